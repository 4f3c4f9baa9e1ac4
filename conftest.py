"""
Pytest configuration: log format for captured output, and a UTF-8 console
so segments full of combining marks print on Windows.
"""

import sys


def pytest_configure(config):
    config.option.log_format = "%(levelname)s %(name)s: %(message)s"

    if sys.platform == 'win32':
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')

"""
Diagnostics collection.

A collector is passed into featuralization instead of appending to shared
state, so each call (or each worker) owns its diagnostics and the caller
merges them in input order.
"""

from typing import Iterable, Iterator, List
from logging import getLogger

from .types import Diagnostic

logger = getLogger(__name__)


class DiagnosticsCollector:
    """Append-only list of diagnostics; every entry is also logged."""

    def __init__(self):
        self._diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        logger.warning(diagnostic.message)
        self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def has_severe(self) -> bool:
        return any(d.is_severe for d in self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

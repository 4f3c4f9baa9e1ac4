#!/usr/bin/env python3
"""
Demo: Featuralizing a Small Segment Inventory

Compiles a handful of rules against a toy schema and audits an inventory,
including segments that fail or are written in non-canonical order.
"""

import logging

from src.phonology import load_schema, load_ruleset
from src.phonology.pipeline import FeaturalizationPipeline


BINARY = {"+": [], "-": []}

SCHEMA = [
    {"name": "syllabic", "values": BINARY},
    {"name": "consonantal", "values": BINARY},
    {"name": "labial", "values": {"+": [{"name": "round", "values": BINARY}], "-": []}},
    {"name": "coronal", "values": {"+": [{"name": "anterior", "values": BINARY}], "-": []}},
    {"name": "nasal", "values": BINARY},
    {"name": "voice", "values": BINARY},
]

RULES = """
__meta default false : syllabic
__meta alias labial : +labial -round -coronal +consonantal
__meta alias alveolar : -labial +coronal +anterior +consonantal

= p : *labial -nasal -voice
= b : *labial -nasal +voice
= m : *labial +nasal +voice
= t : *alveolar -nasal -voice
= a : +syllabic -consonantal -labial -coronal -nasal +voice

^= ◌̥ +voice : -voice       # voiceless
^= ◌̃ +syllabic : +nasal    # nasalized
=> ʷ +labial : +round
=> ⁿ -syllabic : +nasal
"""

INVENTORY = """
p
b̥
m
tʷ
pⁿʷ
ã
a
ʔ
"""


def main():
    """Run featuralizer demo on the inventory above."""
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    print("=" * 80)
    print("FEATURALIZER DEMO")
    print("=" * 80)

    schema = load_schema(SCHEMA)
    ruleset = load_ruleset(RULES, schema)
    print(f"\n✓ {ruleset!r}\n")

    pipeline = FeaturalizationPipeline(ruleset, workers=2, show_progress=True)
    report = pipeline.process_text(INVENTORY)

    print("=" * 80)
    print("RESULTS")
    print("=" * 80)
    print(report.to_text())

    print(f"\n📊 Statistics:")
    print(f"   Segments: {report.total}")
    print(f"   Featuralized: {report.succeeded} ({report.success_rate:.1f}%)")
    print(f"   Failed: {report.failed}")

    if report.diagnostics:
        print(f"\n⚠ Diagnostics:")
        for diagnostic in report.diagnostics:
            print(f"   [{diagnostic.kind.value}] {diagnostic}")

    for group in report.identical_featuralizations():
        print(f"\n⚠ Identical featuralizations: {', '.join(group)}")


if __name__ == "__main__":
    main()

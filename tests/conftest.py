"""
Shared fixtures: a small Hayes-style feature schema and a rules text in the
style of simple.rule.
"""

import copy

import pytest

from src.phonology import load_schema, load_ruleset
from src.phonology.featuralization import Featuralizer


BINARY = {"+": [], "-": []}

SCHEMA_TREE = [
    {"name": "syllabic", "values": BINARY},
    {"name": "consonantal", "values": BINARY},
    {"name": "labial", "values": {
        "+": [
            {"name": "round", "values": BINARY},
            {"name": "labiodental", "values": BINARY},
        ],
        "-": [],
    }},
    {"name": "coronal", "values": {
        "+": [
            {"name": "anterior", "values": BINARY},
            {"name": "distributed", "values": BINARY},
        ],
        "-": [],
    }},
    {"name": "dorsal", "values": {
        "+": [
            {"name": "high", "values": BINARY},
            {"name": "back", "values": BINARY},
        ],
        "-": [],
    }},
    {"name": "nasal", "values": BINARY},
    {"name": "obstruent", "values": BINARY},
    {"name": "voice", "values": BINARY},
]

# Combining marks are written with escapes: U+25CC is the dotted-circle
# placeholder, U+0325 ring below, U+0303 tilde, U+0330 tilde below.
RULES_TEXT = (
    "# test rules\n"
    "__meta default false : syllabic\n"
    "__meta default - : anterior distributed high back\n"
    "__meta alias labial : labial:true round:false labiodental:false coronal:false dorsal:false consonantal:true\n"
    "__meta alias plosive : -nasal +obstruent\n"
    "__meta alias alveolar : +coronal +anterior -distributed -labial -dorsal +consonantal\n"
    "__meta alias vowel : +syllabic -consonantal -nasal -obstruent +voice\n"
    "\n"
    "= p : *labial *plosive voice:-\n"
    "= b : *labial *plosive +voice\n"
    "= m : *labial +nasal -obstruent +voice\n"
    "= t : *alveolar *plosive -voice\n"
    "= d : *alveolar *plosive +voice\n"
    "base ts : *alveolar *plosive -voice +distributed   # affricate\n"
    "= a : *vowel -labial -coronal +dorsal -high +back\n"
    "= i : *vowel -labial -coronal +dorsal +high -back\n"
    "= u : *vowel +labial +round -labiodental -coronal +dorsal +high +back\n"
    "\n"
    "^= ◌̥ +voice : -voice         # voiceless\n"
    "^= ◌̃ +syllabic : +nasal      # nasalized\n"
    "combin ◌̰ +voice : -obstruent # creaky\n"
    "combin ◌̰ +nasal : +obstruent\n"
    "=> ʷ +labial : +round\n"
    "suffix ⁿ -syllabic : +nasal\n"
    "<= ⁿ +consonantal -nasal : +nasal\n"
)

P_BUNDLE = {
    "labial": "+", "round": "-", "labiodental": "-", "coronal": "-", "dorsal": "-",
    "consonantal": "+", "nasal": "-", "obstruent": "+", "voice": "-", "syllabic": "-",
}


@pytest.fixture
def schema_tree():
    """Raw schema tree; a fresh copy per test."""
    return copy.deepcopy(SCHEMA_TREE)


@pytest.fixture
def schema():
    """Feature schema used across the test suite."""
    return load_schema(SCHEMA_TREE)


@pytest.fixture
def rules_text():
    return RULES_TEXT


@pytest.fixture
def ruleset(schema, rules_text):
    """READY ruleset compiled from RULES_TEXT."""
    return load_ruleset(rules_text, schema)


@pytest.fixture
def featuralizer(ruleset):
    return Featuralizer(ruleset)


@pytest.fixture
def p_bundle():
    """Expected bundle of base /p/ under RULES_TEXT."""
    return dict(P_BUNDLE)

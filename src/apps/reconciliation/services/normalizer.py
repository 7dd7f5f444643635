"""
Institution name normalization.

Pure functions. No I/O, no Django dependencies.
"""

import re

# Applied in order: regional-hub prefixes, legal-entity markers
PREFIX_PATTERNS = [
    re.compile(r"^\(광역\)"),
    re.compile(r"^광역"),
    re.compile(r"\*광역지원기관"),
    re.compile(r"광역지원기관"),
]

LEGAL_ENTITY_PATTERNS = [
    re.compile(r"\(재\)"),
    re.compile(r"\(사\)"),
    re.compile(r"\(주\)"),
    re.compile(r"재단법인"),
    re.compile(r"사단법인"),
    re.compile(r"주식회사"),
]

# Facility-name synonyms collapsed to their short form
SYNONYMS = {
    "종합사회복지관": "사회복지관",
    "노인종합복지관": "노인복지관",
    "장애인종합복지관": "장애인복지관",
    "통합지원센터": "지원센터",
}

REGION_ALIASES = {
    "경상남도": "경남",
    "경남도": "경남",
}

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[().,]")


def _normalize_once(name: str) -> str:
    for pattern in PREFIX_PATTERNS:
        name = pattern.sub("", name)
    for pattern in LEGAL_ENTITY_PATTERNS:
        name = pattern.sub("", name)
    for long_form, short_form in SYNONYMS.items():
        name = name.replace(long_form, short_form)
    for alias, region in REGION_ALIASES.items():
        name = name.replace(alias, region)
    name = _WHITESPACE.sub(" ", name)
    name = _PUNCTUATION.sub("", name)
    return name.strip()


def normalize_institution_name(name: str | None) -> str:
    """
    Canonicalize an institution name for comparison.

    Strips regional-hub prefixes and legal-entity markers, collapses facility
    synonyms and province aliases, then drops punctuation and extra spaces.

    >>> normalize_institution_name("(광역)(재)경상남도사회서비스원")
    '경남사회서비스원'

    Idempotent: the steps are repeated until the name stops changing, so
    removing "(재)" cannot expose a new "(광역)" prefix that survives.
    """
    if not name:
        return ""
    current = str(name)
    # Terminates: every step shortens the name or only rewrites whitespace
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            break
        current = normalized
    return current

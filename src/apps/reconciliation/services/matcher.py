"""
Institution matching.

Decides whether two institution references (code + free-text name) point
at the same organization. Codes are authoritative when both sides have one;
otherwise a chain of name heuristics is tried, each isolated in its own
function so it can be tested and replaced on its own.

Pure functions. No I/O, no Django dependencies.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, TypeVar

from apps.core.utils.safecast import is_blank
from apps.reconciliation.records import get_field
from apps.reconciliation.services.normalizer import normalize_institution_name
from config.districts import (
    CITY_PROVINCE,
    FACILITY_TYPES,
    MATCH_LOCATIONS,
    SIDO_NAMES,
    SIGUNGU_NAMES,
)

T = TypeVar("T")

# Administrative-unit suffixes and particles that carry no identity
STOPWORDS = frozenset(
    ["시", "군", "구", "읍", "면", "동", "리", "및", "와", "과", "의", "를", "을", "에", "도"]
)

MIN_KEYWORDS = 2
MIN_KEYWORD_OVERLAP = 2

_TOKEN_SPLIT = re.compile(r"[\s\-_]+")
_NON_ALNUM = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class InstitutionRef:
    code: str | None = None
    name: str | None = None

    @classmethod
    def of(cls, record: Any) -> "InstitutionRef":
        """
        Build a reference from an institution or from a person-like record.

        Person records (employees, participants, course rows) carry their
        institution as ``institution_code`` / ``institution``; institution
        records carry it as ``code`` / ``name``.
        """
        if isinstance(record, InstitutionRef):
            return record
        if _has_field(record, "institution") or _has_field(record, "institution_code"):
            return cls(
                code=get_field(record, "institution_code"),
                name=get_field(record, "institution"),
            )
        return cls(code=get_field(record, "code"), name=get_field(record, "name"))


def _has_field(record: Any, name: str) -> bool:
    if isinstance(record, dict):
        return name in record
    return hasattr(record, name)


def normalize_code(code: Any) -> str:
    if is_blank(code):
        return ""
    return _NON_ALNUM.sub("", str(code).strip().upper())


def is_institution_code_match(code1: Any, code2: Any) -> bool:
    """Compare two institution codes ignoring case, spacing and separators."""
    normalized1 = normalize_code(code1)
    normalized2 = normalize_code(code2)
    if not normalized1 or not normalized2:
        return False
    return normalized1 == normalized2


@lru_cache(maxsize=8192)
def canonical_name(name: str | None) -> str:
    """Normalized, lowercased name used by every name heuristic."""
    return normalize_institution_name(name).lower()


def extract_keywords(normalized: str) -> list[str]:
    return [
        word
        for word in _TOKEN_SPLIT.split(normalized)
        if len(word) > 1 and word not in STOPWORDS
    ]


def extract_location(normalized: str) -> str | None:
    for location in MATCH_LOCATIONS:
        if location in normalized:
            return location
    return None


def extract_facility_type(normalized: str) -> str | None:
    for facility in FACILITY_TYPES:
        if facility in normalized:
            return facility
    return None


def _overlap_count(keywords: list[str], others: list[str]) -> int:
    return sum(
        1
        for keyword in keywords
        if any(keyword == other or keyword in other or other in keyword for other in others)
    )


def keywords_overlap(normalized1: str, normalized2: str) -> bool:
    keywords1 = extract_keywords(normalized1)
    keywords2 = extract_keywords(normalized2)
    if len(keywords1) < MIN_KEYWORDS or len(keywords2) < MIN_KEYWORDS:
        return False
    # Counted from both sides so the result does not depend on argument order
    overlap = min(
        _overlap_count(keywords1, keywords2), _overlap_count(keywords2, keywords1)
    )
    return overlap >= MIN_KEYWORD_OVERLAP


def location_facility_match(normalized1: str, normalized2: str) -> bool:
    location1 = extract_location(normalized1)
    location2 = extract_location(normalized2)
    facility1 = extract_facility_type(normalized1)
    facility2 = extract_facility_type(normalized2)
    if not (location1 and location2 and facility1 and facility2):
        return False
    return location1 == location2 and facility1 == facility2


def is_institution_match(name1: str | None, name2: str | None) -> bool:
    """
    Name-only comparison.

    Tried in order: exact match after normalization, containment in either
    direction, at least two shared keywords, same location and facility type.
    """
    if is_blank(name1) or is_blank(name2):
        return False

    normalized1 = canonical_name(str(name1))
    normalized2 = canonical_name(str(name2))
    if not normalized1 or not normalized2:
        return False

    if normalized1 == normalized2:
        return True
    if normalized1 in normalized2 or normalized2 in normalized1:
        return True
    if keywords_overlap(normalized1, normalized2):
        return True
    return location_facility_match(normalized1, normalized2)


def match_institution(a: Any, b: Any) -> bool:
    """
    Decide whether two institution references are the same organization.

    Accepts InstitutionRef, record objects or dicts. When both sides have a
    code the code comparison is final and names are not consulted.
    """
    ref_a = InstitutionRef.of(a)
    ref_b = InstitutionRef.of(b)
    if normalize_code(ref_a.code) and normalize_code(ref_b.code):
        return is_institution_code_match(ref_a.code, ref_b.code)
    return is_institution_match(ref_a.name, ref_b.name)


def find_best_matching_institution(target: Any, institutions: Iterable[T]) -> T | None:
    """Return the first institution matching ``target`` by code, else by name."""
    ref = InstitutionRef.of(target)
    candidates = list(institutions)

    if normalize_code(ref.code):
        for institution in candidates:
            if is_institution_code_match(InstitutionRef.of(institution).code, ref.code):
                return institution

    if not is_blank(ref.name):
        for institution in candidates:
            if is_institution_match(InstitutionRef.of(institution).name, ref.name):
                return institution

    return None


def explain_institution_match(name1: str | None, name2: str | None) -> dict[str, Any]:
    """Break a name comparison down into the intermediate values of each rule."""
    normalized1 = canonical_name(name1)
    normalized2 = canonical_name(name2)
    return {
        "match": is_institution_match(name1, name2),
        "normalized1": normalized1,
        "normalized2": normalized2,
        "keywords1": extract_keywords(normalized1),
        "keywords2": extract_keywords(normalized2),
        "location1": extract_location(normalized1),
        "location2": extract_location(normalized2),
        "facility1": extract_facility_type(normalized1),
        "facility2": extract_facility_type(normalized2),
    }


def extract_sido(name: str | None) -> str:
    """Infer the province (시도) from an institution name, "" when unknown."""
    if is_blank(name):
        return ""
    lowered = str(name).lower()
    for short, official in SIDO_NAMES.items():
        if short in lowered or official in lowered:
            return official
    for city, province in CITY_PROVINCE.items():
        if city in lowered:
            return province
    return ""


def extract_sigungu(name: str | None) -> str:
    """Infer the city/county/district (시군구) from an institution name."""
    if is_blank(name):
        return ""
    lowered = str(name).lower()
    for sigungu in SIGUNGU_NAMES:
        if sigungu in lowered:
            return sigungu
    # Stem match ("김해" for "김해시"); one-syllable stems match too much
    for sigungu in SIGUNGU_NAMES:
        stem = sigungu[:-1]
        if len(stem) >= 2 and stem in lowered:
            return sigungu
    return ""

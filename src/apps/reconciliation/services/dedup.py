"""
Person de-duplication across redundant person lists.

A person is keyed by (name, birth date), then (name, id), then by name
alone. Duplicates collapse onto the most complete record; output keeps the
order in which people were first seen.
"""

import re
from datetime import date, datetime
from typing import Any, Iterable

from loguru import logger

from apps.core.utils.safecast import safe_str
from apps.reconciliation.records import get_field

BIRTH_YEAR_MIN = 1900
BIRTH_YEAR_MAX = 2030
# Two-digit years up to this value are 20xx, above it 19xx
TWO_DIGIT_YEAR_PIVOT = 30

NAME_ONLY_SUFFIX = "_NAME_ONLY"

# (label, alternative field names) counted by completeness_score
COMPLETENESS_FIELDS = [
    ("name", ("name",)),
    ("birth_date", ("birth_date",)),
    ("id", ("id",)),
    ("institution", ("institution",)),
    ("job_type", ("job_type",)),
    ("is_active", ("is_active",)),
    ("resign_date", ("resign_date",)),
    ("basic_status", ("basic_education_status", "basic_training")),
    ("advanced_status", ("advanced_education_status", "advanced_education")),
]

_NON_DIGIT = re.compile(r"\D")
_TIME_SUFFIX = re.compile(r"[ T]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?$")


def normalize_birth_date(value: Any) -> str | None:
    """
    Reduce a birth date to ``YYYYMMDD`` or None.

    >>> normalize_birth_date("1990-01-01")
    '19900101'
    >>> normalize_birth_date("850315")
    '19850315'
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y%m%d")

    text = _TIME_SUFFIX.sub("", str(value).strip())
    digits = _NON_DIGIT.sub("", text)

    if len(digits) == 8:
        year = int(digits[:4])
        if BIRTH_YEAR_MIN <= year <= BIRTH_YEAR_MAX:
            return digits
        return None

    if len(digits) == 6:
        two_digit_year = int(digits[:2])
        century = 2000 if two_digit_year <= TWO_DIGIT_YEAR_PIVOT else 1900
        return f"{century + two_digit_year}{digits[2:]}"

    return None


def completeness_score(record: Any) -> int:
    """Number of populated identity/status fields on a record."""
    return sum(
        1 for _, names in COMPLETENESS_FIELDS if get_field(record, *names) is not None
    )


def candidate_keys(record: Any, name: str) -> list[str]:
    """Match keys for a record, highest priority first."""
    keys = []
    birth = normalize_birth_date(get_field(record, "birth_date"))
    if birth:
        keys.append(f"{name}_{birth}")
    person_id = safe_str(get_field(record, "id"))
    if person_id:
        keys.append(f"{name}_ID_{person_id}")
    keys.append(f"{name}{NAME_ONLY_SUFFIX}")
    return keys


class PersonDeduplicator:
    """
    Collapses duplicate person records.

    Keeps counters in ``stats`` so callers can report what happened.
    """

    def __init__(self):
        self.stats = {
            "processed": 0,
            "skipped": 0,
            "duplicates": 0,
            "replaced": 0,
            "name_only_matches": 0,
        }

    def dedupe(self, records: Iterable[Any]) -> list[Any]:
        entries: list[Any] = []
        # key -> position in entries
        index: dict[str, int] = {}

        for record in records:
            self.stats["processed"] += 1
            name = safe_str(get_field(record, "name"))
            if not name:
                self.stats["skipped"] += 1
                continue

            keys = candidate_keys(record, name)
            hit = next((key for key in keys if key in index), None)

            if hit is None:
                index[keys[0]] = len(entries)
                entries.append(record)
                continue

            self.stats["duplicates"] += 1
            position = index[hit]
            existing = entries[position]

            if hit.endswith(NAME_ONLY_SUFFIX):
                self.stats["name_only_matches"] += 1
                logger.warning(
                    f"Merged '{name}' on name alone; may be two different people "
                    f"(institutions: {get_field(existing, 'institution')!r} / "
                    f"{get_field(record, 'institution')!r})"
                )

            if completeness_score(record) > completeness_score(existing):
                entries[position] = record
                # The winner must also be findable under its own primary key
                index.setdefault(keys[0], position)
                self.stats["replaced"] += 1

        if self.stats["duplicates"] or self.stats["skipped"]:
            logger.info(
                f"De-duplicated {self.stats['processed']} records: "
                f"{len(entries)} kept, {self.stats['duplicates']} duplicates, "
                f"{self.stats['skipped']} skipped without name"
            )
        return entries


def dedupe_persons(records: Iterable[Any]) -> list[Any]:
    """Collapse duplicate person records, keeping first-seen order."""
    return PersonDeduplicator().dedupe(records)

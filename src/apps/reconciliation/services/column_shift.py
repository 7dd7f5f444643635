"""
Repair employee rows whose columns were shifted right during an earlier
spreadsheet conversion.

Some exports left the optional leading "특화" (specialization) column blank
and the converter filled the gap by pulling every following value one or two
columns to the right. The detection below is a heuristic on field shapes and
can misfire on a genuine row whose career type happens to look like a name;
corrected rows are therefore flagged and logged.

Pure functions. No I/O, no Django dependencies.
"""

import re
from datetime import date
from typing import Any

from loguru import logger

from apps.core.utils.safecast import safe_date

SPECIALIZATION_MARKER = "특화"
OTHER_LABEL = "기타"
TENURE_LABEL_MARKER = "년이상"

ONE_COLUMN_SHIFT = "one_column_right_shift"
TWO_COLUMN_SHIFT = "two_column_right_shift"

# Where the real resignation date ends up after a shift, in lookup order
RESIGN_DATE_FALLBACK_FIELDS = [
    "notes",
    "note",
    "modified_date",
    "learning_id",
    "update_date",
    "main_duty",
]

_KOREAN_NAME = re.compile(r"^[가-힣]{2,4}$")
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def looks_like_korean_name(value: Any) -> bool:
    return isinstance(value, str) and bool(_KOREAN_NAME.match(value))


def looks_like_tenure_label(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return TENURE_LABEL_MARKER in value or value == OTHER_LABEL


def detect_column_shift(row: dict[str, Any]) -> str | None:
    """Return the shift type of a row, or None for a well-formed row."""
    name = row.get("name")
    career_type = row.get("career_type")

    if name == SPECIALIZATION_MARKER and looks_like_korean_name(career_type):
        return ONE_COLUMN_SHIFT

    if (
        looks_like_korean_name(career_type)
        and career_type != OTHER_LABEL
        and looks_like_tenure_label(row.get("birth_date"))
    ):
        return TWO_COLUMN_SHIFT

    return None


def find_resign_date(row: dict[str, Any]) -> str | None:
    """First YYYY-MM-DD found in the fallback fields, in order."""
    for field_name in RESIGN_DATE_FALLBACK_FIELDS:
        value = row.get(field_name)
        if not isinstance(value, str):
            continue
        match = _ISO_DATE.search(value)
        if match:
            return match.group(0)
    return None


def correct_column_shift(row: dict[str, Any], now: date | None = None) -> dict[str, Any]:
    """
    Return a repaired copy of a shifted row, or the row itself if it is fine.

    Remapping for both shift types: name <- career_type, career_type <-
    birth_date, birth_date <- gender, gender <- hire_date, hire_date <-
    resign_date (or learning_id). The resignation date is recovered from the
    fallback fields and ``is_active`` is recomputed against ``now``.
    """
    shift_type = detect_column_shift(row)
    if shift_type is None:
        return row

    today = now or date.today()
    resign_date = find_resign_date(row)
    resigned_on = safe_date(resign_date)
    is_active = resigned_on is None or resigned_on > today

    corrected = dict(row)
    corrected.update(
        {
            "name": row.get("career_type"),
            "career_type": row.get("birth_date"),
            "birth_date": row.get("gender"),
            "gender": row.get("hire_date"),
            "hire_date": row.get("resign_date") or row.get("learning_id"),
            "resign_date": resign_date,
            "is_active": is_active,
            "corrected": True,
            "correction_type": shift_type,
        }
    )

    logger.warning(
        f"Column shift corrected ({shift_type}) at row {row.get('row_number')}: "
        f"{row.get('name')!r} -> {corrected['name']!r}, "
        f"resign_date={resign_date}, active={is_active}"
    )
    return corrected


def correct_rows(rows: list[dict[str, Any]], now: date | None = None) -> tuple[list[dict[str, Any]], int]:
    """Correct a batch of rows. Returns (rows, number_of_corrected_rows)."""
    result = []
    corrected_count = 0
    for row in rows:
        fixed = correct_column_shift(row, now=now)
        if fixed is not row:
            corrected_count += 1
        result.append(fixed)
    return result, corrected_count

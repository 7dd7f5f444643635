"""
Spreadsheet reading and record building.

``read_dataframe`` is the only function here that touches the filesystem;
``build_records`` turns a standardized DataFrame into reconciliation
records, applying the per-kind cell parsers and the employee column-shift
repair.
"""

from datetime import date
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger

from apps.core.utils.safecast import is_blank
from apps.ingest.exceptions import DatasetFileError
from apps.ingest.services.parsers import (
    determine_course_type,
    parse_count,
    parse_education_status,
    parse_gender,
)
from apps.ingest.services.standardizer import (
    ADVANCED_EDUCATION,
    BASIC_EDUCATION,
    EMPLOYEE,
    INSTITUTION,
    PARTICIPANT,
)
from apps.reconciliation.records import (
    EducationRecord,
    Employee,
    Institution,
    Participant,
    RowRecord,
)
from apps.reconciliation.services.column_shift import correct_rows
from apps.reconciliation.services.matcher import extract_sido, extract_sigungu

SUPPORTED_SUFFIXES = (".xlsx", ".xls", ".csv")

RECORD_TYPES: dict[str, type[RowRecord]] = {
    EMPLOYEE: Employee,
    INSTITUTION: Institution,
    BASIC_EDUCATION: EducationRecord,
    ADVANCED_EDUCATION: EducationRecord,
    PARTICIPANT: Participant,
}

COUNT_FIELDS = [
    "allocated_social_workers",
    "allocated_life_support",
    "allocated_social_workers_gov",
    "allocated_life_support_gov",
    "hired_social_workers",
    "hired_life_support",
]

# Field holding the institution name, used to infer missing region columns
INSTITUTION_NAME_FIELD = {
    EMPLOYEE: "institution",
    INSTITUTION: "name",
    BASIC_EDUCATION: "institution",
    ADVANCED_EDUCATION: "institution",
    PARTICIPANT: "institution",
}


def read_dataframe(path: str | Path) -> pl.DataFrame:
    """
    Read the first sheet of an Excel file, or a CSV file.

    Raises:
        DatasetFileError: if the file is missing, of an unsupported type or
            cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise DatasetFileError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DatasetFileError(
            f"Unsupported file type {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        if suffix == ".csv":
            df = pl.read_csv(path, infer_schema_length=0, encoding="utf8-lossy")
        else:
            result = pl.read_excel(path, sheet_id=1)
            df = result if isinstance(result, pl.DataFrame) else next(iter(result.values()))
    except Exception as e:
        raise DatasetFileError(f"Could not read {path.name}: {e}") from e

    logger.info(f"Read {df.height} rows from {path.name}")
    return df


def fill_region(row: dict[str, Any], name_field: str) -> dict[str, Any]:
    """Infer a missing region/district from the institution name."""
    name = row.get(name_field)
    if is_blank(row.get("region")):
        row["region"] = extract_sido(name) or None
    if is_blank(row.get("district")):
        row["district"] = extract_sigungu(name) or None
    return row


def _prepare_row(row: dict[str, Any], kind: str) -> dict[str, Any]:
    if kind == INSTITUTION:
        for field_name in COUNT_FIELDS:
            row[field_name] = parse_count(row.get(field_name))
    elif kind in (BASIC_EDUCATION, ADVANCED_EDUCATION):
        track = "basic" if kind == BASIC_EDUCATION else "advanced"
        row["status"] = parse_education_status(row.get("status"))
        row["course_type"] = determine_course_type(row.get("course"), track)
    elif kind in (EMPLOYEE, PARTICIPANT):
        row["gender"] = parse_gender(row.get("gender")) or row.get("gender")
    return fill_region(row, INSTITUTION_NAME_FIELD[kind])


def build_records(
    df: pl.DataFrame, kind: str, now: date | None = None
) -> tuple[list[RowRecord], int]:
    """
    Build typed records from a standardized DataFrame.

    Employee rows are checked for shifted columns first; ``now`` is the
    date a recovered resignation date is compared against.

    Returns:
        (records, number_of_corrected_rows)
    """
    rows = list(df.iter_rows(named=True))
    corrected = 0
    if kind == EMPLOYEE:
        rows, corrected = correct_rows(rows, now=now)

    record_type = RECORD_TYPES[kind]
    records = [record_type.from_row(_prepare_row(dict(row), kind)) for row in rows]
    return records, corrected

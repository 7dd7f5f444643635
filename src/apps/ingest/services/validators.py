"""
Validation functions for standardized datasets.

Validates that required fields exist and meet basic constraints.
"""

import polars as pl

from apps.ingest.services.standardizer import (
    ADVANCED_EDUCATION,
    BASIC_EDUCATION,
    EMPLOYEE,
    INSTITUTION,
    PARTICIPANT,
)

REQUIRED_COLUMNS = {
    EMPLOYEE: ["name"],
    INSTITUTION: ["name"],
    BASIC_EDUCATION: ["name"],
    ADVANCED_EDUCATION: ["name"],
    PARTICIPANT: ["name"],
}


def validate_dataset(df: pl.DataFrame, kind: str) -> tuple[bool, list[str]]:
    """
    Validate a standardized dataset.

    Args:
        df: Standardized DataFrame
        kind: Dataset kind

    Returns:
        (is_valid, error_messages)

    Rules:
    - every required column of the kind is present
    - at least one row survived standardization
    - institution codes, where given, are unique
    """
    errors = []

    missing = [column for column in REQUIRED_COLUMNS[kind] if column not in df.columns]
    if missing:
        errors.append(f"Missing required column(s): {', '.join(missing)}")
        return False, errors

    if df.height == 0:
        errors.append("No data rows found")

    if kind == INSTITUTION and "code" in df.columns:
        codes = df.filter(pl.col("code").is_not_null()).select("code")
        duplicates = codes.height - codes.unique().height
        if duplicates > 0:
            errors.append(
                f"Found {duplicates} duplicate institution codes. "
                "Each institution must have a unique code."
            )

    is_valid = len(errors) == 0
    return is_valid, errors

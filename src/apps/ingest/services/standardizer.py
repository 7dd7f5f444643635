"""
Data standardization service for ingestion pipeline.

Pure functions for transforming raw spreadsheet data into standardized format.
No I/O, no Django dependencies - only Polars DataFrame transformations.
"""

import re

import polars as pl

EMPLOYEE = "EMPLOYEE"
INSTITUTION = "INSTITUTION"
BASIC_EDUCATION = "BASIC_EDUCATION"
ADVANCED_EDUCATION = "ADVANCED_EDUCATION"
PARTICIPANT = "PARTICIPANT"

DATASET_KINDS = [EMPLOYEE, INSTITUTION, BASIC_EDUCATION, ADVANCED_EDUCATION, PARTICIPANT]
EDUCATION_KINDS = (BASIC_EDUCATION, ADVANCED_EDUCATION)

# Column name normalization mappings
# Maps raw Korean headers of each export to standardized names. Where
# several headers map to one field, the first one present wins.
EMPLOYEE_COLUMN_MAPPING = {
    "성명": "name",
    "이름": "name",
    "ID": "id",
    "기관명": "institution",
    "수행기관명": "institution",
    "수행기관코드": "institution_code",
    "기관코드": "institution_code",
    "광역시": "region",
    "지자체": "district",
    "광역코드": "area_code",
    "광역명": "area_name",
    "직무구분": "job_type",
    "직군": "job_type",
    "담당업무": "responsibility",
    "주요업무": "main_duty",
    "경력구분": "career_type",
    "생년월일": "birth_date",
    "성별": "gender",
    "입사일": "hire_date",
    "퇴사일": "resign_date",
    "비고": "notes",
    "상태": "status",
    "재직상태": "employment_status",
    "근무상태": "work_status",
    "주민등록번호": "resident_id",
    "배움터ID": "learning_id",
    "수정일": "modified_date",
    "엔젤코드": "angel_code",
}

INSTITUTION_COLUMN_MAPPING = {
    "수행기관코드": "code",
    "수행기관명": "name",
    "기관명": "name",
    "광역시": "region",
    "시도": "region",
    "지자체": "district",
    "시군구": "district",
    "광역코드": "area_code",
    "광역명": "area_name",
    "시설유형구분": "facility_type",
    "수행기관위수탁구분": "contract_type",
    "위수탁기간": "contract_period",
    "기관장명": "manager",
    "주소": "address",
    "전담사회복지사(배정)_복지부": "allocated_social_workers_gov",
    "생활지원사(배정)_복지부": "allocated_life_support_gov",
    "전담사회복지사(배정)_기관": "allocated_social_workers",
    "생활지원사(배정)_기관": "allocated_life_support",
    "전담사회복지사(채용)_기관": "hired_social_workers",
    "생활지원사(채용)_기관": "hired_life_support",
}

EDUCATION_COLUMN_MAPPING = {
    "수강생명": "name",
    "성명": "name",
    "이름": "name",
    "ID": "id",
    "연번": "serial_number",
    "수행기관명": "institution",
    "기관코드": "institution_code",
    "수행기관코드": "institution_code",
    "과정명": "course",
    "수료여부": "status",
    "상태": "raw_status",
    "수료일": "completion_date",
    "이메일": "email",
    "직군": "job_type",
    "생년월일": "birth_date",
    "주민등록번호": "resident_id",
    "입사일": "hire_date",
    "퇴사일": "resign_date",
    "년도/차수": "year",
    "년도차수": "year",
    "년도": "year",
    "차수": "year",
    "교육신청일자": "application_date",
    "시도": "region",
    "광역시": "region",
    "시군구": "district",
    "지자체": "district",
}

PARTICIPANT_COLUMN_MAPPING = {
    "회원명": "name",
    "ID": "id",
    "No": "no",
    "소속": "institution",
    "기관코드": "institution_code",
    "유형": "institution_type",
    "성별": "gender",
    "생년월일": "birth_date",
    "휴대전화": "phone",
    "이메일": "email",
    "직군": "job_type",
    "입사일": "hire_date",
    "퇴사일": "resign_date",
    "특화": "specialization",
    "경력": "career",
    "상태": "status",
    "회원상태": "member_status",
    "최종수료": "final_completion",
    "기초직무": "basic_training",
    "심화교육": "advanced_education",
}

COLUMN_MAPPINGS = {
    EMPLOYEE: EMPLOYEE_COLUMN_MAPPING,
    INSTITUTION: INSTITUTION_COLUMN_MAPPING,
    BASIC_EDUCATION: EDUCATION_COLUMN_MAPPING,
    ADVANCED_EDUCATION: EDUCATION_COLUMN_MAPPING,
    PARTICIPANT: PARTICIPANT_COLUMN_MAPPING,
}

_FALLBACK_SEPARATORS = re.compile(r"[\s/()·.]+")


def _fallback_column_name(name: str) -> str:
    return _FALLBACK_SEPARATORS.sub("_", name.strip()).strip("_").lower()


def normalize_column_names(df: pl.DataFrame, kind: str) -> pl.DataFrame:
    """
    Normalize column names to standard format.

    Args:
        df: Raw DataFrame from the spreadsheet
        kind: One of DATASET_KINDS

    Returns:
        DataFrame with normalized column names
    """
    mapping = COLUMN_MAPPINGS[kind]

    renames = {}
    taken = set()
    for old_name in df.columns:
        header = old_name.strip()
        new_name = mapping.get(header)
        if new_name is None or new_name in taken:
            # Fallback: normalize by rules (lowercase, separators to underscores)
            new_name = _fallback_column_name(header)
        if new_name in taken or not new_name:
            new_name = old_name
        taken.add(new_name)
        renames[old_name] = new_name

    return df.rename(renames)


def cast_to_string(df: pl.DataFrame) -> pl.DataFrame:
    """
    Cast all non-string columns to string for initial staging.

    Actual type conversions happen when records are built, not here.
    """
    return df.with_columns(pl.exclude(pl.String).cast(str))


def replace_null_markers(df: pl.DataFrame) -> pl.DataFrame:
    """
    Replace null markers with actual nulls.

    Common null markers: "-", "", whitespace
    """
    return df.with_columns(
        pl.when(
            (pl.col(pl.String).str.strip_chars() == "-")
            | (pl.col(pl.String).str.strip_chars() == "")
        )
        .then(None)
        .otherwise(pl.col(pl.String).str.strip_chars())
        .name.keep()
    )


def filter_required_rows(df: pl.DataFrame, kind: str) -> pl.DataFrame:
    """
    Filter out rows that should not be processed.

    Rules:
    - Institutions: drop rows with neither code nor name
    - Everything else: drop rows without a name
    """
    if kind == INSTITUTION:
        present = [column for column in ("code", "name") if column in df.columns]
        if not present:
            return df
        return df.filter(pl.any_horizontal(pl.col(present).is_not_null()))

    if "name" not in df.columns:
        return df
    return df.filter(pl.col("name").is_not_null())


def add_row_numbers(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add row_number column for error reporting.

    Row numbers are 1-indexed to match Excel.
    """
    return df.with_row_index(
        name="row_number", offset=2
    )  # +1 for 1-indexing, +1 for header row


def standardize_dataframe(df: pl.DataFrame, kind: str) -> pl.DataFrame:
    """
    Complete standardization pipeline.

    Steps:
    1. Normalize column names
    2. Cast all to string
    3. Replace null markers
    4. Add row numbers
    5. Filter rows without identity

    Row numbers are added before filtering so they keep pointing at the
    source spreadsheet row.

    Example:
        >>> raw_df = pl.read_excel("employees.xlsx")
        >>> standardized = standardize_dataframe(raw_df, EMPLOYEE)
    """
    df = normalize_column_names(df, kind)
    df = cast_to_string(df)
    df = replace_null_markers(df)
    df = add_row_numbers(df)
    df = filter_required_rows(df, kind)

    return df

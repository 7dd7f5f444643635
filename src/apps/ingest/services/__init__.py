"""
Dataset standardization and import services for the ingestion pipeline.

Standardization, parsing and validation are pure DataFrame/value
transformations; the importer is the only part touching the database.
"""

from .parsers import (
    determine_course_type,
    parse_count,
    parse_education_status,
    parse_gender,
)
from .processor import DatasetImporter, get_or_create_snapshot, import_dataset
from .readers import RECORD_TYPES, build_records, read_dataframe
from .standardizer import (
    DATASET_KINDS,
    normalize_column_names,
    standardize_dataframe,
)
from .validators import validate_dataset

__all__ = [
    # Parsing
    "determine_course_type",
    "parse_count",
    "parse_education_status",
    "parse_gender",
    # Reading
    "RECORD_TYPES",
    "build_records",
    "read_dataframe",
    # Standardization
    "DATASET_KINDS",
    "normalize_column_names",
    "standardize_dataframe",
    # Validation
    "validate_dataset",
    # Processing
    "DatasetImporter",
    "get_or_create_snapshot",
    "import_dataset",
]

"""
Reconciliation core: matching, cleaning and aggregating person records.

Pure functions over in-memory records. No I/O, no Django dependencies.
"""

from .active_status import EmployeeRoster, is_active_person
from .aggregator import IntegratedAnalyzer, analyze, calculate_summary_stats, percentage
from .column_shift import correct_column_shift
from .dedup import PersonDeduplicator, dedupe_persons, normalize_birth_date
from .education import (
    calculate_district_stats,
    calculate_institution_performance,
    calculate_stats_by_job_type,
    calculate_time_series,
    match_education_with_participants,
)
from .job_types import JobCategory, classify_job_type
from .matcher import (
    InstitutionRef,
    explain_institution_match,
    extract_sido,
    extract_sigungu,
    find_best_matching_institution,
    is_institution_code_match,
    is_institution_match,
    match_institution,
)
from .normalizer import normalize_institution_name
from .unified import (
    build_employee_based_stats,
    calculate_education_stats,
    calculate_institution_stats,
    count_education_participants,
    create_unified_persons,
)

__all__ = [
    # Normalization and matching
    "InstitutionRef",
    "explain_institution_match",
    "extract_sido",
    "extract_sigungu",
    "find_best_matching_institution",
    "is_institution_code_match",
    "is_institution_match",
    "match_institution",
    "normalize_institution_name",
    # Record cleaning
    "PersonDeduplicator",
    "correct_column_shift",
    "dedupe_persons",
    "normalize_birth_date",
    # Status and classification
    "EmployeeRoster",
    "JobCategory",
    "classify_job_type",
    "is_active_person",
    # Analysis
    "IntegratedAnalyzer",
    "analyze",
    "calculate_summary_stats",
    "percentage",
    # Unified person view
    "build_employee_based_stats",
    "calculate_education_stats",
    "calculate_institution_stats",
    "count_education_participants",
    "create_unified_persons",
    # Course statistics
    "calculate_district_stats",
    "calculate_institution_performance",
    "calculate_stats_by_job_type",
    "calculate_time_series",
    "match_education_with_participants",
]

"""
Record types for the reconciliation core.

Plain dataclasses built from standardized spreadsheet rows. Date-like fields
keep the raw cell value and are parsed where they are used, so a malformed
date only ever means "absent".
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any

from apps.core.utils.safecast import is_blank

DateLike = str | date | None


def get_field(record: Any, *names: str) -> Any:
    """
    Return the first non-blank value among ``names``.

    Works on dicts and on attribute-bearing objects (dataclasses, model
    instances), falling back to a record's ``extra`` mapping.
    """
    for name in names:
        if isinstance(record, dict):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
            if value is None:
                value = (getattr(record, "extra", None) or {}).get(name)
        if not is_blank(value):
            return value
    return None


class RowRecord:
    """Mixin that builds a dataclass from a standardized row dict."""

    @classmethod
    def from_row(cls, row: dict[str, Any]):
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs = {}
        # A stored record (see to_dict) carries its extras nested
        extra = dict(row.get("extra") or {})
        for key, value in row.items():
            if key == "extra":
                continue
            if key in known:
                kwargs[key] = value
            else:
                extra[key] = value
        return cls(**kwargs, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Employee(RowRecord):
    name: str | None = None
    id: str | None = None
    institution: str | None = None
    institution_code: str | None = None
    job_type: str | None = None
    career_type: str | None = None
    birth_date: DateLike = None
    gender: str | None = None
    hire_date: DateLike = None
    resign_date: DateLike = None
    is_active: bool | None = None
    notes: str | None = None
    status: str | None = None
    employment_status: str | None = None
    work_status: str | None = None
    resident_id: str | None = None
    responsibility: str | None = None
    corrected: bool = False
    correction_type: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Institution(RowRecord):
    code: str | None = None
    name: str | None = None
    region: str | None = None
    district: str | None = None
    area_name: str | None = None
    facility_type: str | None = None
    # Manual allocation (institution-reported)
    allocated_social_workers: int = 0
    allocated_life_support: int = 0
    # Budget allocation (ministry)
    allocated_social_workers_gov: int = 0
    allocated_life_support_gov: int = 0
    hired_social_workers: int = 0
    hired_life_support: int = 0
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class EducationRecord(RowRecord):
    name: str | None = None
    id: str | None = None
    institution: str | None = None
    institution_code: str | None = None
    course: str | None = None
    course_type: str | None = None
    status: str | None = None
    completion_date: DateLike = None
    resident_id: str | None = None
    job_type: str | None = None
    year: str | None = None
    birth_date: DateLike = None
    hire_date: DateLike = None
    resign_date: DateLike = None
    email: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Participant(RowRecord):
    name: str | None = None
    id: str | None = None
    institution: str | None = None
    institution_code: str | None = None
    job_type: str | None = None
    birth_date: DateLike = None
    gender: str | None = None
    status: str | None = None
    member_status: str | None = None
    basic_training: str | None = None
    advanced_education: str | None = None
    final_completion: str | None = None
    specialization: str | None = None
    hire_date: DateLike = None
    resign_date: DateLike = None
    resident_id: str | None = None
    is_active: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class UnifiedPerson(RowRecord):
    """One person as seen across the employee, participant and course sources."""

    name: str | None = None
    id: str | None = None
    institution: str | None = None
    institution_code: str | None = None
    job_type: str | None = None
    birth_date: DateLike = None
    resident_id: str | None = None
    hire_date: DateLike = None
    resign_date: DateLike = None
    is_active: bool | None = None
    basic_education_status: str | None = None
    advanced_education_status: str | None = None
    source: str = "employee"
    merged: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class AnalysisRow:
    """Per-institution staffing and education metrics."""

    id: str
    institution_code: str | None
    institution_name: str | None
    region: str | None = None
    district: str | None = None
    management: str | None = None

    allocated_total: int = 0
    allocated_social: int = 0
    allocated_life: int = 0
    allocated_gov_total: int = 0
    allocated_gov_social: int = 0
    allocated_gov_life: int = 0

    hired_total: int = 0
    hired_social: int = 0
    hired_life: int = 0

    active_total: int = 0
    active_social: int = 0
    active_life: int = 0

    employment_rate: float = 0.0
    employment_social_rate: float = 0.0
    employment_life_rate: float = 0.0
    employment_reference: str | None = None

    fill_rate: float = 0.0
    fill_social_rate: float = 0.0
    fill_life_rate: float = 0.0

    tenure_social: int = 0
    tenure_life: int = 0

    education_target_total: int = 0
    education_target_social: int = 0
    education_target_life: int = 0
    education_completed_total: int = 0
    education_completed_social: int = 0
    education_completed_life: int = 0
    education_rate_total: float = 0.0
    education_rate_social: float = 0.0
    education_rate_life: float = 0.0
    education_d_rate_total: float = 0.0
    education_d_rate_social: float = 0.0
    education_d_rate_life: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

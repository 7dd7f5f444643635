"""
Integrated per-institution analysis.

Joins the employee roster, the training-system participants and the basic
and advanced course records onto each institution and computes staffing,
tenure and education-completion metrics.

Pure functions. No I/O, no Django dependencies.
"""

import re
from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from loguru import logger

from apps.core.utils.safecast import safe_date, safe_int, safe_str
from apps.reconciliation.records import AnalysisRow, get_field
from apps.reconciliation.services.active_status import EmployeeRoster, is_active_person
from apps.reconciliation.services.dedup import dedupe_persons
from apps.reconciliation.services.job_types import JobCategory, classify_job_type
from apps.reconciliation.services.matcher import match_institution

COMPLETED_STATUSES = frozenset(["수료", "완료"])

DEFAULT_MANAGEMENT = "경남광역"
DEFAULT_REGION = "경상남도"

_WHITESPACE = re.compile(r"\s+")


def percentage(numerator: int | float, denominator: int | float) -> float:
    """``numerator / denominator * 100`` rounded half-up to one decimal; 0.0 if undefined."""
    if not denominator:
        return 0.0
    value = Decimal(str(numerator)) * Decimal(100) / Decimal(str(denominator))
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def is_completed(status: Any) -> bool:
    text = safe_str(status)
    return text in COMPLETED_STATUSES if text else False


def normalize_person_name(name: Any) -> str:
    text = safe_str(name)
    return _WHITESPACE.sub("", text) if text else ""


def average_tenure_days(employees: Iterable[Any], reference: date) -> int:
    """
    Mean days from hire date to ``reference``.

    Employees without a parseable hire date are left out entirely; hire
    dates after the reference count as 0 days.
    """
    spans = []
    for employee in employees:
        hired_on = safe_date(get_field(employee, "hire_date"))
        if hired_on is None:
            continue
        spans.append(max(0, (reference - hired_on).days))
    if not spans:
        return 0
    average = Decimal(sum(spans)) / Decimal(len(spans))
    return int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CompletionIndex:
    """
    Course records of one track (basic or advanced) indexed for person lookup.

    A person is looked up by (name, resident id) first and by whitespace-free
    name second.
    """

    def __init__(self, records: Iterable[Any]):
        self._by_identity: dict[tuple[str, str], list[Any]] = defaultdict(list)
        self._by_name: dict[str, list[Any]] = defaultdict(list)
        self.size = 0
        for record in records:
            name = normalize_person_name(get_field(record, "name"))
            if not name:
                continue
            self.size += 1
            self._by_name[name].append(record)
            resident_id = safe_str(get_field(record, "resident_id"))
            if resident_id:
                self._by_identity[(name, resident_id)].append(record)

    def records_for(self, person: Any) -> list[Any]:
        name = normalize_person_name(get_field(person, "name"))
        if not name:
            return []
        resident_id = safe_str(get_field(person, "resident_id"))
        if resident_id and (name, resident_id) in self._by_identity:
            return self._by_identity[(name, resident_id)]
        return self._by_name.get(name, [])

    def completed(self, person: Any, *fallback_fields: str) -> bool:
        """
        Whether ``person`` completed this track.

        Without any record for the person, the person's own redundant status
        fields (``fallback_fields``) are used instead.
        """
        records = self.records_for(person)
        if records:
            return any(is_completed(get_field(record, "status")) for record in records)
        return any(is_completed(get_field(person, field)) for field in fallback_fields)


def _split_by_job(persons: Iterable[Any], job_of) -> dict[JobCategory, list[Any]]:
    buckets: dict[JobCategory, list[Any]] = {category: [] for category in JobCategory}
    for person in persons:
        buckets[classify_job_type(job_of(person))].append(person)
    return buckets


def _person_key(person: Any) -> tuple[str, str]:
    return (
        normalize_person_name(get_field(person, "name")),
        safe_str(get_field(person, "resident_id")) or "",
    )


class IntegratedAnalyzer:
    """
    Computes one AnalysisRow per institution.

    The employee roster, the active-status index and both completion indexes
    are built once and shared by every institution.
    """

    def __init__(
        self,
        employees: Sequence[Any],
        basic_education: Sequence[Any],
        advanced_education: Sequence[Any],
        participants: Sequence[Any],
        snapshot_date: date | str | None = None,
        default_management: str = DEFAULT_MANAGEMENT,
        default_region: str = DEFAULT_REGION,
    ):
        self.employees = list(employees)
        self.basic_education = list(basic_education)
        self.advanced_education = list(advanced_education)
        self.participants = list(participants)
        self.reference = safe_date(snapshot_date) or date.today()
        self.default_management = default_management
        self.default_region = default_region

        self.roster = EmployeeRoster(self.employees)
        self.basic_index = CompletionIndex(self.basic_education)
        self.advanced_index = CompletionIndex(self.advanced_education)

    def is_active(self, person: Any) -> bool:
        return is_active_person(person, self.roster, self.reference)

    def analyze(self, institutions: Iterable[Any]) -> list[AnalysisRow]:
        institutions = list(institutions)
        logger.info(
            f"Analyzing {len(institutions)} institutions as of {self.reference}: "
            f"{len(self.employees)} employees, {len(self.participants)} participants, "
            f"{len(self.basic_education)} basic / {len(self.advanced_education)} advanced course records"
        )
        rows = [
            self.analyze_institution(institution, position)
            for position, institution in enumerate(institutions, start=1)
        ]
        logger.info(f"Analysis produced {len(rows)} rows")
        return rows

    def education_candidates(self, institution: Any, institution_employees: list[Any]) -> tuple[list[Any], bool]:
        """
        People whose education counts for ``institution``.

        Returns (candidates, from_participants). Participants of the
        institution are used when there are any; otherwise the course
        records of the institution, plus course records of its own
        employees found by name and resident id.
        """
        participants = [
            participant
            for participant in self.participants
            if match_institution(participant, institution) and self.is_active(participant)
        ]
        if participants:
            return participants, True

        if not (self.basic_education or self.advanced_education):
            return [], False

        employee_identities = {
            _person_key(employee)
            for employee in institution_employees
            if safe_str(get_field(employee, "resident_id"))
        }
        seen: set[tuple[str, str]] = set()
        candidates = []
        for record in self.basic_education + self.advanced_education:
            key = _person_key(record)
            if not key[0] or key in seen:
                continue
            if match_institution(record, institution) or (key[1] and key in employee_identities):
                if self.is_active(record):
                    seen.add(key)
                    candidates.append(record)
        return candidates, False

    def final_completers(self, candidates: Iterable[Any], from_participants: bool) -> list[Any]:
        completers = []
        seen: set[tuple[str, str]] = set()
        for person in candidates:
            key = _person_key(person)
            if key in seen:
                continue
            seen.add(key)
            if from_participants:
                basic_done = self.basic_index.completed(person, "basic_training", "final_completion")
                advanced_done = self.advanced_index.completed(person, "advanced_education")
            else:
                basic_done = self.basic_index.completed(person)
                advanced_done = self.advanced_index.completed(person)
            if basic_done and advanced_done:
                completers.append(person)
        return completers

    def _job_type_lookup(self, institution_employees: list[Any]):
        by_name: dict[str, Any] = {}
        for employee in institution_employees:
            name = normalize_person_name(get_field(employee, "name"))
            if name and name not in by_name:
                by_name[name] = get_field(employee, "job_type")

        def job_of(person: Any) -> Any:
            own = get_field(person, "job_type")
            if own is not None:
                return own
            return by_name.get(normalize_person_name(get_field(person, "name")))

        return job_of

    def analyze_institution(self, institution: Any, position: int = 1) -> AnalysisRow:
        code = safe_str(get_field(institution, "code"))
        name = safe_str(get_field(institution, "name"))

        institution_employees = [
            employee for employee in self.employees if match_institution(employee, institution)
        ]
        # Activity is resolved per row before de-duplication, so the current row
        # of a re-hired person is the one that survives
        active = dedupe_persons(
            employee for employee in institution_employees if self.is_active(employee)
        )
        active_by_job = _split_by_job(active, lambda employee: get_field(employee, "job_type"))
        social = active_by_job[JobCategory.SOCIAL_WORKER]
        life = active_by_job[JobCategory.LIFE_SUPPORT]

        candidates, from_participants = self.education_candidates(institution, institution_employees)
        completers = self.final_completers(candidates, from_participants)
        completers_by_job = _split_by_job(completers, self._job_type_lookup(institution_employees))
        completed_social = len(completers_by_job[JobCategory.SOCIAL_WORKER])
        completed_life = len(completers_by_job[JobCategory.LIFE_SUPPORT])

        allocated_social = safe_int(get_field(institution, "allocated_social_workers"), 0)
        allocated_life = safe_int(get_field(institution, "allocated_life_support"), 0)
        allocated_total = allocated_social + allocated_life
        gov_social = safe_int(get_field(institution, "allocated_social_workers_gov"), 0)
        gov_life = safe_int(get_field(institution, "allocated_life_support_gov"), 0)
        gov_total = gov_social + gov_life
        hired_social = safe_int(get_field(institution, "hired_social_workers"), 0)
        hired_life = safe_int(get_field(institution, "hired_life_support"), 0)
        hired_total = hired_social + hired_life

        logger.debug(
            f"[{name}] ({code}) employees={len(institution_employees)} active={len(active)} "
            f"social={len(social)} life={len(life)} education_candidates={len(candidates)} "
            f"completers={len(completers)}"
        )

        return AnalysisRow(
            id=f"analysis_{code or position}",
            institution_code=code,
            institution_name=name,
            management=safe_str(get_field(institution, "area_name")) or self.default_management,
            region=safe_str(get_field(institution, "region")) or self.default_region,
            district=safe_str(get_field(institution, "district")) or "",
            allocated_total=allocated_total,
            allocated_social=allocated_social,
            allocated_life=allocated_life,
            allocated_gov_total=gov_total,
            allocated_gov_social=gov_social,
            allocated_gov_life=gov_life,
            hired_total=hired_total,
            hired_social=hired_social,
            hired_life=hired_life,
            active_total=len(active),
            active_social=len(social),
            active_life=len(life),
            employment_rate=percentage(hired_total, gov_total),
            employment_social_rate=percentage(hired_social, gov_social),
            employment_life_rate=percentage(hired_life, gov_life),
            employment_reference=self.reference.isoformat(),
            fill_rate=percentage(len(active), allocated_total),
            fill_social_rate=percentage(len(social), allocated_social),
            fill_life_rate=percentage(len(life), allocated_life),
            tenure_social=average_tenure_days(social, self.reference),
            tenure_life=average_tenure_days(life, self.reference),
            education_target_total=len(active),
            education_target_social=len(social),
            education_target_life=len(life),
            education_completed_total=len(completers),
            education_completed_social=completed_social,
            education_completed_life=completed_life,
            education_rate_total=percentage(len(completers), len(active)),
            education_rate_social=percentage(completed_social, len(social)),
            education_rate_life=percentage(completed_life, len(life)),
            education_d_rate_total=percentage(len(completers), hired_total),
            education_d_rate_social=percentage(completed_social, hired_social),
            education_d_rate_life=percentage(completed_life, hired_life),
        )


def analyze(
    employees: Sequence[Any],
    institutions: Sequence[Any],
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
    participants: Sequence[Any],
    snapshot_date: date | str | None = None,
    **options: str,
) -> list[AnalysisRow]:
    """
    Compute one AnalysisRow per institution, in input order.

    ``snapshot_date`` is the as-of date for active status and tenure
    (default: today). ``options`` may override ``default_management`` and
    ``default_region``.
    """
    analyzer = IntegratedAnalyzer(
        employees,
        basic_education,
        advanced_education,
        participants,
        snapshot_date=snapshot_date,
        **options,
    )
    return analyzer.analyze(institutions)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    total = sum(Decimal(str(value)) for value in values)
    return float((total / Decimal(len(values))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def calculate_summary_stats(rows: Sequence[AnalysisRow]) -> dict[str, Any] | None:
    """Totals and averages over analysis rows; None for no rows."""
    if not rows:
        return None
    count = len(rows)
    return {
        "total_institutions": count,
        "total_workers": sum(row.hired_total for row in rows),
        "total_social_workers": sum(row.hired_social for row in rows),
        "total_life_support": sum(row.hired_life for row in rows),
        "total_active": sum(row.active_total for row in rows),
        "total_allocated": sum(row.allocated_total for row in rows),
        "total_allocated_gov": sum(row.allocated_gov_total for row in rows),
        "total_employed": sum(row.hired_total for row in rows),
        "total_completed": sum(row.education_completed_total for row in rows),
        "avg_employment_rate": _mean([row.employment_rate for row in rows]),
        "avg_education_rate": _mean([row.education_rate_total for row in rows]),
    }

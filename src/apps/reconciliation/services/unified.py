"""
Unified person view over the three person sources.

Employees, training-system participants and course records each describe
overlapping sets of people. This module merges them into UnifiedPerson
records with one active-status rule and one de-duplication rule, so every
statistic built on top counts people the same way.
"""

from collections import defaultdict
from datetime import date
from typing import Any, Iterable, Sequence

from loguru import logger

from apps.core.utils.safecast import safe_str
from apps.reconciliation.records import UnifiedPerson, get_field
from apps.reconciliation.services.active_status import EmployeeRoster, is_active_person
from apps.reconciliation.services.aggregator import is_completed
from apps.reconciliation.services.dedup import dedupe_persons, normalize_birth_date
from apps.reconciliation.services.job_types import JobCategory, classify_job_type

SOURCE_EMPLOYEE = "employee"
SOURCE_PARTICIPANT = "participant"
SOURCE_EDUCATION = "education"


class PersonLookup:
    """Records indexed by name; resolved by birth date, then id, then name."""

    def __init__(self, records: Iterable[Any]):
        self._by_name: dict[str, list[Any]] = defaultdict(list)
        for record in records:
            name = safe_str(get_field(record, "name"))
            if name:
                self._by_name[name].append(record)

    def find(self, person: Any, allow_name_only: bool = False) -> Any | None:
        name = safe_str(get_field(person, "name"))
        candidates = self._by_name.get(name) if name else None
        if not candidates:
            return None

        birth = normalize_birth_date(get_field(person, "birth_date"))
        person_id = safe_str(get_field(person, "id"))
        for candidate in candidates:
            if birth and birth == normalize_birth_date(get_field(candidate, "birth_date")):
                return candidate
            if person_id and person_id == safe_str(get_field(candidate, "id")):
                return candidate
        return candidates[0] if allow_name_only else None


def _status_of(lookup: PersonLookup, person: Any, allow_name_only: bool = False) -> str | None:
    record = lookup.find(person, allow_name_only=allow_name_only)
    return safe_str(get_field(record, "status")) if record is not None else None


def _unified(person: Any, source: str, is_active: bool, basic: Any, advanced: Any) -> UnifiedPerson:
    return UnifiedPerson(
        name=safe_str(get_field(person, "name")),
        id=safe_str(get_field(person, "id")),
        institution=safe_str(get_field(person, "institution")),
        institution_code=safe_str(get_field(person, "institution_code")),
        job_type=safe_str(get_field(person, "job_type")),
        birth_date=get_field(person, "birth_date"),
        resident_id=safe_str(get_field(person, "resident_id")),
        hire_date=get_field(person, "hire_date"),
        resign_date=get_field(person, "resign_date"),
        is_active=is_active,
        basic_education_status=safe_str(basic),
        advanced_education_status=safe_str(advanced),
        source=source,
        merged=source != SOURCE_EMPLOYEE,
        extra={"final_completion": get_field(person, "final_completion")},
    )


def create_unified_persons(
    employees: Sequence[Any],
    participants: Sequence[Any],
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
    reference_date: date | str | None = None,
) -> list[UnifiedPerson]:
    """
    Merge all person sources into de-duplicated UnifiedPerson records.

    Employees come first so they win ties in de-duplication; participants
    carry their own course statuses; course records contribute the people
    missing from both other sources.
    """
    roster = EmployeeRoster(employees)
    basic_lookup = PersonLookup(basic_education)
    advanced_lookup = PersonLookup(advanced_education)

    persons: list[UnifiedPerson] = []
    for employee in employees:
        persons.append(
            _unified(
                employee,
                SOURCE_EMPLOYEE,
                is_active_person(employee, roster, reference_date),
                _status_of(basic_lookup, employee),
                _status_of(advanced_lookup, employee),
            )
        )
    for participant in participants:
        persons.append(
            _unified(
                participant,
                SOURCE_PARTICIPANT,
                is_active_person(participant, roster, reference_date),
                get_field(participant, "basic_training"),
                get_field(participant, "advanced_education"),
            )
        )
    for record in list(basic_education) + list(advanced_education):
        persons.append(
            _unified(
                record,
                SOURCE_EDUCATION,
                is_active_person(record, roster, reference_date),
                _status_of(basic_lookup, record, allow_name_only=True),
                _status_of(advanced_lookup, record, allow_name_only=True),
            )
        )

    unique = dedupe_persons(persons)
    logger.info(f"Unified {len(persons)} person records into {len(unique)} people")
    return unique


def _education_flags(person: UnifiedPerson) -> tuple[bool, bool]:
    basic_done = is_completed(person.basic_education_status)
    advanced_done = is_completed(person.advanced_education_status) or is_completed(
        person.extra.get("final_completion")
    )
    return basic_done, advanced_done


def calculate_education_stats(persons: Iterable[UnifiedPerson]) -> dict[str, int]:
    """Education progress of active people: complete, partial, in progress, none."""
    stats = {"total": 0, "complete": 0, "partial": 0, "in_progress": 0, "none": 0}
    for person in persons:
        if not person.is_active:
            continue
        stats["total"] += 1
        basic_done, advanced_done = _education_flags(person)
        if basic_done and advanced_done:
            stats["complete"] += 1
        elif basic_done or advanced_done:
            stats["partial"] += 1
        elif person.basic_education_status or person.advanced_education_status:
            stats["in_progress"] += 1
        else:
            stats["none"] += 1
    return stats


def calculate_institution_stats(persons: Iterable[UnifiedPerson]) -> list[dict[str, Any]]:
    """Active headcount and completions per institution name."""
    by_institution: dict[str | None, dict[str, Any]] = {}
    for person in persons:
        if not person.is_active:
            continue
        stats = by_institution.setdefault(
            person.institution,
            {
                "institution_name": person.institution,
                "institution_code": person.institution_code,
                "total": 0,
                "social_workers": 0,
                "life_support": 0,
                "completed": 0,
            },
        )
        stats["total"] += 1
        category = classify_job_type(person.job_type)
        if category is JobCategory.SOCIAL_WORKER:
            stats["social_workers"] += 1
        elif category is JobCategory.LIFE_SUPPORT:
            stats["life_support"] += 1
        if any(_education_flags(person)):
            stats["completed"] += 1
    return list(by_institution.values())


def build_employee_based_stats(
    employees: Sequence[Any],
    participants: Sequence[Any],
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
    reference_date: date | str | None = None,
) -> dict[str, Any]:
    """Employees annotated with their course statuses, plus headcounts."""
    roster = EmployeeRoster(employees)
    participant_lookup = PersonLookup(participants)
    basic_lookup = PersonLookup(basic_education)
    advanced_lookup = PersonLookup(advanced_education)

    annotated = []
    for employee in employees:
        participant = participant_lookup.find(employee)
        basic = _status_of(basic_lookup, employee) or get_field(participant, "basic_training")
        advanced = _status_of(advanced_lookup, employee) or get_field(participant, "advanced_education")
        annotated.append(
            _unified(
                employee,
                SOURCE_EMPLOYEE,
                is_active_person(employee, roster, reference_date),
                basic,
                advanced,
            )
        )

    active = [person for person in annotated if person.is_active]
    return {
        "all_employees": annotated,
        "active_employees": active,
        "total_count": len(annotated),
        "active_count": len(active),
    }


def count_education_participants(
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
    employees: Sequence[Any],
    include_retired: bool = False,
    reference_date: date | str | None = None,
) -> int:
    """Distinct (name, id) people across both course tracks."""
    roster = EmployeeRoster(employees)
    people = set()
    for record in list(basic_education) + list(advanced_education):
        if not include_retired and not is_active_person(record, roster, reference_date):
            continue
        people.add((safe_str(get_field(record, "name")), safe_str(get_field(record, "id"))))
    return len(people)

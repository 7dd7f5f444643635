"""
Active-status resolution.

Decides whether a person (employee, participant or course record) is still
employed as of a reference date. When the person can be found on the
employee roster, the roster entry is authoritative; otherwise the person's
own status fields are used.

Pure functions. No I/O, no Django dependencies.
"""

from collections import defaultdict
from datetime import date
from typing import Any, Iterable

from loguru import logger

from apps.core.utils.safecast import is_blank, safe_date, safe_str
from apps.reconciliation.records import get_field
from apps.reconciliation.services.dedup import normalize_birth_date

INACTIVE_KEYWORDS = [
    "중지",
    "탈퇴",
    "휴면",
    "휴면상태",
    "정지",
    "퇴사",
    "해지",
    "종료",
    "중단",
    "비활성",
    "inactive",
    "suspended",
    "terminated",
    "resigned",
    "withdrawn",
    "dormant",
    "ended",
]

EMPLOYEE_STATUS_FIELDS = ("status", "employment_status", "work_status")
PERSON_STATUS_FIELDS = EMPLOYEE_STATUS_FIELDS + ("member_status",)


def has_inactive_keyword(value: Any) -> bool:
    """Case-insensitive substring check against INACTIVE_KEYWORDS."""
    if is_blank(value):
        return False
    text = str(value).strip().lower()
    return any(keyword in text for keyword in INACTIVE_KEYWORDS)


class EmployeeRoster:
    """Employees indexed by name, so lookups are not a scan of the roster."""

    def __init__(self, employees: Iterable[Any] = ()):
        self._by_name: dict[str, list[Any]] = defaultdict(list)
        self.size = 0
        for employee in employees:
            name = safe_str(get_field(employee, "name"))
            if name:
                self._by_name[name].append(employee)
                self.size += 1

    @classmethod
    def of(cls, roster: "EmployeeRoster | Iterable[Any] | None") -> "EmployeeRoster":
        if isinstance(roster, cls):
            return roster
        return cls(roster or ())

    def __len__(self):
        return self.size

    def find(self, person: Any) -> Any | None:
        """
        Find the roster entry for ``person``.

        An employee row is its own entry. Otherwise same name plus equal
        birth date when both sides have one, else same name plus equal id
        when both sides have one. Of several matching rows (a re-hired
        person), one without a resignation date wins.
        """
        name = safe_str(get_field(person, "name"))
        if not name:
            return None
        candidates = self._by_name.get(name)
        if not candidates:
            return None
        if any(employee is person for employee in candidates):
            return person

        person_birth = normalize_birth_date(get_field(person, "birth_date"))
        person_id = safe_str(get_field(person, "id"))

        matches = []
        for employee in candidates:
            employee_birth = normalize_birth_date(get_field(employee, "birth_date"))
            if person_birth and employee_birth:
                if person_birth == employee_birth:
                    matches.append(employee)
                continue
            employee_id = safe_str(get_field(employee, "id"))
            if person_id and employee_id and person_id == employee_id:
                matches.append(employee)
        if not matches:
            return None
        current = [employee for employee in matches if is_blank(get_field(employee, "resign_date"))]
        return (current or matches)[0]


def _resolve_reference(reference_date: Any) -> date:
    return safe_date(reference_date) or date.today()


def resigned_by(record: Any, reference: date) -> bool:
    """True when the record's resignation date is on or before ``reference``."""
    raw = get_field(record, "resign_date")
    if raw is None:
        return False
    resigned_on = safe_date(raw)
    if resigned_on is None:
        logger.debug(f"Ignoring unparseable resign date {raw!r} for {get_field(record, 'name')!r}")
        return False
    return resigned_on <= reference


def _status_says_active(record: Any, status_fields: tuple[str, ...], reference: date) -> bool:
    if any(has_inactive_keyword(get_field(record, field)) for field in status_fields):
        return False
    if resigned_by(record, reference):
        return False
    if get_field(record, "is_active") is False:
        return False
    return True


def is_active_person(
    person: Any,
    employee_roster: EmployeeRoster | Iterable[Any] | None = None,
    reference_date: date | str | None = None,
) -> bool:
    """
    Whether ``person`` is active on ``reference_date`` (default: today).

    Active means: no inactive status keyword, no resignation on or before
    the reference date and no explicit ``is_active=False``. A matching
    employee on the roster is checked instead of the person's own fields.
    """
    reference = _resolve_reference(reference_date)
    roster = EmployeeRoster.of(employee_roster)

    employee = roster.find(person)
    if employee is not None:
        return _status_says_active(employee, EMPLOYEE_STATUS_FIELDS, reference)

    return _status_says_active(person, PERSON_STATUS_FIELDS, reference)

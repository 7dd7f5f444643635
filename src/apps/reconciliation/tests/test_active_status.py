"""
Tests for active-status resolution.

Pure function tests - no Django dependencies needed.
"""

from datetime import date

import pytest

from apps.reconciliation.records import Employee, Participant
from apps.reconciliation.services.active_status import (
    EmployeeRoster,
    has_inactive_keyword,
    is_active_person,
)

REFERENCE = date(2025, 1, 15)


class TestKeywords:
    @pytest.mark.parametrize(
        "status", ["퇴사", "휴면상태", "중지", "회원 탈퇴", "Suspended", "RESIGNED", "dormant"]
    )
    def test_inactive_keywords(self, status):
        assert has_inactive_keyword(status)

    @pytest.mark.parametrize("status", ["정상", "재직", "active", None, ""])
    def test_other_values(self, status):
        assert not has_inactive_keyword(status)


class TestOwnFields:
    """Resolution without a roster match."""

    def test_default_is_active(self):
        assert is_active_person({"name": "김철수"}, [], REFERENCE)

    @pytest.mark.parametrize("field", ["status", "employment_status", "work_status", "member_status"])
    def test_status_fields(self, field):
        assert not is_active_person({"name": "김철수", field: "휴면"}, [], REFERENCE)

    def test_explicit_inactive_flag(self):
        assert not is_active_person(Participant(name="김철수", is_active=False), [], REFERENCE)

    def test_resign_date_on_reference_day_is_inactive(self):
        person = {"name": "김철수", "resign_date": "2025-01-15"}
        assert not is_active_person(person, [], REFERENCE)

    def test_resign_date_day_after_reference_is_active(self):
        person = {"name": "김철수", "resign_date": "2025-01-16"}
        assert is_active_person(person, [], REFERENCE)

    def test_unparseable_resign_date_is_ignored(self):
        person = {"name": "김철수", "resign_date": "미정"}
        assert is_active_person(person, [], REFERENCE)

    def test_reference_date_as_string(self):
        person = {"name": "김철수", "resign_date": "2024-12-31"}
        assert is_active_person(person, [], "2024-12-30")
        assert not is_active_person(person, [], "2024-12-31")

    def test_default_reference_is_today(self):
        assert not is_active_person({"name": "김철수", "resign_date": "2000-01-01"})


class TestRosterPrecedence:
    """A matching employee is authoritative."""

    def test_employee_status_overrides_person(self):
        roster = [Employee(name="김철수", birth_date="1990-01-01", resign_date="2024-06-30")]
        participant = Participant(name="김철수", birth_date="19900101", status="정상")
        assert not is_active_person(participant, roster, REFERENCE)

    def test_active_employee_overrides_inactive_participant(self):
        roster = [Employee(name="김철수", birth_date="1990-01-01")]
        participant = Participant(name="김철수", birth_date="1990-01-01", member_status="휴면")
        assert is_active_person(participant, roster, REFERENCE)

    def test_member_status_not_checked_on_employee(self):
        roster = [Employee(name="김철수", id="e1", extra={"member_status": "휴면"})]
        assert is_active_person({"name": "김철수", "id": "e1"}, roster, REFERENCE)

    def test_id_match_when_birth_date_missing(self):
        roster = [Employee(name="김철수", id="e1", status="퇴사")]
        assert not is_active_person({"name": "김철수", "id": "e1"}, roster, REFERENCE)

    def test_birth_date_mismatch_is_not_a_match(self):
        roster = [Employee(name="김철수", birth_date="1990-01-01", id="e1", status="퇴사")]
        person = {"name": "김철수", "birth_date": "1985-05-05", "id": "e1"}
        assert is_active_person(person, roster, REFERENCE)

    def test_name_alone_is_not_a_match(self):
        roster = [Employee(name="김철수", status="퇴사")]
        assert is_active_person({"name": "김철수"}, roster, REFERENCE)

    def test_prebuilt_roster(self):
        roster = EmployeeRoster([Employee(name="이영희", id="e2", is_active=False)])
        assert len(roster) == 1
        assert not is_active_person({"name": "이영희", "id": "e2"}, roster, REFERENCE)

    def test_employee_resolves_to_its_own_row(self):
        old = Employee(name="김철수", birth_date="1990-01-01", resign_date="2022-01-01")
        current = Employee(name="김철수", birth_date="1990-01-01")
        roster = EmployeeRoster([old, current])
        assert roster.find(current) is current
        assert roster.find(old) is old
        assert is_active_person(current, roster, REFERENCE)
        assert not is_active_person(old, roster, REFERENCE)

    def test_rehired_person_matches_current_row(self):
        old = Employee(name="김철수", birth_date="1990-01-01", resign_date="2022-01-01")
        current = Employee(name="김철수", birth_date="1990-01-01")
        roster = EmployeeRoster([old, current])
        participant = Participant(name="김철수", birth_date="19900101")
        assert roster.find(participant) is current
        assert is_active_person(participant, roster, REFERENCE)

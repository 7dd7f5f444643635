"""
Tests for the unified person view.

Pure function tests - no Django dependencies needed.
"""

from apps.reconciliation.records import EducationRecord, Employee, Participant, UnifiedPerson
from apps.reconciliation.services.unified import (
    PersonLookup,
    build_employee_based_stats,
    calculate_education_stats,
    calculate_institution_stats,
    count_education_participants,
    create_unified_persons,
)

REFERENCE = "2025-01-01"


class TestPersonLookup:
    def test_birth_date_then_id(self):
        lookup = PersonLookup(
            [
                {"name": "김철수", "birth_date": "1985-05-05", "status": "A"},
                {"name": "김철수", "birth_date": "1990-01-01", "status": "B"},
                {"name": "김철수", "id": "p9", "status": "C"},
            ]
        )
        assert lookup.find({"name": "김철수", "birth_date": "19900101"})["status"] == "B"
        assert lookup.find({"name": "김철수", "id": "p9"})["status"] == "C"

    def test_name_only_is_opt_in(self):
        lookup = PersonLookup([{"name": "이영희", "status": "수료"}])
        assert lookup.find({"name": "이영희"}) is None
        assert lookup.find({"name": "이영희"}, allow_name_only=True)["status"] == "수료"

    def test_unknown_name(self):
        assert PersonLookup([]).find({"name": "박민수"}) is None


class TestCreateUnifiedPersons:
    def test_participant_with_statuses_replaces_employee(self):
        employees = [
            Employee(name="김철수", birth_date="1990-01-01", institution="창원시종합사회복지관", job_type="전담사회복지사")
        ]
        participants = [
            Participant(
                name="김철수",
                birth_date="19900101",
                institution="창원시종합사회복지관",
                job_type="전담사회복지사",
                basic_training="수료",
                advanced_education="수료",
            )
        ]

        [person] = create_unified_persons(employees, participants, [], [], reference_date=REFERENCE)

        assert person.source == "participant"
        assert person.merged is True
        assert person.basic_education_status == "수료"
        assert person.is_active is True

    def test_employee_gets_course_statuses(self):
        employees = [Employee(name="이영희", id="e1")]
        basic = [EducationRecord(name="이영희", id="e1", status="수료")]

        [person] = create_unified_persons(employees, [], basic, [], reference_date=REFERENCE)

        assert person.source == "employee"
        assert person.merged is False
        assert person.basic_education_status == "수료"
        assert person.advanced_education_status is None

    def test_course_only_person_is_included(self):
        basic = [EducationRecord(name="정민호", status="진행중")]
        [person] = create_unified_persons([], [], basic, [], reference_date=REFERENCE)
        assert person.source == "education"
        assert person.basic_education_status == "진행중"

    def test_resigned_employee_is_inactive(self):
        employees = [Employee(name="박민수", birth_date="1970-03-03", resign_date="2024-06-30")]
        [person] = create_unified_persons(employees, [], [], [], reference_date=REFERENCE)
        assert person.is_active is False

    def test_merge_is_logged(self, log_messages):
        create_unified_persons([Employee(name="김철수")], [], [], [], reference_date=REFERENCE)
        assert any("Unified 1 person records into 1 people" in message for message in log_messages)


class TestEducationStats:
    PEOPLE = [
        UnifiedPerson(name="가", is_active=True, basic_education_status="수료", advanced_education_status="수료"),
        UnifiedPerson(name="나", is_active=True, basic_education_status="수료"),
        UnifiedPerson(name="다", is_active=True, basic_education_status="진행중"),
        UnifiedPerson(name="라", is_active=True),
        UnifiedPerson(name="마", is_active=True, extra={"final_completion": "수료"}),
        UnifiedPerson(name="바", is_active=False, basic_education_status="수료"),
    ]

    def test_counts_active_people_only(self):
        stats = calculate_education_stats(self.PEOPLE)
        assert stats == {"total": 5, "complete": 1, "partial": 2, "in_progress": 1, "none": 1}

    def test_institution_stats(self):
        people = [
            UnifiedPerson(name="가", institution="A", job_type="전담사회복지사", is_active=True, basic_education_status="수료"),
            UnifiedPerson(name="나", institution="A", job_type="생활지원사", is_active=True),
            UnifiedPerson(name="다", institution="A", job_type="생활지원사", is_active=False),
            UnifiedPerson(name="라", institution="B", job_type="사무원", is_active=True),
        ]

        stats = {item["institution_name"]: item for item in calculate_institution_stats(people)}

        assert stats["A"]["total"] == 2
        assert stats["A"]["social_workers"] == 1
        assert stats["A"]["life_support"] == 1
        assert stats["A"]["completed"] == 1
        assert stats["B"]["total"] == 1


class TestEmployeeBasedStats:
    def test_statuses_and_counts(self, sample_employees, sample_participants, sample_basic_education):
        stats = build_employee_based_stats(
            sample_employees, sample_participants, sample_basic_education, [], reference_date=REFERENCE
        )

        assert stats["total_count"] == 3
        assert stats["active_count"] == 2
        by_name = {person.name: person for person in stats["all_employees"]}
        # No birth date on the course record, so the participant supplies the status
        assert by_name["김철수"].basic_education_status == "수료"
        assert by_name["김철수"].advanced_education_status == "수료"
        assert by_name["박민수"].is_active is False


class TestCountEducationParticipants:
    def test_distinct_people_across_tracks(self):
        basic = [EducationRecord(name="가", id="1"), EducationRecord(name="나", id="2")]
        advanced = [EducationRecord(name="가", id="1"), EducationRecord(name="다", id="3", status="퇴사")]

        assert count_education_participants(basic, advanced, [], reference_date=REFERENCE) == 2
        assert count_education_participants(basic, advanced, [], include_retired=True, reference_date=REFERENCE) == 3

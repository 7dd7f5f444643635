"""
Tests for course completion statistics.

Pure function tests - no Django dependencies needed.
"""

from datetime import date

import pytest

from apps.reconciliation.records import EducationRecord, Participant
from apps.reconciliation.services.education import (
    calculate_district_stats,
    calculate_institution_performance,
    calculate_stats_by_job_type,
    calculate_time_series,
    match_education_with_participants,
    overall_status,
    status_counts,
    summarize_matches,
    track_status,
    whole_percentage,
)


def _record(
    status, job_type="생활지원사", institution="통영노인통합지원센터", course="생활지원사 기본교육", name="김철수", **kwargs
):
    return EducationRecord(
        name=name,
        status=status,
        job_type=job_type,
        institution=institution,
        course=course,
        **kwargs,
    )


class TestStatusCounts:
    @pytest.mark.parametrize(
        "numerator,denominator,expected", [(1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 0, 0)]
    )
    def test_whole_percentage(self, numerator, denominator, expected):
        assert whole_percentage(numerator, denominator) == expected

    def test_counts(self):
        records = [_record("수료"), _record("수료"), _record("미수료"), _record("정상"), _record("수강취소")]
        stats = status_counts(records)
        assert stats == {
            "total": 5,
            "completed": 2,
            "incomplete": 1,
            "in_progress": 1,
            "cancelled": 1,
            "completion_rate": 40,
        }


class TestByJobType:
    def test_split_by_job_type(self):
        records = [
            _record("수료", job_type="전담사회복지사", course="전담 기본교육"),
            _record("미수료", job_type="선임전담사회복지사", course="전담 기본교육"),
            _record("수료"),
            _record("수료"),
            _record("수료"),
            _record("진행중", job_type=None),
        ]

        stats = calculate_stats_by_job_type(records)

        assert stats["전담사회복지사"]["total"] == 2
        assert stats["전담사회복지사"]["completion_rate"] == 50
        assert stats["생활지원사"]["total"] == 3
        assert stats["생활지원사"]["completion_rate"] == 100
        assert stats["총계"]["total"] == 6
        assert stats["총계"]["in_progress"] == 1
        assert [course["course_name"] for course in stats["course_stats"]] == [
            "생활지원사 기본교육",
            "전담 기본교육",
        ]


class TestDistrictStats:
    def test_known_institutions_are_grouped(self):
        records = [
            _record("수료", institution="통영노인통합지원센터"),
            _record("미수료", institution="통영시종합사회복지관"),
            _record("수료", institution="어딘가의 센터"),
        ]

        districts = {item["district"]: item for item in calculate_district_stats(records)}

        tongyeong = districts["통영시"]
        assert tongyeong["total_participants"] == 2
        assert tongyeong["completed_participants"] == 1
        assert tongyeong["completion_rate"] == 50
        assert tongyeong["institutions"][0]["name"] == "통영노인통합지원센터"
        assert sum(item["total_participants"] for item in districts.values()) == 2

    def test_sorted_by_completion_rate(self):
        result = calculate_district_stats([_record("수료", institution="통영노인통합지원센터")])
        assert result[0]["district"] == "통영시"


class TestInstitutionPerformance:
    def test_ranking_and_thresholds(self):
        basic = [
            _record("수료", institution="A"),
            _record("수료", institution="A"),
            _record("수료", institution="B"),
            _record("미수료", institution="B"),
        ]
        advanced = [_record("수료", institution="A"), _record("미수료", institution="C")]

        result = calculate_institution_performance(basic, advanced)

        assert [p["institution_name"] for p in result["all"]] == ["A", "B", "C"]
        assert [p["ranking"] for p in result["all"]] == [1, 2, 3]
        assert [p["institution_name"] for p in result["excellent"]] == ["A"]
        assert [p["institution_name"] for p in result["needs_improvement"]] == ["B", "C"]
        assert result["all"][1]["basic_education_rate"] == 50
        assert result["all"][0]["district"] == "미분류"


class TestTimeSeries:
    def test_periods_and_trend(self):
        records = [
            _record("수료", year="2024-1"),
            _record("미수료", year="2024-1"),
            _record("수료", year="2023-2"),
            _record("수료"),
        ]

        result = calculate_time_series(records)

        assert result["period_stats"]["2024-1"]["completion_rate"] == 50
        assert [item["period"] for item in result["trend"]] == ["2023-2", "2024-1", "미분류"]


class TestParticipantMatching:
    def test_track_status_priority(self):
        assert track_status([]) == "미등록"
        assert track_status([_record("미수료"), _record("수료")]) == "수료"
        assert track_status([_record("미수료"), _record("정상")]) == "진행중"
        assert track_status([_record("미수료")]) == "미수료"
        assert track_status([_record("수강취소")]) == "미등록"

    @pytest.mark.parametrize(
        "basic,advanced,expected",
        [
            ("수료", "수료", "우수"),
            ("수료", "진행중", "진행중"),
            ("수료", "미등록", "미완료"),
            ("미수료", "미수료", "미완료"),
        ],
    )
    def test_overall_status(self, basic, advanced, expected):
        assert overall_status(basic, advanced) == expected

    def test_match_by_email_or_name_and_institution(self):
        participants = [
            Participant(name="김철수", institution="통영노인통합지원센터", extra={"email": "kim@example.com"}),
            Participant(name="이영희", institution="통영노인통합지원센터"),
        ]
        basic = [
            _record("수료", name="다른이름", email="KIM@example.com", completion_date="2024-03-01"),
            _record("수료", name="이영희"),
            _record("수료", name="이영희", institution="다른기관"),
        ]
        advanced = [_record("수료", name="김철수", email="kim@example.com", completion_date="2024-09-01")]

        kim, lee = match_education_with_participants(participants, basic, advanced)

        assert kim.overall_status == "우수"
        assert kim.last_completion_date == date(2024, 9, 1)
        assert len(lee.basic_courses) == 1
        assert lee.advanced_status == "미등록"
        assert lee.overall_status == "미완료"

        summary = summarize_matches([kim, lee])
        assert summary["excellent_count"] == 1
        assert summary["basic_completion_rate"] == 100
        assert summary["advanced_completion_rate"] == 50

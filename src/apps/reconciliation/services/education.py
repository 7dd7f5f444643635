"""
Course completion statistics.

Aggregations over basic/advanced course records: by job type, by course,
by district, by institution (with ranking) and by year/round, plus the
per-participant education status used by the participant listing.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from apps.core.utils.safecast import safe_date, safe_str
from apps.reconciliation.records import get_field
from config.districts import DISTRICT_INSTITUTIONS, INSTITUTION_DISTRICT

STATUS_COMPLETED = "수료"
STATUS_INCOMPLETE = "미수료"
STATUS_IN_PROGRESS = "진행중"
STATUS_CANCELLED = "수강취소"
STATUS_NOT_ENROLLED = "미등록"
# Legacy exports mark running enrolments as 정상
IN_PROGRESS_ALIASES = frozenset([STATUS_IN_PROGRESS, "정상"])

OVERALL_EXCELLENT = "우수"
OVERALL_IN_PROGRESS = "진행중"
OVERALL_INCOMPLETE = "미완료"

SOCIAL_WORKER = "전담사회복지사"
LIFE_SUPPORT = "생활지원사"
TOTAL = "총계"
UNCLASSIFIED = "미분류"


def whole_percentage(numerator: int, denominator: int) -> int:
    """Integer percentage rounded half-up; 0 when the denominator is 0."""
    if not denominator:
        return 0
    value = Decimal(numerator) * Decimal(100) / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _status(record: Any) -> str | None:
    return safe_str(get_field(record, "status"))


def _is_social_worker_record(record: Any) -> bool:
    job_type = safe_str(get_field(record, "job_type")) or ""
    return job_type == SOCIAL_WORKER or SOCIAL_WORKER in job_type


def _is_life_support_record(record: Any) -> bool:
    return safe_str(get_field(record, "job_type")) == LIFE_SUPPORT


def status_counts(records: Iterable[Any]) -> dict[str, int]:
    """Totals per course status and the completion rate."""
    stats = {"total": 0, "completed": 0, "incomplete": 0, "in_progress": 0, "cancelled": 0}
    for record in records:
        status = _status(record)
        stats["total"] += 1
        if status == STATUS_COMPLETED:
            stats["completed"] += 1
        elif status == STATUS_INCOMPLETE:
            stats["incomplete"] += 1
        elif status in IN_PROGRESS_ALIASES:
            stats["in_progress"] += 1
        elif status == STATUS_CANCELLED:
            stats["cancelled"] += 1
    stats["completion_rate"] = whole_percentage(stats["completed"], stats["total"])
    return stats


def calculate_course_stats(records: Iterable[Any]) -> list[dict[str, Any]]:
    by_course: dict[str | None, dict[str, int]] = {}
    for record in records:
        course = safe_str(get_field(record, "course"))
        stats = by_course.setdefault(course, {"total": 0, "completed": 0})
        stats["total"] += 1
        if _status(record) == STATUS_COMPLETED:
            stats["completed"] += 1

    course_stats = [
        {
            "course_name": course,
            "total": stats["total"],
            "completed": stats["completed"],
            "completion_rate": whole_percentage(stats["completed"], stats["total"]),
        }
        for course, stats in by_course.items()
    ]
    return sorted(course_stats, key=lambda item: item["total"], reverse=True)


def calculate_stats_by_job_type(records: Sequence[Any]) -> dict[str, Any]:
    """Status counts for social workers, life-support workers and overall."""
    records = list(records)
    return {
        SOCIAL_WORKER: status_counts(r for r in records if _is_social_worker_record(r)),
        LIFE_SUPPORT: status_counts(r for r in records if _is_life_support_record(r)),
        TOTAL: status_counts(records),
        "course_stats": calculate_course_stats(records),
    }


def district_of(institution_name: Any) -> str | None:
    return INSTITUTION_DISTRICT.get(safe_str(institution_name) or "")


def calculate_district_stats(records: Sequence[Any]) -> list[dict[str, Any]]:
    """
    Completion per city/county of the regional institution list.

    Records are assigned to a district by exact institution name; districts
    and the institutions within them are sorted by completion rate.
    """
    by_institution: dict[str, list[Any]] = defaultdict(list)
    for record in records:
        name = safe_str(get_field(record, "institution"))
        if name:
            by_institution[name].append(record)

    districts = []
    for district, institutions in DISTRICT_INSTITUTIONS.items():
        institution_stats = []
        total = completed = 0
        for institution in institutions:
            institution_records = by_institution.get(institution, [])
            done = sum(1 for record in institution_records if _status(record) == STATUS_COMPLETED)
            total += len(institution_records)
            completed += done
            institution_stats.append(
                {
                    "name": institution,
                    "participants": len(institution_records),
                    "completed": done,
                    "completion_rate": whole_percentage(done, len(institution_records)),
                }
            )
        institution_stats.sort(key=lambda item: item["completion_rate"], reverse=True)
        districts.append(
            {
                "district": district,
                "total_participants": total,
                "completed_participants": completed,
                "completion_rate": whole_percentage(completed, total),
                "institution_count": len(institutions),
                "institutions": institution_stats,
            }
        )
    return sorted(districts, key=lambda item: item["completion_rate"], reverse=True)


def calculate_institution_performance(
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
    excellent_threshold: int = 80,
    needs_improvement_threshold: int = 60,
) -> dict[str, list[dict[str, Any]]]:
    """
    Rank institutions by completion over both tracks.

    ``excellent`` holds institutions at or above ``excellent_threshold``,
    ``needs_improvement`` those strictly below ``needs_improvement_threshold``.
    """
    names: list[str] = []
    for record in list(basic_education) + list(advanced_education):
        name = safe_str(get_field(record, "institution"))
        if name and name not in names:
            names.append(name)

    def track(records: Sequence[Any], name: str) -> tuple[int, int]:
        matching = [r for r in records if safe_str(get_field(r, "institution")) == name]
        return len(matching), sum(1 for r in matching if _status(r) == STATUS_COMPLETED)

    performances = []
    for name in names:
        basic_total, basic_completed = track(basic_education, name)
        advanced_total, advanced_completed = track(advanced_education, name)
        total = basic_total + advanced_total
        completed = basic_completed + advanced_completed
        performances.append(
            {
                "institution_name": name,
                "district": district_of(name) or UNCLASSIFIED,
                "total_participants": total,
                "completed_participants": completed,
                "completion_rate": whole_percentage(completed, total),
                "basic_education_rate": whole_percentage(basic_completed, basic_total),
                "advanced_education_rate": whole_percentage(advanced_completed, advanced_total),
                "ranking": 0,
            }
        )

    performances.sort(key=lambda item: item["completion_rate"], reverse=True)
    for ranking, performance in enumerate(performances, start=1):
        performance["ranking"] = ranking

    return {
        "excellent": [p for p in performances if p["completion_rate"] >= excellent_threshold],
        "needs_improvement": [
            p for p in performances if p["completion_rate"] < needs_improvement_threshold
        ],
        "all": performances,
    }


def calculate_time_series(records: Iterable[Any]) -> dict[str, Any]:
    """Status counts per year/round and the completion-rate trend."""
    by_period: dict[str, list[Any]] = defaultdict(list)
    for record in records:
        by_period[safe_str(get_field(record, "year")) or UNCLASSIFIED].append(record)

    period_stats = {period: status_counts(items) for period, items in by_period.items()}
    trend = sorted(
        (
            {"period": period, "completion_rate": stats["completion_rate"]}
            for period, stats in period_stats.items()
        ),
        key=lambda item: item["period"],
    )
    return {"period_stats": period_stats, "trend": trend}


@dataclass
class EducationMatch:
    participant_id: str | None
    name: str | None
    institution: str | None
    basic_status: str
    advanced_status: str
    overall_status: str
    basic_courses: list[Any] = field(default_factory=list)
    advanced_courses: list[Any] = field(default_factory=list)
    last_completion_date: date | None = None


def track_status(courses: Sequence[Any]) -> str:
    """Best status over a person's courses in one track."""
    if not courses:
        return STATUS_NOT_ENROLLED
    statuses = {_status(course) for course in courses}
    if STATUS_COMPLETED in statuses:
        return STATUS_COMPLETED
    if statuses & IN_PROGRESS_ALIASES:
        return STATUS_IN_PROGRESS
    if STATUS_INCOMPLETE in statuses:
        return STATUS_INCOMPLETE
    return STATUS_NOT_ENROLLED


def overall_status(basic_status: str, advanced_status: str) -> str:
    if basic_status == STATUS_COMPLETED and advanced_status == STATUS_COMPLETED:
        return OVERALL_EXCELLENT
    if STATUS_IN_PROGRESS in (basic_status, advanced_status):
        return OVERALL_IN_PROGRESS
    return OVERALL_INCOMPLETE


def _course_matches(participant: Any, course: Any) -> bool:
    participant_email = safe_str(get_field(participant, "email"))
    course_email = safe_str(get_field(course, "email"))
    if participant_email and course_email:
        return participant_email.lower() == course_email.lower()
    return safe_str(get_field(participant, "name")) == safe_str(
        get_field(course, "name")
    ) and safe_str(get_field(participant, "institution")) == safe_str(
        get_field(course, "institution")
    )


def match_education_with_participants(
    participants: Iterable[Any],
    basic_education: Sequence[Any],
    advanced_education: Sequence[Any],
) -> list[EducationMatch]:
    """
    Education status of each participant.

    Courses belong to a participant by e-mail when both sides have one,
    otherwise by name and institution name.
    """
    matches = []
    for participant in participants:
        basic_courses = [c for c in basic_education if _course_matches(participant, c)]
        advanced_courses = [c for c in advanced_education if _course_matches(participant, c)]
        basic = track_status(basic_courses)
        advanced = track_status(advanced_courses)

        completion_dates = [
            safe_date(get_field(course, "completion_date"))
            for course in basic_courses + advanced_courses
            if _status(course) == STATUS_COMPLETED
        ]
        completion_dates = [d for d in completion_dates if d is not None]

        matches.append(
            EducationMatch(
                participant_id=safe_str(get_field(participant, "id")),
                name=safe_str(get_field(participant, "name")),
                institution=safe_str(get_field(participant, "institution")),
                basic_status=basic,
                advanced_status=advanced,
                overall_status=overall_status(basic, advanced),
                basic_courses=basic_courses,
                advanced_courses=advanced_courses,
                last_completion_date=max(completion_dates) if completion_dates else None,
            )
        )
    return matches


def summarize_matches(matches: Sequence[EducationMatch]) -> dict[str, int]:
    total = len(matches)
    basic_completed = sum(1 for m in matches if m.basic_status == STATUS_COMPLETED)
    advanced_completed = sum(1 for m in matches if m.advanced_status == STATUS_COMPLETED)
    excellent = sum(1 for m in matches if m.overall_status == OVERALL_EXCELLENT)
    return {
        "total_participants": total,
        "basic_completed_count": basic_completed,
        "advanced_completed_count": advanced_completed,
        "excellent_count": excellent,
        "basic_completion_rate": whole_percentage(basic_completed, total),
        "advanced_completion_rate": whole_percentage(advanced_completed, total),
        "excellent_rate": whole_percentage(excellent, total),
    }

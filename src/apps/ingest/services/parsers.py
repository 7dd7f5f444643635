"""
Cell value parsers applied while building records.

Education exports spell statuses and course names inconsistently; these
reduce them to the fixed vocabularies the reconciliation core works with.
"""

from typing import Any

from apps.core.utils.safecast import safe_int, safe_str

STATUS_COMPLETED = "수료"
STATUS_INCOMPLETE = "미수료"
STATUS_CANCELLED = "수강취소"
STATUS_IN_PROGRESS = "진행중"

COURSE_BASIC = "기본"
COURSE_ADVANCED = "심화"
COURSE_LEGAL = "법정"
COURSE_SPECIAL = "특별"
COURSE_OTHER = "기타"

SPECIAL_COURSE_MARKERS = ("공무원 교육", "예방교육")

MALE_VALUES = frozenset(["남", "남자", "m", "male", "1", "3"])
FEMALE_VALUES = frozenset(["여", "여자", "f", "female", "2", "4"])


def parse_education_status(value: Any) -> str:
    """
    Reduce a completion cell to 수료 / 미수료 / 수강취소 / 진행중.

    완료 is read as 수료 and 미완료 as 미수료. Blank and unrecognized
    values count as 미수료.
    """
    text = (safe_str(value) or "").lower()
    if not text:
        return STATUS_INCOMPLETE
    if STATUS_INCOMPLETE in text or "미완료" in text:
        return STATUS_INCOMPLETE
    if STATUS_COMPLETED in text or "완료" in text:
        return STATUS_COMPLETED
    if "취소" in text:
        return STATUS_CANCELLED
    if "진행" in text or "ing" in text or "정상" in text:
        return STATUS_IN_PROGRESS
    return STATUS_INCOMPLETE


def determine_course_type(course: Any, track: str | None = None) -> str:
    """
    Course category from the course name, else from the upload track.

    Args:
        course: Course name as exported
        track: "basic" or "advanced" for the file the record came from
    """
    name = safe_str(course) or ""
    if "기본교육" in name:
        return COURSE_BASIC
    if "심화교육" in name:
        return COURSE_ADVANCED
    if "법정" in name:
        return COURSE_LEGAL
    if any(marker in name for marker in SPECIAL_COURSE_MARKERS):
        return COURSE_SPECIAL
    if track == "advanced":
        return COURSE_ADVANCED
    if track == "basic":
        return COURSE_BASIC
    return COURSE_OTHER


def parse_gender(value: Any) -> str | None:
    text = (safe_str(value) or "").lower()
    if text in MALE_VALUES:
        return "남"
    if text in FEMALE_VALUES:
        return "여"
    return None


def parse_count(value: Any) -> int:
    """Headcount cell as a non-negative int; blanks and junk are 0."""
    return max(0, safe_int(value, default=0))

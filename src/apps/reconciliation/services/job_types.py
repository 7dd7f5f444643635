"""Job-type classification shared by the aggregator and the statistics."""

from enum import Enum
from typing import Any

from apps.core.utils.safecast import safe_str

SOCIAL_WORKER_TITLES = ("전담사회복지사", "선임전담사회복지사")
SOCIAL_WORKER_MARKER = "전담"
LIFE_SUPPORT_TITLE = "생활지원사"
LIFE_SUPPORT_MARKERS = ("생활지원", "요양", "돌봄", "케어", "특화")


class JobCategory(str, Enum):
    SOCIAL_WORKER = "social"
    LIFE_SUPPORT = "life"
    OTHER = "other"


def classify_job_type(job_type: Any) -> JobCategory:
    """
    Bucket a free-text job type.

    Anything mentioning 전담 is a social worker. Care-related titles are
    life support, and so is any other non-blank title that does not mention
    사회복지사. Blank titles are OTHER.
    """
    text = safe_str(job_type)
    if not text:
        return JobCategory.OTHER
    if text in SOCIAL_WORKER_TITLES or SOCIAL_WORKER_MARKER in text:
        return JobCategory.SOCIAL_WORKER
    if text == LIFE_SUPPORT_TITLE or any(marker in text for marker in LIFE_SUPPORT_MARKERS):
        return JobCategory.LIFE_SUPPORT
    if "사회복지사" not in text:
        return JobCategory.LIFE_SUPPORT
    return JobCategory.OTHER

import re
from datetime import date, datetime, timedelta
from typing import Any

from dateutil import parser

# Excel stores dates as days since this epoch (1900 leap-year bug included)
EXCEL_EPOCH = date(1899, 12, 30)

_KOREAN_DATE_MARKERS = re.compile(r"\s*[년월]\s*")
_KOREAN_DAY_MARKER = re.compile(r"\s*일\s*$")

# Fills the fields a partial date leaves out, instead of today's month and day
_PARSE_DEFAULT = datetime(2000, 1, 1)


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def safe_str(value: Any) -> str | None:
    """Strip strings; blank values become None."""
    if is_blank(value):
        return None
    return str(value).strip()


def safe_int(value: Any, default: int | None = None) -> int | None:
    """Safely convert value to int. Returns default if conversion fails."""
    if is_blank(value):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        # Handle floats like 1.0 -> 1
        return int(float(value))
    except (ValueError, TypeError, OverflowError):
        return default


def safe_float(value: Any, default: float | None = None) -> float | None:
    """Safely convert value to float. Returns default if conversion fails."""
    if is_blank(value):
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def safe_bool(value: Any) -> bool | None:
    """Safely convert value to bool, return None on failure."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        value_lower = value.lower().strip()
        if value_lower in ("true", "yes", "1", "y", "o", "활성", "재직"):
            return True
        if value_lower in ("false", "no", "0", "n", "x", "비활성", "퇴사"):
            return False
        return None
    try:
        return bool(int(value))
    except (ValueError, TypeError):
        return None


def safe_date(value: Any) -> date | None:
    """
    Convert a spreadsheet cell to a date.

    Accepts date/datetime objects, ISO-ish strings ("2024-03-31",
    "2024.03.31", "2024-03-31 00:00:00"), Korean notation ("2024년 3월 31일")
    and Excel serial numbers. A year and month without a day is the first
    of that month. Returns None for anything else, a bare year included.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_excel_serial(value)

    text = str(value).strip()
    if not text:
        return None
    if re.fullmatch(r"\d{5}(\.\d+)?", text):
        return _from_excel_serial(float(text))
    # Bare numbers other than YYYYMMDD are not dates
    if not re.search(r"\d{4}", text):
        return None

    text = _KOREAN_DAY_MARKER.sub("", _KOREAN_DATE_MARKERS.sub("-", text))
    # A year alone is not a date
    if re.fullmatch(r"\d{4}", text.strip("- ")):
        return None
    try:
        return parser.parse(text, default=_PARSE_DEFAULT).date()
    except (ValueError, TypeError, OverflowError):
        return None


def _from_excel_serial(serial: float) -> date | None:
    if serial <= 0 or serial > 2958465:
        return None
    return EXCEL_EPOCH + timedelta(days=int(serial))

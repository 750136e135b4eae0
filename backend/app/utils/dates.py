"""
Date helpers for the sales dashboard.

Dates travel through the dashboard as zero-padded ISO strings
(`YYYY-MM-DD`) so that plain string comparison orders them correctly.
Months are 0-indexed (Jan = 0) wherever a month number is passed around.
"""
import calendar
import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import NamedTuple, Optional

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

WEEK_LABELS = ["Week 1", "Week 2", "Week 3", "Week 4", "Week 5"]

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class DateParts(NamedTuple):
    year: int
    month: int   # 0-indexed
    day: int


def format_date(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month + 1:02d}-{day:02d}"


def format_day(d: date) -> str:
    return format_date(d.year, d.month - 1, d.day)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month + 1)[1]


def week_of_month(year: int, month: int, day: int) -> int:
    """Sunday-start week index of `day` within its month (1..6)."""
    # date.weekday() is Mon=0; shift to Sun=0
    first_weekday = (date(year, month + 1, 1).weekday() + 1) % 7
    return math.ceil((day + first_weekday) / 7)


def sanitize_date_string(value) -> Optional[str]:
    """Return the trimmed value if it looks like YYYY-MM-DD, else None. No repair is attempted."""
    if not value or not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not _ISO_DATE_RE.fullmatch(trimmed):
        return None
    return trimmed


def parse_date_parts(value: Optional[str]) -> Optional[DateParts]:
    if not value or not isinstance(value, str):
        return None
    pieces = value.split("-")
    if len(pieces) < 3:
        return None
    try:
        year, month, day = (int(p) for p in pieces[:3])
    except ValueError:
        return None
    return DateParts(year, month - 1, day)


def normalize_row_date(value) -> str:
    """Coerce a stored sale date to a zero-padded ISO string."""
    if isinstance(value, datetime):
        return format_day(value.date())
    if isinstance(value, date):
        return format_day(value)
    text = str(value).strip() if value is not None else ""
    parts = parse_date_parts(text)
    if parts and 1 <= parts.month + 1 <= 12 and parts.year >= 0:
        return format_date(parts.year, parts.month, parts.day)
    return text


def to_number(value) -> float:
    """Quantity coercion: anything non-numeric or non-finite counts as 0; whole numbers come back as int."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        value = float(value) if value.is_finite() else 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(parsed):
        return 0
    return int(parsed) if parsed.is_integer() else parsed

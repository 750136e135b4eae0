"""
Dashboard filter handling: turns loosely-typed query parameters into a
validated FilterSpec and resolves the concrete date range it covers.

Raw request maps stop here; everything downstream receives a FilterSpec.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..exceptions import InvalidRangeError
from .dates import days_in_month, format_date, format_day, parse_date_parts, sanitize_date_string

logger = logging.getLogger(__name__)

FILTER_TYPES = ("yearly", "monthly", "weekly", "daily", "tomorrow", "custom", "all")
DEFAULT_FILTER_TYPE = "yearly"


@dataclass(frozen=True)
class DateRange:
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def is_bounded(self) -> bool:
        return bool(self.start_date and self.end_date)

    def contains(self, day: str) -> bool:
        return self.is_bounded and self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"startDate": self.start_date, "endDate": self.end_date}


UNBOUNDED = DateRange()


@dataclass
class SalesMetadata:
    available_years: List[int] = field(default_factory=list)           # newest first
    available_months_by_year: Dict[str, List[int]] = field(default_factory=dict)

    def months_for_year(self, year: Optional[int]) -> List[int]:
        if year is None:
            return []
        return list(self.available_months_by_year.get(str(year), []))


@dataclass(frozen=True)
class FilterDefaults:
    year: Optional[int] = None
    month: Optional[int] = None


@dataclass
class FilterSpec:
    filter_type: str
    year: Optional[int]
    month: Optional[int]
    range: DateRange
    store_ids: List[int]
    defaults: FilterDefaults


def build_metadata(rows: Iterable) -> SalesMetadata:
    """Years (newest first) and months per year present in `rows`."""
    months_by_year: Dict[int, set] = {}
    for row in rows:
        parts = parse_date_parts(row.date)
        if not parts:
            continue
        months_by_year.setdefault(parts.year, set()).add(parts.month)

    return SalesMetadata(
        available_years=sorted(months_by_year, reverse=True),
        available_months_by_year={
            str(year): sorted(months) for year, months in months_by_year.items()
        },
    )


def parse_filter_type(value: Any) -> str:
    if not value or not isinstance(value, str):
        return DEFAULT_FILTER_TYPE
    normalized = value.strip().lower()
    return normalized if normalized in FILTER_TYPES else DEFAULT_FILTER_TYPE


def _to_int(value: Any) -> Optional[int]:
    """Integral value of a scalar, or None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (list, tuple)):
        return _to_int(value[0]) if value else None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(parsed) or not parsed.is_integer():
        return None
    return int(parsed)


def _first_int(raw: Mapping[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        parsed = _to_int(raw.get(key))
        if parsed is not None:
            return parsed
    return None


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def parse_store_ids(value: Any) -> List[int]:
    """Comma-separated string, list or scalar → unique integer ids, in order of appearance."""
    if value is None or value == "":
        return []
    items = value if isinstance(value, (list, tuple, set)) else [value]

    tokens: List[Any] = []
    for item in items:
        if isinstance(item, str):
            tokens.extend(t.strip() for t in item.split(",") if t.strip())
        else:
            tokens.append(item)

    ids: List[int] = []
    for token in tokens:
        parsed = _to_int(token)
        if parsed is not None and parsed not in ids:
            ids.append(parsed)
    return ids


def resolve_date_range(
    filter_type: str,
    today: date,
    year: Optional[int] = None,
    month: Optional[int] = None,
    from_date: Any = None,
    to_date: Any = None,
) -> DateRange:
    if filter_type == "yearly":
        if year is None:
            return UNBOUNDED
        return DateRange(format_date(year, 0, 1), format_date(year, 11, 31))

    if filter_type == "monthly":
        if year is None or month is None:
            return UNBOUNDED
        return DateRange(
            format_date(year, month, 1),
            format_date(year, month, days_in_month(year, month)),
        )

    if filter_type == "weekly":
        # Sunday-start calendar week containing today
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateRange(format_day(start), format_day(start + timedelta(days=6)))

    if filter_type == "daily":
        return DateRange(format_day(today), format_day(today))

    if filter_type == "tomorrow":
        tomorrow = today + timedelta(days=1)
        return DateRange(format_day(tomorrow), format_day(tomorrow))

    if filter_type == "custom":
        start_date = sanitize_date_string(from_date)
        end_date = sanitize_date_string(to_date)
        if not start_date or not end_date:
            raise InvalidRangeError(
                "Both fromDate and toDate are required in YYYY-MM-DD format for custom filters.",
                from_date=start_date, to_date=end_date,
            )
        if start_date > end_date:
            raise InvalidRangeError(
                "fromDate cannot be after toDate.", from_date=start_date, to_date=end_date,
            )
        return DateRange(start_date, end_date)

    return UNBOUNDED


def compute_previous_range(filter_type: str, year: Optional[int], month: Optional[int]) -> Optional[DateRange]:
    """Comparison window for period-over-period change; None when the filter has no previous period."""
    if filter_type == "yearly" and year is not None:
        return DateRange(format_date(year - 1, 0, 1), format_date(year - 1, 11, 31))

    if filter_type == "monthly" and year is not None and month is not None:
        prev_year, prev_month = (year - 1, 11) if month == 0 else (year, month - 1)
        return DateRange(
            format_date(prev_year, prev_month, 1),
            format_date(prev_year, prev_month, days_in_month(prev_year, prev_month)),
        )

    return None


def normalize_params(raw: Mapping[str, Any], metadata: SalesMetadata, today: date) -> FilterSpec:
    """
    Build the FilterSpec for one dashboard request.

    Raises InvalidRangeError for an incomplete or inverted custom range;
    every other malformed input falls back to a default.
    """
    raw = raw or {}
    filter_type = parse_filter_type(raw.get("filterType"))

    default_year = metadata.available_years[0] if metadata.available_years else None
    default_months = metadata.months_for_year(default_year)
    defaults = FilterDefaults(year=default_year, month=default_months[0] if default_months else None)

    year = _first_int(raw, "year", "selectedYear")
    if filter_type in ("yearly", "monthly") and year is None:
        year = default_year

    month = None
    if filter_type == "monthly":
        month = _first_int(raw, "month", "selectedMonth")
        if month is not None and not 0 <= month <= 11:
            month = None
        if month is None:
            months = metadata.months_for_year(year)
            month = months[0] if months else None

    date_range = resolve_date_range(
        filter_type,
        today,
        year=year,
        month=month,
        from_date=_first_present(raw, "fromDate", "startDate"),
        to_date=_first_present(raw, "toDate", "endDate"),
    )

    spec = FilterSpec(
        filter_type=filter_type,
        year=year,
        month=month,
        range=date_range,
        store_ids=parse_store_ids(_first_present(raw, "storeIds", "storeId", "stores")),
        defaults=defaults,
    )
    logger.debug("Normalized dashboard filter: %s", spec)
    return spec

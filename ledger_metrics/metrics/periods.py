"""
Time bucketing and calendar windows.

Period keys are year-first and zero-padded so plain string sorting is also
chronological sorting.
"""
import calendar
import math
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple


GRANULARITIES = ("weekly", "monthly", "quarterly", "yearly")


def week_number(day: date) -> int:
    """
    Approximate week of year: ``ceil((days_since_jan1 + jan1_weekday + 1) / 7)``
    with Sunday as weekday 0. This is not ISO-8601 week numbering.
    """
    first_day = date(day.year, 1, 1)
    past_days = (day - first_day).days
    first_weekday = (first_day.weekday() + 1) % 7
    return math.ceil((past_days + first_weekday + 1) / 7)


def period_key(day: date, granularity: str = "monthly") -> str:
    if granularity == "monthly":
        return f"{day.year:04d}-{day.month:02d}"
    if granularity == "quarterly":
        return f"{day.year:04d}-Q{(day.month - 1) // 3 + 1}"
    if granularity == "yearly":
        return f"{day.year:04d}"
    if granularity == "weekly":
        return f"{day.year:04d}-W{week_number(day):02d}"
    raise ValueError(f"Unsupported granularity '{granularity}'. Expected one of: {', '.join(GRANULARITIES)}")


def sort_period_keys(keys: Iterable[str]) -> List[str]:
    return sorted(keys)


def month_bounds(day: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return date(day.year, day.month, 1), date(day.year, day.month, last_day)


def previous_month_bounds(day: date) -> Tuple[date, date]:
    first_of_month = date(day.year, day.month, 1)
    return month_bounds(first_of_month - timedelta(days=1))


def year_start(day: date) -> date:
    return date(day.year, 1, 1)


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole months, clamping the day to the target month's length."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def resolve_budget_window(
    period: str,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[date, date]:
    """Map a budget query period to an inclusive ``(start, end)`` window."""
    if period == "previous":
        return previous_month_bounds(today)
    if period == "year_to_date":
        return year_start(today), month_bounds(today)[1]
    if period == "custom" and start_date and end_date:
        return start_date, end_date
    return month_bounds(today)


def resolve_expense_window(
    period: str,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[date, date]:
    """Window for the expense breakdown: current/previous month, current year, or custom."""
    if period == "previous_month":
        return previous_month_bounds(today)
    if period == "current_year":
        return year_start(today), date(today.year, 12, 31)
    if period == "custom" and start_date and end_date:
        return start_date, end_date
    return month_bounds(today)

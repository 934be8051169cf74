"""
Calendar helpers for the roster engine
Pure date arithmetic: month enumeration, weekday names, ISO weeks, weekend pairs
"""
import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

WEEKDAY_NAMES = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')

SATURDAY = 5
SUNDAY = 6


def month_days(year: int, month: int) -> List[date]:
    """Every calendar day of the month, in order."""
    last_day = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last_day + 1)]


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def iso_week_number(value: date) -> int:
    return value.isocalendar()[1]


def is_weekend(value: date) -> bool:
    return value.weekday() in (SATURDAY, SUNDAY)


def format_date(value: date) -> str:
    return value.strftime('%Y-%m-%d')


def parse_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD string

    Raises:
        ValueError: If the string is not a real calendar date in that format
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value, '%Y-%m-%d').date()


def month_key(year: int, month: int) -> str:
    """Document id for per-month records (YYYY-MM)."""
    return f"{year:04d}-{month:02d}"


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def months_between(start: date, end: date) -> List[Tuple[int, int]]:
    """
    (year, month) tuples touched by an inclusive date range

    Example:
        >>> months_between(date(2025, 1, 30), date(2025, 3, 2))
        [(2025, 1), (2025, 2), (2025, 3)]
    """
    if end < start:
        start, end = end, start
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


def weekend_pairs(year: int, month: int) -> List[Tuple[Optional[date], Optional[date]]]:
    """
    Saturday/Sunday pairs of a month

    A pair member is None when it falls outside the month: a month starting
    on Sunday opens with (None, sunday) and a month ending on Saturday
    closes with (saturday, None).
    """
    pairs = []
    first, last = month_bounds(year, month)
    for day in month_days(year, month):
        if day.weekday() == SATURDAY:
            sunday = day + timedelta(days=1)
            pairs.append((day, sunday if sunday <= last else None))
        elif day.weekday() == SUNDAY and day == first:
            pairs.append((None, day))
    return pairs

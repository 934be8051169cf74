"""
Employee day-pattern resolution
Which weekdays an employee works and with which start/end times
"""
from datetime import date
from typing import Tuple, Union

from roster.services.schedule_types import Assignment, Employee
from roster.utils.date_helpers import format_date, weekday_name
from roster.utils.validators import normalize_time

Weekday = Union[str, date]


def _weekday(value: Weekday) -> str:
    if isinstance(value, date):
        return weekday_name(value)
    return value.lower()


def works_on(employee: Employee, weekday: Weekday) -> bool:
    return _weekday(weekday) in employee.work_days


def times_for(employee: Employee, weekday: Weekday) -> Tuple[str, str]:
    """
    Start/end time for a weekday

    A custom override for the weekday wins; each half falls back to the
    employee's default independently.
    """
    override = employee.custom_schedule.get(_weekday(weekday)) or {}
    start = override.get('start_time') or employee.default_start_time
    end = override.get('end_time') or employee.default_end_time
    return normalize_time(start), normalize_time(end)


def build_assignment(employee: Employee, day: date) -> Assignment:
    date_str = format_date(day)
    start, end = times_for(employee, day)
    return Assignment(
        id=Assignment.make_id(employee.id, date_str),
        employee_id=employee.id,
        employee_name=employee.name,
        start_time=start,
        end_time=end,
    )

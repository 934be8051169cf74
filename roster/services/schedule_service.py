"""
Schedule Service
Month reads through the schedule cache, generation entry points and day patches
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from roster.error_handlers.exceptions import NotModifiedException, StorageException, ValidationException
from roster.services.day_pattern import build_assignment, works_on
from roster.services.employee_service import EmployeeService
from roster.services.holiday_service import HolidayService
from roster.services.regeneration import RegenerationTracker
from roster.services.rotation_manager import WeekendRotationManager
from roster.services.schedule_cache import ScheduleCache
from roster.services.schedule_generator import MonthlyScheduleGenerator
from roster.services.schedule_types import Assignment, Employee, ScheduleEntry, WeekendRunResult, utc_now_iso
from roster.services.vacation_service import VacationService
from roster.storage import SCHEDULE, DocumentStore
from roster.utils.date_helpers import format_date, is_weekend, month_bounds
from roster.utils.validators import validate_date_param, validate_time, validate_year_month

logger = logging.getLogger(__name__)


class ScheduleService:
    """
    Owns the schedule cache and every path that reads or writes schedule entries
    """

    def __init__(self, store: DocumentStore, cache: ScheduleCache, tracker: RegenerationTracker,
                 employees: EmployeeService, holidays: HolidayService, vacations: VacationService,
                 rotation: WeekendRotationManager, generator: MonthlyScheduleGenerator):
        self.store = store
        self.cache = cache
        self.tracker = tracker
        self.employees = employees
        self.holidays = holidays
        self.vacations = vacations
        self.rotation = rotation
        self.generator = generator

    def read_month(self, year: int, month: int) -> List[ScheduleEntry]:
        first, last = month_bounds(year, month)
        documents = self.store.list_range(SCHEDULE, format_date(first), format_date(last))
        return [ScheduleEntry.from_dict(d) for d in documents]

    def get_month_schedule(self, year: int, month: int, if_none_match: Optional[str] = None,
                           force_regenerate: bool = False) -> Dict[str, Any]:
        """
        Month schedule with its fingerprint

        A cached entry younger than the TTL is served unless force_regenerate
        is set. Otherwise the stored month is read; a month that was never
        generated, was marked for regeneration, or is forced gets generated
        first. The result is cached under a fresh fingerprint.

        Returns:
            {'schedule': [entry dicts], 'etag': str, 'from_cache': bool}

        Raises:
            NotModifiedException: if_none_match equals the current fingerprint
        """
        year, month = validate_year_month(year, month)
        key = (year, month)

        if not force_regenerate:
            cached = self.cache.get(key)
            if cached:
                if if_none_match and if_none_match == cached.etag:
                    raise NotModifiedException(cached.etag)
                return {'schedule': cached.data, 'etag': cached.etag, 'from_cache': True}

        if force_regenerate or self.tracker.needs_generation(year, month):
            entries = self.generator.generate(year, month)
        else:
            entries = self.read_month(year, month)

        cached = self.cache.put(key, [e.to_dict() for e in entries])
        if if_none_match and if_none_match == cached.etag:
            raise NotModifiedException(cached.etag)
        return {'schedule': cached.data, 'etag': cached.etag, 'from_cache': False}

    def generate_month(self, year: int, month: int) -> List[ScheduleEntry]:
        year, month = validate_year_month(year, month)
        return self.generator.generate(year, month)

    def generate_weekends(self, year: int, month: int, force: bool = False) -> WeekendRunResult:
        year, month = validate_year_month(year, month)
        return self.rotation.run(year, month, force=force)

    def update_day(self, date_str: str, assignments: Any) -> ScheduleEntry:
        """
        Replace the full assignment list of one date

        A month that was never generated, or is marked for regeneration, is
        generated first so later reads serve the patch instead of rebuilding
        the month over it.

        Raises:
            ValidationException: Bad date, bad time, missing employee fields,
                or the same employee twice
        """
        day = validate_date_param(date_str, 'date')
        date_str = format_date(day)
        if not isinstance(assignments, list):
            raise ValidationException('Assignments must be a list', field='assignments')

        parsed: List[Assignment] = []
        seen = set()
        for index, item in enumerate(assignments):
            prefix = f"assignments[{index}]"
            if not isinstance(item, dict):
                raise ValidationException('Assignment must be an object', field=prefix)
            employee_id = str(item.get('employee_id') or '').strip()
            if not employee_id:
                raise ValidationException('employee_id is required', field=f"{prefix}.employee_id")
            if employee_id in seen:
                raise ValidationException(f"Employee {employee_id} is assigned twice", field=prefix)
            seen.add(employee_id)

            employee_name = str(item.get('employee_name') or '').strip()
            if not employee_name:
                employee = self.employees.find(employee_id)
                if not employee:
                    raise ValidationException('employee_name is required', field=f"{prefix}.employee_name")
                employee_name = employee.name

            parsed.append(Assignment(
                id=Assignment.make_id(employee_id, date_str),
                employee_id=employee_id,
                employee_name=employee_name,
                start_time=validate_time(item.get('start_time'), f"{prefix}.start_time"),
                end_time=validate_time(item.get('end_time'), f"{prefix}.end_time"),
            ))

        if self.tracker.needs_generation(day.year, day.month):
            self.generator.generate(day.year, day.month)

        existing = self.store.get(SCHEDULE, date_str)
        now = utc_now_iso()
        entry = ScheduleEntry(
            id=date_str,
            date=date_str,
            assignments=parsed,
            created_at=existing.get('created_at') if existing else now,
            updated_at=now,
        )
        self.store.set(SCHEDULE, date_str, entry.to_dict())
        self.tracker.invalidate(day.year, day.month)
        logger.info(f"Updated {date_str} with {len(parsed)} assignment(s)")
        return entry

    def auto_schedule_employee(self, employee: Employee, start: Optional[date] = None) -> Dict[str, int]:
        """
        Add a new employee to already generated days from start to month end

        Days that were never generated, holidays, vacation days and weekend
        days of rotation employees are left alone. A failing day is logged and
        counted; the remaining days are still attempted.

        Returns:
            {'scheduled': n, 'failed': n}
        """
        start = start or date.today()
        _, last = month_bounds(start.year, start.month)
        resolver = self.holidays.resolver()
        scheduled = failed = 0

        day = start
        while day <= last:
            date_str = format_date(day)
            try:
                if self._auto_schedule_day(employee, day, resolver):
                    scheduled += 1
            except StorageException as e:
                failed += 1
                logger.warning(f"Auto-scheduling {employee.name} on {date_str} failed: {e.details}")
            day += timedelta(days=1)

        if scheduled:
            self.tracker.invalidate(start.year, start.month)
        logger.info(f"Auto-scheduled {employee.name} on {scheduled} day(s), {failed} failure(s)")
        return {'scheduled': scheduled, 'failed': failed}

    def _auto_schedule_day(self, employee: Employee, day: date, resolver) -> bool:
        if resolver.is_holiday(day) or not works_on(employee, day):
            return False
        if is_weekend(day) and employee.weekend_rotation:
            return False
        data = self.store.get(SCHEDULE, format_date(day))
        if not data:
            return False
        entry = ScheduleEntry.from_dict(data)
        if entry.assignment_for(employee.id) or self.vacations.is_on_vacation(employee.id, day):
            return False
        entry.assignments.append(build_assignment(employee, day))
        entry.updated_at = utc_now_iso()
        self.store.set(SCHEDULE, entry.id, entry.to_dict())
        return True

    def clear_cache(self) -> None:
        self.cache.clear()

"""
Monthly Schedule Generator
Builds a full month of schedule entries and writes them in one batch

Process:
1. Holidays get an empty entry
2. Every active employee working that weekday and not on vacation is
   assigned with their weekday times, except rotation-eligible employees
   on weekend days
3. Weekend days are filled from the weekend rotation plan, the same plan
   the incremental rotation run uses, and its checkpoint is stored with
   the month
4. Entries, checkpoint and the month's regeneration marker are committed
   together, replacing whatever the month held before
"""
import logging
from typing import Dict, List, Tuple

from roster.services.day_pattern import build_assignment, works_on
from roster.services.employee_service import EmployeeService
from roster.services.holiday_service import HolidayService
from roster.services.regeneration import RegenerationTracker
from roster.services.rotation_manager import ASSIGNED, WeekendRotationManager
from roster.services.schedule_types import ScheduleEntry, utc_now_iso
from roster.services.vacation_service import VacationService
from roster.storage import ROTATION_META, SCHEDULE, DocumentStore
from roster.utils.date_helpers import format_date, is_weekend, month_bounds, month_days, month_key

logger = logging.getLogger(__name__)


class MonthlyScheduleGenerator:

    def __init__(self, store: DocumentStore, employees: EmployeeService, holidays: HolidayService,
                 vacations: VacationService, rotation: WeekendRotationManager,
                 tracker: RegenerationTracker):
        self.store = store
        self.employees = employees
        self.holidays = holidays
        self.vacations = vacations
        self.rotation = rotation
        self.tracker = tracker

    def _existing_created_at(self, year: int, month: int) -> Dict[str, str]:
        first, last = month_bounds(year, month)
        return {
            d['id']: d.get('created_at')
            for d in self.store.list_range(SCHEDULE, format_date(first), format_date(last))
        }

    def build(self, year: int, month: int) -> Tuple[List[ScheduleEntry], dict]:
        """
        Compute the month without writing it

        Returns:
            (entries in date order, rotation checkpoint record for the month)
        """
        active = self.employees.active_employees()
        rotation_employees = [e for e in active if e.weekend_rotation]
        rotation_ids = {e.id for e in rotation_employees}
        resolver = self.holidays.resolver()
        vacation_index = self.vacations.month_index(year, month)
        created = self._existing_created_at(year, month)
        now = utc_now_iso()

        if not active:
            logger.warning(f"No active employees while generating {month_key(year, month)}")

        entries: Dict[str, ScheduleEntry] = {}
        for day in month_days(year, month):
            date_str = format_date(day)
            entry = ScheduleEntry(id=date_str, date=date_str,
                                  created_at=created.get(date_str) or now, updated_at=now)
            entries[date_str] = entry

            if resolver.is_holiday(day):
                continue

            away = vacation_index.get(day, set())
            for employee in active:
                if not works_on(employee, day):
                    continue
                if employee.id in away:
                    continue
                if is_weekend(day) and employee.id in rotation_ids:
                    continue
                entry.assignments.append(build_assignment(employee, day))

        plan = self.rotation.plan_month(year, month, employees=rotation_employees,
                                        resolver=resolver, vacation_index=vacation_index)
        for planned in plan.days:
            if planned.status == ASSIGNED:
                entries[format_date(planned.day)].assignments.append(
                    build_assignment(planned.employee, planned.day)
                )

        checkpoint = self.rotation.checkpoint_record(year, month, plan) if rotation_employees else None
        return list(entries.values()), checkpoint

    def generate(self, year: int, month: int) -> List[ScheduleEntry]:
        """Build the month and replace its stored entries atomically."""
        entries, checkpoint = self.build(year, month)

        batch = self.store.batch()
        for entry in entries:
            batch.set(SCHEDULE, entry.id, entry.to_dict())
        if checkpoint:
            batch.set(ROTATION_META, checkpoint['id'], checkpoint)
        self.tracker.record_generated(batch, year, month)
        batch.commit()
        self.tracker.invalidate(year, month)

        assigned_days = sum(1 for e in entries if e.assignments)
        logger.info(f"Generated {month_key(year, month)}: {len(entries)} day(s), {assigned_days} with assignments")
        return entries

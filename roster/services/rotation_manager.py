"""
Weekend Rotation Manager
Distributes Saturday/Sunday coverage among rotation-eligible employees

The rotation state (rotation_index, swap_parity) is checkpointed per month in
``rotationMeta``. A run for month M starts from the checkpoint stored for
M-1 (or index 0 / parity 0 when there is none) and stores its end state
under M, so the rotation carries on across months and re-running M is
deterministic.

Concurrent runs for the same month are not safe: the per-day
read-modify-write is not locked, callers must serialize them.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple

from roster.services.day_pattern import build_assignment
from roster.services.employee_service import EmployeeService
from roster.services.holiday_service import HolidayResolver, HolidayService
from roster.services.regeneration import RegenerationTracker
from roster.services.schedule_types import (
    Employee,
    RotationMeta,
    ScheduleEntry,
    WeekendRunResult,
    utc_now_iso,
)
from roster.services.vacation_service import VacationIndex, VacationService
from roster.storage import ROTATION_META, SCHEDULE, DocumentStore
from roster.utils.date_helpers import format_date, month_key, previous_month, weekend_pairs

logger = logging.getLogger(__name__)

WeekendPair = Tuple[Optional[date], Optional[date]]

ASSIGNED = 'assigned'
HOLIDAY = 'holiday'
VACATION = 'vacation'


def rotation_pattern(employee_count: int) -> str:
    if employee_count == 0:
        return 'none'
    if employee_count == 1:
        return 'single'
    if employee_count == 2:
        return 'pair'
    return 'multiple'


def pair_assignment(employees: Sequence[Employee], rotation_index: int, swap_parity: int,
                    pair_size: int) -> List[Employee]:
    """
    Employees covering the present days of one weekend pair, in day order

    - one employee covers every day
    - two employees take Saturday/Sunday in an order set by swap_parity
    - more employees take the next two slots starting at rotation_index,
      swapped when swap_parity is 1
    """
    count = len(employees)
    if count == 0 or pair_size == 0:
        return []
    if count == 1:
        return [employees[0]] * pair_size
    if count == 2:
        first, second = (employees[0], employees[1]) if swap_parity == 0 else (employees[1], employees[0])
        return [first, second][:pair_size]

    current = employees[rotation_index % count]
    following = employees[(rotation_index + 1) % count]
    if pair_size == 1:
        return [current]
    return [following, current] if swap_parity == 1 else [current, following]


def advance(employee_count: int, rotation_index: int, swap_parity: int) -> Tuple[int, int]:
    """Rotation state after one processed pair."""
    if employee_count == 2:
        return rotation_index, 1 - swap_parity
    if employee_count > 2:
        return (rotation_index + 2) % employee_count, 1 - swap_parity
    return rotation_index, swap_parity


@dataclass
class PlannedDay:
    day: date
    status: str
    employee: Optional[Employee] = None
    holiday_name: Optional[str] = None


@dataclass
class RotationPlan:
    days: List[PlannedDay] = field(default_factory=list)
    rotation_index: int = 0
    swap_parity: int = 0


class WeekendRotationManager:

    def __init__(self, store: DocumentStore, employees: EmployeeService,
                 holidays: HolidayService, vacations: VacationService,
                 tracker: RegenerationTracker):
        self.store = store
        self.employees = employees
        self.holidays = holidays
        self.vacations = vacations
        self.tracker = tracker

    # ------------------------------------------------------------------
    # Checkpoints
    # ------------------------------------------------------------------

    def get_checkpoint(self, year: int, month: int) -> Optional[RotationMeta]:
        data = self.store.get(ROTATION_META, month_key(year, month))
        return RotationMeta.from_dict(data) if data else None

    def starting_checkpoint(self, year: int, month: int) -> RotationMeta:
        """State a run for (year, month) starts from: the previous month's end state."""
        previous = self.get_checkpoint(*previous_month(year, month))
        if previous:
            return previous
        return RotationMeta.fresh(month_key(year, month))

    def checkpoint_record(self, year: int, month: int, plan: RotationPlan) -> dict:
        existing = self.get_checkpoint(year, month)
        now = utc_now_iso()
        return RotationMeta(
            id=month_key(year, month),
            rotation_index=plan.rotation_index,
            swap_parity=plan.swap_parity,
            last_processed=now,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        ).to_dict()

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, employees: Sequence[Employee], pairs: Sequence[WeekendPair],
             checkpoint: RotationMeta, resolver: HolidayResolver,
             vacation_index: VacationIndex) -> RotationPlan:
        """
        Decide who covers each weekend day without touching storage

        The rotation advances once per pair, whether or not its days are
        holidays. A selected employee who is on vacation is replaced by the
        next available employee in rotation order; the day is left uncovered
        when nobody is available.
        """
        rotation_index, swap_parity = checkpoint.rotation_index, checkpoint.swap_parity
        if employees:
            rotation_index %= len(employees)
        result = RotationPlan(rotation_index=rotation_index, swap_parity=swap_parity)
        if not employees:
            return result

        for pair in pairs:
            present = [d for d in pair if d is not None]
            chosen = pair_assignment(employees, rotation_index, swap_parity, len(present))

            for day, employee in zip(present, chosen):
                holiday = resolver.is_holiday(day)
                if holiday:
                    result.days.append(PlannedDay(day, HOLIDAY, holiday_name=holiday.name))
                    continue
                away = vacation_index.get(day, set())
                if employee.id in away:
                    employee = self._substitute(employees, employee, away)
                if employee is None:
                    result.days.append(PlannedDay(day, VACATION))
                    continue
                result.days.append(PlannedDay(day, ASSIGNED, employee=employee))

            rotation_index, swap_parity = advance(len(employees), rotation_index, swap_parity)

        result.rotation_index, result.swap_parity = rotation_index, swap_parity
        return result

    @staticmethod
    def _substitute(employees: Sequence[Employee], selected: Employee, away: Set[str]) -> Optional[Employee]:
        start = next(i for i, e in enumerate(employees) if e.id == selected.id)
        for offset in range(1, len(employees)):
            candidate = employees[(start + offset) % len(employees)]
            if candidate.id not in away:
                return candidate
        return None

    def plan_month(self, year: int, month: int,
                   employees: Optional[Sequence[Employee]] = None,
                   resolver: Optional[HolidayResolver] = None,
                   vacation_index: Optional[VacationIndex] = None) -> RotationPlan:
        return self.plan(
            self.employees.rotation_eligible() if employees is None else employees,
            weekend_pairs(year, month),
            self.starting_checkpoint(year, month),
            self.holidays.resolver() if resolver is None else resolver,
            self.vacations.month_index(year, month) if vacation_index is None else vacation_index,
        )

    # ------------------------------------------------------------------
    # Incremental run
    # ------------------------------------------------------------------

    def run(self, year: int, month: int, force: bool = False) -> WeekendRunResult:
        """
        Write the month's weekend rotation into stored schedule entries

        A day whose selected employee already holds the right assignment (and
        no other rotation employee is on it) is not written unless force is
        set, so re-running an unchanged month performs no schedule writes.
        """
        employees = self.employees.rotation_eligible()
        result = WeekendRunResult(eligible_employees=len(employees), pattern=rotation_pattern(len(employees)))

        if not employees:
            logger.info(f"No rotation-eligible employees for {month_key(year, month)}")
            return result

        vacation_index = self.vacations.month_index(year, month)
        plan = self.plan_month(year, month, employees=employees, vacation_index=vacation_index)
        eligible_ids = {e.id for e in employees}

        for planned in plan.days:
            date_str = format_date(planned.day)
            if planned.status == HOLIDAY:
                logger.debug(f"Skipping {date_str} ({planned.holiday_name})")
                result.skipped_holidays.append(date_str)
                continue

            if planned.status == VACATION:
                result.skipped_vacations.append(date_str)
                if self._clear_absent(date_str, vacation_index.get(planned.day, set()) & eligible_ids):
                    result.changed_count += 1
                    result.updated_days.append(date_str)
                continue

            employee = planned.employee
            result.days_processed += 1
            if employee.name not in result.employees_used:
                result.employees_used.append(employee.name)

            if self._write_day(planned.day, employee, eligible_ids, force):
                logger.debug(f"Assigned {employee.name} to {date_str}")
                result.changed_count += 1
                result.updated_days.append(date_str)

        self.store.set(ROTATION_META, month_key(year, month), self.checkpoint_record(year, month, plan))
        result.rotation_index, result.swap_parity = plan.rotation_index, plan.swap_parity

        if result.changed_count:
            self.tracker.invalidate(year, month)

        logger.info(
            f"Weekend rotation {month_key(year, month)}: {result.days_processed} day(s) processed, "
            f"{result.changed_count} changed, {len(result.skipped_holidays)} holiday(s) skipped, "
            f"pattern={result.pattern}"
        )
        return result

    def _load_entry(self, date_str: str) -> Optional[ScheduleEntry]:
        data = self.store.get(SCHEDULE, date_str)
        return ScheduleEntry.from_dict(data) if data else None

    def _write_day(self, day: date, employee: Employee, eligible_ids: Set[str], force: bool) -> bool:
        date_str = format_date(day)
        entry = self._load_entry(date_str)
        assignment = build_assignment(employee, day)

        if entry and not force:
            current = entry.assignment_for(employee.id)
            stale = [a for a in entry.assignments
                     if a.employee_id in eligible_ids and a.employee_id != employee.id]
            if current == assignment and not stale:
                return False

        now = utc_now_iso()
        kept = [a for a in entry.assignments if a.employee_id not in eligible_ids] if entry else []
        updated = ScheduleEntry(
            id=date_str,
            date=date_str,
            assignments=kept + [assignment],
            created_at=entry.created_at if entry else now,
            updated_at=now,
        )
        self.store.set(SCHEDULE, date_str, updated.to_dict())
        return True

    def _clear_absent(self, date_str: str, absent_ids: Set[str]) -> bool:
        """Drop rotation assignments of employees on vacation; True when something was removed."""
        entry = self._load_entry(date_str)
        if not entry or not absent_ids:
            return False
        kept = [a for a in entry.assignments if a.employee_id not in absent_ids]
        if len(kept) == len(entry.assignments):
            return False
        entry.assignments = kept
        entry.updated_at = utc_now_iso()
        self.store.set(SCHEDULE, date_str, entry.to_dict())
        return True

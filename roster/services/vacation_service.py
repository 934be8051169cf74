"""
Vacation Service
Vacation periods, overlap validation and the per-month vacation index

Every successful create/update/delete marks the months touched by the old
and the new period for regeneration, which keeps generated rosters in line
with approved vacations.

Overlap checks read the latest stored vacations right before writing. Two
concurrent submissions for the same employee can still both pass; such
pairs are reported by find_conflicts().
"""
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Set, Tuple

from roster.error_handlers.exceptions import ConflictException, ResourceNotFoundException, ValidationException
from roster.services.employee_service import EmployeeService
from roster.services.regeneration import RegenerationTracker
from roster.services.schedule_types import Vacation, utc_now_iso
from roster.storage import VACATIONS, DocumentStore, WriteBatch
from roster.utils.date_helpers import month_bounds, months_between
from roster.utils.validators import optional_str, validate_date_param, validate_required_fields

logger = logging.getLogger(__name__)

VacationIndex = Dict[date, Set[str]]


def validate_period(start: date, end: date) -> None:
    """
    Raises:
        ValidationException: start after end, or a period crossing a year boundary
    """
    if start > end:
        raise ValidationException(
            'Start date must be on or before end date',
            errors=[{'field': 'start_date', 'message': 'Start date must be on or before end date'}]
        )
    if start.year != end.year:
        raise ValidationException(
            'Vacation period cannot cross a year boundary. Split it into two records.',
            errors=[{'field': 'end_date', 'message': 'End date must be in the same year as start date'}]
        )


def periods_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start <= other_end and end >= other_start


class VacationService:

    def __init__(self, store: DocumentStore, employees: EmployeeService, tracker: RegenerationTracker):
        self.store = store
        self.employees = employees
        self.tracker = tracker

    def _all(self, employee_id: Optional[str] = None) -> List[Vacation]:
        filters = {'employee_id': employee_id} if employee_id else {}
        return [Vacation.from_dict(d) for d in self.store.list(VACATIONS, **filters)]

    def list_vacations(self, year: int, employee_id: Optional[str] = None) -> List[Vacation]:
        """Vacations of a year, optionally for one employee, sorted by start date."""
        vacations = [v for v in self._all(employee_id) if v.year == year]
        return sorted(vacations, key=lambda v: (v.start_date, v.employee_name))

    def get(self, vacation_id: str) -> Vacation:
        data = self.store.get(VACATIONS, vacation_id)
        if not data:
            raise ResourceNotFoundException(f"Vacation {vacation_id} not found")
        return Vacation.from_dict(data)

    def check_overlap(self, employee_id: str, start: date, end: date, exclude_id: Optional[str] = None) -> None:
        """
        Raises:
            ConflictException: An existing period of the employee overlaps [start, end]
        """
        for other in self._all(employee_id):
            if other.id == exclude_id:
                continue
            if periods_overlap(start, end, other.start, other.end):
                raise ConflictException(
                    'Vacation period overlaps an existing period for this employee',
                    details={'conflicting_vacation_id': other.id,
                             'conflicting_period': [other.start_date, other.end_date]}
                )

    def create(self, data: dict) -> Vacation:
        validate_required_fields(data, ['employee_id', 'start_date', 'end_date'])
        start = validate_date_param(data['start_date'], 'start_date')
        end = validate_date_param(data['end_date'], 'end_date')
        validate_period(start, end)
        employee = self.employees.get(data['employee_id'])
        self.check_overlap(employee.id, start, end)

        now = utc_now_iso()
        vacation = Vacation(
            id=self.store.new_id(),
            employee_id=employee.id,
            employee_name=employee.name,
            year=start.year,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            notes=optional_str(data.get('notes')),
            created_at=now,
            updated_at=now,
        )
        batch = self.store.batch().set(VACATIONS, vacation.id, vacation.to_dict())
        self._commit_with_markers(batch, months_between(start, end), f"vacation {vacation.id} created")
        logger.info(f"Created vacation for {employee.name}: {vacation.start_date} to {vacation.end_date}")
        return vacation

    def update(self, vacation_id: str, data: dict) -> Vacation:
        existing = self.get(vacation_id)
        start = validate_date_param(data['start_date'], 'start_date') if 'start_date' in data else existing.start
        end = validate_date_param(data['end_date'], 'end_date') if 'end_date' in data else existing.end
        validate_period(start, end)

        employee_id, employee_name = existing.employee_id, existing.employee_name
        if data.get('employee_id') and data['employee_id'] != existing.employee_id:
            employee = self.employees.get(data['employee_id'])
            employee_id, employee_name = employee.id, employee.name
        self.check_overlap(employee_id, start, end, exclude_id=vacation_id)

        updated = Vacation(
            id=existing.id,
            employee_id=employee_id,
            employee_name=employee_name,
            year=start.year,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            notes=optional_str(data['notes']) if 'notes' in data else existing.notes,
            created_at=existing.created_at,
            updated_at=utc_now_iso(),
        )
        affected = months_between(existing.start, existing.end) + months_between(start, end)
        batch = self.store.batch().set(VACATIONS, updated.id, updated.to_dict())
        self._commit_with_markers(batch, affected, f"vacation {vacation_id} updated")
        logger.info(f"Updated vacation {vacation_id}: {updated.start_date} to {updated.end_date}")
        return updated

    def remove(self, vacation_id: str) -> None:
        existing = self.get(vacation_id)
        batch = self.store.batch().delete(VACATIONS, vacation_id)
        self._commit_with_markers(batch, months_between(existing.start, existing.end),
                                  f"vacation {vacation_id} deleted")
        logger.info(f"Deleted vacation {vacation_id} of {existing.employee_name}")

    def _commit_with_markers(self, batch: WriteBatch, months, reason: str) -> None:
        """Commit a vacation write together with the regeneration markers of its months."""
        months = self.tracker.mark_stale(months, reason=reason, batch=batch)
        batch.commit()
        self.tracker.forget_cached(months)

    def is_on_vacation(self, employee_id: str, value: date) -> bool:
        return any(v.covers(value) for v in self._all(employee_id))

    def month_index(self, year: int, month: int) -> VacationIndex:
        """Map every date of the month to the ids of employees on vacation that day."""
        first, last = month_bounds(year, month)
        index: VacationIndex = defaultdict(set)
        for vacation in self._all():
            start, end = max(vacation.start, first), min(vacation.end, last)
            day = start
            while day <= end:
                index[day].add(vacation.employee_id)
                day += timedelta(days=1)
        return dict(index)

    def find_conflicts(self, employee_id: Optional[str] = None) -> List[Tuple[Vacation, Vacation]]:
        """Stored pairs of overlapping periods for the same employee."""
        by_employee: Dict[str, List[Vacation]] = defaultdict(list)
        for vacation in self._all(employee_id):
            by_employee[vacation.employee_id].append(vacation)

        conflicts = []
        for vacations in by_employee.values():
            vacations.sort(key=lambda v: (v.start_date, v.id))
            for i, first in enumerate(vacations):
                for second in vacations[i + 1:]:
                    if second.start > first.end:
                        break
                    conflicts.append((first, second))
        return conflicts

"""
Employee Service
Employee CRUD and the rotation-eligible roster
"""
import logging
from typing import Callable, List, Optional

from roster.error_handlers.exceptions import AppException, ResourceNotFoundException
from roster.services.schedule_types import Employee, utc_now_iso
from roster.storage import EMPLOYEES, DocumentStore
from roster.utils.validators import (
    optional_str,
    parse_bool,
    validate_custom_schedule,
    validate_required_fields,
    validate_time,
    validate_work_days,
)

logger = logging.getLogger(__name__)


def _by_name(employees: List[Employee]) -> List[Employee]:
    # Name first, id as the deterministic tie-break
    return sorted(employees, key=lambda e: (e.name.casefold(), e.id))


class EmployeeService:
    """
    Manages employee records

    Args:
        store: Document store
        auto_scheduler: Optional callable run after an active employee is
            created; it adds the newcomer to already generated schedule days.
            Its failures are logged and never fail the create.
    """

    def __init__(self, store: DocumentStore, auto_scheduler: Optional[Callable[[Employee], dict]] = None):
        self.store = store
        self.auto_scheduler = auto_scheduler

    def list_employees(self) -> List[Employee]:
        return _by_name([Employee.from_dict(d) for d in self.store.list(EMPLOYEES)])

    def active_employees(self) -> List[Employee]:
        return [e for e in self.list_employees() if e.is_active]

    def rotation_eligible(self) -> List[Employee]:
        """Active weekend-rotation employees, ordered by name."""
        return [e for e in self.active_employees() if e.weekend_rotation]

    def find(self, employee_id: str) -> Optional[Employee]:
        data = self.store.get(EMPLOYEES, employee_id)
        return Employee.from_dict(data) if data else None

    def get(self, employee_id: str) -> Employee:
        employee = self.find(employee_id)
        if not employee:
            raise ResourceNotFoundException(f"Employee {employee_id} not found")
        return employee

    def create(self, data: dict) -> Employee:
        validate_required_fields(data, ['name', 'work_days', 'default_start_time', 'default_end_time'])
        now = utc_now_iso()
        employee = Employee(
            id=self.store.new_id(),
            name=str(data['name']).strip(),
            work_days=validate_work_days(data['work_days']),
            default_start_time=validate_time(data['default_start_time'], 'default_start_time'),
            default_end_time=validate_time(data['default_end_time'], 'default_end_time'),
            is_active=parse_bool(data.get('is_active'), default=True),
            weekend_rotation=parse_bool(data.get('weekend_rotation')),
            custom_schedule=validate_custom_schedule(data.get('custom_schedule')),
            notes=optional_str(data.get('notes')),
            created_at=now,
            updated_at=now,
        )
        self.store.set(EMPLOYEES, employee.id, employee.to_dict())
        logger.info(f"Created employee {employee.name} ({employee.id})")

        if self.auto_scheduler and employee.is_active:
            try:
                outcome = self.auto_scheduler(employee)
                if outcome.get('failed'):
                    logger.warning(
                        f"Auto-scheduling for {employee.name} partially failed: "
                        f"{outcome['failed']} day(s) not written"
                    )
            except AppException as e:
                logger.warning(f"Auto-scheduling for {employee.name} failed: {e}")

        return employee

    def update(self, employee_id: str, data: dict) -> Employee:
        employee = self.get(employee_id)

        if 'name' in data:
            validate_required_fields(data, ['name'])
            employee.name = str(data['name']).strip()
        if 'work_days' in data:
            employee.work_days = validate_work_days(data['work_days'])
        if 'default_start_time' in data:
            employee.default_start_time = validate_time(data['default_start_time'], 'default_start_time')
        if 'default_end_time' in data:
            employee.default_end_time = validate_time(data['default_end_time'], 'default_end_time')
        if 'is_active' in data:
            employee.is_active = parse_bool(data['is_active'], default=True)
        if 'weekend_rotation' in data:
            employee.weekend_rotation = parse_bool(data['weekend_rotation'])
        if 'custom_schedule' in data:
            employee.custom_schedule = validate_custom_schedule(data['custom_schedule'])
        if 'notes' in data:
            employee.notes = optional_str(data['notes'])

        employee.updated_at = utc_now_iso()
        self.store.set(EMPLOYEES, employee.id, employee.to_dict())
        logger.info(f"Updated employee {employee.name} ({employee.id})")
        return employee

    def delete(self, employee_id: str) -> None:
        """Remove an employee; generated schedule entries keep their assignments."""
        if not self.store.delete(EMPLOYEES, employee_id):
            raise ResourceNotFoundException(f"Employee {employee_id} not found")
        logger.info(f"Deleted employee {employee_id}")

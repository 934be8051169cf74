"""
Record types exchanged between the roster services and the document store
"""
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Dict, List, Optional

from roster.utils.date_helpers import parse_date


def utc_now_iso() -> str:
    return datetime.utcnow().isoformat()


@dataclass
class Employee:
    id: str
    name: str
    work_days: List[str]
    default_start_time: str
    default_end_time: str
    is_active: bool = True
    weekend_rotation: bool = False
    custom_schedule: Dict[str, Dict[str, str]] = field(default_factory=dict)
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Employee':
        return cls(
            id=data['id'],
            name=data['name'],
            work_days=list(data.get('work_days') or []),
            default_start_time=data['default_start_time'],
            default_end_time=data['default_end_time'],
            is_active=bool(data.get('is_active', True)),
            weekend_rotation=bool(data.get('weekend_rotation', False)),
            custom_schedule=dict(data.get('custom_schedule') or {}),
            notes=data.get('notes'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Holiday:
    id: str
    name: str
    date: str  # MM-DD
    month: int
    day: int
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Holiday':
        month, day = data.get('month'), data.get('day')
        raw = data.get('date') or ''
        if not (month and day) and raw:
            # Legacy records may still hold YYYY-MM-DD
            month, day = (int(part) for part in raw[-5:].split('-'))
        return cls(
            id=data['id'],
            name=data['name'],
            date=f"{int(month):02d}-{int(day):02d}",
            month=int(month),
            day=int(day),
            description=data.get('description'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Vacation:
    id: str
    employee_id: str
    employee_name: str
    year: int
    start_date: str
    end_date: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def start(self) -> date:
        return parse_date(self.start_date)

    @property
    def end(self) -> date:
        return parse_date(self.end_date)

    def covers(self, value: date) -> bool:
        return self.start <= value <= self.end

    @classmethod
    def from_dict(cls, data: dict) -> 'Vacation':
        return cls(
            id=data['id'],
            employee_id=data['employee_id'],
            employee_name=data.get('employee_name', ''),
            year=int(data['year']),
            start_date=data['start_date'],
            end_date=data['end_date'],
            notes=data.get('notes'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Assignment:
    id: str
    employee_id: str
    employee_name: str
    start_time: str
    end_time: str

    @staticmethod
    def make_id(employee_id: str, date_str: str) -> str:
        return f"{employee_id}-{date_str}"

    @classmethod
    def from_dict(cls, data: dict) -> 'Assignment':
        return cls(
            id=data['id'],
            employee_id=data['employee_id'],
            employee_name=data.get('employee_name', ''),
            start_time=data['start_time'],
            end_time=data['end_time'],
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ScheduleEntry:
    id: str  # YYYY-MM-DD, same as date
    date: str
    assignments: List[Assignment] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def assignment_for(self, employee_id: str) -> Optional[Assignment]:
        return next((a for a in self.assignments if a.employee_id == employee_id), None)

    @classmethod
    def from_dict(cls, data: dict) -> 'ScheduleEntry':
        return cls(
            id=data.get('id') or data['date'],
            date=data['date'],
            assignments=[Assignment.from_dict(a) for a in data.get('assignments') or []],
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'date': self.date,
            'assignments': [a.to_dict() for a in self.assignments],
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


@dataclass
class RotationMeta:
    """Weekend rotation checkpoint stored per month (id = YYYY-MM)."""
    id: str
    rotation_index: int = 0
    swap_parity: int = 0
    last_processed: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def fresh(cls, meta_id: str) -> 'RotationMeta':
        return cls(id=meta_id)

    @classmethod
    def from_dict(cls, data: dict) -> 'RotationMeta':
        return cls(
            id=data['id'],
            rotation_index=int(data.get('rotation_index', 0)),
            swap_parity=int(data.get('swap_parity', 0)),
            last_processed=data.get('last_processed'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WeekendRunResult:
    """Outcome of one weekend rotation run"""
    days_processed: int = 0
    changed_count: int = 0
    skipped_holidays: List[str] = field(default_factory=list)
    skipped_vacations: List[str] = field(default_factory=list)
    eligible_employees: int = 0
    employees_used: List[str] = field(default_factory=list)
    pattern: str = 'none'
    updated_days: List[str] = field(default_factory=list)
    rotation_index: int = 0
    swap_parity: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

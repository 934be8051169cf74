"""
Holiday Service
Recurring (month-day) holidays: storage, lookups and resolution
"""
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from roster.error_handlers.exceptions import ResourceNotFoundException
from roster.services.schedule_types import Holiday, utc_now_iso
from roster.storage import HOLIDAYS, DocumentStore
from roster.utils.date_helpers import month_days
from roster.utils.validators import (
    format_month_day,
    optional_str,
    parse_month_day,
    validate_required_fields,
)

logger = logging.getLogger(__name__)


class HolidayResolver:
    """
    Year-independent holiday lookup

    Built once per batch of lookups; matching compares month and day only.
    """

    def __init__(self, holidays: Iterable[Holiday]):
        self._by_month_day: Dict[tuple, Holiday] = {}
        for holiday in holidays:
            self._by_month_day.setdefault((holiday.month, holiday.day), holiday)

    def is_holiday(self, value: date) -> Optional[Holiday]:
        return self._by_month_day.get((value.month, value.day))

    def holidays_in_month(self, year: int, month: int) -> Dict[date, Holiday]:
        return {
            day: self._by_month_day[(day.month, day.day)]
            for day in month_days(year, month)
            if (day.month, day.day) in self._by_month_day
        }

    def __len__(self) -> int:
        return len(self._by_month_day)


class HolidayService:
    """
    Holiday CRUD on the document store

    Dates arrive as YYYY-MM-DD or MM-DD and are always stored as MM-DD with
    separate month/day fields.
    """

    def __init__(self, store: DocumentStore, on_change=None):
        self.store = store
        # Called with no arguments after any holiday mutation
        self.on_change = on_change

    def list_holidays(self) -> List[Holiday]:
        holidays = [Holiday.from_dict(d) for d in self.store.list(HOLIDAYS)]
        return sorted(holidays, key=lambda h: (h.month, h.day, h.name))

    def get(self, holiday_id: str) -> Holiday:
        data = self.store.get(HOLIDAYS, holiday_id)
        if not data:
            raise ResourceNotFoundException(f"Holiday {holiday_id} not found")
        return Holiday.from_dict(data)

    def resolver(self) -> HolidayResolver:
        return HolidayResolver(self.list_holidays())

    def check(self, value: date) -> Optional[Holiday]:
        return self.resolver().is_holiday(value)

    def create(self, data: dict) -> Holiday:
        validate_required_fields(data, ['name', 'date'])
        month, day = parse_month_day(data['date'])
        now = utc_now_iso()
        holiday = Holiday(
            id=self.store.new_id(),
            name=str(data['name']).strip(),
            date=format_month_day(month, day),
            month=month,
            day=day,
            description=optional_str(data.get('description')),
            created_at=now,
            updated_at=now,
        )
        self.store.set(HOLIDAYS, holiday.id, holiday.to_dict())
        logger.info(f"Created holiday {holiday.name} on {holiday.date}")
        self._changed()
        return holiday

    def update(self, holiday_id: str, data: dict) -> Holiday:
        holiday = self.get(holiday_id)
        if 'name' in data:
            validate_required_fields(data, ['name'])
            holiday.name = str(data['name']).strip()
        if 'date' in data:
            holiday.month, holiday.day = parse_month_day(data['date'])
            holiday.date = format_month_day(holiday.month, holiday.day)
        if 'description' in data:
            holiday.description = optional_str(data['description'])
        holiday.updated_at = utc_now_iso()
        self.store.set(HOLIDAYS, holiday.id, holiday.to_dict())
        logger.info(f"Updated holiday {holiday.name}")
        self._changed()
        return holiday

    def delete(self, holiday_id: str) -> None:
        holiday = self.get(holiday_id)
        self.store.delete(HOLIDAYS, holiday_id)
        logger.info(f"Deleted holiday {holiday.name}")
        self._changed()

    def _changed(self):
        if self.on_change:
            self.on_change()

    def migrate_legacy_dates(self, dry_run: bool = False) -> List[Tuple[str, str, str]]:
        """
        Rewrite holiday records still carrying a YYYY-MM-DD date to MM-DD

        Args:
            dry_run: Only report what would change

        Returns:
            (holiday_id, old_date, new_date) for every record needing a rewrite
        """
        changes = []
        batch = self.store.batch()
        for data in self.store.list(HOLIDAYS):
            raw = str(data.get('date') or '')
            month, day = parse_month_day(raw, field=f"holidays/{data['id']}.date")
            new_date = format_month_day(month, day)
            if raw == new_date and data.get('month') == month and data.get('day') == day:
                continue
            changes.append((data['id'], raw, new_date))
            batch.set(HOLIDAYS, data['id'], {
                **data,
                'date': new_date,
                'month': month,
                'day': day,
                'updated_at': utc_now_iso(),
            })

        if changes and not dry_run:
            batch.commit()
            self._changed()
        logger.info(f"Holiday date migration: {len(changes)} record(s) {'to update' if dry_run else 'updated'}")
        return changes

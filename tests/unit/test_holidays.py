"""
Unit tests for holiday resolution and the holiday service.
"""
import pytest
from datetime import date

from roster.error_handlers.exceptions import ResourceNotFoundException, ValidationException
from roster.services.holiday_service import HolidayResolver
from roster.services.schedule_types import Holiday
from roster.storage import HOLIDAYS


def _holiday(month, day, name='Holiday'):
    return Holiday(id=f'h-{month}-{day}', name=name, date=f'{month:02d}-{day:02d}', month=month, day=day)


class TestHolidayResolver:

    @pytest.mark.unit
    def test_matches_any_year(self):
        resolver = HolidayResolver([_holiday(12, 25, 'Christmas')])
        assert resolver.is_holiday(date(2024, 12, 25)).name == 'Christmas'
        assert resolver.is_holiday(date(2031, 12, 25)).name == 'Christmas'

    @pytest.mark.unit
    def test_no_match(self):
        resolver = HolidayResolver([_holiday(12, 25)])
        assert resolver.is_holiday(date(2025, 12, 24)) is None

    @pytest.mark.unit
    def test_leap_day_only_in_leap_years(self):
        resolver = HolidayResolver([_holiday(2, 29)])
        assert resolver.holidays_in_month(2024, 2)
        assert resolver.holidays_in_month(2025, 2) == {}

    @pytest.mark.unit
    def test_holidays_in_month(self):
        resolver = HolidayResolver([_holiday(7, 4), _holiday(12, 25)])
        assert list(resolver.holidays_in_month(2025, 7)) == [date(2025, 7, 4)]
        assert len(resolver) == 2


class TestHolidayService:

    @pytest.mark.unit
    def test_create_normalizes_full_date(self, services):
        holiday = services.holidays.create({'name': 'Independence Day', 'date': '2024-07-04'})
        assert holiday.date == '07-04'
        assert (holiday.month, holiday.day) == (7, 4)

    @pytest.mark.unit
    def test_create_accepts_single_digits(self, services):
        holiday = services.holidays.create({'name': 'New Year', 'date': '1-1'})
        assert holiday.date == '01-01'

    @pytest.mark.unit
    def test_create_requires_name_and_date(self, services):
        with pytest.raises(ValidationException) as exc:
            services.holidays.create({'name': ''})
        assert {e['field'] for e in exc.value.errors} == {'name', 'date'}

    @pytest.mark.unit
    def test_check(self, services, holiday_factory):
        holiday_factory(name='Christmas', date='12-25')
        assert services.holidays.check(date(2030, 12, 25)).name == 'Christmas'
        assert services.holidays.check(date(2030, 12, 26)) is None

    @pytest.mark.unit
    def test_update_and_delete(self, services, holiday_factory):
        holiday = holiday_factory(name='Old', date='03-01')
        updated = services.holidays.update(holiday.id, {'date': '2025-03-02', 'name': 'New'})
        assert updated.date == '03-02'
        assert updated.name == 'New'

        services.holidays.delete(holiday.id)
        with pytest.raises(ResourceNotFoundException):
            services.holidays.get(holiday.id)

    @pytest.mark.unit
    def test_mutation_clears_schedule_cache(self, services, holiday_factory):
        services.cache.put((2025, 7), [])
        holiday_factory(date='07-04')
        assert len(services.cache) == 0

    @pytest.mark.unit
    def test_list_sorted_by_date(self, services, holiday_factory):
        holiday_factory(name='B', date='12-25')
        holiday_factory(name='A', date='01-01')
        assert [h.date for h in services.holidays.list_holidays()] == ['01-01', '12-25']


class TestLegacyDateMigration:

    @pytest.mark.unit
    def test_dry_run_reports_without_writing(self, services, store):
        store.set(HOLIDAYS, 'legacy', {'name': 'Legacy', 'date': '2023-07-04'})
        changes = services.holidays.migrate_legacy_dates(dry_run=True)
        assert changes == [('legacy', '2023-07-04', '07-04')]
        assert store.get(HOLIDAYS, 'legacy')['date'] == '2023-07-04'

    @pytest.mark.unit
    def test_migration_rewrites_legacy_records(self, services, store, holiday_factory):
        holiday_factory(name='Current', date='12-25')
        store.set(HOLIDAYS, 'legacy', {'name': 'Legacy', 'date': '2023-07-04'})

        changes = services.holidays.migrate_legacy_dates()

        assert [c[0] for c in changes] == ['legacy']
        migrated = store.get(HOLIDAYS, 'legacy')
        assert migrated['date'] == '07-04'
        assert (migrated['month'], migrated['day']) == (7, 4)
        assert services.holidays.migrate_legacy_dates() == []

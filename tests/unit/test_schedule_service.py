"""
Unit tests for the schedule service: cached month reads, fingerprints,
day patches and auto-scheduling of new employees.
"""
import pytest
from datetime import date

from roster.error_handlers.exceptions import NotModifiedException, StorageException, ValidationException
from roster.storage import SCHEDULE

from tests.conftest import WEEKDAYS


def _day(schedule, date_str):
    return next(e for e in schedule if e['date'] == date_str)


@pytest.fixture
def team(employee_factory):
    return [employee_factory(name='Dana'), employee_factory(name='Eli')]


class TestMonthReads:

    @pytest.mark.unit
    def test_first_read_generates_then_cache_serves(self, services, team):
        first = services.schedule.get_month_schedule(2025, 3)
        second = services.schedule.get_month_schedule(2025, 3)

        assert first['from_cache'] is False
        assert len(first['schedule']) == 31
        assert second['from_cache'] is True
        assert second['etag'] == first['etag']

    @pytest.mark.unit
    def test_matching_etag_raises_not_modified(self, services, team):
        etag = services.schedule.get_month_schedule(2025, 3)['etag']

        with pytest.raises(NotModifiedException) as exc_info:
            services.schedule.get_month_schedule(2025, 3, if_none_match=etag)
        assert exc_info.value.etag == etag

    @pytest.mark.unit
    def test_matching_etag_after_cache_expiry(self, services, team):
        etag = services.schedule.get_month_schedule(2025, 3)['etag']
        services.schedule.clear_cache()

        with pytest.raises(NotModifiedException):
            services.schedule.get_month_schedule(2025, 3, if_none_match=etag)

    @pytest.mark.unit
    def test_stale_etag_gets_full_body(self, services, team):
        result = services.schedule.get_month_schedule(2025, 3, if_none_match='"0000000000000000"')
        assert result['schedule']

    @pytest.mark.unit
    def test_patch_changes_fingerprint_and_survives_reads(self, services, team):
        before = services.schedule.get_month_schedule(2025, 3)
        services.schedule.update_day('2025-03-03', [])

        after = services.schedule.get_month_schedule(2025, 3)

        assert after['from_cache'] is False
        assert after['etag'] != before['etag']
        assert _day(after['schedule'], '2025-03-03')['assignments'] == []

    @pytest.mark.unit
    def test_force_regenerate_discards_patch(self, services, team):
        services.schedule.get_month_schedule(2025, 3)
        services.schedule.update_day('2025-03-03', [])

        result = services.schedule.get_month_schedule(2025, 3, force_regenerate=True)

        assert result['from_cache'] is False
        assert len(_day(result['schedule'], '2025-03-03')['assignments']) == 2

    @pytest.mark.unit
    def test_vacation_marks_month_for_regeneration(self, services, team, vacation_factory):
        services.schedule.get_month_schedule(2025, 3)
        vacation_factory(employee=team[0], start=date(2025, 3, 3), end=date(2025, 3, 4))

        assert services.tracker.needs_generation(2025, 3) is True
        result = services.schedule.get_month_schedule(2025, 3)

        names = [a['employee_name'] for a in _day(result['schedule'], '2025-03-03')['assignments']]
        assert names == ['Eli']
        assert services.tracker.needs_generation(2025, 3) is False

    @pytest.mark.unit
    def test_patch_before_first_read_is_kept(self, services, team):
        services.schedule.update_day('2025-04-01', [])

        result = services.schedule.get_month_schedule(2025, 4)

        assert len(result['schedule']) == 30
        assert _day(result['schedule'], '2025-04-01')['assignments'] == []
        assert len(_day(result['schedule'], '2025-04-02')['assignments']) == 2

    @pytest.mark.unit
    def test_patch_on_stale_month_is_kept(self, services, team, vacation_factory):
        services.schedule.get_month_schedule(2025, 3)
        vacation_factory(employee=team[0], start=date(2025, 3, 3), end=date(2025, 3, 4))
        services.schedule.update_day('2025-03-05', [])

        result = services.schedule.get_month_schedule(2025, 3)

        assert _day(result['schedule'], '2025-03-05')['assignments'] == []
        names = [a['employee_name'] for a in _day(result['schedule'], '2025-03-03')['assignments']]
        assert names == ['Eli']

    @pytest.mark.unit
    def test_weekend_run_before_first_read_is_reproduced(self, services, rotation_employee_factory):
        rotation_employee_factory('Alice')
        rotation_employee_factory('Bob')
        services.schedule.generate_weekends(2025, 2)

        result = services.schedule.get_month_schedule(2025, 2)

        owners = {d: [a['employee_name'] for a in _day(result['schedule'], d)['assignments']]
                  for d in ('2025-02-01', '2025-02-02', '2025-02-08')}
        assert owners == {'2025-02-01': ['Alice'], '2025-02-02': ['Bob'], '2025-02-08': ['Bob']}
        assert services.rotation.run(2025, 2).changed_count == 0

    @pytest.mark.unit
    def test_invalid_month_rejected(self, services):
        with pytest.raises(ValidationException):
            services.schedule.get_month_schedule(2025, 13)


class TestUpdateDay:

    @pytest.mark.unit
    def test_replaces_assignments(self, services, store, team):
        services.schedule.generate_month(2025, 3)
        created_at = store.get(SCHEDULE, '2025-03-03')['created_at']

        entry = services.schedule.update_day('2025-03-03', [
            {'employee_id': team[1].id, 'start_time': '8:00', 'end_time': '12:30'},
        ])

        assert [a.employee_name for a in entry.assignments] == ['Eli']
        assert entry.assignments[0].start_time == '08:00'
        assert entry.assignments[0].id == f"{team[1].id}-2025-03-03"
        assert entry.created_at == created_at
        assert store.get(SCHEDULE, '2025-03-03')['assignments'][0]['end_time'] == '12:30'

    @pytest.mark.unit
    def test_explicit_name_for_unknown_employee(self, services):
        entry = services.schedule.update_day('2025-03-03', [
            {'employee_id': 'external-7', 'employee_name': 'Temp', 'start_time': '10:00', 'end_time': '14:00'},
        ])
        assert entry.assignments[0].employee_name == 'Temp'

    @pytest.mark.unit
    def test_unknown_employee_without_name(self, services):
        with pytest.raises(ValidationException) as exc_info:
            services.schedule.update_day('2025-03-03', [
                {'employee_id': 'nobody', 'start_time': '10:00', 'end_time': '14:00'},
            ])
        assert exc_info.value.errors[0]['field'] == 'assignments[0].employee_name'

    @pytest.mark.unit
    @pytest.mark.parametrize('date_str', ['2025-02-30', '03/03/2025', ''])
    def test_bad_date(self, services, date_str):
        with pytest.raises(ValidationException):
            services.schedule.update_day(date_str, [])

    @pytest.mark.unit
    def test_bad_time(self, services, team):
        with pytest.raises(ValidationException) as exc_info:
            services.schedule.update_day('2025-03-03', [
                {'employee_id': team[0].id, 'start_time': '25:00', 'end_time': '14:00'},
            ])
        assert exc_info.value.errors[0]['field'] == 'assignments[0].start_time'

    @pytest.mark.unit
    def test_duplicate_employee(self, services, team):
        item = {'employee_id': team[0].id, 'start_time': '09:00', 'end_time': '17:00'}
        with pytest.raises(ValidationException):
            services.schedule.update_day('2025-03-03', [item, dict(item)])

    @pytest.mark.unit
    @pytest.mark.parametrize('assignments', [None, {'employee_id': 'x'}, ['x'], [{'start_time': '09:00'}]])
    def test_malformed_assignments(self, services, assignments):
        with pytest.raises(ValidationException):
            services.schedule.update_day('2025-03-03', assignments)

    @pytest.mark.unit
    def test_rejected_patch_writes_nothing(self, services, store):
        with pytest.raises(ValidationException):
            services.schedule.update_day('2025-03-03', [{'employee_id': 'nobody'}])
        assert store.get(SCHEDULE, '2025-03-03') is None


class TestAutoScheduleEmployee:

    @pytest.fixture
    def generated_february(self, services, holiday_factory):
        holiday_factory(name='Founders Day', date='02-17')
        services.schedule.generate_month(2025, 2)

    @pytest.mark.unit
    def test_fills_generated_working_days(self, services, store, generated_february, vacation_factory):
        employee = services.employees.create({
            'name': 'Newcomer', 'work_days': list(WEEKDAYS),
            'default_start_time': '10:00', 'default_end_time': '16:00',
        })
        vacation_factory(employee=employee, start=date(2025, 2, 20), end=date(2025, 2, 21))

        outcome = services.schedule.auto_schedule_employee(employee, start=date(2025, 2, 10))

        # 15 weekdays from the 10th, minus the holiday and two vacation days
        assert outcome == {'scheduled': 12, 'failed': 0}
        assert store.get(SCHEDULE, '2025-02-10')['assignments'][0]['start_time'] == '10:00'
        assert store.get(SCHEDULE, '2025-02-17')['assignments'] == []
        assert store.get(SCHEDULE, '2025-02-07')['assignments'] == []

    @pytest.mark.unit
    def test_skips_days_already_assigned(self, services, employee_factory, generated_february):
        employee = employee_factory(name='Dana')
        services.schedule.generate_month(2025, 2)

        outcome = services.schedule.auto_schedule_employee(employee, start=date(2025, 2, 1))

        assert outcome == {'scheduled': 0, 'failed': 0}

    @pytest.mark.unit
    def test_rotation_employee_not_added_on_weekends(self, services, store, generated_february,
                                                     rotation_employee_factory):
        employee = rotation_employee_factory('Rota')

        outcome = services.schedule.auto_schedule_employee(employee, start=date(2025, 2, 22))

        # 22nd-28th: Mon-Fri only
        assert outcome['scheduled'] == 5
        assert store.get(SCHEDULE, '2025-02-22')['assignments'] == []

    @pytest.mark.unit
    def test_ungenerated_month_untouched(self, services, store, employee_factory):
        employee = employee_factory(name='Dana')
        outcome = services.schedule.auto_schedule_employee(employee, start=date(2025, 4, 1))

        assert outcome == {'scheduled': 0, 'failed': 0}
        assert store.get(SCHEDULE, '2025-04-01') is None

    @pytest.mark.unit
    def test_counts_failed_days_and_continues(self, services, store, generated_february, monkeypatch):
        employee = services.employees.create({
            'name': 'Newcomer', 'work_days': ['monday', 'tuesday'],
            'default_start_time': '09:00', 'default_end_time': '17:00',
        })
        original_set = store.set

        def flaky_set(collection, doc_id, data):
            if doc_id == '2025-02-24':
                raise StorageException('test-error-id', operation='set')
            return original_set(collection, doc_id, data)

        monkeypatch.setattr(store, 'set', flaky_set)

        outcome = services.schedule.auto_schedule_employee(employee, start=date(2025, 2, 18))

        # Tuesday 18th, Monday 24th (fails), Tuesday 25th
        assert outcome == {'scheduled': 2, 'failed': 1}
        assert store.get(SCHEDULE, '2025-02-25')['assignments'][0]['employee_name'] == 'Newcomer'

"""
Unit tests for employee day-pattern resolution.
"""
import pytest
from datetime import date

from roster.services.day_pattern import build_assignment, times_for, works_on
from roster.services.schedule_types import Employee


@pytest.fixture
def employee():
    return Employee(
        id='emp-1',
        name='Alice',
        work_days=['monday', 'wednesday', 'saturday'],
        default_start_time='9:00',
        default_end_time='17:00',
        custom_schedule={
            'saturday': {'start_time': '8:00', 'end_time': '12:30'},
            'wednesday': {'start_time': '10:00'},
        },
    )


class TestDayPattern:

    @pytest.mark.unit
    def test_works_on_by_name_and_date(self, employee):
        assert works_on(employee, 'monday') is True
        assert works_on(employee, 'Tuesday') is False
        assert works_on(employee, date(2025, 6, 7)) is True  # Saturday

    @pytest.mark.unit
    def test_default_times_normalized(self, employee):
        assert times_for(employee, 'monday') == ('09:00', '17:00')

    @pytest.mark.unit
    def test_custom_override_wins(self, employee):
        assert times_for(employee, 'saturday') == ('08:00', '12:30')

    @pytest.mark.unit
    def test_partial_override_falls_back_per_half(self, employee):
        assert times_for(employee, 'wednesday') == ('10:00', '17:00')

    @pytest.mark.unit
    def test_build_assignment(self, employee):
        assignment = build_assignment(employee, date(2025, 6, 7))
        assert assignment.id == 'emp-1-2025-06-07'
        assert assignment.employee_name == 'Alice'
        assert (assignment.start_time, assignment.end_time) == ('08:00', '12:30')

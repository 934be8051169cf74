"""
Unit tests for calendar helpers.
"""
import pytest
from datetime import date

from roster.utils.date_helpers import (
    format_date,
    is_weekend,
    iso_week_number,
    month_bounds,
    month_days,
    month_key,
    months_between,
    parse_date,
    previous_month,
    weekday_name,
    weekend_pairs,
)


class TestMonthArithmetic:

    @pytest.mark.unit
    def test_month_days_leap_february(self):
        days = month_days(2024, 2)
        assert len(days) == 29
        assert days[0] == date(2024, 2, 1)
        assert days[-1] == date(2024, 2, 29)

    @pytest.mark.unit
    def test_month_days_regular_february(self):
        assert len(month_days(2025, 2)) == 28

    @pytest.mark.unit
    def test_month_bounds(self):
        assert month_bounds(2025, 4) == (date(2025, 4, 1), date(2025, 4, 30))

    @pytest.mark.unit
    def test_previous_month_wraps_year(self):
        assert previous_month(2025, 1) == (2024, 12)
        assert previous_month(2025, 7) == (2025, 6)

    @pytest.mark.unit
    def test_month_key_zero_pads(self):
        assert month_key(2025, 3) == '2025-03'

    @pytest.mark.unit
    def test_months_between_spans_months(self):
        assert months_between(date(2025, 1, 30), date(2025, 3, 2)) == [(2025, 1), (2025, 2), (2025, 3)]

    @pytest.mark.unit
    def test_months_between_single_month(self):
        assert months_between(date(2025, 6, 5), date(2025, 6, 9)) == [(2025, 6)]


class TestDayHelpers:

    @pytest.mark.unit
    def test_weekday_name(self):
        assert weekday_name(date(2025, 6, 2)) == 'monday'
        assert weekday_name(date(2025, 6, 1)) == 'sunday'

    @pytest.mark.unit
    def test_is_weekend(self):
        assert is_weekend(date(2025, 6, 7)) is True
        assert is_weekend(date(2025, 6, 8)) is True
        assert is_weekend(date(2025, 6, 9)) is False

    @pytest.mark.unit
    def test_iso_week_number(self):
        assert iso_week_number(date(2025, 1, 1)) == 1
        assert iso_week_number(date(2024, 12, 30)) == 1

    @pytest.mark.unit
    def test_parse_and_format(self):
        assert parse_date('2025-06-09') == date(2025, 6, 9)
        assert format_date(date(2025, 6, 9)) == '2025-06-09'

    @pytest.mark.unit
    @pytest.mark.parametrize('value', ['2025-6-9', '2025-02-30', '06/09/2025', '', None])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_date(value)


class TestWeekendPairs:

    @pytest.mark.unit
    def test_full_pairs(self):
        # February 2025 starts on a Saturday and ends on a Friday
        pairs = weekend_pairs(2025, 2)
        assert len(pairs) == 4
        assert pairs[0] == (date(2025, 2, 1), date(2025, 2, 2))
        assert pairs[-1] == (date(2025, 2, 22), date(2025, 2, 23))

    @pytest.mark.unit
    def test_month_starting_on_sunday(self):
        pairs = weekend_pairs(2025, 6)
        assert pairs[0] == (None, date(2025, 6, 1))
        assert len(pairs) == 5

    @pytest.mark.unit
    def test_month_ending_on_saturday(self):
        pairs = weekend_pairs(2025, 5)
        assert pairs[-1] == (date(2025, 5, 31), None)

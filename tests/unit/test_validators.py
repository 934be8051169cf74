"""
Unit tests for request validation helpers.
"""
import pytest
from datetime import date

from roster.error_handlers.exceptions import ValidationException
from roster.utils.validators import (
    normalize_time,
    parse_bool,
    parse_month_day,
    require_json_object,
    sanitize_request_data,
    validate_custom_schedule,
    validate_date_param,
    validate_required_fields,
    validate_time,
    validate_work_days,
    validate_year_month,
)


class TestTimeNormalization:

    @pytest.mark.unit
    def test_normalize_pads_single_digits(self):
        assert normalize_time('9:5') == '09:05'

    @pytest.mark.unit
    def test_normalize_is_idempotent(self):
        assert normalize_time('09:05') == '09:05'
        assert normalize_time(normalize_time('7:30')) == '07:30'

    @pytest.mark.unit
    def test_normalize_leaves_garbage_alone(self):
        assert normalize_time('noon') == 'noon'

    @pytest.mark.unit
    def test_validate_time_accepts_lenient_input(self):
        assert validate_time('8:00', 'start_time') == '08:00'

    @pytest.mark.unit
    @pytest.mark.parametrize('value', ['24:00', '12:60', 'noon', '', None, 900])
    def test_validate_time_rejects(self, value):
        with pytest.raises(ValidationException) as exc:
            validate_time(value, 'start_time')
        assert exc.value.errors[0]['field'] == 'start_time'


class TestDateValidation:

    @pytest.mark.unit
    def test_valid_date(self):
        assert validate_date_param('2025-03-10', 'start_date') == date(2025, 3, 10)

    @pytest.mark.unit
    def test_invalid_date_names_field(self):
        with pytest.raises(ValidationException) as exc:
            validate_date_param('2025-13-01', 'start_date')
        assert exc.value.status_code == 400
        assert exc.value.errors == [{'field': 'start_date', 'message': exc.value.message}]

    @pytest.mark.unit
    def test_year_month_coerced(self):
        assert validate_year_month('2025', '6') == (2025, 6)

    @pytest.mark.unit
    def test_year_month_errors_collected(self):
        with pytest.raises(ValidationException) as exc:
            validate_year_month('abc', 13)
        fields = {e['field'] for e in exc.value.errors}
        assert fields == {'year', 'month'}


class TestPayloadValidation:

    @pytest.mark.unit
    def test_required_fields_lists_every_missing_field(self):
        with pytest.raises(ValidationException) as exc:
            validate_required_fields({'name': '', 'date': None}, ['name', 'date'])
        assert [e['field'] for e in exc.value.errors] == ['name', 'date']

    @pytest.mark.unit
    def test_work_days_lowercased_and_deduplicated(self):
        assert validate_work_days(['Monday', 'monday', 'FRIDAY']) == ['monday', 'friday']

    @pytest.mark.unit
    def test_work_days_rejects_unknown(self):
        with pytest.raises(ValidationException):
            validate_work_days(['funday'])

    @pytest.mark.unit
    def test_work_days_rejects_empty(self):
        with pytest.raises(ValidationException):
            validate_work_days([])

    @pytest.mark.unit
    def test_custom_schedule_normalized(self):
        result = validate_custom_schedule({'Saturday': {'start_time': '8:0', 'end_time': '12:00'}})
        assert result == {'saturday': {'start_time': '08:00', 'end_time': '12:00'}}

    @pytest.mark.unit
    def test_custom_schedule_bad_time(self):
        with pytest.raises(ValidationException) as exc:
            validate_custom_schedule({'monday': {'start_time': '25:00', 'end_time': '12:00'}})
        assert exc.value.errors[0]['field'] == 'custom_schedule.monday.start_time'

    @pytest.mark.unit
    def test_require_json_object(self):
        assert require_json_object({'a': 1}) == {'a': 1}
        with pytest.raises(ValidationException):
            require_json_object(['a'])
        with pytest.raises(ValidationException):
            require_json_object(None)

    @pytest.mark.unit
    def test_parse_bool(self):
        assert parse_bool('true') is True
        assert parse_bool('1') is True
        assert parse_bool('false') is False
        assert parse_bool(None) is False
        assert parse_bool(True) is True


class TestMonthDay:

    @pytest.mark.unit
    @pytest.mark.parametrize('value,expected', [
        ('2024-07-04', (7, 4)),
        ('07-04', (7, 4)),
        ('7-4', (7, 4)),
        ('02-29', (2, 29)),
    ])
    def test_accepted_forms(self, value, expected):
        assert parse_month_day(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize('value', ['13-01', '02-30', 'July 4', '', None])
    def test_rejected_forms(self, value):
        with pytest.raises(ValidationException):
            parse_month_day(value)


class TestSanitize:

    @pytest.mark.unit
    def test_redacts_sensitive_keys(self):
        raw = '{"password": "secret123", "token": "abc", "name": "Alice"}'
        cleaned = sanitize_request_data(raw)
        assert 'secret123' not in cleaned
        assert 'abc' not in cleaned
        assert 'Alice' in cleaned

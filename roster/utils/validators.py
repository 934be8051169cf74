"""
Validation utilities for the roster API
Reusable parsing and validation helpers for request payloads

All helpers raise ValidationException with field-level detail so that the
@handle_errors decorator can turn them into 400 responses.
"""
import re
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from roster.error_handlers.exceptions import ValidationException
from roster.utils.date_helpers import WEEKDAY_NAMES, parse_date

# Lenient input: single-digit hour/minute tolerated, normalized on the way in
_TIME_INPUT_RE = re.compile(r'^(\d{1,2}):(\d{1,2})$')
# Stored form: always HH:MM, 00:00-23:59
STRICT_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
_MONTH_DAY_RE = re.compile(r'^(?:\d{4}-)?(\d{1,2})-(\d{1,2})$')


def normalize_time(value: str) -> str:
    """
    Zero-pad an H:M time to HH:MM

    Idempotent: an already normalized value is returned unchanged. Strings
    that do not look like a time are returned as-is so the caller's
    validation can reject them.

    Examples:
        >>> normalize_time('9:5')
        '09:05'
        >>> normalize_time('09:05')
        '09:05'
    """
    if not isinstance(value, str):
        return value
    match = _TIME_INPUT_RE.match(value.strip())
    if not match:
        return value
    hours, minutes = match.groups()
    return f"{int(hours):02d}:{int(minutes):02d}"


def validate_time(value: Any, field: str) -> str:
    """Normalize and validate a time value, returning the HH:MM form."""
    normalized = normalize_time(value)
    if not isinstance(normalized, str) or not STRICT_TIME_RE.match(normalized):
        raise ValidationException(f"Invalid time format for {field}. Use HH:MM", field=field)
    return normalized


def validate_date_param(value: Any, param_name: str = 'date') -> date:
    """
    Validate and parse a YYYY-MM-DD date

    Raises:
        ValidationException: If the value is missing or not a real date
    """
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        raise ValidationException(
            f"Invalid {param_name} format. Use YYYY-MM-DD (e.g., 2025-10-15)",
            field=param_name
        )


def validate_year_month(year: Any, month: Any) -> Tuple[int, int]:
    """Coerce and range-check a (year, month) pair."""
    errors = []
    try:
        year = int(year)
        if year < 1 or year > 9999:
            raise ValueError
    except (TypeError, ValueError):
        errors.append({'field': 'year', 'message': 'Year must be a valid number'})
    try:
        month = int(month)
        if month < 1 or month > 12:
            raise ValueError
    except (TypeError, ValueError):
        errors.append({'field': 'month', 'message': 'Month must be between 1 and 12'})
    if errors:
        raise ValidationException('Invalid year or month', errors=errors)
    return year, month


def validate_required_fields(data: Dict[str, Any], required_fields: Iterable[str]) -> None:
    """
    Validate that all required fields are present and non-empty

    Raises:
        ValidationException: Listing every missing field
    """
    missing = [name for name in required_fields if data.get(name) in (None, '')]
    if missing:
        raise ValidationException(
            f"Missing required fields: {', '.join(missing)}",
            errors=[{'field': name, 'message': 'This field is required'} for name in missing]
        )


def validate_work_days(value: Any, field: str = 'work_days') -> List[str]:
    """Lowercase weekday names, at least one, no unknown names."""
    if not isinstance(value, (list, tuple)) or not value:
        raise ValidationException('At least one work day must be selected', field=field)
    days = []
    for item in value:
        name = str(item).strip().lower()
        if name not in WEEKDAY_NAMES:
            raise ValidationException(f"Unknown weekday: {item}", field=field)
        if name not in days:
            days.append(name)
    return days


def validate_custom_schedule(value: Any, field: str = 'custom_schedule') -> Dict[str, Dict[str, str]]:
    """Per-weekday {'start_time', 'end_time'} overrides, normalized."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationException('Custom schedule must be an object keyed by weekday', field=field)
    result = {}
    for day, times in value.items():
        name = str(day).strip().lower()
        if name not in WEEKDAY_NAMES:
            raise ValidationException(f"Unknown weekday: {day}", field=field)
        if not isinstance(times, dict):
            raise ValidationException(f"Times for {name} must be an object", field=f"{field}.{name}")
        result[name] = {
            'start_time': validate_time(times.get('start_time'), f"{field}.{name}.start_time"),
            'end_time': validate_time(times.get('end_time'), f"{field}.{name}.end_time"),
        }
    return result


def parse_month_day(value: Any, field: str = 'date') -> Tuple[int, int]:
    """
    Parse a recurring holiday date given as YYYY-MM-DD or MM-DD

    The year, when present, is discarded. Feb 29 is accepted since it
    recurs in leap years.

    Returns:
        (month, day)
    """
    match = _MONTH_DAY_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationException('Invalid holiday date. Use MM-DD or YYYY-MM-DD', field=field)
    month, day = int(match.group(1)), int(match.group(2))
    try:
        # 2000 is a leap year so 02-29 is accepted
        date(2000, month, day)
    except ValueError:
        raise ValidationException(f"Invalid holiday date: {value}", field=field)
    return month, day


def format_month_day(month: int, day: int) -> str:
    return f"{month:02d}-{day:02d}"


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def sanitize_request_data(data: str) -> str:
    """
    Remove sensitive data from request strings for safe logging.

    Redacts common sensitive field patterns (passwords, tokens, API keys, secrets).

    Examples:
        >>> sanitize_request_data('{"password": "secret123"}')
        '{"password": "[REDACTED]"}'
    """
    for key in ('password', 'token', 'api_key', 'secret', 'credential', 'authorization'):
        data = re.sub(rf'("{key}"\s*:\s*")[^"]*(")', r'\1[REDACTED]\2', data, flags=re.IGNORECASE)
    return data


def require_json_object(payload: Any) -> Dict[str, Any]:
    """Request bodies must be JSON objects."""
    if not isinstance(payload, dict):
        raise ValidationException('Request body must be a JSON object')
    return payload


def parse_bool(value: Any, default: bool = False) -> bool:
    """Query-string or JSON flag: true/1/yes/on (any case) or a real bool."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')

"""
Utility modules for the roster service
"""
from .date_helpers import format_date, parse_date, month_key
from .validators import normalize_time, sanitize_request_data

__all__ = ['format_date', 'parse_date', 'month_key', 'normalize_time', 'sanitize_request_data']

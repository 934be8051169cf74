"""
Unified Error Handling System

Provides centralized, consistent error handling across the roster API.

Usage:
    from roster.error_handlers import handle_errors
    from roster.error_handlers.exceptions import ValidationException

    @employees_bp.route('', methods=['POST'])
    @handle_errors
    def create_employee():
        if not valid:
            raise ValidationException('Invalid data')
        return jsonify({'success': True})
"""
from .exceptions import (
    AppException,
    NotModifiedException,
    ValidationException,
    AuthenticationException,
    ResourceNotFoundException,
    ConflictException,
    StorageException
)
from .decorators import handle_errors
from .logging import setup_logging, register_error_handlers


__all__ = [
    # Exceptions
    'AppException',
    'NotModifiedException',
    'ValidationException',
    'AuthenticationException',
    'ResourceNotFoundException',
    'ConflictException',
    'StorageException',
    # Decorators
    'handle_errors',
    # App setup
    'setup_logging',
    'register_error_handlers',
]

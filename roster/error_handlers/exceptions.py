"""
Custom exception hierarchy for type-safe error handling

Provides a structured exception hierarchy that maps to HTTP status codes
and enables consistent error responses across the roster API.

Usage:
    from roster.error_handlers.exceptions import ValidationException

    def create_vacation(data):
        if not data.get('start_date'):
            raise ValidationException('start_date is required', field='start_date')

Exception Hierarchy:
    AppException (base)
    ├── NotModifiedException (304)
    ├── ValidationException (400)
    ├── AuthenticationException (401)
    ├── ResourceNotFoundException (404)
    ├── ConflictException (409)
    └── StorageException (500)
"""
from typing import Dict, Any, List, Optional


class AppException(Exception):
    """
    Base exception for all application errors

    All custom exceptions should inherit from this class to enable
    consistent error handling and response formatting.

    Attributes:
        status_code: HTTP status code for the error
        error_type: String identifier for the error type
        message: Human-readable error message
        details: Additional context about the error
    """
    status_code = 500
    error_type = 'ApplicationError'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception

        Args:
            message: Human-readable error message
            status_code: Optional HTTP status code override
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to JSON-serializable dictionary

        Returns:
            Dictionary suitable for JSON response
        """
        result = {
            'error': self.error_type,
            'message': self.message,
            'status_code': self.status_code
        }

        if self.details:
            result.update(self.details)

        return result

    def __str__(self) -> str:
        return f"{self.error_type}: {self.message}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}('{self.message}', status_code={self.status_code})>"


class NotModifiedException(AppException):
    """
    Conditional fetch matched the current fingerprint (HTTP 304)

    Rendered without a body; the etag is echoed back in the response header.
    """
    status_code = 304
    error_type = 'NotModified'

    def __init__(self, etag: str):
        super().__init__('Schedule not modified', details={'etag': etag})
        self.etag = etag


class ValidationException(AppException):
    """
    Validation errors (HTTP 400)

    Raised when request data fails validation checks. Field-level problems
    are collected in ``errors`` as ``{'field': ..., 'message': ...}`` items.

    Example:
        >>> raise ValidationException('Invalid time', field='start_time')
    """
    status_code = 400
    error_type = 'ValidationError'

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None
    ):
        errors = list(errors or [])
        if field and not errors:
            errors.append({'field': field, 'message': message})
        super().__init__(message, details={'errors': errors} if errors else None)
        self.errors = errors


class AuthenticationException(AppException):
    """
    Authentication errors (HTTP 401)

    Raised when a write path is called without a verified actor identity.
    """
    status_code = 401
    error_type = 'AuthenticationError'


class ResourceNotFoundException(AppException):
    """
    Resource not found (HTTP 404)

    Example:
        >>> raise ResourceNotFoundException(f'Employee {employee_id} not found')
    """
    status_code = 404
    error_type = 'NotFound'


class ConflictException(AppException):
    """
    Conflicting state (HTTP 409)

    Raised when a vacation period overlaps another period of the same employee.
    """
    status_code = 409
    error_type = 'ConflictError'


class StorageException(AppException):
    """
    Persistence failures (HTTP 500)

    The message shown to callers is always generic; the underlying error is
    logged by whoever raises this, and only the opaque ``error_id`` travels
    in the response details.
    """
    status_code = 500
    error_type = 'StorageError'

    def __init__(self, error_id: str, operation: Optional[str] = None):
        super().__init__('A storage error occurred', details={'error_id': error_id})
        self.error_id = error_id
        self.operation = operation

"""
Pytest configuration and fixtures for roster service tests.

This module provides shared fixtures for:
- Flask application with test configuration
- Database setup and teardown
- Service container and document store
- Factories for employees, holidays and vacations
- A static identity verifier and matching auth header
"""
import pytest
from datetime import date

from roster import create_app
from roster.extensions import db as _db
from roster.routes.auth import Actor, StaticTokenVerifier

TEST_TOKEN = 'test-token'
TEST_ACTOR = Actor(uid='admin-1', email='admin@example.com')


@pytest.fixture(scope='session')
def app():
    """
    Create application for the tests.

    Uses TestingConfig with in-memory SQLite database.
    Scope is 'session' to reuse the same app across all tests.
    """
    app = create_app('testing', identity_verifier=StaticTokenVerifier({TEST_TOKEN: TEST_ACTOR}))
    app.config.update({
        'TESTING': True,
        'RATELIMIT_ENABLED': False,  # Disable rate limiting for tests
    })

    return app


@pytest.fixture(scope='function')
def db(app):
    """
    Create database for the tests.

    Creates all tables before each test function and drops them after.
    The schedule cache lives as long as the app, so it is emptied too.
    """
    with app.app_context():
        _db.create_all()
        app.extensions['services'].cache.clear()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app, db):
    """
    Create a test client for the app.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture(scope='function')
def services(app, db):
    """Service container bound to the test app."""
    return app.extensions['services']


@pytest.fixture(scope='function')
def store(services):
    """Document store behind the services."""
    return services.store


@pytest.fixture
def auth_headers():
    """Authorization header accepted by the static verifier."""
    return {'Authorization': f'Bearer {TEST_TOKEN}'}


# =============================================================================
# Factories
# =============================================================================

ALL_WEEK = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']
WEEKDAYS = ALL_WEEK[:5]


@pytest.fixture
def employee_factory(services):
    """
    Factory for creating employees through the employee service.

    Usage:
        employee = employee_factory(name="Alice")
        employee = employee_factory(weekend_rotation=True, work_days=ALL_WEEK)
    """
    counter = [0]

    def _create_employee(**kwargs):
        counter[0] += 1
        defaults = {
            'name': f'Employee {counter[0]:02d}',
            'work_days': list(WEEKDAYS),
            'default_start_time': '09:00',
            'default_end_time': '17:00',
            'is_active': True,
            'weekend_rotation': False,
        }
        defaults.update(kwargs)
        return services.employees.create(defaults)

    return _create_employee


@pytest.fixture
def rotation_employee_factory(employee_factory):
    """Active weekend-rotation employees working every day of the week."""
    def _create(name, **kwargs):
        defaults = {'name': name, 'work_days': list(ALL_WEEK), 'weekend_rotation': True}
        defaults.update(kwargs)
        return employee_factory(**defaults)

    return _create


@pytest.fixture
def holiday_factory(services):
    """
    Factory for creating holidays.

    Usage:
        holiday = holiday_factory(name="Independence Day", date="07-04")
    """
    def _create_holiday(**kwargs):
        defaults = {'name': 'Test Holiday', 'date': '12-25'}
        defaults.update(kwargs)
        return services.holidays.create(defaults)

    return _create_holiday


@pytest.fixture
def vacation_factory(services, employee_factory):
    """
    Factory for creating vacations.

    Creates an employee if none is given.
    """
    def _create_vacation(employee=None, start=date(2025, 6, 1), end=date(2025, 6, 10), **kwargs):
        if employee is None:
            employee = employee_factory()
        data = {
            'employee_id': employee.id,
            'start_date': start.isoformat(),
            'end_date': end.isoformat(),
        }
        data.update(kwargs)
        return services.vacations.create(data)

    return _create_vacation

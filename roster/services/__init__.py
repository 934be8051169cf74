"""
Services package for roster business logic

build_services() wires every service around one document store and one
schedule cache. init_services() does the same for a Flask app and exposes
the result through app.extensions['services'].
"""
from dataclasses import dataclass

from flask import current_app

from .employee_service import EmployeeService
from .holiday_service import HolidayResolver, HolidayService
from .regeneration import RegenerationTracker
from .rotation_manager import WeekendRotationManager
from .schedule_cache import DEFAULT_TTL_SECONDS, ScheduleCache
from .schedule_generator import MonthlyScheduleGenerator
from .schedule_service import ScheduleService
from .vacation_service import VacationService


@dataclass
class RosterServices:
    store: object
    cache: ScheduleCache
    tracker: RegenerationTracker
    employees: EmployeeService
    holidays: HolidayService
    vacations: VacationService
    rotation: WeekendRotationManager
    generator: MonthlyScheduleGenerator
    schedule: ScheduleService


def build_services(store, cache_ttl: int = DEFAULT_TTL_SECONDS, auto_schedule: bool = True) -> RosterServices:
    """
    Wire all services around a document store

    Args:
        store: DocumentStore implementation
        cache_ttl: Seconds a cached month stays fresh
        auto_schedule: Add new employees to already generated days

    Returns:
        RosterServices container
    """
    cache = ScheduleCache(ttl_seconds=cache_ttl)
    tracker = RegenerationTracker(store, cache)
    holidays = HolidayService(store, on_change=cache.clear)
    employees = EmployeeService(store)
    vacations = VacationService(store, employees, tracker)
    rotation = WeekendRotationManager(store, employees, holidays, vacations, tracker)
    generator = MonthlyScheduleGenerator(store, employees, holidays, vacations, rotation, tracker)
    schedule = ScheduleService(store, cache, tracker, employees, holidays, vacations, rotation, generator)

    if auto_schedule:
        employees.auto_scheduler = schedule.auto_schedule_employee

    return RosterServices(
        store=store,
        cache=cache,
        tracker=tracker,
        employees=employees,
        holidays=holidays,
        vacations=vacations,
        rotation=rotation,
        generator=generator,
        schedule=schedule,
    )


def init_services(app, db, models) -> RosterServices:
    from roster.storage import SQLAlchemyDocumentStore

    store = SQLAlchemyDocumentStore(db, models['Document'])
    services = build_services(
        store,
        cache_ttl=app.config.get('SCHEDULE_CACHE_TTL', DEFAULT_TTL_SECONDS),
        auto_schedule=app.config.get('AUTO_SCHEDULE_ON_EMPLOYEE_CREATE', True),
    )
    app.extensions['services'] = services
    return services


def get_services() -> RosterServices:
    """
    Services bound to the current app

    Raises:
        RuntimeError: If called outside application context or before init_services()
    """
    if 'services' not in current_app.extensions:
        raise RuntimeError(
            "Services not initialized. "
            "Ensure init_services(app, db, models) is called during app setup."
        )
    return current_app.extensions['services']


__all__ = [
    'RosterServices',
    'build_services',
    'init_services',
    'get_services',
    'EmployeeService',
    'HolidayService',
    'HolidayResolver',
    'VacationService',
    'RegenerationTracker',
    'WeekendRotationManager',
    'MonthlyScheduleGenerator',
    'ScheduleService',
    'ScheduleCache',
]

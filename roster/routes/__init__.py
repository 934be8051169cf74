"""
Routes package for the roster service
Centralizes all route blueprints
"""
from .auth import (
    Actor,
    IdentityVerifier,
    RedisSessionVerifier,
    StaticTokenVerifier,
    init_identity,
    get_current_actor,
    require_authentication
)
from .employees import employees_bp
from .holidays import holidays_bp
from .vacations import vacations_bp
from .schedule import schedule_bp
from .health import health_bp

__all__ = [
    'employees_bp',
    'holidays_bp',
    'vacations_bp',
    'schedule_bp',
    'health_bp',
    'Actor',
    'IdentityVerifier',
    'RedisSessionVerifier',
    'StaticTokenVerifier',
    'init_identity',
    'get_current_actor',
    'require_authentication'
]

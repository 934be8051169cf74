"""
Flask application factory.

This module implements the application factory pattern for creating
Flask application instances with different configurations.
"""

from flask import Flask
import os

from .extensions import db, migrate, limiter
from .config import get_config


def create_app(config_name=None, identity_verifier=None):
    """
    Application factory function.

    Args:
        config_name: Configuration name (development, testing, production)
                    If None, determined from environment
        identity_verifier: Optional IdentityVerifier replacing the default
                    Redis session lookup

    Returns:
        Flask application instance
    """
    app = Flask(__name__)

    # Apply ProxyFix for correct IP and scheme handling behind reverse proxies
    from werkzeug.middleware.proxy_fix import ProxyFix
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Load configuration
    config_class = get_config(config_name, validate=(config_name == 'production'))
    app.config.from_object(config_class)

    # Update database URI to use absolute path
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///instance/'):
        os.makedirs(os.path.join(basedir, "instance"), exist_ok=True)
        db_name = app.config['SQLALCHEMY_DATABASE_URI'][len('sqlite:///instance/'):]
        app.config['SQLALCHEMY_DATABASE_URI'] = f'sqlite:///{os.path.join(basedir, "instance", db_name)}'

    # Configure logging and error handling
    from roster.error_handlers import setup_logging, register_error_handlers
    setup_logging(app)
    register_error_handlers(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Initialize database models
    from roster.models import init_models, model_registry
    models = init_models(db)
    model_registry.init_app(app)
    model_registry.register(models)

    # Services and identity
    from roster.services import init_services
    from roster.routes.auth import init_identity
    init_services(app, db, models)
    init_identity(app, identity_verifier)

    register_blueprints(app)

    app.logger.info(f"Roster service started ({config_class.__name__})")
    return app


def register_blueprints(app):
    """Register all Flask blueprints."""
    from roster.routes import (
        employees_bp,
        holidays_bp,
        vacations_bp,
        schedule_bp,
        health_bp
    )

    app.register_blueprint(employees_bp)
    app.register_blueprint(holidays_bp)
    app.register_blueprint(vacations_bp)
    app.register_blueprint(schedule_bp)
    app.register_blueprint(health_bp)

    # Probes must never be throttled
    limiter.exempt(health_bp)


def init_db(app):
    """Create all tables."""
    with app.app_context():
        db.create_all()

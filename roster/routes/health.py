"""
Health Check and Monitoring Endpoints
Provides endpoints for application health monitoring and readiness checks.
"""
from flask import Blueprint, jsonify, current_app
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import sys
import psutil
import os

from roster.error_handlers.exceptions import StorageException
from roster.extensions import db
from roster.services import get_services
from roster.storage import SCHEDULE_STATUS

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('/ping', methods=['GET'])
def ping():
    """
    Simple ping endpoint for basic connectivity checks.
    Returns: 200 OK with pong message
    """
    return jsonify({
        'status': 'ok',
        'message': 'pong',
        'timestamp': datetime.utcnow().isoformat()
    }), 200


@health_bp.route('/live', methods=['GET'])
def liveness():
    """
    Liveness probe - the process answers requests.
    """
    return jsonify({
        'status': 'alive',
        'timestamp': datetime.utcnow().isoformat()
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness():
    """
    Readiness probe - checks if application is ready to serve traffic.
    Validates the database connection and a document store read.

    Returns:
        200: Application is ready
        503: Application is not ready
    """
    checks = {
        'database': False,
        'storage': False,
    }
    errors = []

    try:
        db.session.execute(text('SELECT 1'))
        checks['database'] = True
    except SQLAlchemyError as e:
        db.session.rollback()
        errors.append(f"Database: {e.__class__.__name__}")

    try:
        get_services().store.get(SCHEDULE_STATUS, 'health-probe')
        checks['storage'] = True
    except StorageException as e:
        errors.append(f"Storage: error_id {e.error_id}")

    all_checks_passed = all(checks.values())
    status_code = 200 if all_checks_passed else 503

    response = {
        'status': 'ready' if all_checks_passed else 'not_ready',
        'checks': checks,
        'timestamp': datetime.utcnow().isoformat()
    }

    if errors:
        current_app.logger.warning(f"Readiness check failed: {errors}")
        response['errors'] = errors

    return jsonify(response), status_code


@health_bp.route('/status', methods=['GET'])
def status():
    """
    Application status with process resource usage.

    Returns:
        200: Status information
    """
    process = psutil.Process()
    memory_info = process.memory_info()
    services = get_services()

    return jsonify({
        'status': 'operational',
        'timestamp': datetime.utcnow().isoformat(),
        'application': {
            'name': 'roster',
            'debug': current_app.debug,
        },
        'system': {
            'python_version': sys.version,
            'platform': sys.platform,
            'process_id': os.getpid(),
        },
        'resources': {
            'memory': {
                'used_mb': round(memory_info.rss / 1024 / 1024, 2),
                'percent': round(process.memory_percent(), 2),
            },
        },
        'schedule_cache': {
            'entries': len(services.cache),
            'ttl_seconds': services.cache.ttl_seconds,
        },
        'database': {
            'type': 'sqlite' if 'sqlite' in current_app.config.get('SQLALCHEMY_DATABASE_URI', '') else 'postgresql',
        }
    }), 200

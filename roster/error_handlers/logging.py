"""
Error handling and logging utilities for the roster service
Provides centralized logging setup and JSON error responses
"""
import logging
import traceback
from datetime import datetime
from flask import jsonify, request
from werkzeug.exceptions import HTTPException
import os

from .exceptions import AppException, NotModifiedException

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(app):
    """
    Configure application logging

    The app logger is named after the package, so every module logger
    under ``roster.*`` propagates into these handlers. LOG_FILE may be empty
    to log to the console only.
    """
    log_level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    log_file = app.config.get('LOG_FILE')

    formatter = logging.Formatter(LOG_FORMAT)

    # Drop handlers from a previous setup of the same logger (app factory called twice)
    for handler in list(app.logger.handlers):
        if getattr(handler, '_roster_handler', False):
            app.logger.removeHandler(handler)
            handler.close()

    handlers = []
    if log_file:
        # Make log file path absolute if it's not
        if not os.path.isabs(log_file):
            basedir = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
            log_file = os.path.join(basedir, log_file)
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler._roster_handler = True
        app.logger.addHandler(handler)

    app.logger.setLevel(log_level)

    # Configure werkzeug logger (Flask's request logger)
    logging.getLogger('werkzeug').setLevel(log_level)

    return app.logger


def _error_response(error_type, message, status_code, **extra):
    payload = {'error': error_type, 'message': message, 'status_code': status_code}
    payload.update(extra)
    return jsonify(payload), status_code


def register_error_handlers(app):
    """Register global error handlers for the Flask app"""

    @app.errorhandler(AppException)
    def app_exception(error):
        """Application exceptions raised outside a @handle_errors view"""
        if isinstance(error, NotModifiedException):
            response = app.response_class(status=304)
            response.headers['ETag'] = error.etag
            return response
        app.logger.warning(f"{error.error_type} on {request.method} {request.path}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 Bad Request errors"""
        app.logger.warning(f"Bad request from {request.remote_addr}: {request.url}")
        return _error_response('Bad Request', 'The request could not be understood by the server', 400)

    @app.errorhandler(401)
    def unauthorized_error(error):
        """Handle 401 Unauthorized errors"""
        app.logger.warning(f"Unauthorized access attempt from {request.remote_addr}: {request.url}")
        return _error_response('Unauthorized', 'Authentication required', 401)

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 Forbidden errors"""
        app.logger.warning(f"Forbidden access attempt from {request.remote_addr}: {request.url}")
        return _error_response('Forbidden', 'Access denied', 403)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 Not Found errors"""
        app.logger.info(f"404 Not Found: {request.url} from {request.remote_addr}")
        return _error_response('Not Found', 'The requested resource was not found', 404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 Method Not Allowed errors"""
        app.logger.warning(f"Method not allowed: {request.method} {request.url} from {request.remote_addr}")
        return _error_response(
            'Method Not Allowed', f'The {request.method} method is not allowed for this endpoint', 405
        )

    @app.errorhandler(429)
    def rate_limited_error(error):
        """Handle 429 Too Many Requests errors"""
        app.logger.warning(f"Rate limit hit by {request.remote_addr}: {request.url}")
        return _error_response('Too Many Requests', str(error.description), 429)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error"""
        from roster.utils.validators import sanitize_request_data

        error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
        app.logger.error(f"Internal Server Error [{error_id}]: {str(error)}")
        app.logger.error(f"Traceback [{error_id}]: {traceback.format_exc()}")

        # Log request details for debugging (SANITIZED to prevent credential leakage)
        app.logger.error(f"Request details [{error_id}]: {request.method} {request.url}")
        request_data = sanitize_request_data(request.get_data(as_text=True)[:1000])
        app.logger.error(f"Request data [{error_id}]: {request_data}")

        return _error_response('Internal Server Error', 'An unexpected error occurred', 500, error_id=error_id)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle any unexpected errors"""
        from roster.utils.validators import sanitize_request_data

        if isinstance(error, HTTPException):
            return _error_response(error.name, error.description, error.code)

        error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
        app.logger.critical(f"Unexpected error [{error_id}]: {str(error)}")
        app.logger.critical(f"Traceback [{error_id}]: {traceback.format_exc()}")

        # Log sanitized request data for security
        request_data = sanitize_request_data(request.get_data(as_text=True)[:1000])
        app.logger.critical(f"Request data [{error_id}]: {request_data}")

        return _error_response('Unexpected Error', 'An unexpected error occurred', 500, error_id=error_id)

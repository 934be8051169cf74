"""
Configuration management for the roster service
Handles environment-based settings

Settings are read with python-decouple from the environment or a .env file.
Credentials are validated lazily so development and testing run without them.
"""
import secrets
from decouple import config, UndefinedValueError
from typing import Optional


class Config:
    """Base configuration class"""
    # Flask settings
    # Development: Generate random key on startup (non-persistent OK for dev)
    SECRET_KEY = config('SECRET_KEY', default=secrets.token_hex(32))
    SQLALCHEMY_DATABASE_URI = config('DATABASE_URL', default='sqlite:///instance/roster.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging settings
    LOG_LEVEL = config('LOG_LEVEL', default='INFO')
    LOG_FILE = config('LOG_FILE', default='logs/roster.log')

    # Schedule settings
    SCHEDULE_CACHE_TTL = config('SCHEDULE_CACHE_TTL', default=60, cast=int)  # seconds
    AUTO_SCHEDULE_ON_EMPLOYEE_CREATE = config('AUTO_SCHEDULE_ON_EMPLOYEE_CREATE', default=True, cast=bool)

    # Session store used to resolve bearer tokens
    REDIS_URL = config('REDIS_URL', default='redis://localhost:6379/0')
    REDIS_PASSWORD = config('REDIS_PASSWORD', default=None)
    SESSION_KEY_PREFIX = config('SESSION_KEY_PREFIX', default='session:')

    # Rate Limiting (read by Flask-Limiter)
    RATELIMIT_ENABLED = config('RATELIMIT_ENABLED', default=True, cast=bool)
    RATELIMIT_DEFAULT = config('RATELIMIT_DEFAULT', default='300 per hour')
    RATELIMIT_STORAGE_URI = config('RATELIMIT_STORAGE_URI', default='memory://')

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration - can be called explicitly or on-demand

        Raises:
            ValueError: If required configuration is missing
        """
        pass  # Base config has no required validation


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False
    LOG_FILE = None
    AUTO_SCHEDULE_ON_EMPLOYEE_CREATE = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Will raise on startup if SECRET_KEY is not set - see validate()
    SECRET_KEY = config('SECRET_KEY', default='change-this-to-a-random-secret-key-in-production')

    # Database Connection Pool (for production databases)
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': config('DB_POOL_RECYCLE', default=3600, cast=int),
        'pool_pre_ping': True,
    }

    RATELIMIT_STORAGE_URI = config('RATELIMIT_STORAGE_URI', default=Config.REDIS_URL)

    # Logging
    LOG_LEVEL = config('LOG_LEVEL', default='WARNING')

    @classmethod
    def validate(cls) -> None:
        """
        Production mode: validate all required settings

        Raises:
            ValueError: If any required configuration is missing
        """
        try:
            secret_key = config('SECRET_KEY')
        except UndefinedValueError:
            raise ValueError(
                "SECRET_KEY environment variable must be set in production. "
                "Generate a secure key with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        if len(secret_key) < 32:
            raise ValueError(
                f"SECRET_KEY must be at least 32 characters in production (current: {len(secret_key)}). "
                "Generate a secure key with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )


# Configuration mapping
config_mapping = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None, validate: bool = False) -> type:
    """
    Get configuration class based on environment.

    Args:
        config_name: Environment name ('development', 'testing', 'production')
        validate: Whether to validate configuration immediately (default: False)

    Returns:
        Config class for the specified environment

    Raises:
        ValueError: If validation is enabled and required variables are missing

    Example:
        >>> config = get_config('production', validate=True)
    """
    if config_name is None:
        config_name = config('FLASK_ENV', default='development')

    config_class = config_mapping.get(config_name, DevelopmentConfig)

    if validate:
        config_class.validate()

    return config_class

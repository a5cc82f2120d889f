"""
Configuration Module for the Property Rentals Application

This module defines configuration classes for different environments:
- DevelopmentConfig: Local development with SQLite
- ProductionConfig: Production deployment with PostgreSQL
- TestingConfig: Automated testing configuration
"""

import os
import sys
from pathlib import Path
from datetime import timedelta


class Config:
    """Base configuration with common settings"""

    # Secret key for session management and CSRF protection.
    # DO NOT provide an insecure default here.
    # - In development, the app factory generates an ephemeral key.
    # - In production, the app factory enforces presence.
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Database configuration
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Make database connections more resilient in production (stale connections,
    # temporary network blips). Safe defaults for all environments.
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # Credential accounts
    PASSWORD_MIN_LENGTH = int(os.environ.get('PASSWORD_MIN_LENGTH', 8))

    # Rate limiting (Flask-Limiter)
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    REGISTRATION_RATE_LIMIT = os.environ.get('REGISTRATION_RATE_LIMIT', '10 per minute')

    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=720)
    SESSION_REFRESH_EACH_REQUEST = True

    # Remember me cookie duration
    REMEMBER_COOKIE_DURATION = timedelta(days=30)
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_HTTPONLY = True

    # Security headers
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    SITE_NAME = 'Property Rentals'

    # Level for the package's module loggers
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    TESTING = False

    # SQLite for development
    # IMPORTANT (Windows): SQLAlchemy sqlite URLs must use forward slashes.
    _project_root = Path(__file__).resolve().parent.parent
    _default_db_path = (_project_root / 'property_rentals.db').resolve()

    _env_db_url = os.environ.get('DATABASE_URL')
    if _env_db_url and _env_db_url.strip().startswith('sqlite:'):
        _env_db_url = _env_db_url.replace('\\', '/')

    SQLALCHEMY_DATABASE_URI = _env_db_url or f"sqlite:///{_default_db_path.as_posix()}"

    # Disable secure cookies for local development
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False

    SQLALCHEMY_ECHO = False


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    TESTING = False

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        """
        Production database URI, read when the config object is loaded.

        - Managed hosts provide DATABASE_URL with a postgres:// prefix,
          SQLAlchemy requires postgresql://
        - SSL is required for managed PostgreSQL
        """
        db_uri = os.environ.get('DATABASE_URL')

        if not db_uri:
            print('FATAL: DATABASE_URL not set in environment', file=sys.stderr)
            return None

        if db_uri.startswith('postgres://'):
            db_uri = 'postgresql://' + db_uri[len('postgres://'):]

        if db_uri.startswith('postgresql://') and 'sslmode=' not in db_uri:
            separator = '&' if '?' in db_uri else '?'
            db_uri = f"{db_uri}{separator}sslmode=require"

        return db_uri

    SQLALCHEMY_ECHO = False

    # Production security
    SESSION_COOKIE_SECURE = True
    REMEMBER_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True

    # In-memory SQLite for fast testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    # Disable CSRF for testing
    WTF_CSRF_ENABLED = False

    RATELIMIT_ENABLED = False

    # Disable secure cookies for testing
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

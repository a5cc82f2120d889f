"""
Flask Application Factory

This module implements the application factory pattern for creating
Flask application instances with different configurations.
"""

import logging
import os
from collections.abc import Mapping

from flask import Flask, jsonify
from app.config import config
from app.extensions import db, migrate, login_manager, limiter


def _configure_logging(app) -> None:
    """Route the package's module loggers through the configured level."""
    level = app.config.get('LOG_LEVEL', 'INFO')
    if not logging.getLogger().handlers:
        logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('app').setLevel(level)


def create_app(config_name='default'):
    """
    Application factory function

    Args:
        config_name: Configuration name ('development', 'production', 'testing')
            or a mapping of overrides applied on top of the testing config.

    Returns:
        Flask: Configured Flask application instance
    """

    overrides = {}
    if isinstance(config_name, Mapping):
        overrides = dict(config_name)
        config_name = 'testing'

    # Normalize config name
    config_name = (config_name or 'default').lower()

    # Create Flask app instance
    app = Flask(__name__)

    # Load configuration
    # IMPORTANT: Instantiate the config object so @property values (like
    # ProductionConfig.SQLALCHEMY_DATABASE_URI) are evaluated correctly.
    cfg = config.get(config_name) or config['default']
    cfg_obj = cfg() if isinstance(cfg, type) else cfg
    app.config.from_object(cfg_obj)
    app.config.update(overrides)

    if config_name == 'production':
        if not app.config.get('SECRET_KEY'):
            app.logger.error('Production requires SECRET_KEY to be set via environment variable')
            raise RuntimeError('Missing SECRET_KEY in production')

        db_uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if not db_uri:
            app.logger.error('Production requires DATABASE_URL (SQLALCHEMY_DATABASE_URI) to be set')
            raise RuntimeError('Missing DATABASE_URL in production')
        if db_uri.strip().startswith('sqlite:'):
            app.logger.error('Production requires PostgreSQL (DATABASE_URL must not be sqlite)')
            raise RuntimeError('SQLite not allowed in production')
    elif not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = os.urandom(32)
        app.logger.warning('SECRET_KEY was missing; generated an ephemeral key for this process.')

    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    register_blueprints(app)
    register_error_handlers(app)
    register_shell_context(app)
    register_cli_commands(app)

    @app.teardown_appcontext
    def _cleanup_appcontext(exc):
        """Ensure scoped sessions are removed when the app context ends."""
        try:
            db.session.remove()
        except Exception as remove_exc:
            app.logger.error('Session remove during appcontext teardown failed: %s', remove_exc, exc_info=True)
        return None

    return app


def register_blueprints(app):
    """Register Flask blueprints"""

    from app.routes.auth import auth_bp
    from app.routes.health import health_bp
    from app.routes.messages import messages_bp
    from app.routes.properties import properties_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(properties_bp, url_prefix='/properties')
    app.register_blueprint(messages_bp, url_prefix='/messages')
    app.register_blueprint(health_bp)  # No prefix - accessible at /health


def _error_payload(message):
    return {'status': 'error', 'message': message}


def register_error_handlers(app):
    """Register JSON error handlers for common HTTP errors"""

    @login_manager.unauthorized_handler
    def unauthorized():
        """Handle requests that need a signed-in user"""
        return jsonify(_error_payload('Please sign in to continue.')), 401

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors"""
        return jsonify(_error_payload('Not found.')), 404

    @app.errorhandler(429)
    def rate_limited_error(error):
        """Handle rate limit errors"""
        return jsonify(_error_payload('Too many requests. Please try again later.')), 429

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors"""
        app.logger.exception('Unhandled exception (500): %s', error)
        db.session.rollback()
        return jsonify(_error_payload('Internal server error. Please try again.')), 500


def register_shell_context(app):
    """Register shell context for Flask CLI"""

    @app.shell_context_processor
    def make_shell_context():
        """Make database models available in Flask shell"""
        from app.models import User, Property, Message
        return {
            'db': db,
            'User': User,
            'Property': Property,
            'Message': Message,
        }


def register_cli_commands(app):
    """Register custom Flask CLI commands."""
    from app.cli import init_db_command, create_user_command

    app.cli.add_command(init_db_command)
    app.cli.add_command(create_user_command)

"""
WSGI Entry Point for the Property Rentals Application

This module serves as the entry point for WSGI servers (like Gunicorn)
to run the Flask application in production environments.
"""

import os
import sys

from app import create_app

# Determine configuration name.
# - Local/dev defaults to development.
# - Production platforms must explicitly set FLASK_CONFIG=production.
config_name = (os.getenv('FLASK_CONFIG') or os.getenv('FLASK_ENV') or 'development').lower()

if config_name == 'production':
    required_vars = {
        'SECRET_KEY': 'Required for session encryption',
        'DATABASE_URL': 'Required for PostgreSQL connection',
    }

    missing_vars = [
        f"  {var_name}: {description}"
        for var_name, description in required_vars.items()
        if not os.getenv(var_name)
    ]

    if missing_vars:
        print('Missing required environment variables:\n' + '\n'.join(missing_vars), file=sys.stderr)
        raise RuntimeError('Missing required environment variables in production')

app = create_app(config_name)

"""
Health check endpoints for monitoring application and dependencies.

These endpoints are used by:
- The hosting platform to determine service health
- Load balancers to route traffic only to healthy instances
"""

from flask import Blueprint, jsonify, current_app
from app.extensions import db
from sqlalchemy import inspect, text
from datetime import datetime

REQUIRED_TABLES = {'users', 'properties', 'messages', 'user_favorites'}

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    """
    Lightweight health check for load balancer probes.

    Does NOT check database connectivity to keep response time low.
    """
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': 'property-rentals',
    }), 200


@health_bp.route('/health/ready')
def readiness_check():
    """
    Readiness check including database connectivity.

    Returns 200 OK only if the database is reachable and the
    required tables exist.
    """
    checks = {
        'application': 'healthy',
        'database': 'unknown',
        'timestamp': datetime.utcnow().isoformat(),
    }

    status_code = 200

    try:
        db.session.execute(text('SELECT 1'))
        db.session.commit()
        checks['database'] = 'healthy'
    except Exception as exc:
        checks['database'] = 'unhealthy'
        status_code = 503
        current_app.logger.error('Database health check failed: %s', exc, exc_info=True)
        db.session.rollback()

    if checks['database'] == 'healthy':
        missing = REQUIRED_TABLES - set(inspect(db.engine).get_table_names())
        if missing:
            checks['schema'] = 'incomplete'
            checks['missing_tables'] = sorted(missing)
            status_code = 503
        else:
            checks['schema'] = 'complete'

    checks['overall'] = 'healthy' if status_code == 200 else 'unhealthy'

    return jsonify(checks), status_code

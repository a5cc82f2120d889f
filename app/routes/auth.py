"""
Authentication Blueprint - Credential Account Routes

This blueprint handles:
- Credential registration (new account or password linked to a Google account)
- Logout

Sign-in itself happens client-side with the credentials returned by
registration.
"""

from flask import Blueprint, current_app, request
from flask_login import login_required, logout_user

from app.domain.action_state import to_action_state
from app.domain.enums import ActionStatus
from app.extensions import limiter
from app.services.registration import create_credentials_user
from app.utils.responses import action_response

# Create Blueprint
auth_bp = Blueprint('auth', __name__)


def _registration_limit():
    return current_app.config.get('REGISTRATION_RATE_LIMIT', '10 per minute')


@auth_bp.route('/register', methods=['POST'])
@limiter.limit(_registration_limit)
def register():
    """Create a credentials account from the submitted form."""
    state = create_credentials_user(request.form)
    return action_response(state, success_code=201)


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """User logout route"""

    logout_user()
    return action_response(to_action_state({
        'status': ActionStatus.SUCCESS,
        'message': 'You have been logged out successfully.',
    }))

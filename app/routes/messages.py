"""
Messages Blueprint - Inquiries between renters and owners
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from app.services.message_actions import create_message, delete_message, get_unread_message_count, toggle_message_read
from app.utils.responses import action_response

messages_bp = Blueprint('messages', __name__)


@messages_bp.route('', methods=['POST'])
@login_required
def send_message():
    return action_response(create_message(request.form, current_user), success_code=201)


@messages_bp.route('/<int:message_id>/read', methods=['POST'])
@login_required
def mark_message(message_id):
    return action_response(toggle_message_read(message_id, current_user))


@messages_bp.route('/<int:message_id>/delete', methods=['POST'])
@login_required
def remove_message(message_id):
    return action_response(delete_message(message_id, current_user))


@messages_bp.route('/unread-count')
@login_required
def unread_count():
    return jsonify({'unread_count': get_unread_message_count(current_user)})

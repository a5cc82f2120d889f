"""Messaging mutations between renters and property owners."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from app.domain.action_state import to_action_state
from app.domain.enums import ActionStatus
from app.domain.error_tree import build_form_error_map, issues_from_form_errors
from app.extensions import db
from app.forms import MessageForm
from app.models import Message, Property
from app.services.property_actions import as_formdata

logger = logging.getLogger(__name__)


def _error(message: str, **extra) -> dict:
    return to_action_state({'status': ActionStatus.ERROR, 'message': message, **extra})


def _received_message(message_id, user):
    """Return ``(message, None)`` or ``(None, error_state)`` for the recipient."""
    try:
        message = db.session.get(Message, message_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error finding message %s', message_id)
        return None, _error('Error finding message.')

    if message is None:
        return None, _error('Message not found.')
    if message.recipient_id != user.id:
        return None, _error('Not authorized to change message.')
    return message, None


def create_message(form_data, sender) -> dict:
    formdata = as_formdata(form_data)
    form = MessageForm(formdata=formdata)
    if not form.validate():
        issues = issues_from_form_errors(form.errors)
        return to_action_state({
            'form_data': formdata,
            'form_error_map': build_form_error_map(issues),
        })

    prop = db.session.get(Property, form.property_id.data)
    if prop is None:
        return _error('Property not found.', form_data=formdata)
    if prop.owner_id == sender.id:
        return _error('You cannot send a message to yourself.', form_data=formdata)

    message = Message(
        sender_id=sender.id,
        recipient_id=prop.owner_id,
        property_id=prop.id,
        name=form.name.data.strip(),
        email=form.email.data.strip(),
        phone=(form.phone.data or '').strip() or None,
        body=form.body.data.strip(),
    )
    try:
        db.session.add(message)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error sending a message about property %s', prop.id)
        return _error('Failed to send message. Please try again.', form_data=formdata)

    return to_action_state({'status': ActionStatus.SUCCESS, 'message': 'Message sent.'})


def toggle_message_read(message_id, user) -> dict:
    message, state = _received_message(message_id, user)
    if message is None:
        return state

    message.read = not message.read
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error changing message %s', message_id)
        return _error('Failed to change message. Please try again.')

    return to_action_state({
        'status': ActionStatus.SUCCESS,
        'message': f"Message marked {'read' if message.read else 'new'}.",
        'is_read': message.read,
    })


def delete_message(message_id, user) -> dict:
    message, state = _received_message(message_id, user)
    if message is None:
        return state

    try:
        db.session.delete(message)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error deleting message %s', message_id)
        return _error('Failed to delete message. Please try again.')

    return to_action_state({'status': ActionStatus.SUCCESS, 'message': 'Message deleted.'})


def get_unread_message_count(user) -> int:
    return db.session.execute(
        db.select(db.func.count(Message.id)).where(
            Message.recipient_id == user.id,
            Message.read.is_(False),
        )
    ).scalar_one()

"""Listing mutations: create, update, delete and bookmark properties.

Every function returns a sanitized action state. Validation failures come
back as ``form_error_map`` plus the submitted ``form_data`` so the form can
be re-populated; database failures are logged and reported generically.
"""

from __future__ import annotations

import logging

from slugify import slugify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import MultiDict

from app.domain.action_state import to_action_state
from app.domain.enums import ActionStatus
from app.domain.error_tree import build_form_error_map, issues_from_form_errors
from app.extensions import db
from app.forms import PropertyForm
from app.models import Message, Property, user_favorites

logger = logging.getLogger(__name__)


def as_formdata(form_data) -> MultiDict:
    if isinstance(form_data, MultiDict):
        return form_data
    return MultiDict(form_data or {})


def _error(message: str, **extra) -> dict:
    return to_action_state({'status': ActionStatus.ERROR, 'message': message, **extra})


def _validate(formdata: MultiDict):
    form = PropertyForm(formdata=formdata)
    if form.validate():
        return form, None

    issues = issues_from_form_errors(form.errors)
    return None, to_action_state({
        'form_data': formdata,
        'form_error_map': build_form_error_map(issues),
    })


def _property_fields(form: PropertyForm) -> dict:
    location = form.location.form
    rates = form.rates.form
    seller = form.seller_info.form
    return {
        'name': form.name.data.strip(),
        'type': form.type.data,
        'description': (form.description.data or '').strip() or None,
        'street': location.street.data.strip(),
        'city': location.city.data.strip(),
        'state': location.state.data,
        'zipcode': location.zipcode.data,
        'beds': form.beds.data,
        'baths': form.baths.data,
        'square_feet': form.square_feet.data,
        'amenities': list(form.amenities.data),
        'rate_nightly': rates.nightly.data,
        'rate_weekly': rates.weekly.data,
        'rate_monthly': rates.monthly.data,
        'seller_name': seller.name.data.strip(),
        'seller_email': seller.email.data.strip(),
        'seller_phone': seller.phone.data.strip(),
    }


def _owned_property(property_id, user):
    """Return ``(property, None)`` or ``(None, error_state)``."""
    prop = db.session.get(Property, property_id)
    if prop is None:
        return None, _error('Property not found.')
    if prop.owner_id != user.id:
        return None, _error('Not authorized to change property.')
    return prop, None


def create_property(form_data, owner):
    """Validate and persist a new listing.

    Returns ``(state, property)``; ``property`` is ``None`` unless it was saved.
    """
    formdata = as_formdata(form_data)
    form, state = _validate(formdata)
    if form is None:
        return state, None

    prop = Property(owner_id=owner.id, **_property_fields(form))
    try:
        db.session.add(prop)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error adding a property for user %s', owner.id)
        return _error('Failed to add property. Please try again.', form_data=formdata), None

    logger.info('Property %s added by user %s', prop.id, owner.id)
    return to_action_state({'status': ActionStatus.SUCCESS, 'message': 'Property added.'}), prop


def update_property(property_id, form_data, user) -> dict:
    prop, state = _owned_property(property_id, user)
    if prop is None:
        return state

    formdata = as_formdata(form_data)
    form, state = _validate(formdata)
    if form is None:
        return state

    for key, value in _property_fields(form).items():
        setattr(prop, key, value)
    prop.slug = slugify(prop.name)

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error updating property %s', property_id)
        return _error('Failed to update property. Please try again.', form_data=formdata)

    return to_action_state({'status': ActionStatus.SUCCESS, 'message': 'Property updated.'})


def delete_property(property_id, user) -> dict:
    """Delete a listing, its messages and every bookmark pointing at it."""
    prop, state = _owned_property(property_id, user)
    if prop is None:
        return state

    try:
        db.session.execute(user_favorites.delete().where(user_favorites.c.property_id == prop.id))
        db.session.execute(db.delete(Message).where(Message.property_id == prop.id))
        db.session.delete(prop)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error deleting property %s', property_id)
        return _error('Failed to delete property. Please try again.')

    return to_action_state({'status': ActionStatus.SUCCESS, 'message': 'Property successfully deleted.'})


def toggle_favorite(property_id, user) -> dict:
    prop = db.session.get(Property, property_id)
    if prop is None:
        return _error('Property not found.')

    is_favorite = user.favorites.filter(Property.id == prop.id).first() is not None
    try:
        if is_favorite:
            user.favorites.remove(prop)
        else:
            user.favorites.append(prop)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error bookmarking property %s for user %s', property_id, user.id)
        return _error('Failed to update bookmark. Please try again.')

    return to_action_state({
        'status': ActionStatus.SUCCESS,
        'message': 'Bookmark removed.' if is_favorite else 'Bookmark added.',
        'is_favorite': not is_favorite,
    })

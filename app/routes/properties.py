"""
Properties Blueprint - Listing Mutation Routes

All mutating routes require a signed-in user and answer with the
sanitized action state as JSON.
"""

from flask import Blueprint, abort, jsonify, request, url_for
from flask_login import current_user, login_required

from app.extensions import db
from app.models import Property
from app.services.property_actions import create_property, delete_property, toggle_favorite, update_property
from app.utils.responses import action_response

properties_bp = Blueprint('properties', __name__)


@properties_bp.route('', methods=['POST'])
@login_required
def add_property():
    state, prop = create_property(request.form, current_user)
    if prop is None:
        return action_response(state)

    response, status_code = action_response(state, success_code=201)
    response.headers['Location'] = url_for('properties.property_detail', property_id=prop.id)
    return response, status_code


@properties_bp.route('/<int:property_id>')
def property_detail(property_id):
    prop = db.session.get(Property, property_id)
    if prop is None:
        abort(404)
    return jsonify(prop.to_dict())


@properties_bp.route('/<int:property_id>/edit', methods=['POST'])
@login_required
def edit_property(property_id):
    return action_response(update_property(property_id, request.form, current_user))


@properties_bp.route('/<int:property_id>/delete', methods=['POST'])
@login_required
def remove_property(property_id):
    return action_response(delete_property(property_id, current_user))


@properties_bp.route('/<int:property_id>/favorite', methods=['POST'])
@login_required
def favorite_property(property_id):
    return action_response(toggle_favorite(property_id, current_user))

"""JSON responses for action states."""

from flask import jsonify

from app.domain.enums import ActionStatus


def action_response(state: dict, success_code: int = 200):
    """Serialize a sanitized action state with a matching HTTP status.

    Error states and form validation failures map to 400.
    """
    if state.get('status') == ActionStatus.ERROR or state.get('form_error_map') is not None:
        return jsonify(state), 400
    return jsonify(state), success_code

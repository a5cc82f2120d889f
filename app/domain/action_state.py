"""Client-safe action state.

Every mutating action hands its outcome to the UI as an *action state*: a
plain dict restricted to the fields in ``ACTION_STATE_FIELDS``. The
sanitizer walks that fixed allow-list, never the keys of the value it was
given, so unrecognised keys are never copied.

Each field is checked on its own. A field with the wrong type is dropped
and logged while the rest of the state is kept; only a value that is not a
container at all (or that blows up while being read) collapses to ``{}``.
"""

from __future__ import annotations

import datetime
import enum
import logging
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from werkzeug.datastructures import MultiDict

from app.domain.enums import ActionStatus

logger = logging.getLogger(__name__)

# Submitted keys that must never be echoed back for form re-population.
UNECHOED_FORM_KEYS = frozenset({'password', 'password_confirm', 'csrf_token'})

# Fields that only make sense on a successful outcome.
SUCCESS_ONLY_FIELDS = ('password', 'user_id')

# Values that can never carry action state fields.
SCALAR_TYPES = (
    str, bytes, bytearray, numbers.Number,
    datetime.date, datetime.time, datetime.timedelta, enum.Enum,
)


@dataclass(frozen=True)
class FieldRule:
    name: str
    accepts: Callable[[Any], bool]
    clone: Callable[[Any], Any]
    expected: str


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_status(value: Any) -> bool:
    return isinstance(value, str) and value in ActionStatus.ALL


def _is_provider_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _same(value: Any) -> Any:
    return value


def clone_error_tree(tree: Mapping) -> dict:
    cloned = {}
    for key, value in tree.items():
        if isinstance(value, Mapping):
            cloned[key] = clone_error_tree(value)
        elif isinstance(value, (list, tuple)):
            cloned[key] = list(value)
        else:
            cloned[key] = value
    return cloned


def clone_form_data(form_data: Mapping) -> dict:
    """Copy submitted values, keeping every value of multi-valued keys."""
    if isinstance(form_data, MultiDict):
        items = [
            (key, values if len(values) > 1 else values[0])
            for key, values in form_data.lists()
            if values
        ]
    else:
        items = list(form_data.items())

    return {
        key: list(value) if isinstance(value, (list, tuple)) else value
        for key, value in items
        if key not in UNECHOED_FORM_KEYS
    }


ACTION_STATE_FIELDS: tuple[FieldRule, ...] = (
    FieldRule('status', _is_status, _same, 'a recognised status string'),
    FieldRule('message', _is_str, _same, 'a string'),
    FieldRule('user_id', _is_str, _same, 'a string'),
    FieldRule('email', _is_str, _same, 'a string'),
    FieldRule('password', _is_str, _same, 'a string'),
    FieldRule('is_account_linked', _is_bool, _same, 'a boolean'),
    FieldRule('can_sign_in_with', _is_provider_list, list, 'a list of provider names'),
    FieldRule('should_auto_login', _is_bool, _same, 'a boolean'),
    FieldRule('is_favorite', _is_bool, _same, 'a boolean'),
    FieldRule('is_read', _is_bool, _same, 'a boolean'),
    FieldRule('form_error_map', _is_mapping, clone_error_tree, 'a mapping'),
    FieldRule('form_data', _is_mapping, clone_form_data, 'a mapping'),
)


def _read(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def to_action_state(value: Any) -> dict:
    """Return a sanitized copy of ``value`` holding only recognised fields.

    Never raises. Lists and tuples are containers too, but they carry no
    recognised fields and therefore come back as ``{}`` without a warning.
    """

    if value is None:
        logger.warning('to_action_state: action state is None')
        return {}

    if isinstance(value, SCALAR_TYPES):
        logger.warning('to_action_state: action state is not an object (%s)', type(value).__name__)
        return {}

    try:
        result: dict = {}
        for rule in ACTION_STATE_FIELDS:
            raw = _read(value, rule.name)
            if raw is None:
                continue
            if not rule.accepts(raw):
                logger.warning('to_action_state: %s property is not %s', rule.name, rule.expected)
                continue
            result[rule.name] = rule.clone(raw)

        if result.get('status') == ActionStatus.ERROR:
            for name in SUCCESS_ONLY_FIELDS:
                if result.pop(name, None) is not None:
                    logger.warning('to_action_state: dropped %s from an error state', name)

        return result
    except Exception:
        logger.error('to_action_state: error processing action state', exc_info=True)
        return {}

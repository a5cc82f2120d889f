"""Form error trees built from validator diagnostics.

``build_form_error_map`` turns a flat list of validation issues into the
nested structure the UI reads field errors from::

    [Issue(('name',), 'Too short'), Issue(('rates', 'nightly'), 'Too low')]
    -> {'name': ['Too short'], 'rates': {'nightly': ['Too low']}}

Paths longer than two segments are not nested further; they are flattened
into a dotted key so the tree never gets deeper than two levels.

A defect in the batch itself (``None``, a non-sequence, or an exception while
iterating) aborts the whole batch and yields ``{}``; the client then falls
back to its generic message. A defect in a single issue only skips that issue.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)

PathSegment = Union[str, int]
# field -> [messages] or group -> {field -> [messages]}
ErrorTree = dict


@dataclass(frozen=True)
class ValidationIssue:
    path: tuple[PathSegment, ...]
    message: str


def build_form_error_map(issues: Any) -> ErrorTree:
    """Build an error tree from validator issues. Never raises."""

    if issues is None:
        logger.warning('build_form_error_map: issues parameter is None')
        return {}

    if isinstance(issues, (str, bytes, bytearray)) or not isinstance(issues, Sequence):
        logger.warning('build_form_error_map: issues parameter is not a list')
        return {}

    tree: ErrorTree = {}
    try:
        for issue in issues:
            _add_issue(tree, issue)
    except Exception:
        logger.error('build_form_error_map: error processing issues', exc_info=True)
        return {}

    return tree


def issues_from_form_errors(errors: Mapping, prefix: tuple = ()) -> list[ValidationIssue]:
    """Flatten a WTForms ``form.errors`` mapping into validation issues.

    ``FormField`` errors arrive as nested mappings, form-level errors under
    the ``None`` key (attached to the enclosing path) and ``FieldList``
    errors as one entry per list item.
    """

    issues: list[ValidationIssue] = []
    for key, value in errors.items():
        path = prefix if key is None else prefix + (key,)
        if isinstance(value, Mapping):
            issues.extend(issues_from_form_errors(value, path))
            continue
        for index, entry in enumerate(value):
            if isinstance(entry, str):
                issues.append(ValidationIssue(path=path, message=entry))
            elif isinstance(entry, Mapping):
                issues.extend(issues_from_form_errors(entry, path + (index,)))
            elif isinstance(entry, (list, tuple)):
                issues.extend(ValidationIssue(path=path + (index,), message=m) for m in entry)
    return issues


def _read(issue: Any, name: str) -> Any:
    if isinstance(issue, Mapping):
        return issue.get(name)
    return getattr(issue, name, None)


def _segment_key(segment: Any) -> str:
    if segment is None:
        return ''
    if isinstance(segment, str):
        return segment
    return str(segment)


def _add_issue(tree: ErrorTree, issue: Any) -> None:
    if not isinstance(issue, (ValidationIssue, Mapping)):
        logger.warning('build_form_error_map: skipping invalid issue object (%s)', type(issue).__name__)
        return

    try:
        path = _read(issue, 'path')
        message = _read(issue, 'message')
    except Exception:
        logger.warning('build_form_error_map: skipping unreadable issue', exc_info=True)
        return

    if not isinstance(path, (list, tuple)):
        logger.warning('build_form_error_map: issue missing valid path list')
        return

    if not isinstance(message, str) or not message:
        logger.warning('build_form_error_map: issue missing valid message string')
        return

    try:
        keys = [_segment_key(segment) for segment in path]
        flat_key = '.'.join(keys)
    except Exception:
        logger.warning('build_form_error_map: error processing issue path', exc_info=True)
        return

    if not keys:
        logger.warning('build_form_error_map: issue path is empty')
        return

    if len(keys) == 1:
        _append(tree, keys[0], message)
    elif len(keys) == 2:
        _append_grouped(tree, keys[0], keys[1], message)
    else:
        _append(tree, flat_key, message)


def _append(tree: ErrorTree, field: str, message: str) -> None:
    if not field:
        logger.warning('build_form_error_map: issue field name is empty')
        return

    messages = tree.get(field)
    if messages is None:
        tree[field] = [message]
    elif isinstance(messages, list):
        messages.append(message)
    else:
        logger.warning('build_form_error_map: %r already holds grouped errors; skipping issue', field)


def _append_grouped(tree: ErrorTree, group: str, field: str, message: str) -> None:
    if not group:
        logger.warning('build_form_error_map: issue group name is empty')
        return

    fields = tree.get(group)
    if fields is None:
        fields = tree[group] = {}
    elif not isinstance(fields, dict):
        logger.warning('build_form_error_map: %r already holds field errors; skipping issue', group)
        return

    if field:
        fields.setdefault(field, []).append(message)

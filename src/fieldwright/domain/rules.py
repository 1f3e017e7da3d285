"""Generic validation rules shared by every field type.

Rules are evaluated in a fixed order and short-circuit on the first
failure: ``required``, ``min_length``, ``max_length``, ``pattern``,
``callback``. Length and pattern rules only look at string values; the
callback sees whatever canonical value the field type produced.

``is_empty`` is the shared definition of "no value provided": ``""``,
``None``, empty collections, and whitespace-only strings. ``0`` and
``False`` are values, not absence.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError

logger = logging.getLogger(__name__)


def is_empty(value: Any) -> bool:
    """Return True when *value* counts as "nothing provided"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def fail(code: str, message: str, field: FieldDefinition) -> FieldError:
    """Build a FieldError bound to *field*."""
    return FieldError(code=code, message=message, field=field.name)


def required_error(field: FieldDefinition, message: str | None = None) -> FieldError:
    """The ``required`` failure with the stock message."""
    return fail(
        ErrorCode.REQUIRED,
        message or f"{field.display_label} is required.",
        field,
    )


def apply_validation_rules(value: Any, field: FieldDefinition) -> FieldError | None:
    """Run the generic rule set for *field* against *value*.

    Returns ``None`` when every rule passes, otherwise the first failure.
    Empty values only trip ``required``; optional empty values pass.
    """
    if is_empty(value):
        return required_error(field) if field.required else None

    rules = field.validation
    label = field.display_label

    if rules.min_length is not None and isinstance(value, str):
        if len(value) < rules.min_length:
            return fail(
                ErrorCode.MIN_LENGTH,
                f"{label} must be at least {rules.min_length} characters.",
                field,
            )

    if rules.max_length is not None and isinstance(value, str):
        if len(value) > rules.max_length:
            return fail(
                ErrorCode.MAX_LENGTH,
                f"{label} must not exceed {rules.max_length} characters.",
                field,
            )

    if rules.pattern is not None and isinstance(value, str):
        if not _matches(rules.pattern, value, field):
            return fail(
                ErrorCode.PATTERN,
                rules.pattern_message or f"{label} format is invalid.",
                field,
            )

    if rules.callback is not None:
        outcome = rules.callback(value, field)
        if isinstance(outcome, FieldError):
            return outcome
        if outcome is False:
            return fail(ErrorCode.CALLBACK_FAILED, f"{label} is invalid.", field)

    return None


def _matches(pattern: str, value: str, field: FieldDefinition) -> bool:
    """Full-match *value* against *pattern*; a broken pattern never matches."""
    try:
        return re.fullmatch(pattern, value) is not None
    except re.error:
        logger.warning("Invalid validation pattern %r on field %s", pattern, field.name)
        return False

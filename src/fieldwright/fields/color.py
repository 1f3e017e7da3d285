"""Hex color field type."""

from __future__ import annotations

import re
from typing import Any

from markupsafe import escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail
from fieldwright.fields.base import AbstractFieldType

HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
DEFAULT_COLOR = "#000000"


def expand_hex(color: str) -> str:
    """``#f53`` -> ``#ff5533``; six-digit colors are returned unchanged."""
    if len(color) == 4 and HEX_COLOR_RE.match(color):
        return "#" + "".join(channel * 2 for channel in color[1:])
    return color


class ColorField(AbstractFieldType):
    """``#rgb`` or ``#rrggbb``; anything else sanitizes to ``""``."""

    features = frozenset()

    @property
    def type(self) -> str:
        return "color"

    def sanitize(self, value: Any) -> str:
        if not isinstance(value, str):
            return ""
        color = value.strip()
        return color if HEX_COLOR_RE.match(color) else ""

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if not isinstance(value, str) or not HEX_COLOR_RE.match(value):
            return fail(
                ErrorCode.INVALID_COLOR,
                f"{field.display_label} must be a valid hex color (e.g., #FF5733 or #F53).",
                field,
            )
        return None

    def default_value(self) -> Any:
        return DEFAULT_COLOR

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if not isinstance(value, str) or not value:
            return ""
        return escape(value)

    def from_storage(self, stored: Any) -> Any:
        if not isinstance(stored, str) or not stored:
            return ""
        return self.sanitize(stored) or self.default_value()

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        if isinstance(value, str) and value:
            shown = expand_hex(value)
        else:
            shown = field.default if isinstance(field.default, str) else DEFAULT_COLOR
        return {"type": "color", "value": shown}

"""Pluggy hook specifications for fieldwright extensions.

All hooks run at setup time. Plugins contribute field types, field
definitions, validator strategies, and display formatter strategies;
the manager collects each plugin's contribution separately so one
broken plugin cannot hide the others.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from fieldwright.fields.base import FieldType
    from fieldwright.fields.context import FieldContext

hookspec = pluggy.HookspecMarker("fieldwright")
hookimpl = pluggy.HookimplMarker("fieldwright")


class FieldwrightHookSpec:
    """Hook specifications for the fieldwright plugin system."""

    @hookspec
    def register_field_types(self, context: FieldContext) -> list[FieldType] | None:
        """Return field type instances built against *context*."""

    @hookspec
    def register_fields(self) -> list[dict[str, Any]] | None:
        """Return field definitions (as mappings) to add to the registry."""

    @hookspec
    def register_validators(self) -> list[Any] | None:
        """Return ``(value, field, field_type) -> FieldError | None`` callables."""

    @hookspec
    def register_display_formatters(self) -> list[Any] | None:
        """Return ``(html, field, value) -> str`` callables."""

"""Choice field types: checkbox, switch, checkbox group, select, radio, multi-select.

Single-choice types (Select, Radio) hold one option key as a string.
Multi-choice types (CheckboxGroup, MultiSelect) hold an ordered list of
option keys and persist it as a JSON array. Every selected key must be a
key of ``field.options``.
"""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail
from fieldwright.fields.base import AbstractFieldType, Feature
from fieldwright.fields.markup import strip_tags

TRUTHY_STRINGS = frozenset({"1", "true", "yes", "on"})


def to_boolean(value: Any) -> bool:
    """Map *value* onto a checkbox state."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    if isinstance(value, (int, float)):
        return value == 1
    return False


def invalid_option(field: FieldDefinition) -> FieldError:
    return fail(
        ErrorCode.INVALID_OPTION,
        f"{field.display_label} contains an invalid selection.",
        field,
    )


class CheckboxField(AbstractFieldType):
    """A single boolean, stored as ``"1"``/``"0"``.

    ``False`` is a value, so the generic empty check does not apply:
    a required checkbox must be checked.
    """

    features = frozenset({Feature.FILTERABLE})
    template = "checkbox.html"
    role: str | None = None

    @property
    def type(self) -> str:
        return "checkbox"

    def sanitize(self, value: Any) -> bool:
        return to_boolean(value)

    def is_empty(self, value: Any) -> bool:
        return value is None

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if self.is_required(field) and not to_boolean(value):
            return fail(ErrorCode.REQUIRED, f"{field.display_label} must be checked.", field)
        return None

    def default_value(self) -> Any:
        return False

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if to_boolean(value):
            return escape(field.option("yes_label", "Yes"))
        return escape(field.option("no_label", "No"))

    def to_storage(self, value: Any) -> str:
        return "1" if to_boolean(value) else "0"

    def from_storage(self, stored: Any) -> Any:
        return to_boolean(stored)

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes = self.common_attributes(field)
        attributes.pop("placeholder", None)
        attributes.update(
            {
                "type": "checkbox",
                "value": "1",
                "role": self.role,
                "checked": to_boolean(value),
            }
        )
        return self.render_template(
            self.template,
            attributes=attributes,
            text=field.option("checkbox_label", field.label),
            kind=self.type,
            description=self.render_description(field),
        )


class SwitchField(CheckboxField):
    """A checkbox presented as an on/off toggle."""

    role = "switch"

    @property
    def type(self) -> str:
        return "switch"


class SelectField(AbstractFieldType):
    """A single option key chosen from a dropdown."""

    features = frozenset({Feature.FILTERABLE})
    template = "select.html"

    @property
    def type(self) -> str:
        return "select"

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ""
        return self._sanitize_scalar(value)

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if str(value) not in field.options:
            return invalid_option(field)
        return None

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if self.is_empty(value):
            return ""
        return escape(field.options.get(str(value), str(value)))

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        return self.render_template(
            self.template,
            attributes=self.common_attributes(field),
            options=field.options,
            selected={"" if value is None else str(value)},
            empty_option=field.option("empty_option"),
            description=self.render_description(field),
        )


class RadioField(SelectField):
    """A single option key chosen from a radio group."""

    template = "radio.html"

    @property
    def type(self) -> str:
        return "radio"

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        return self.render_template(
            self.template,
            field_id=self.field_id(field),
            field_name=self.field_name(field),
            legend=self.label(field),
            required=self.is_required(field),
            described_by=self.description_id(field) if field.description else None,
            options=field.options,
            checked="" if value is None else str(value),
            description=self.render_description(field),
        )


class CheckboxGroupField(AbstractFieldType):
    """Several option keys ticked from a checkbox list."""

    features = frozenset({Feature.FILTERABLE, Feature.REPEATER})
    template = "checkbox_group.html"

    @property
    def type(self) -> str:
        return "checkboxgroup"

    def sanitize(self, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        keys: list[str] = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (str, int, float)):
                continue
            key = strip_tags(str(item))
            if key:
                keys.append(key)
        return keys

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if str(item) not in field.options:
                return invalid_option(field)
        return None

    def default_value(self) -> Any:
        return []

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if self.is_empty(value) or not isinstance(value, (list, tuple)):
            return ""
        labels = [field.options.get(str(item), str(item)) for item in value]
        return escape(", ".join(labels))

    def to_storage(self, value: Any) -> str:
        if not isinstance(value, (list, tuple)):
            return "[]"
        return json.dumps([str(item) for item in value])

    def from_storage(self, stored: Any) -> Any:
        if isinstance(stored, (list, tuple)):
            return [str(item) for item in stored]
        if not isinstance(stored, str) or not stored:
            return []
        try:
            decoded = json.loads(stored)
        except ValueError:
            return []
        if not isinstance(decoded, list):
            return []
        return [str(item) for item in decoded]

    def selected_keys(self, value: Any) -> set[str]:
        if not isinstance(value, (list, tuple)):
            return set()
        return {str(item) for item in value}

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        return self.render_template(
            self.template,
            field_id=self.field_id(field),
            field_name=f"{self.field_name(field)}[]",
            legend=self.label(field),
            required=self.is_required(field),
            described_by=self.description_id(field) if field.description else None,
            options=field.options,
            selected=self.selected_keys(value),
            description=self.render_description(field),
        )


class MultiSelectField(CheckboxGroupField):
    """Several option keys picked from a ``<select multiple>``."""

    template = "select.html"

    @property
    def type(self) -> str:
        return "multiselect"

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes = self.common_attributes(field)
        attributes["name"] = f"{self.field_name(field)}[]"
        attributes["multiple"] = True
        return self.render_template(
            self.template,
            attributes=attributes,
            options=field.options,
            selected=self.selected_keys(value),
            empty_option=None,
            description=self.render_description(field),
        )

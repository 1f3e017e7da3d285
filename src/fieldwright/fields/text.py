"""Free-text field types: text, textarea, rich text, hidden."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import FieldError
from fieldwright.fields.base import AbstractFieldType, Feature
from fieldwright.fields.markup import strip_tags


def length_attributes(field: FieldDefinition) -> dict[str, Any]:
    """``maxlength``/``minlength`` mirrored from the validation rules."""
    attributes: dict[str, Any] = {}
    if field.validation.max_length is not None:
        attributes["maxlength"] = field.validation.max_length
    if field.validation.min_length is not None:
        attributes["minlength"] = field.validation.min_length
    return attributes


class TextField(AbstractFieldType):
    """Single-line text input."""

    features = frozenset({Feature.SEARCHABLE, Feature.SORTABLE})

    @property
    def type(self) -> str:
        return "text"

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        attributes = super().input_attributes(field, value)
        attributes.update(length_attributes(field))
        if field.validation.pattern:
            attributes["pattern"] = field.validation.pattern
        return attributes


class TextareaField(AbstractFieldType):
    """Multi-line text; newlines survive sanitizing and display as ``<br>``."""

    template = "textarea.html"
    default_rows = 5

    @property
    def type(self) -> str:
        return "textarea"

    def _sanitize_scalar(self, value: Any) -> str:
        if isinstance(value, str):
            return strip_tags(value, keep_newlines=True)
        return super()._sanitize_scalar(value)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        attributes: dict[str, Any] = {"rows": field.option("rows", self.default_rows)}
        attributes.update(length_attributes(field))
        return attributes

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes = self.common_attributes(field)
        attributes.update(self.input_attributes(field, value))
        return self.render_template(
            self.template,
            attributes=attributes,
            value="" if value is None else str(value),
            description=self.render_description(field),
        )

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if isinstance(value, (list, tuple)):
            return super().format_value(value, field)
        if value is None:
            return ""
        lines = str(value).split("\n")
        return Markup("<br>\n").join(escape(line) for line in lines)


class RichTextField(TextareaField):
    """HTML content filtered through the context's allow-list sanitizer.

    The sanitized HTML is trusted: ``format_value`` returns it unchanged.
    """

    default_rows = 10

    @property
    def type(self) -> str:
        return "richtext"

    def sanitize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return ""
        return self.context.html_sanitizer.sanitize(value)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        ns = self.context.namespace
        return {
            "rows": field.option("textarea_rows", self.default_rows),
            "class": " ".join(filter(None, [f"{ns}-richtext", field.class_])),
            "data-editor": "richtext",
            "data-media-buttons": "true" if field.option("media_buttons", True) else "false",
        }

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if not isinstance(value, str) or value == "":
            return ""
        return Markup(value)


class HiddenField(AbstractFieldType):
    """Hidden input: no label, no description, no required semantics."""

    features = frozenset()
    renders_label = False

    @property
    def type(self) -> str:
        return "hidden"

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        return None

    def is_required(self, field: FieldDefinition) -> bool:
        return False

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes: dict[str, Any] = {
            "type": "hidden",
            "id": self.field_id(field),
            "name": self.field_name(field),
            "value": "" if value is None else str(value),
        }
        attributes.update(field.attributes)
        return self.render_template("input.html", attributes=attributes, description="")

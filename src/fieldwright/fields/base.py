"""FieldType ABC and the shared AbstractFieldType base.

From the field contract: every field type is a stateless strategy for one
value shape. It renders editable markup, sanitizes untrusted input into a
canonical value, validates that value, formats it for display, and
converts it to and from a storage string.

INVARIANT: ``sanitize`` never raises; unparseable input degrades to the
type's default value.
INVARIANT: ``validate`` returns ``None`` or exactly one ``FieldError``.
INVARIANT: ``from_storage(to_storage(v)) == v`` for every ``v`` that
``sanitize`` can produce.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, ClassVar

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import FieldError
from fieldwright.domain.rules import apply_validation_rules, is_empty, required_error
from fieldwright.fields.context import FieldContext
from fieldwright.fields.markup import build_attributes, strip_tags


class Feature(StrEnum):
    """Cross-cutting behaviors a field type can take part in."""

    SEARCHABLE = "searchable"
    FILTERABLE = "filterable"
    SORTABLE = "sortable"
    REPEATER = "repeater"


class FieldType(ABC):
    """The polymorphic field contract.

    Concrete types should extend :class:`AbstractFieldType` rather than
    implementing this class directly.
    """

    @property
    @abstractmethod
    def type(self) -> str:
        """Stable type tag (e.g. ``'text'``, ``'daterange'``)."""
        ...

    @abstractmethod
    def supports(self, feature: str) -> bool:
        """Whether this type takes part in *feature*."""
        ...

    @abstractmethod
    def render(self, field: FieldDefinition, value: Any) -> Markup:
        """Editable markup for *field* holding *value*."""
        ...

    @abstractmethod
    def sanitize(self, value: Any) -> Any:
        """Coerce untrusted input into the canonical value shape."""
        ...

    @abstractmethod
    def sanitize_with_field(self, value: Any, field: FieldDefinition) -> Any:
        """Sanitize with access to field options (e.g. precision)."""
        ...

    @abstractmethod
    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        """Check a sanitized value; ``None`` means valid."""
        ...

    @abstractmethod
    def is_required(self, field: FieldDefinition) -> bool:
        """Whether *field* takes part in the required gate for this type."""
        ...

    @abstractmethod
    def is_empty(self, value: Any) -> bool:
        """The type-aware definition of "no value provided"."""
        ...

    @abstractmethod
    def format_value(self, value: Any, field: FieldDefinition) -> str:
        """Read-only display rendering; ``""`` for empty or invalid input."""
        ...

    @abstractmethod
    def default_value(self) -> Any:
        """The canonical "nothing set" value."""
        ...

    @abstractmethod
    def to_storage(self, value: Any) -> str:
        """Encode a canonical value as a storage string."""
        ...

    @abstractmethod
    def from_storage(self, stored: Any) -> Any:
        """Decode a storage string back into a canonical value."""
        ...


class AbstractFieldType(FieldType):
    """Default behavior shared by the concrete field types.

    Subclasses set ``features`` and ``template`` and override only what
    differs: most override ``check_value`` to add semantic checks after
    the required gate and the generic rules have passed.
    """

    features: ClassVar[frozenset[Feature]] = frozenset({Feature.SEARCHABLE})
    template: ClassVar[str] = "input.html"
    renders_label: ClassVar[bool] = True

    def __init__(self, context: FieldContext | None = None) -> None:
        self._context = context if context is not None else FieldContext()

    @property
    def context(self) -> FieldContext:
        return self._context

    def supports(self, feature: str) -> bool:
        return feature in self.features

    # ------------------------------------------------------------------
    # Sanitize / validate
    # ------------------------------------------------------------------

    def sanitize(self, value: Any) -> Any:
        """Strip tags and trim; lists are sanitized element by element."""
        if isinstance(value, (list, tuple)):
            return [self._sanitize_scalar(item) for item in value]
        return self._sanitize_scalar(value)

    def sanitize_with_field(self, value: Any, field: FieldDefinition) -> Any:
        return self.sanitize(value)

    def _sanitize_scalar(self, value: Any) -> str:
        if isinstance(value, str):
            return strip_tags(value)
        if isinstance(value, bool):
            return "1" if value else ""
        if isinstance(value, (int, float)):
            return str(value)
        return ""

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if self.is_empty(value):
            return required_error(field) if self.is_required(field) else None
        error = apply_validation_rules(value, field)
        if error is not None:
            return error
        return self.check_value(value, field)

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        """Type-specific semantic checks for a non-empty value."""
        return None

    def is_required(self, field: FieldDefinition) -> bool:
        return field.required

    def is_empty(self, value: Any) -> bool:
        return is_empty(value)

    # ------------------------------------------------------------------
    # Display / storage
    # ------------------------------------------------------------------

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return escape(", ".join(str(item) for item in value))
        return escape(str(value))

    def default_value(self) -> Any:
        return ""

    def to_storage(self, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def from_storage(self, stored: Any) -> Any:
        if stored is None:
            return self.default_value()
        return stored if isinstance(stored, str) else str(stored)

    # ------------------------------------------------------------------
    # Markup helpers
    # ------------------------------------------------------------------

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes = self.common_attributes(field)
        attributes.update(self.input_attributes(field, value))
        return self.render_template(
            self.template,
            field=field,
            attributes=attributes,
            description=self.render_description(field),
        )

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        """Type-specific attributes merged over the common ones."""
        return {"type": "text", "value": "" if value is None else str(value)}

    def field_id(self, field: FieldDefinition) -> str:
        return f"{self._context.namespace}-field-{field.name}"

    def field_name(self, field: FieldDefinition) -> str:
        return f"{self._context.namespace}_field_{field.name}"

    def description_id(self, field: FieldDefinition) -> str:
        return f"{self.field_id(field)}-description"

    def common_attributes(self, field: FieldDefinition) -> dict[str, Any]:
        """id, name, required semantics, placeholder, description link, class."""
        attributes: dict[str, Any] = {
            "id": self.field_id(field),
            "name": self.field_name(field),
        }
        if self.is_required(field):
            attributes["required"] = True
            attributes["aria-required"] = "true"
        if field.placeholder:
            attributes["placeholder"] = field.placeholder
        if field.description:
            attributes["aria-describedby"] = self.description_id(field)
        if field.class_:
            attributes["class"] = field.class_
        attributes.update(self.custom_attributes(field))
        return attributes

    def custom_attributes(self, field: FieldDefinition) -> Mapping[str, Any]:
        return field.attributes

    def build_attributes(self, attributes: Mapping[str, Any]) -> Markup:
        return build_attributes(attributes)

    def render_description(self, field: FieldDefinition) -> Markup:
        if not field.description:
            return Markup("")
        return self.render_template(
            "description.html",
            description_id=self.description_id(field),
            description=field.description,
        )

    def render_template(self, name: str, **context: Any) -> Markup:
        template = self._context.templates.get_template(name)
        return Markup(template.render(ns=self._context.namespace, **context))

    def label(self, field: FieldDefinition) -> str:
        return field.display_label

"""FieldRegistry — type tags to field types, names to field definitions.

The registry is an ordinary object: build one per application with
:func:`create_registry` and pass it to the services that need it. There
is no process-wide instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.fields.base import AbstractFieldType, FieldType
from fieldwright.fields.choice import (
    CheckboxField,
    CheckboxGroupField,
    MultiSelectField,
    RadioField,
    SelectField,
    SwitchField,
)
from fieldwright.fields.color import ColorField
from fieldwright.fields.context import FieldContext
from fieldwright.fields.media import FileField, GalleryField, ImageField
from fieldwright.fields.numeric import CurrencyField, DecimalField, NumberField
from fieldwright.fields.temporal import DateField, DateRangeField, DateTimeField, TimeField
from fieldwright.fields.text import HiddenField, RichTextField, TextareaField, TextField
from fieldwright.fields.web import EmailField, PhoneField, UrlField

if TYPE_CHECKING:
    from fieldwright.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

BUILTIN_FIELD_TYPES: tuple[type[AbstractFieldType], ...] = (
    TextField,
    TextareaField,
    RichTextField,
    HiddenField,
    NumberField,
    DecimalField,
    CurrencyField,
    CheckboxField,
    SwitchField,
    CheckboxGroupField,
    SelectField,
    RadioField,
    MultiSelectField,
    DateField,
    TimeField,
    DateTimeField,
    DateRangeField,
    EmailField,
    UrlField,
    PhoneField,
    ColorField,
    FileField,
    ImageField,
    GalleryField,
)

# Stock fields every directory listing carries.
DEFAULT_LISTING_FIELDS: tuple[dict[str, Any], ...] = (
    {"name": "phone", "type": "phone", "label": "Phone", "priority": 10},
    {"name": "email", "type": "email", "label": "Email", "priority": 20},
    {"name": "website", "type": "url", "label": "Website", "priority": 30},
    {"name": "address", "type": "text", "label": "Address", "priority": 40},
    {"name": "city", "type": "text", "label": "City", "priority": 50},
    {"name": "state", "type": "text", "label": "State", "priority": 60},
    {"name": "zip", "type": "text", "label": "Zip Code", "priority": 70},
    {"name": "hours", "type": "textarea", "label": "Business Hours", "priority": 80},
    {
        "name": "price_range",
        "type": "select",
        "label": "Price Range",
        "priority": 90,
        "options": {
            "": "Not specified",
            "$": "$",
            "$$": "$$",
            "$$$": "$$$",
            "$$$$": "$$$$",
        },
    },
)

ORDER_BY = frozenset({"priority", "name"})


class FieldRegistry:
    """Holds the field types and field definitions of one application."""

    def __init__(self, context: FieldContext | None = None) -> None:
        self._context = context if context is not None else FieldContext()
        self._types: dict[str, FieldType] = {}
        self._fields: dict[str, FieldDefinition] = {}

    @property
    def context(self) -> FieldContext:
        return self._context

    # ------------------------------------------------------------------
    # Field types
    # ------------------------------------------------------------------

    def register_field_type(self, field_type: FieldType) -> bool:
        """Register *field_type* under its type tag; duplicates are refused."""
        tag = field_type.type
        if tag in self._types:
            logger.warning("Field type %r is already registered", tag)
            return False
        self._types[tag] = field_type
        logger.debug("Registered field type %s", tag)
        return True

    def get_field_type(self, type_name: str) -> FieldType | None:
        return self._types.get(type_name)

    def has_field_type(self, type_name: str) -> bool:
        return type_name in self._types

    def field_types(self) -> dict[str, FieldType]:
        """All registered field types keyed by tag, in registration order."""
        return dict(self._types)

    def field_type_for(self, field: FieldDefinition) -> FieldType | None:
        return self._types.get(field.type)

    # ------------------------------------------------------------------
    # Field definitions
    # ------------------------------------------------------------------

    def register_field(self, definition: FieldDefinition | Mapping[str, Any]) -> bool:
        """Register a field definition; duplicate names are refused.

        Mappings are validated into a :class:`FieldDefinition` first, so a
        malformed configuration raises ``pydantic.ValidationError`` here.
        """
        if not isinstance(definition, FieldDefinition):
            definition = FieldDefinition.model_validate(dict(definition))
        if definition.name in self._fields:
            logger.warning("Field %r is already registered", definition.name)
            return False
        self._fields[definition.name] = definition
        logger.debug("Registered field %s (%s)", definition.name, definition.type)
        return True

    def register_fields(self, definitions: Iterable[FieldDefinition | Mapping[str, Any]]) -> int:
        """Register several definitions; returns how many were accepted."""
        return sum(1 for definition in definitions if self.register_field(definition))

    def unregister_field(self, name: str) -> bool:
        if self._fields.pop(name, None) is None:
            return False
        logger.debug("Unregistered field %s", name)
        return True

    def get_field(self, name: str) -> FieldDefinition | None:
        return self._fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def get_fields(
        self,
        *,
        type: str | None = None,
        searchable: bool | None = None,
        filterable: bool | None = None,
        admin_only: bool | None = None,
        orderby: str = "priority",
        order: str = "asc",
    ) -> list[FieldDefinition]:
        """Registered fields, filtered and sorted.

        Filters left as ``None`` are ignored. *orderby* is ``"priority"``
        or ``"name"``; *order* is ``"asc"`` or ``"desc"``.
        """
        if orderby not in ORDER_BY:
            msg = f"orderby must be one of {sorted(ORDER_BY)}, got {orderby!r}"
            raise ValueError(msg)

        fields = [
            field
            for field in self._fields.values()
            if (type is None or field.type == type)
            and (searchable is None or field.searchable == searchable)
            and (filterable is None or field.filterable == filterable)
            and (admin_only is None or field.admin_only == admin_only)
        ]
        if orderby == "name":
            fields.sort(key=lambda field: field.name)
        else:
            fields.sort(key=lambda field: field.priority)
        if order.lower() == "desc":
            fields.reverse()
        return fields

    def meta_key(self, name: str) -> str:
        """Storage key for field *name* (``_<namespace>_<name>``)."""
        return f"_{self._context.namespace}_{name}"

    def register_default_fields(self) -> int:
        """Install the stock listing fields; returns how many were added."""
        return self.register_fields(DEFAULT_LISTING_FIELDS)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields


def create_registry(
    context: FieldContext | None = None,
    plugin_manager: PluginManager | None = None,
) -> FieldRegistry:
    """Build a registry with every built-in field type installed.

    Plugin-provided types are registered after the built-ins, so a plugin
    cannot replace a built-in tag.
    """
    registry = FieldRegistry(context)
    for field_type_cls in BUILTIN_FIELD_TYPES:
        registry.register_field_type(field_type_cls(registry.context))
    if plugin_manager is not None:
        for field_type in plugin_manager.collect_field_types(registry.context):
            registry.register_field_type(field_type)
    return registry

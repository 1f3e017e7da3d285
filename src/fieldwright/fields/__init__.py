"""Field layer — the field type contract, concrete types, and the registry.

Field types depend on the domain layer and on the collaborator ports
carried by ``FieldContext``. They never import from services or commands.
"""

from fieldwright.fields.base import AbstractFieldType, Feature, FieldType
from fieldwright.fields.context import FieldContext
from fieldwright.fields.registry import (
    BUILTIN_FIELD_TYPES,
    DEFAULT_LISTING_FIELDS,
    FieldRegistry,
    create_registry,
)

__all__ = [
    "BUILTIN_FIELD_TYPES",
    "DEFAULT_LISTING_FIELDS",
    "AbstractFieldType",
    "Feature",
    "FieldContext",
    "FieldRegistry",
    "FieldType",
    "create_registry",
]

"""FieldStorage — encode field values to meta entries and back.

Meta entries are keyed ``_<namespace>_<name>`` and always hold strings.
Loading a missing or blank entry yields the definition's default, then
the type's default; anything present goes through the type's
``from_storage``, which never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fieldwright.fields.registry import FieldRegistry

logger = logging.getLogger(__name__)


class FieldStorage:
    """Moves values between field names and meta keys."""

    def __init__(self, registry: FieldRegistry) -> None:
        self._registry = registry

    def dump(self, values: Mapping[str, Any]) -> dict[str, str]:
        """Storage strings keyed by meta key; unregistered names are skipped."""
        stored: dict[str, str] = {}
        for name, value in values.items():
            field = self._registry.get_field(name)
            if field is None:
                logger.debug("Not storing unregistered field %s", name)
                continue
            field_type = self._registry.field_type_for(field)
            if field_type is None:
                logger.warning("Field %s has unknown type %r", name, field.type)
                continue
            stored[self._registry.meta_key(name)] = field_type.to_storage(value)
        return stored

    def load(
        self,
        meta: Mapping[str, Any],
        *,
        fields: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        """Canonical values keyed by field name for every selected field."""
        names = list(fields) if fields is not None else [f.name for f in self._registry.get_fields()]
        values: dict[str, Any] = {}
        for name in names:
            field = self._registry.get_field(name)
            if field is None:
                continue
            field_type = self._registry.field_type_for(field)
            if field_type is None:
                continue
            stored = meta.get(self._registry.meta_key(name))
            if stored is None or (isinstance(stored, str) and stored == ""):
                values[name] = field.default if field.default is not None else field_type.default_value()
            else:
                values[name] = field_type.from_storage(stored)
        return values

    def load_value(self, name: str, meta: Mapping[str, Any]) -> Any:
        """One field's value, or ``None`` when the field is not registered."""
        return self.load(meta, fields=[name]).get(name)

"""FieldValidator — form-level sanitize/validate pipeline over a registry.

Order for one field: resolve the definition and its type, check
``required`` against the raw value, sanitize, run the type's ``validate``,
then run every appended validator strategy. The first failure wins.

The required check runs before sanitizing because sanitizers turn absent
input into type defaults (``""`` becomes ``0`` for numbers), which would
otherwise satisfy ``required``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Mapping
from typing import Any

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import required_error
from fieldwright.fields.base import FieldType
from fieldwright.fields.registry import FieldRegistry
from fieldwright.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)

ValidatorStrategy = Callable[[Any, FieldDefinition, FieldType], FieldError | None]


class FieldValidator:
    """Validates and sanitizes submitted values for registered fields."""

    def __init__(self, registry: FieldRegistry) -> None:
        self._registry = registry
        self._validators: list[ValidatorStrategy] = []

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    def add_validator(self, strategy: ValidatorStrategy) -> None:
        """Append a strategy run after the field type's own validation."""
        self._validators.append(strategy)

    @property
    def validators(self) -> tuple[ValidatorStrategy, ...]:
        return tuple(self._validators)

    # ------------------------------------------------------------------
    # Single field
    # ------------------------------------------------------------------

    def validate_field(self, name: str, value: Any, *, sanitize: bool = True) -> FieldError | None:
        field = self._registry.get_field(name)
        if field is None:
            return FieldError(
                code=ErrorCode.UNKNOWN_FIELD,
                message=f"Unknown field: {name}.",
                field=name,
            )
        field_type = self._registry.field_type_for(field)
        if field_type is None:
            return FieldError(
                code=ErrorCode.UNKNOWN_FIELD_TYPE,
                message=f"Unknown field type: {field.type}.",
                field=name,
            )

        if field_type.is_required(field) and field_type.is_empty(value):
            return required_error(field)

        if sanitize:
            value = field_type.sanitize_with_field(value, field)

        error = field_type.validate(value, field)
        if error is not None:
            return error

        for strategy in self._validators:
            error = strategy(value, field, field_type)
            if error is not None:
                return error
        return None

    def sanitize_field(self, name: str, value: Any) -> Any:
        """Sanitize *value* for field *name*; unknown fields pass through."""
        field = self._registry.get_field(name)
        if field is None:
            return value
        field_type = self._registry.field_type_for(field)
        if field_type is None:
            return value
        # Keep required-and-empty input empty so validation still sees it.
        if field_type.is_required(field) and field_type.is_empty(value):
            return _empty_like(value)
        return field_type.sanitize_with_field(value, field)

    # ------------------------------------------------------------------
    # Many fields
    # ------------------------------------------------------------------

    def validate_fields(
        self,
        values: Mapping[str, Any],
        *,
        fields: Iterable[str] | None = None,
        exclude: Collection[str] = (),
        sanitize: bool = True,
    ) -> dict[str, FieldError]:
        """Validate every selected field; returns errors keyed by field name.

        By default every registered field is checked, so a required field
        missing from *values* is reported.
        """
        names = list(fields) if fields is not None else [f.name for f in self._registry.get_fields()]
        errors: dict[str, FieldError] = {}
        for name in names:
            if name in exclude or not self._registry.has_field(name):
                continue
            error = self.validate_field(name, values.get(name), sanitize=sanitize)
            if error is not None:
                errors[name] = error
        return errors

    def sanitize_fields(
        self,
        values: Mapping[str, Any],
        *,
        fields: Iterable[str] | None = None,
        exclude: Collection[str] = (),
    ) -> dict[str, Any]:
        """Sanitize submitted values; keys without a registered field are dropped."""
        wanted = set(fields) if fields is not None else None
        sanitized: dict[str, Any] = {}
        for name, value in values.items():
            if wanted is not None and name not in wanted:
                continue
            if name in exclude:
                continue
            if not self._registry.has_field(name):
                logger.debug("Dropping value for unregistered field %s", name)
                continue
            sanitized[name] = self.sanitize_field(name, value)
        return sanitized

    def validate_required(self, values: Mapping[str, Any]) -> dict[str, FieldError]:
        """Only the presence check, for every required field."""
        errors: dict[str, FieldError] = {}
        for field in self._registry.get_fields():
            field_type = self._registry.field_type_for(field)
            if field_type is None:
                continue
            if field_type.is_required(field) and field_type.is_empty(values.get(field.name)):
                errors[field.name] = required_error(field)
        return errors

    def process_fields(
        self,
        values: Mapping[str, Any],
        *,
        fields: Iterable[str] | None = None,
        exclude: Collection[str] = (),
    ) -> ServiceResult:
        """Sanitize, validate, and encode for storage.

        On success ``data`` holds ``values`` (sanitized, by field name) and
        ``storage`` (encoded, by meta key). On failure ``data`` is empty and
        the per-field errors are in ``error.detail["errors"]``.
        """
        selected = list(fields) if fields is not None else None
        sanitized = self.sanitize_fields(values, fields=selected, exclude=exclude)
        errors = self.validate_fields(sanitized, fields=selected, exclude=exclude, sanitize=False)

        if errors:
            return ServiceResult(
                ok=False,
                op="process_fields",
                error=ServiceError(
                    code="validation_failed",
                    message=f"{len(errors)} field(s) failed validation",
                    detail={
                        "errors": {
                            name: error.model_dump(include={"code", "message"})
                            for name, error in errors.items()
                        }
                    },
                ),
                meta={"checked": len(sanitized), "failed": len(errors)},
            )

        storage: dict[str, str] = {}
        for name, value in sanitized.items():
            field = self._registry.get_field(name)
            field_type = self._registry.field_type_for(field) if field is not None else None
            if field is None or field_type is None:
                continue
            storage[self._registry.meta_key(name)] = field_type.to_storage(value)

        return ServiceResult(
            ok=True,
            op="process_fields",
            data={"values": sanitized, "storage": storage},
            meta={"checked": len(sanitized), "failed": 0},
        )


def _empty_like(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return []
    if isinstance(value, str):
        return ""
    return None

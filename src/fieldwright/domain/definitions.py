"""FieldDefinition — declarative, immutable description of one field.

Definitions are plain data: they carry no behavior beyond small accessors.
A field type receives the definition on every call and reads what it
needs from it. ``name`` is the join key between markup, sanitized value,
and storage, so it is normalized once at construction and frozen.

Type-specific options that are not modelled explicitly (``rows``,
``yes_label``, ``separator``, ``currency_symbol``...) are kept as extras
and read through :meth:`FieldDefinition.option`.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")

ValidationCallback = Callable[..., Any]


class ValidationRules(BaseModel):
    """Generic validation rules shared by every field type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None
    callback: ValidationCallback | None = Field(default=None, exclude=True)

    def is_blank(self) -> bool:
        """True when no rule is configured."""
        return (
            self.min_length is None
            and self.max_length is None
            and self.pattern is None
            and self.callback is None
        )


class FieldDefinition(BaseModel):
    """One configured field.

    Attributes:
        name: Stable identifier (lowercase letters, digits, ``_`` and ``-``).
        type: Field type tag resolved through the registry.
        options: Choice keys mapped to display labels.
        min / max: Numeric bounds, or ISO strings for temporal types.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str
    type: str = "text"
    label: str = ""
    description: str = ""
    placeholder: str = ""
    class_: str = Field(default="", alias="class")
    attributes: dict[str, Any] = Field(default_factory=dict)
    required: bool = False
    default: Any = None
    validation: ValidationRules = Field(default_factory=ValidationRules)
    options: dict[str, str] = Field(default_factory=dict)
    min: int | float | str | None = None
    max: int | float | str | None = None
    step: int | float | None = None
    precision: int = 2
    allowed_types: list[str] | None = None
    max_size: int = 0
    searchable: bool = False
    filterable: bool = False
    admin_only: bool = False
    priority: int = 10

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: Any) -> str:
        name = str(value or "").strip().lower()
        if not NAME_PATTERN.match(name):
            msg = f"Invalid field name {value!r}: use lowercase letters, digits, '_' or '-'"
            raise ValueError(msg)
        return name

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, (list, tuple)):
            return {str(item): str(item) for item in value}
        if isinstance(value, dict):
            return {str(key): str(label) for key, label in value.items()}
        return value

    @field_validator("allowed_types", mode="before")
    @classmethod
    def _lower_allowed_types(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [str(ext).lower().lstrip(".") for ext in value]
        return value

    @field_validator("priority", "max_size", mode="before")
    @classmethod
    def _absint(cls, value: Any) -> int:
        try:
            return abs(int(value))
        except (TypeError, ValueError):
            return 0

    @model_validator(mode="before")
    @classmethod
    def _derive_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("label"):
            name = str(data.get("name") or "").strip().lower()
            data = {**data, "label": name.replace("_", " ").replace("-", " ").title()}
        return data

    def option(self, key: str, default: Any = None) -> Any:
        """Read a type-specific option stored as an extra key."""
        extras = self.model_extra or {}
        value = extras.get(key, default)
        return default if value is None else value

    @property
    def display_label(self) -> str:
        """Label used in messages and legends."""
        return self.label or self.name

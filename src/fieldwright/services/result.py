"""Outcome of a form-level pass over a listing's submitted fields.

``FieldValidator.process_fields`` returns a ServiceResult instead of raising,
so the CLI and host pages can show every field error at once. The CLI
commands wrap their listings and markup in the same type for output.
A failed result never carries storage data.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def field_errors(self) -> dict[str, dict[str, str]]:
        """Per-field ``{"code", "message"}`` entries keyed by field name."""
        errors = self.detail.get("errors")
        return errors if isinstance(errors, dict) else {}


class ServiceResult(BaseModel):
    """Return type for form-level operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"process_fields"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

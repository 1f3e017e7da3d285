"""Validation failure codes and the FieldError payload.

INVARIANT: Validation failures are values, never exceptions.
``validate`` returns ``None`` on success or exactly one ``FieldError``
(the first violated rule) on failure.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class ErrorCode(StrEnum):
    """Stable machine-readable validation failure codes."""

    # Presence
    REQUIRED = "required"

    # Generic shape
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"
    CALLBACK_FAILED = "validation_callback_failed"

    # Numeric range
    NOT_NUMERIC = "not_numeric"
    MIN_VALUE = "min_value"
    MAX_VALUE = "max_value"
    NEGATIVE_VALUE = "negative_value"

    # Temporal
    INVALID_DATE = "invalid_date"
    INVALID_TIME = "invalid_time"
    INVALID_DATETIME = "invalid_datetime"
    DATE_TOO_EARLY = "date_too_early"
    DATE_TOO_LATE = "date_too_late"
    TIME_TOO_EARLY = "time_too_early"
    TIME_TOO_LATE = "time_too_late"
    DATETIME_TOO_EARLY = "datetime_too_early"
    DATETIME_TOO_LATE = "datetime_too_late"
    END_BEFORE_START = "end_before_start"
    START_TOO_EARLY = "start_too_early"
    START_TOO_LATE = "start_too_late"
    END_TOO_EARLY = "end_too_early"
    END_TOO_LATE = "end_too_late"
    INVALID_START_DATE = "invalid_start_date"
    INVALID_END_DATE = "invalid_end_date"

    # Format-specific
    INVALID_URL = "invalid_url"
    INVALID_EMAIL = "invalid_email"
    INVALID_PHONE = "invalid_phone"
    INVALID_OPTION = "invalid_option"
    INVALID_ATTACHMENT = "invalid_attachment"
    NOT_AN_IMAGE = "not_an_image"
    INVALID_FILE_TYPE = "invalid_file_type"
    INVALID_IMAGE_TYPE = "invalid_image_type"
    INVALID_COLOR = "invalid_color"
    MAX_FILES_EXCEEDED = "max_files_exceeded"

    # Form level
    UNKNOWN_FIELD = "unknown_field"
    UNKNOWN_FIELD_TYPE = "unknown_field_type"


class FieldError(BaseModel):
    """A single coded validation failure for one field."""

    model_config = {"frozen": True}

    code: str
    message: str
    field: str = ""

    def __str__(self) -> str:
        return self.message

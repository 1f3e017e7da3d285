"""Temporal field types: date, time, date-time, date range.

Values are normalized ISO strings (``YYYY-MM-DD``, ``HH:MM``,
``YYYY-MM-DDTHH:MM``), so ``min``/``max`` bounds compare lexicographically
on the normalized form. Invalid input sanitizes to ``""``. Display
formatting goes through the context's ``LocaleFormatter``.

Storage is deliberately lenient for date-times: a stored value with a
space separator (``2024-06-15 14:30``) is read back as ``2024-06-15T14:30``
even though ``sanitize`` rejects that shape on input.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, ClassVar

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail, required_error
from fieldwright.fields.base import AbstractFieldType, Feature
from fieldwright.fields.markup import strip_tags

DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
TIME_RE = re.compile(r"^[0-9]{2}:[0-9]{2}(:[0-9]{2})?$")
DATETIME_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}(:[0-9]{2})?$")


def is_valid_date(value: Any) -> bool:
    """``YYYY-MM-DD`` and a real calendar day (no Feb 30)."""
    if not isinstance(value, str) or not DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_valid_time(value: Any) -> bool:
    """``HH:MM`` or ``HH:MM:SS`` with hour 0-23 and minute/second 0-59."""
    if not isinstance(value, str) or not TIME_RE.match(value):
        return False
    hour, minute, *rest = (int(part) for part in value.split(":"))
    second = rest[0] if rest else 0
    return 0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59


def is_valid_datetime(value: Any) -> bool:
    """``YYYY-MM-DDTHH:MM`` (seconds optional), both halves valid."""
    if not isinstance(value, str) or not DATETIME_RE.match(value):
        return False
    date_part, time_part = value.split("T", 1)
    return is_valid_date(date_part) and is_valid_time(time_part)


class TemporalField(AbstractFieldType):
    """Shared sanitize/validate/format logic for single temporal values.

    Subclasses describe their shape with a validity check, the width of
    the normalized string, the strptime pattern used to parse it, and the
    error codes they report.
    """

    input_type: ClassVar[str] = "date"
    width: ClassVar[int] = 10
    parse_pattern: ClassVar[str] = "%Y-%m-%d"
    invalid_code: ClassVar[ErrorCode] = ErrorCode.INVALID_DATE
    too_early_code: ClassVar[ErrorCode] = ErrorCode.DATE_TOO_EARLY
    too_late_code: ClassVar[ErrorCode] = ErrorCode.DATE_TOO_LATE
    invalid_message: ClassVar[str] = "must be a valid date in YYYY-MM-DD format"

    def is_valid(self, value: Any) -> bool:
        return is_valid_date(value)

    def normalize(self, value: str) -> str:
        return value[: self.width]

    def sanitize(self, value: Any) -> str:
        if not isinstance(value, str) or not value:
            return ""
        cleaned = strip_tags(value)
        if not self.is_valid(cleaned):
            return ""
        return self.normalize(cleaned)

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        label = field.display_label
        if not self.is_valid(value):
            return fail(self.invalid_code, f"{label} {self.invalid_message}.", field)

        normalized = self.normalize(value)
        low = self.bound(field.min)
        if low is not None and normalized < low:
            return fail(self.too_early_code, f"{label} must be on or after {low}.", field)
        high = self.bound(field.max)
        if high is not None and normalized > high:
            return fail(self.too_late_code, f"{label} must be on or before {high}.", field)
        return None

    def bound(self, raw: Any) -> str | None:
        """A usable ``min``/``max`` bound; invalid bounds are ignored."""
        if raw and self.is_valid(raw):
            return self.normalize(raw)
        return None

    def display_pattern(self, field: FieldDefinition) -> str:
        return str(field.option("date_format", self.context.date_format))

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if not isinstance(value, str) or not self.is_valid(value):
            return ""
        moment = datetime.strptime(self.normalize(value), self.parse_pattern)
        return escape(self.context.locale.format_date(moment, self.display_pattern(field)))

    def from_storage(self, stored: Any) -> Any:
        if not isinstance(stored, str) or not self.is_valid(stored):
            return ""
        return self.normalize(stored)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        return {
            "type": self.input_type,
            "value": self.sanitize(value),
            "min": field.min or None,
            "max": field.max or None,
        }


class DateField(TemporalField):
    features = frozenset({Feature.FILTERABLE, Feature.SORTABLE})

    @property
    def type(self) -> str:
        return "date"


class TimeField(TemporalField):
    """Times of day; seconds are accepted on input and dropped."""

    features = frozenset({Feature.SORTABLE})
    input_type = "time"
    width = 5
    parse_pattern = "%H:%M"
    invalid_code = ErrorCode.INVALID_TIME
    too_early_code = ErrorCode.TIME_TOO_EARLY
    too_late_code = ErrorCode.TIME_TOO_LATE
    invalid_message = "must be a valid time in HH:MM format"

    @property
    def type(self) -> str:
        return "time"

    def is_valid(self, value: Any) -> bool:
        return is_valid_time(value)

    def display_pattern(self, field: FieldDefinition) -> str:
        return str(field.option("time_format", self.context.time_format))


class DateTimeField(TemporalField):
    """A date and time joined by ``T``; seconds are dropped."""

    features = frozenset({Feature.SORTABLE})
    input_type = "datetime-local"
    width = 16
    parse_pattern = "%Y-%m-%dT%H:%M"
    invalid_code = ErrorCode.INVALID_DATETIME
    too_early_code = ErrorCode.DATETIME_TOO_EARLY
    too_late_code = ErrorCode.DATETIME_TOO_LATE
    invalid_message = "must be a valid date and time"

    @property
    def type(self) -> str:
        return "datetime"

    def is_valid(self, value: Any) -> bool:
        return is_valid_datetime(value)

    def display_pattern(self, field: FieldDefinition) -> str:
        default = f"{self.context.date_format} {self.context.time_format}"
        return str(field.option("datetime_format", default))

    def from_storage(self, stored: Any) -> Any:
        if not isinstance(stored, str) or not stored:
            return ""
        return super().from_storage(stored.replace(" ", "T", 1))


class DateRangeField(AbstractFieldType):
    """A ``{"start", "end"}`` pair of dates; either side may be empty.

    Options: ``separator`` for display (default ``" - "``), ``date_format``.
    """

    features = frozenset({Feature.FILTERABLE})
    template = "daterange.html"

    @property
    def type(self) -> str:
        return "daterange"

    def default_value(self) -> Any:
        return {"start": "", "end": ""}

    def normalize(self, value: Any) -> dict[str, str]:
        """Coerce anything into the ``{start, end}`` shape."""
        if not isinstance(value, dict):
            return self.default_value()
        start = value.get("start")
        end = value.get("end")
        return {
            "start": start if isinstance(start, str) else "",
            "end": end if isinstance(end, str) else "",
        }

    def is_empty(self, value: Any) -> bool:
        normalized = self.normalize(value)
        return not normalized["start"] and not normalized["end"]

    def sanitize(self, value: Any) -> dict[str, str]:
        normalized = self.normalize(value)
        result: dict[str, str] = {}
        for side in ("start", "end"):
            cleaned = strip_tags(normalized[side]) if normalized[side] else ""
            result[side] = cleaned if is_valid_date(cleaned) else ""
        return result

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        value = self.normalize(value)
        start, end = value["start"], value["end"]
        label = field.display_label

        if self.is_required(field) and (not start or not end):
            return required_error(field, f"{label} requires both start and end dates.")
        if not start and not end:
            return None

        if start and not is_valid_date(start):
            return fail(
                ErrorCode.INVALID_START_DATE,
                f"{label} start date must be in YYYY-MM-DD format.",
                field,
            )
        if end and not is_valid_date(end):
            return fail(
                ErrorCode.INVALID_END_DATE,
                f"{label} end date must be in YYYY-MM-DD format.",
                field,
            )

        if start and end and end < start:
            return fail(
                ErrorCode.END_BEFORE_START,
                f"{label} end date cannot be before the start date.",
                field,
            )

        low = field.min if is_valid_date(field.min) else None
        if low is not None:
            if start and start < low:
                return fail(
                    ErrorCode.START_TOO_EARLY,
                    f"{label} start date must be on or after {low}.",
                    field,
                )
            if end and end < low:
                return fail(
                    ErrorCode.END_TOO_EARLY,
                    f"{label} end date must be on or after {low}.",
                    field,
                )

        high = field.max if is_valid_date(field.max) else None
        if high is not None:
            if start and start > high:
                return fail(
                    ErrorCode.START_TOO_LATE,
                    f"{label} start date must be on or before {high}.",
                    field,
                )
            if end and end > high:
                return fail(
                    ErrorCode.END_TOO_LATE,
                    f"{label} end date must be on or before {high}.",
                    field,
                )
        return None

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        value = self.normalize(value)
        pattern = str(field.option("date_format", self.context.date_format))
        parts = [
            self.context.locale.format_date(datetime.strptime(side, "%Y-%m-%d"), pattern)
            for side in (value["start"], value["end"])
            if is_valid_date(side)
        ]
        separator = str(field.option("separator", " - "))
        return escape(separator.join(parts))

    def to_storage(self, value: Any) -> str:
        return json.dumps(self.normalize(value))

    def from_storage(self, stored: Any) -> Any:
        if isinstance(stored, dict):
            return self.normalize(stored)
        if not isinstance(stored, str) or not stored:
            return self.default_value()
        try:
            decoded = json.loads(stored)
        except ValueError:
            return self.default_value()
        return self.normalize(decoded)

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        value = self.normalize(value)
        field_id = self.field_id(field)
        field_name = self.field_name(field)

        shared: dict[str, Any] = {
            "type": "date",
            "min": field.min or None,
            "max": field.max or None,
            "class": field.class_ or None,
        }
        if self.is_required(field):
            shared["required"] = True
            shared["aria-required"] = "true"
        if field.description:
            shared["aria-describedby"] = self.description_id(field)

        sides = [
            {
                "key": side,
                "label": label,
                "attributes": {
                    **shared,
                    "id": f"{field_id}-{side}",
                    "name": f"{field_name}[{side}]",
                    "value": value[side],
                },
            }
            for side, label in (
                ("start", field.option("start_label", "Start Date")),
                ("end", field.option("end_label", "End Date")),
            )
        ]
        return self.render_template(
            self.template,
            field_id=field_id,
            sides=sides,
            description=self.render_description(field),
        )

"""Numeric field types: integer, decimal, currency.

Numeric types treat ``0`` as a value, not as absence: only ``None`` and
``""`` count as empty, so a required number field is satisfied by zero.
Decimal rounding is round-half-up on the decimal string form of the
input, so ``42.565`` rounds to ``42.57`` despite binary float error.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail
from fieldwright.fields.base import AbstractFieldType, Feature


def parse_number(value: Any) -> float | None:
    """Parse *value* as a finite number, or return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return float(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def parse_integer(value: Any) -> int | None:
    """Parse *value* as a whole number, exactly when it is written as one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    number = parse_number(value)
    return None if number is None else int(number)


def round_half_up(value: float, precision: int) -> float:
    """Round *value* to *precision* places, halves away from zero."""
    places = max(precision, 0)
    number = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the requested places.
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return float(number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def step_for_precision(precision: int) -> str:
    """HTML ``step`` for *precision* places (``2`` -> ``"0.01"``)."""
    if precision <= 0:
        return "1"
    return "0." + "0" * (precision - 1) + "1"


class NumberField(AbstractFieldType):
    """Whole numbers; floats are truncated toward zero."""

    features = frozenset({Feature.FILTERABLE, Feature.SORTABLE})

    @property
    def type(self) -> str:
        return "number"

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def parse(self, value: Any) -> float | None:
        return parse_integer(value)

    def sanitize(self, value: Any) -> int:
        number = parse_integer(value)
        return 0 if number is None else number

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        number = self.parse(value)
        label = field.display_label
        if number is None:
            return fail(ErrorCode.NOT_NUMERIC, f"{label} must be a number.", field)
        return self.check_range(self.coerce(number), field)

    def check_range(self, number: float, field: FieldDefinition) -> FieldError | None:
        label = field.display_label
        low = self.bound(field.min)
        if low is not None and number < low:
            return fail(
                ErrorCode.MIN_VALUE,
                f"{label} must be at least {self.describe(low, field)}.",
                field,
            )
        high = self.bound(field.max)
        if high is not None and number > high:
            return fail(
                ErrorCode.MAX_VALUE,
                f"{label} must be no more than {self.describe(high, field)}.",
                field,
            )
        return None

    def coerce(self, number: float) -> float:
        return int(number)

    def bound(self, raw: Any) -> float | None:
        number = parse_number(raw)
        return None if number is None else self.coerce(number)

    def describe(self, number: float, field: FieldDefinition) -> str:
        return str(int(number))

    def default_value(self) -> Any:
        return 0

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        number = self.parse(value)
        if number is None:
            return ""
        return escape(self.describe(self.coerce(number), field))

    def to_storage(self, value: Any) -> str:
        return str(self.sanitize(value))

    def from_storage(self, stored: Any) -> Any:
        return self.sanitize(stored)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        number = self.parse(value)
        attributes: dict[str, Any] = {
            "type": "number",
            "min": self.bound(field.min),
            "max": self.bound(field.max),
            "step": self.step(field),
            "value": "" if number is None else self.render_number(number, field),
        }
        return attributes

    def step(self, field: FieldDefinition) -> Any:
        number = parse_number(field.step)
        return 1 if number is None else int(number)

    def render_number(self, number: float, field: FieldDefinition) -> str:
        return str(int(number))


class DecimalField(NumberField):
    """Floats rounded to the field's ``precision`` (default 2)."""

    @property
    def type(self) -> str:
        return "decimal"

    def parse(self, value: Any) -> float | None:
        return parse_number(value)

    def sanitize(self, value: Any) -> float:
        return self.sanitize_to(value, 2)

    def sanitize_with_field(self, value: Any, field: FieldDefinition) -> float:
        return self.sanitize_to(value, field.precision)

    def sanitize_to(self, value: Any, precision: int) -> float:
        number = parse_number(value)
        return 0.0 if number is None else round_half_up(number, precision)

    def coerce(self, number: float) -> float:
        return number

    def describe(self, number: float, field: FieldDefinition) -> str:
        return f"{number:.{max(field.precision, 0)}f}"

    def default_value(self) -> Any:
        return 0.0

    def to_storage(self, value: Any) -> str:
        number = parse_number(value)
        return repr(0.0 if number is None else float(number))

    def from_storage(self, stored: Any) -> Any:
        number = parse_number(stored)
        return 0.0 if number is None else number

    def step(self, field: FieldDefinition) -> Any:
        return step_for_precision(field.precision)

    def render_number(self, number: float, field: FieldDefinition) -> str:
        return self.describe(number, field)


class CurrencyField(DecimalField):
    """A decimal amount shown with a currency symbol.

    Options: ``currency_symbol`` (default ``$``), ``currency_position``
    (``before`` or ``after``), ``allow_negative`` (default false).
    """

    template = "currency.html"

    @property
    def type(self) -> str:
        return "currency"

    def check_range(self, number: float, field: FieldDefinition) -> FieldError | None:
        if number < 0 and not field.option("allow_negative", False):
            return fail(
                ErrorCode.NEGATIVE_VALUE,
                f"{field.display_label} cannot be negative.",
                field,
            )
        return super().check_range(number, field)

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if parse_number(value) is None:
            return fail(
                ErrorCode.NOT_NUMERIC,
                f"{field.display_label} must be a valid amount.",
                field,
            )
        return super().check_value(value, field)

    def describe(self, number: float, field: FieldDefinition) -> str:
        formatted = f"{number:,.{max(field.precision, 0)}f}"
        symbol = field.option("currency_symbol", "$")
        if self.position(field) == "after":
            return f"{formatted}{symbol}"
        return f"{symbol}{formatted}"

    def position(self, field: FieldDefinition) -> str:
        return "after" if field.option("currency_position") == "after" else "before"

    def render_number(self, number: float, field: FieldDefinition) -> str:
        return f"{number:.{max(field.precision, 0)}f}"

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        attributes = super().input_attributes(field, value)
        if attributes["min"] is None and not field.option("allow_negative", False):
            attributes["min"] = 0
        return attributes

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attributes = self.common_attributes(field)
        attributes.update(self.input_attributes(field, value))
        return self.render_template(
            self.template,
            attributes=attributes,
            symbol=field.option("currency_symbol", "$"),
            position=self.position(field),
            description=self.render_description(field),
        )

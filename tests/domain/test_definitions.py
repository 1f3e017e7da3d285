"""Tests for FieldDefinition and ValidationRules."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fieldwright.domain.definitions import FieldDefinition, ValidationRules


class TestFieldName:
    def test_name_is_lowercased_and_trimmed(self) -> None:
        field = FieldDefinition(name="  Business_Hours ")
        assert field.name == "business_hours"

    @pytest.mark.parametrize("name", ["", "has space", "dot.name", "slash/name", None])
    def test_invalid_names_rejected(self, name: object) -> None:
        with pytest.raises(ValidationError):
            FieldDefinition.model_validate({"name": name})

    def test_hyphen_and_digits_allowed(self) -> None:
        assert FieldDefinition(name="zip-code-2").name == "zip-code-2"

    def test_frozen(self) -> None:
        field = FieldDefinition(name="phone")
        with pytest.raises(ValidationError):
            field.name = "other"  # type: ignore[misc]


class TestDefaults:
    def test_label_derived_from_name(self) -> None:
        assert FieldDefinition(name="price_range").label == "Price Range"
        assert FieldDefinition(name="opening-hours").label == "Opening Hours"

    def test_explicit_label_kept(self) -> None:
        assert FieldDefinition(name="zip", label="Zip Code").label == "Zip Code"

    def test_type_defaults_to_text(self) -> None:
        field = FieldDefinition(name="city")
        assert field.type == "text"
        assert field.required is False
        assert field.precision == 2
        assert field.priority == 10

    def test_class_alias(self) -> None:
        field = FieldDefinition.model_validate({"name": "city", "class": "wide"})
        assert field.class_ == "wide"


class TestOptions:
    def test_list_options_map_value_to_value(self) -> None:
        field = FieldDefinition(name="size", options=["S", "M"])
        assert field.options == {"S": "S", "M": "M"}

    def test_option_keys_become_strings(self) -> None:
        field = FieldDefinition.model_validate({"name": "rating", "options": {1: "One", 2: "Two"}})
        assert field.options == {"1": "One", "2": "Two"}

    def test_none_options_become_empty(self) -> None:
        assert FieldDefinition.model_validate({"name": "x", "options": None}).options == {}

    def test_allowed_types_normalized(self) -> None:
        field = FieldDefinition(name="doc", allowed_types=[".PDF", "Docx"])
        assert field.allowed_types == ["pdf", "docx"]

    def test_priority_and_max_size_are_absolute_ints(self) -> None:
        field = FieldDefinition.model_validate({"name": "x", "priority": "-5", "max_size": "junk"})
        assert field.priority == 5
        assert field.max_size == 0


class TestExtras:
    def test_unknown_keys_read_through_option(self) -> None:
        field = FieldDefinition.model_validate({"name": "notes", "rows": 8})
        assert field.option("rows") == 8
        assert field.option("missing", "fallback") == "fallback"

    def test_none_extra_falls_back_to_default(self) -> None:
        field = FieldDefinition.model_validate({"name": "notes", "rows": None})
        assert field.option("rows", 5) == 5

    def test_display_label_prefers_label(self) -> None:
        assert FieldDefinition(name="zip", label="Postcode").display_label == "Postcode"


class TestValidationRules:
    def test_blank_by_default(self) -> None:
        assert ValidationRules().is_blank()

    def test_not_blank_with_pattern(self) -> None:
        assert not ValidationRules(pattern="[0-9]+").is_blank()

    def test_unknown_rule_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ValidationRules.model_validate({"min_len": 3})

    def test_callback_not_serialized(self) -> None:
        rules = ValidationRules(callback=lambda value, field: True)
        assert "callback" not in rules.model_dump()

"""Tests for checkbox, switch, select, radio, checkbox group, and multi-select."""

from __future__ import annotations

import pytest

from fieldwright.domain.errors import ErrorCode
from fieldwright.fields.base import Feature
from fieldwright.fields.choice import (
    CheckboxField,
    CheckboxGroupField,
    MultiSelectField,
    RadioField,
    SelectField,
    SwitchField,
    to_boolean,
)
from tests.conftest import make_field

AMENITIES = {"wifi": "Wi-Fi", "parking": "Parking", "pets": "Pet Friendly"}


class TestToBoolean:
    @pytest.mark.parametrize("value", [True, 1, 1.0, "1", "true", " YES ", "on"])
    def test_truthy(self, value: object) -> None:
        assert to_boolean(value) is True

    @pytest.mark.parametrize("value", [False, 0, 2, "", "0", "no", "off", None, [], "checked"])
    def test_falsy(self, value: object) -> None:
        assert to_boolean(value) is False


class TestCheckboxField:
    def test_sanitize(self) -> None:
        assert CheckboxField().sanitize("on") is True
        assert CheckboxField().sanitize("") is False

    def test_required_must_be_checked(self) -> None:
        field = make_field("terms", type="checkbox", required=True)
        error = CheckboxField().validate(False, field)
        assert error is not None
        assert error.code == ErrorCode.REQUIRED
        assert error.message == "Terms must be checked."
        assert CheckboxField().validate(True, field) is None

    def test_optional_false_is_valid(self) -> None:
        assert CheckboxField().validate(False, make_field("featured")) is None

    def test_storage(self) -> None:
        checkbox = CheckboxField()
        assert checkbox.to_storage(True) == "1"
        assert checkbox.to_storage(False) == "0"
        assert checkbox.from_storage("1") is True
        assert checkbox.from_storage("0") is False
        assert checkbox.from_storage("") is False

    def test_format_labels(self) -> None:
        field = make_field("featured", yes_label="Featured", no_label="Standard")
        assert CheckboxField().format_value(True, field) == "Featured"
        assert CheckboxField().format_value(False, field) == "Standard"
        assert CheckboxField().format_value(False, make_field("featured")) == "No"

    def test_render(self) -> None:
        field = make_field("featured", placeholder="ignored", checkbox_label="Feature this")
        html = CheckboxField().render(field, True)
        assert html.startswith('<label class="fw-checkbox-label"><input id="fw-field-featured"')
        assert 'type="checkbox" value="1" checked>' in html
        assert "placeholder" not in html
        assert "role=" not in html
        assert '<span class="fw-checkbox-text">Feature this</span>' in html

    def test_render_unchecked(self) -> None:
        assert "checked" not in CheckboxField().render(make_field("featured"), False)


class TestSwitchField:
    def test_type_and_role(self) -> None:
        switch = SwitchField()
        assert switch.type == "switch"
        html = switch.render(make_field("open_now"), "1")
        assert 'role="switch"' in html
        assert 'class="fw-switch-label"' in html

    def test_shares_checkbox_semantics(self) -> None:
        assert SwitchField().to_storage("yes") == "1"


class TestSelectField:
    def test_features(self) -> None:
        assert SelectField().supports(Feature.FILTERABLE)

    def test_invalid_option(self) -> None:
        field = make_field("price_range", options={"$": "$", "$$": "$$"})
        error = SelectField().validate("$$$$$", field)
        assert error is not None and error.code == ErrorCode.INVALID_OPTION
        assert SelectField().validate("$$", field) is None

    def test_sanitize_rejects_lists(self) -> None:
        assert SelectField().sanitize(["a", "b"]) == ""
        assert SelectField().sanitize(3) == "3"

    def test_format_uses_label(self) -> None:
        field = make_field("size", options={"s": "Small", "l": "Large"})
        assert SelectField().format_value("l", field) == "Large"
        assert SelectField().format_value("", field) == ""

    def test_render(self) -> None:
        field = make_field("size", options={"s": "Small", "l": "Large"}, empty_option="Choose")
        html = SelectField().render(field, "l")
        assert html.startswith('<select id="fw-field-size" name="fw_field_size">')
        assert '<option value="">Choose</option>' in html
        assert '<option value="l" selected>Large</option>' in html
        assert '<option value="s">Small</option>' in html


class TestRadioField:
    def test_type(self) -> None:
        assert RadioField().type == "radio"

    def test_render(self) -> None:
        field = make_field("size", label="Size", options={"s": "Small", "l": "Large"}, required=True)
        html = RadioField().render(field, "s")
        assert 'role="radiogroup" aria-required="true"' in html
        assert '<legend class="fw-radio-legend">Size</legend>' in html
        assert 'id="fw-field-size-0" name="fw_field_size" value="s" checked required>' in html
        assert 'id="fw-field-size-1" name="fw_field_size" value="l">' in html

    def test_validates_like_select(self) -> None:
        error = RadioField().validate("m", make_field("size", options={"s": "Small"}))
        assert error is not None and error.code == ErrorCode.INVALID_OPTION


class TestCheckboxGroupField:
    def test_features(self) -> None:
        group = CheckboxGroupField()
        assert group.supports(Feature.FILTERABLE)
        assert group.supports(Feature.REPEATER)

    def test_sanitize(self) -> None:
        group = CheckboxGroupField()
        assert group.sanitize(["wifi", "<b>pets</b>", "", True, None, 3]) == ["wifi", "pets", "3"]
        assert group.sanitize("wifi") == []

    def test_every_key_must_be_an_option(self) -> None:
        field = make_field("amenities", options=AMENITIES)
        assert CheckboxGroupField().validate(["wifi", "pets"], field) is None
        error = CheckboxGroupField().validate(["wifi", "pool"], field)
        assert error is not None and error.code == ErrorCode.INVALID_OPTION

    def test_required_empty_list(self) -> None:
        field = make_field("amenities", options=AMENITIES, required=True)
        error = CheckboxGroupField().validate([], field)
        assert error is not None and error.code == ErrorCode.REQUIRED

    def test_storage_is_json_array(self) -> None:
        group = CheckboxGroupField()
        assert group.to_storage(["wifi", "pets"]) == '["wifi", "pets"]'
        assert group.from_storage('["wifi", "pets"]') == ["wifi", "pets"]
        assert group.from_storage("not json") == []
        assert group.from_storage('{"a": 1}') == []
        assert group.from_storage("") == []

    def test_format_joins_labels(self) -> None:
        field = make_field("amenities", options=AMENITIES)
        assert CheckboxGroupField().format_value(["wifi", "pets"], field) == "Wi-Fi, Pet Friendly"

    def test_render(self) -> None:
        field = make_field("amenities", options=AMENITIES)
        html = CheckboxGroupField().render(field, ["parking"])
        assert '<fieldset class="fw-checkbox-group" id="fw-field-amenities" role="group">' in html
        assert 'name="fw_field_amenities[]" value="parking" checked>' in html
        assert 'name="fw_field_amenities[]" value="wifi">' in html


class TestMultiSelectField:
    def test_render(self) -> None:
        field = make_field("amenities", options=AMENITIES)
        html = MultiSelectField().render(field, ["wifi"])
        assert 'name="fw_field_amenities[]" multiple>' in html
        assert '<option value="wifi" selected>Wi-Fi</option>' in html
        assert '<option value="">' not in html

    def test_storage_matches_checkbox_group(self) -> None:
        assert MultiSelectField().to_storage(["a"]) == CheckboxGroupField().to_storage(["a"])

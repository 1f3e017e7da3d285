"""Tests for the AbstractFieldType defaults shared by concrete types."""

from __future__ import annotations

from typing import Any

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail
from fieldwright.fields.base import AbstractFieldType, Feature, FieldType
from fieldwright.fields.context import FieldContext
from tests.conftest import make_field


class _SlugField(AbstractFieldType):
    """Minimal concrete type that adds one semantic check."""

    @property
    def type(self) -> str:
        return "slug"

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if " " in str(value):
            return fail("invalid_slug", "No spaces.", field)
        return None


class TestContract:
    def test_concrete_type_is_field_type(self) -> None:
        assert isinstance(_SlugField(), FieldType)

    def test_default_features(self) -> None:
        slug = _SlugField()
        assert slug.supports(Feature.SEARCHABLE)
        assert slug.supports("searchable")
        assert not slug.supports(Feature.REPEATER)

    def test_default_context(self) -> None:
        assert _SlugField().context.namespace == "fw"


class TestSanitize:
    def test_strips_tags_and_trims(self) -> None:
        assert _SlugField().sanitize("  <b>hello</b> ") == "hello"

    def test_lists_sanitized_elementwise(self) -> None:
        assert _SlugField().sanitize(["<i>a</i>", 2, True, None]) == ["a", "2", "1", ""]

    def test_unsupported_input_becomes_empty(self) -> None:
        assert _SlugField().sanitize({"a": 1}) == ""


class TestValidate:
    def test_required_gate_runs_first(self) -> None:
        error = _SlugField().validate("", make_field("slug", required=True))
        assert error is not None and error.code == ErrorCode.REQUIRED

    def test_rules_run_before_semantic_check(self) -> None:
        field = make_field("slug", validation={"max_length": 3})
        error = _SlugField().validate("a b c d", field)
        assert error is not None and error.code == ErrorCode.MAX_LENGTH

    def test_semantic_check(self) -> None:
        error = _SlugField().validate("a b", make_field("slug"))
        assert error is not None and error.code == "invalid_slug"

    def test_empty_optional_skips_semantic_check(self) -> None:
        assert _SlugField().validate("", make_field("slug")) is None


class TestDisplayAndStorage:
    def test_format_escapes(self) -> None:
        assert _SlugField().format_value("<b>", make_field()) == "&lt;b&gt;"

    def test_format_joins_lists(self) -> None:
        assert _SlugField().format_value(["a", "b"], make_field()) == "a, b"

    def test_format_none(self) -> None:
        assert _SlugField().format_value(None, make_field()) == ""

    def test_storage_identity(self) -> None:
        slug = _SlugField()
        assert slug.to_storage("abc") == "abc"
        assert slug.from_storage("abc") == "abc"
        assert slug.to_storage(None) == ""
        assert slug.from_storage(None) == ""


class TestMarkupHelpers:
    def test_ids_follow_namespace(self) -> None:
        slug = _SlugField(FieldContext(namespace="apd"))
        field = make_field("slug")
        assert slug.field_id(field) == "apd-field-slug"
        assert slug.field_name(field) == "apd_field_slug"
        assert slug.description_id(field) == "apd-field-slug-description"

    def test_common_attributes(self) -> None:
        field = make_field(
            "slug",
            required=True,
            placeholder="my-slug",
            description="URL part",
            attributes={"data-x": "1"},
            **{"class": "wide"},
        )
        attributes = _SlugField().common_attributes(field)
        assert attributes == {
            "id": "fw-field-slug",
            "name": "fw_field_slug",
            "required": True,
            "aria-required": "true",
            "placeholder": "my-slug",
            "aria-describedby": "fw-field-slug-description",
            "class": "wide",
            "data-x": "1",
        }

    def test_render_includes_description(self) -> None:
        html = _SlugField().render(make_field("slug", description="URL <part>"), "abc")
        assert '<input id="fw-field-slug" name="fw_field_slug"' in html
        assert 'type="text" value="abc"' in html
        assert (
            '<p class="fw-field-description" id="fw-field-slug-description">URL &lt;part&gt;</p>'
            in html
        )

    def test_render_without_description(self) -> None:
        html = _SlugField().render(make_field("slug"), None)
        assert "fw-field-description" not in html
        assert 'value=""' in html

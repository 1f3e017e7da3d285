"""Tests for text, textarea, rich text, and hidden field types."""

from __future__ import annotations

from fieldwright.domain.errors import ErrorCode
from fieldwright.fields.base import Feature
from fieldwright.fields.text import HiddenField, RichTextField, TextareaField, TextField
from tests.conftest import make_field


class TestTextField:
    def test_features(self) -> None:
        text = TextField()
        assert text.supports(Feature.SEARCHABLE)
        assert text.supports(Feature.SORTABLE)
        assert not text.supports(Feature.FILTERABLE)

    def test_sanitize_strips_markup(self) -> None:
        assert TextField().sanitize(" <b>Main</b> Street ") == "Main Street"

    def test_render_mirrors_rules(self) -> None:
        field = make_field(
            "zip",
            validation={"min_length": 5, "max_length": 10, "pattern": "[0-9-]+"},
        )
        html = TextField().render(field, "12345")
        assert 'maxlength="10"' in html
        assert 'minlength="5"' in html
        assert 'pattern="[0-9-]+"' in html
        assert 'value="12345"' in html

    def test_render_required(self) -> None:
        html = TextField().render(make_field("city", required=True), "")
        assert "required" in html
        assert 'aria-required="true"' in html

    def test_render_escapes_value(self) -> None:
        html = TextField().render(make_field("city"), '"><script>')
        assert "<script>" not in html


class TestTextareaField:
    def test_sanitize_keeps_newlines(self) -> None:
        assert TextareaField().sanitize("Mon: 9-5\n<i>Tue</i>: 9-5") == "Mon: 9-5\nTue: 9-5"

    def test_format_converts_newlines(self) -> None:
        html = TextareaField().format_value("Mon <9>\nTue", make_field("hours"))
        assert html == "Mon &lt;9&gt;<br>\nTue"

    def test_render(self) -> None:
        field = make_field("hours", rows=3, validation={"max_length": 200})
        html = TextareaField().render(field, "a & b")
        assert html.startswith('<textarea id="fw-field-hours" name="fw_field_hours" rows="3"')
        assert 'maxlength="200"' in html
        assert ">a &amp; b</textarea>" in html

    def test_default_rows(self) -> None:
        assert 'rows="5"' in TextareaField().render(make_field("hours"), "")

    def test_required_empty(self) -> None:
        error = TextareaField().validate("  ", make_field("hours", required=True))
        assert error is not None and error.code == ErrorCode.REQUIRED


class TestRichTextField:
    def test_allow_list_sanitize(self) -> None:
        html = RichTextField().sanitize('<p onclick="x()">Hi <strong>there</strong><script>bad()</script></p>')
        assert html.startswith("<p>Hi <strong>there</strong>")
        assert "onclick" not in html
        assert "<script>" not in html

    def test_non_string_sanitizes_to_empty(self) -> None:
        assert RichTextField().sanitize(42) == ""

    def test_format_returns_trusted_html(self) -> None:
        assert RichTextField().format_value("<em>ok</em>", make_field("bio")) == "<em>ok</em>"
        assert RichTextField().format_value("", make_field("bio")) == ""

    def test_render_marks_editor(self) -> None:
        html = RichTextField().render(make_field("bio", **{"class": "large"}), "<p>x</p>")
        assert 'class="fw-richtext large"' in html
        assert 'data-editor="richtext"' in html
        assert 'rows="10"' in html
        assert "&lt;p&gt;x&lt;/p&gt;</textarea>" in html


class TestHiddenField:
    def test_no_features(self) -> None:
        hidden = HiddenField()
        assert not any(hidden.supports(feature) for feature in Feature)

    def test_always_valid(self) -> None:
        assert HiddenField().validate("", make_field("token", required=True)) is None

    def test_render_has_no_required_or_description(self) -> None:
        field = make_field("token", required=True, description="Internal", placeholder="x")
        html = HiddenField().render(field, "abc")
        assert html == '<input type="hidden" id="fw-field-token" name="fw_field_token" value="abc">'

    def test_render_keeps_custom_attributes(self) -> None:
        html = HiddenField().render(make_field("token", attributes={"data-k": "v"}), None)
        assert 'value="" data-k="v"' in html

"""Tests for the operation-specific Rich renderers."""

from fieldwright.output.renderers import render_result
from fieldwright.services.result import ServiceError, ServiceResult


class TestListings:
    def test_types_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_types",
            data={
                "items": [
                    {"type": "text", "class": "TextField", "features": ["searchable", "sortable"]},
                    {"type": "gallery", "class": "GalleryField", "features": ["repeater"]},
                ],
                "count": 2,
            },
        )
        output = render_result(result)
        assert "Type" in output and "Searchable" in output
        assert "gallery" in output
        assert "TextField" not in output
        assert output.endswith("2 field types")

    def test_types_table_verbose_shows_class(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_types",
            data={"items": [{"type": "text", "class": "TextField", "features": []}], "count": 1},
        )
        assert "TextField" in render_result(result, verbose=True)

    def test_fields_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_fields",
            data={
                "items": [
                    {
                        "name": "phone",
                        "type": "phone",
                        "label": "Phone",
                        "required": True,
                        "priority": 10,
                        "admin_only": False,
                        "meta_key": "_fw_phone",
                    }
                ],
                "count": 1,
            },
        )
        output = render_result(result)
        assert "phone" in output and "Phone" in output
        assert "_fw_phone" not in output
        assert output.endswith("1 fields")
        assert "_fw_phone" in render_result(result, verbose=True)


class TestProcessed:
    def test_values_listed(self) -> None:
        result = ServiceResult(
            ok=True,
            op="process_fields",
            data={"values": {"city": "Oslo"}, "storage": {"_fw_city": "Oslo"}},
            meta={"checked": 1, "failed": 0},
        )
        output = render_result(result)
        assert output.startswith("OK  process_fields")
        assert "city: Oslo" in output
        assert "_fw_city" not in output
        verbose = render_result(result, verbose=True)
        assert "_fw_city: Oslo" in verbose
        assert "checked: 1" in verbose


class TestMarkup:
    def test_html_printed_verbatim(self) -> None:
        html = '<dl class="fw-field-display-list">\n[b]x[/b]\n</dl>'
        result = ServiceResult(ok=True, op="render_fields", data={"html": html})
        assert render_result(result) == html


class TestErrors:
    def test_field_errors_listed(self) -> None:
        result = ServiceResult(
            ok=False,
            op="process_fields",
            error=ServiceError(
                code="validation_failed",
                message="1 field(s) failed validation",
                detail={"errors": {"email": {"code": "invalid_email", "message": "Bad."}}},
            ),
        )
        output = render_result(result)
        assert output.startswith("ERROR  process_fields: 1 field(s) failed validation")
        assert "email [invalid_email] Bad." in output

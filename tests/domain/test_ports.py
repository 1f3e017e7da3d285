"""Tests for the Attachment model."""

from __future__ import annotations

from fieldwright.domain.ports import Attachment


class TestAttachment:
    def test_extension_from_file_path(self) -> None:
        attachment = Attachment(id=1, url="https://x.test/a", file_path="/up/Menu.PDF")
        assert attachment.extension == "pdf"
        assert attachment.filename == "Menu.PDF"

    def test_extension_falls_back_to_url_without_query(self) -> None:
        attachment = Attachment(id=1, url="https://x.test/img/photo.webp?ver=2")
        assert attachment.extension == "webp"
        assert attachment.filename == ""

    def test_is_image_from_mime_type(self) -> None:
        assert Attachment(id=1, url="u", mime_type="image/png").is_image
        assert not Attachment(id=1, url="u", mime_type="application/pdf").is_image

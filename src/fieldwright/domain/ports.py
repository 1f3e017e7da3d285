"""Collaborator ports consumed by field types.

Field types never reach into a media store, an HTML sanitizer, a locale
layer, or the site configuration directly. They talk to these Protocols,
and the application wires concrete adapters in through ``FieldContext``.
All ports are treated as read-only.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import PurePosixPath
from typing import Protocol

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """A resolved media attachment."""

    model_config = {"frozen": True}

    id: int
    url: str
    file_path: str = ""
    mime_type: str = ""
    alt: str = ""
    sizes: dict[str, str] = Field(default_factory=dict)

    @property
    def filename(self) -> str:
        """Base name of the stored file, or ``""`` when unknown."""
        return PurePosixPath(self.file_path).name if self.file_path else ""

    @property
    def extension(self) -> str:
        """Lowercased file extension without the dot."""
        source = self.file_path or self.url
        return PurePosixPath(source.split("?", 1)[0]).suffix.lower().lstrip(".")

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class AttachmentLookup(Protocol):
    """Resolves attachment ids against an external media store."""

    def resolve(self, attachment_id: int) -> Attachment | None:
        """Return the attachment, or None when the id does not exist."""
        ...

    def is_image(self, attachment_id: int) -> bool:
        """Whether the attachment exists and is an image."""
        ...


class HtmlSanitizer(Protocol):
    """Allow-list HTML sanitizer."""

    def sanitize(self, html: str) -> str:
        """Return *html* with every non-allowed tag and attribute removed."""
        ...


class LocaleFormatter(Protocol):
    """Formats moments for display."""

    def format_date(self, moment: datetime, pattern: str) -> str:
        """Render *moment* using *pattern*."""
        ...


class HostUrlResolver(Protocol):
    """Knows the site's own host name."""

    def home_host(self) -> str:
        """Host of the site's home URL (e.g. ``"example.com"``)."""
        ...

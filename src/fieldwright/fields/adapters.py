"""Default adapters for the collaborator ports.

These are good enough for standalone use and tests. A host application
replaces them through ``FieldContext`` with adapters backed by its own
media store and site configuration.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from urllib.parse import urlsplit

import bleach

from fieldwright.domain.ports import Attachment

ALLOWED_RICH_TAGS: frozenset[str] = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "caption", "cite", "code", "del",
        "div", "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6",
        "hr", "i", "img", "ins", "li", "ol", "p", "pre", "s", "span", "strong",
        "sub", "sup", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
    }
)  # fmt: skip

ALLOWED_RICH_ATTRIBUTES: dict[str, list[str]] = {
    "*": ["class", "id", "title"],
    "a": ["href", "rel", "target"],
    "img": ["src", "alt", "width", "height"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan", "scope"],
}

ALLOWED_PROTOCOLS: frozenset[str] = frozenset({"http", "https", "mailto", "tel"})


class BleachHtmlSanitizer:
    """Allow-list sanitizer for post-style rich text."""

    def __init__(
        self,
        *,
        tags: Iterable[str] = ALLOWED_RICH_TAGS,
        attributes: dict[str, list[str]] | None = None,
        protocols: Iterable[str] = ALLOWED_PROTOCOLS,
    ) -> None:
        self._tags = frozenset(tags)
        self._attributes = attributes if attributes is not None else ALLOWED_RICH_ATTRIBUTES
        self._protocols = frozenset(protocols)

    def sanitize(self, html: str) -> str:
        cleaned = bleach.clean(
            html,
            tags=self._tags,
            attributes=self._attributes,
            protocols=self._protocols,
            strip=True,
            strip_comments=True,
        )
        return cleaned.strip()


class StrftimeFormatter:
    """Formats moments with ``datetime.strftime`` patterns."""

    def format_date(self, moment: datetime, pattern: str) -> str:
        return moment.strftime(pattern)


class StaticHostResolver:
    """Resolves the site host from a fixed home URL."""

    def __init__(self, home_url: str = "http://localhost") -> None:
        self._home_url = home_url

    def home_host(self) -> str:
        return (urlsplit(self._home_url).hostname or "").lower()


class InMemoryAttachmentLookup:
    """Attachment catalogue held in a dict keyed by id."""

    def __init__(self, attachments: Iterable[Attachment] = ()) -> None:
        self._items: dict[int, Attachment] = {a.id: a for a in attachments}

    def add(self, attachment: Attachment) -> None:
        self._items[attachment.id] = attachment

    def resolve(self, attachment_id: int) -> Attachment | None:
        return self._items.get(attachment_id)

    def is_image(self, attachment_id: int) -> bool:
        attachment = self._items.get(attachment_id)
        return attachment is not None and attachment.is_image

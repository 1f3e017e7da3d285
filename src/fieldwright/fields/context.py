"""FieldContext — collaborators and presentation defaults for field types.

A context is built once per application (or per request) and handed to
every field type at construction. It is frozen: field types read from it
but never mutate it, so one set of type instances can serve concurrent
calls without synchronization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jinja2 import Environment

from fieldwright.domain.ports import (
    Attachment,
    AttachmentLookup,
    HostUrlResolver,
    HtmlSanitizer,
    LocaleFormatter,
)
from fieldwright.fields.adapters import (
    BleachHtmlSanitizer,
    InMemoryAttachmentLookup,
    StaticHostResolver,
    StrftimeFormatter,
)
from fieldwright.fields.markup import build_template_environment

if TYPE_CHECKING:
    from fieldwright.config.settings import FieldwrightSettings

DEFAULT_NAMESPACE = "fw"


@dataclass(frozen=True)
class FieldContext:
    """Everything a field type needs beyond the definition and the value.

    Attributes:
        namespace: Prefix for markup ids (``<ns>-field-<name>``), input
            names (``<ns>_field_<name>``), CSS classes, and meta keys.
        date_format / time_format: ``strftime`` patterns used for display
            when a definition does not set its own.
    """

    attachments: AttachmentLookup = field(default_factory=InMemoryAttachmentLookup)
    html_sanitizer: HtmlSanitizer = field(default_factory=BleachHtmlSanitizer)
    locale: LocaleFormatter = field(default_factory=StrftimeFormatter)
    host: HostUrlResolver = field(default_factory=StaticHostResolver)
    namespace: str = DEFAULT_NAMESPACE
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M"
    templates: Environment = field(default_factory=build_template_environment)

    @classmethod
    def from_settings(cls, settings: FieldwrightSettings) -> FieldContext:
        """Build a context from application settings."""
        attachments = InMemoryAttachmentLookup(
            Attachment(id=int(key), **entry.model_dump())
            for key, entry in settings.attachments.items()
        )
        return cls(
            attachments=attachments,
            host=StaticHostResolver(settings.site.home_url),
            namespace=settings.markup.namespace,
            date_format=settings.display.date_format,
            time_format=settings.display.time_format,
            templates=build_template_environment(settings.resolve_path(settings.markup.template_dir)),
        )

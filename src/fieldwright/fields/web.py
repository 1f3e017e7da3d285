"""Contact field types: email, URL, phone.

Each renders as a link in display contexts. URL links get
``rel="noopener noreferrer"`` only when they point off-site, as decided
by the context's ``HostUrlResolver``.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email
from markupsafe import Markup, escape
from pydantic import AnyUrl, TypeAdapter, ValidationError

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.rules import fail
from fieldwright.fields.base import AbstractFieldType, Feature
from fieldwright.fields.markup import strip_tags

URL_SCHEMES = frozenset({"http", "https", "ftp", "ftps"})

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(?![0-9])")
_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_PHONE_DISALLOWED_RE = re.compile(r"[^0-9+\-\s().]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15


class EmailField(AbstractFieldType):
    features = frozenset({Feature.SEARCHABLE, Feature.SORTABLE})

    @property
    def type(self) -> str:
        return "email"

    def sanitize(self, value: Any) -> str:
        if not isinstance(value, str):
            return ""
        return _WHITESPACE_RE.sub("", strip_tags(value))

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if not self.is_valid(str(value)):
            return fail(
                ErrorCode.INVALID_EMAIL,
                f"{field.display_label} must be a valid email address.",
                field,
            )
        return None

    def is_valid(self, email: str) -> bool:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        email = self.sanitize(value)
        if not email or not self.is_valid(email):
            return ""
        return Markup('<a href="mailto:{0}">{0}</a>').format(email)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        return {"type": "email", "value": value if isinstance(value, str) and value else None}


class UrlField(AbstractFieldType):
    """Absolute URLs; bare domains get ``http://`` prepended on sanitize."""

    @property
    def type(self) -> str:
        return "url"

    def sanitize(self, value: Any) -> str:
        if not isinstance(value, str):
            return ""
        url = _WHITESPACE_RE.sub("", strip_tags(value))
        if not url:
            return ""
        scheme = _SCHEME_RE.match(url)
        if scheme is None:
            return f"http:{url}" if url.startswith("//") else f"http://{url}"
        if scheme.group(1).lower() not in URL_SCHEMES:
            return ""
        return url

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if not self.is_absolute(value):
            return fail(ErrorCode.INVALID_URL, f"{field.display_label} must be a valid URL.", field)
        return None

    def is_absolute(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            url = _URL_ADAPTER.validate_python(value)
        except ValidationError:
            return False
        return bool(url.host)

    def is_external(self, url: str) -> bool:
        host = (urlsplit(url).hostname or "").lower()
        if not host:
            return False
        return host != self.context.host.home_host()

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        url = self.sanitize(value)
        if not url:
            return ""
        display = _PROTOCOL_RE.sub("", url).rstrip("/")
        rel = Markup(' rel="noopener noreferrer"') if self.is_external(url) else ""
        return Markup('<a href="{0}" target="_blank"{1}>{2}</a>').format(url, rel, display)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        return {"type": "url", "value": value if isinstance(value, str) and value else None}


class PhoneField(AbstractFieldType):
    """Phone numbers: digits plus ``+ - . ( )`` and spaces, 7 to 15 digits."""

    @property
    def type(self) -> str:
        return "phone"

    def sanitize(self, value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            return ""
        return _PHONE_DISALLOWED_RE.sub("", value).strip()

    def check_value(self, value: Any, field: FieldDefinition) -> FieldError | None:
        text = str(value)
        digits = _NON_DIGIT_RE.sub("", text)
        if _PHONE_DISALLOWED_RE.search(text) or not (
            PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS
        ):
            return fail(
                ErrorCode.INVALID_PHONE,
                f"{field.display_label} must be a valid phone number.",
                field,
            )
        return None

    def tel_href(self, phone: str) -> str:
        """Digits only, keeping a leading ``+``."""
        digits = _NON_DIGIT_RE.sub("", phone)
        return f"+{digits}" if phone.startswith("+") else digits

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        if not isinstance(value, str) or not value.strip():
            return ""
        phone = value.strip()
        return Markup('<a href="tel:{0}">{1}</a>').format(self.tel_href(phone), phone)

    def input_attributes(self, field: FieldDefinition, value: Any) -> dict[str, Any]:
        return {"type": "tel", "value": value if isinstance(value, str) and value else None}

"""Attachment field types: file, image, gallery.

Values are integer attachment ids resolved through the context's
``AttachmentLookup``; ``0`` means "no file". A gallery holds an ordered,
de-duplicated list of ids. Every check that needs the attachment itself
(existence, image-ness, extension) runs after the required gate.
"""

from __future__ import annotations

import json
import math
from typing import Any, ClassVar

from markupsafe import Markup, escape

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import ErrorCode, FieldError
from fieldwright.domain.ports import Attachment
from fieldwright.domain.rules import apply_validation_rules, fail, required_error
from fieldwright.fields.base import AbstractFieldType, Feature

IMAGE_TYPES: tuple[str, ...] = ("jpg", "jpeg", "png", "gif", "webp")
DEFAULT_PREVIEW_SIZE = "thumbnail"


def absint(value: Any) -> int:
    """Absolute integer value of *value*, or ``0`` when unparseable."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, float):
        return abs(int(value)) if math.isfinite(value) else 0
    text = str(value).strip()
    try:
        return abs(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return abs(int(number)) if math.isfinite(number) else 0


def normalize_ids(value: Any) -> list[int]:
    """Positive ids from a list or a comma-separated string, first occurrence wins."""
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return []
    ids: list[int] = []
    for item in items:
        attachment_id = absint(item)
        if attachment_id > 0 and attachment_id not in ids:
            ids.append(attachment_id)
    return ids


class FileField(AbstractFieldType):
    """A single uploaded file referenced by attachment id."""

    features = frozenset()
    template = "file.html"
    default_allowed_types: ClassVar[tuple[str, ...]] = ("pdf", "doc", "docx")
    invalid_type_code: ClassVar[ErrorCode] = ErrorCode.INVALID_FILE_TYPE
    noun: ClassVar[str] = "file"

    @property
    def type(self) -> str:
        return "file"

    def allowed_types(self, field: FieldDefinition) -> list[str]:
        if field.allowed_types is not None:
            return field.allowed_types
        return list(self.default_allowed_types)

    def sanitize(self, value: Any) -> int:
        return absint(value)

    def is_empty(self, value: Any) -> bool:
        return absint(value) <= 0

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        if self.is_empty(value):
            return required_error(field) if self.is_required(field) else None

        attachment = self.context.attachments.resolve(absint(value))
        if attachment is None:
            return fail(
                ErrorCode.INVALID_ATTACHMENT,
                f"{field.display_label} contains an invalid {self.noun}.",
                field,
            )
        error = self.check_attachment(attachment, field)
        if error is not None:
            return error
        return apply_validation_rules(value, field)

    def check_attachment(self, attachment: Attachment, field: FieldDefinition) -> FieldError | None:
        allowed = self.allowed_types(field)
        if allowed and attachment.extension not in allowed:
            return fail(
                self.invalid_type_code,
                f"{field.display_label} must be one of the following types: {', '.join(allowed)}.",
                field,
            )
        return None

    def default_value(self) -> Any:
        return 0

    def to_storage(self, value: Any) -> str:
        return str(absint(value))

    def from_storage(self, stored: Any) -> Any:
        return absint(stored)

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        attachment_id = absint(value)
        if attachment_id <= 0:
            return ""
        attachment = self.context.attachments.resolve(attachment_id)
        if attachment is None:
            return ""
        return self.render_template(
            "file_link.html",
            url=attachment.url,
            filename=attachment.filename or "Download",
        )

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        attachment_id = absint(value)
        attachment = self.context.attachments.resolve(attachment_id) if attachment_id else None
        return self.render_template(
            self.template,
            field=field,
            wrapper_class=self.wrapper_class(field),
            attributes=self.hidden_attributes(field, attachment_id),
            attachment=attachment,
            preview_url=self.preview_url(attachment, field),
            description=self.render_description(field),
        )

    def wrapper_class(self, field: FieldDefinition) -> str:
        base = f"{self.context.namespace}-{self.type}-field"
        return f"{base} {field.class_}" if field.class_ else base

    def hidden_attributes(self, field: FieldDefinition, attachment_id: int) -> dict[str, Any]:
        attributes: dict[str, Any] = {
            "type": "hidden",
            "id": self.field_id(field),
            "name": self.field_name(field),
            "value": attachment_id if attachment_id > 0 else "",
            "data-field-type": self.type,
            "data-allowed-types": ",".join(self.allowed_types(field)),
        }
        if field.max_size > 0:
            attributes["data-max-size"] = field.max_size
        if self.is_required(field):
            attributes["required"] = True
            attributes["aria-required"] = "true"
        if field.description:
            attributes["aria-describedby"] = self.description_id(field)
        return attributes

    def preview_url(self, attachment: Attachment | None, field: FieldDefinition) -> str:
        return attachment.url if attachment is not None else ""


class ImageField(FileField):
    """A single image; the attachment must be an image of an allowed type."""

    template = "image.html"
    default_allowed_types = IMAGE_TYPES
    invalid_type_code = ErrorCode.INVALID_IMAGE_TYPE
    noun = "image"

    @property
    def type(self) -> str:
        return "image"

    def check_attachment(self, attachment: Attachment, field: FieldDefinition) -> FieldError | None:
        if not attachment.is_image:
            return fail(ErrorCode.NOT_AN_IMAGE, f"{field.display_label} must be an image file.", field)
        return super().check_attachment(attachment, field)

    def preview_size(self, field: FieldDefinition) -> str:
        return str(field.option("preview_size", DEFAULT_PREVIEW_SIZE))

    def preview_url(self, attachment: Attachment | None, field: FieldDefinition) -> str:
        if attachment is None:
            return ""
        return attachment.sizes.get(self.preview_size(field), attachment.url)

    def hidden_attributes(self, field: FieldDefinition, attachment_id: int) -> dict[str, Any]:
        attributes = super().hidden_attributes(field, attachment_id)
        attributes["data-preview-size"] = self.preview_size(field)
        return attributes

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        attachment_id = absint(value)
        if attachment_id <= 0:
            return ""
        attachment = self.context.attachments.resolve(attachment_id)
        if attachment is None:
            return ""
        if not attachment.is_image:
            return escape(attachment.url)
        size = str(field.option("display_size", self.preview_size(field)))
        return self.render_template(
            "image_display.html",
            src=attachment.sizes.get(size, attachment.url),
            alt=attachment.alt,
        )


class GalleryField(ImageField):
    """An ordered set of images.

    Options: ``max_files`` (0 means unlimited), ``preview_size``,
    ``display_size``.
    """

    features = frozenset({Feature.REPEATER})
    template = "gallery.html"

    @property
    def type(self) -> str:
        return "gallery"

    def max_files(self, field: FieldDefinition) -> int:
        return absint(field.option("max_files", field.option("max_images", 0)))

    def sanitize(self, value: Any) -> Any:
        return normalize_ids(value)

    def is_empty(self, value: Any) -> bool:
        return not normalize_ids(value)

    def validate(self, value: Any, field: FieldDefinition) -> FieldError | None:
        ids = normalize_ids(value)
        if not ids:
            return required_error(field) if self.is_required(field) else None

        limit = self.max_files(field)
        if limit and len(ids) > limit:
            return fail(
                ErrorCode.MAX_FILES_EXCEEDED,
                f"{field.display_label} cannot contain more than {limit} images.",
                field,
            )

        for attachment_id in ids:
            attachment = self.context.attachments.resolve(attachment_id)
            if attachment is None:
                return fail(
                    ErrorCode.INVALID_ATTACHMENT,
                    f"{field.display_label} contains an invalid image.",
                    field,
                )
            error = self.check_attachment(attachment, field)
            if error is not None:
                return error
        return apply_validation_rules(ids, field)

    def default_value(self) -> Any:
        return []

    def to_storage(self, value: Any) -> str:
        return json.dumps(normalize_ids(value))

    def from_storage(self, stored: Any) -> Any:
        if isinstance(stored, (list, tuple)):
            return normalize_ids(stored)
        if not isinstance(stored, str) or not stored:
            return []
        try:
            decoded = json.loads(stored)
        except ValueError:
            return normalize_ids(stored)
        if isinstance(decoded, int):
            decoded = [decoded]
        return normalize_ids(decoded)

    def format_value(self, value: Any, field: FieldDefinition) -> str:
        ids = normalize_ids(value)
        if not ids:
            return ""
        size = str(field.option("display_size", self.preview_size(field)))
        items = []
        for attachment_id in ids:
            attachment = self.context.attachments.resolve(attachment_id)
            if attachment is None or not attachment.is_image:
                continue
            items.append(
                {
                    "href": attachment.url,
                    "src": attachment.sizes.get(size, attachment.url),
                    "alt": attachment.alt,
                }
            )
        if not items:
            return ""
        return self.render_template("gallery_display.html", items=items)

    def render(self, field: FieldDefinition, value: Any) -> Markup:
        ids = normalize_ids(value)
        limit = self.max_files(field)
        attributes = self.hidden_attributes(field, 0)
        attributes["value"] = ",".join(str(i) for i in ids)
        for key in ("data-field-type", "data-allowed-types", "data-preview-size", "data-max-size"):
            attributes.pop(key, None)

        data: dict[str, Any] = {
            "data-field-type": "gallery",
            "data-field-name": field.name,
            "data-allowed-types": ",".join(self.allowed_types(field)),
            "data-preview-size": self.preview_size(field),
            "data-max-files": limit or None,
        }
        items = []
        for attachment_id in ids:
            attachment = self.context.attachments.resolve(attachment_id)
            if attachment is not None:
                items.append(
                    {
                        "id": attachment_id,
                        "src": self.preview_url(attachment, field),
                        "alt": attachment.alt,
                    }
                )
        return self.render_template(
            self.template,
            wrapper_class=self.wrapper_class(field),
            data=data,
            attributes=attributes,
            items=items,
            count=len(ids),
            limit=limit,
            full=bool(limit) and len(ids) >= limit,
            description=self.render_description(field),
        )

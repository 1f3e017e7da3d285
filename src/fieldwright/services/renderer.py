"""FieldRenderer — form and display markup for registered fields.

Three contexts:

* ``admin`` and ``frontend`` wrap each field type's editable markup with
  a label, a required indicator, and any error messages set on the
  renderer. ``admin_only`` fields are skipped on the frontend.
* ``display`` emits ``<dt>/<dd>`` pairs built from ``format_value``,
  skipping fields whose value or formatted output is empty.

Display formatter strategies run in order over each formatted value and
may rewrite it; their output is treated as trusted markup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from markupsafe import Markup

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.errors import FieldError
from fieldwright.domain.rules import is_empty
from fieldwright.fields.base import FieldType
from fieldwright.fields.registry import FieldRegistry

logger = logging.getLogger(__name__)

DisplayFormatter = Callable[[str, FieldDefinition, Any], str]


class RenderContext(StrEnum):
    ADMIN = "admin"
    FRONTEND = "frontend"
    DISPLAY = "display"


@dataclass(frozen=True)
class FieldGroup:
    """A titled, optionally collapsible set of fields."""

    id: str
    title: str = ""
    description: str = ""
    priority: int = 10
    collapsible: bool = False
    collapsed: bool = False
    fields: tuple[str, ...] = ()


class FieldRenderer:
    """Renders registered fields in one of the three contexts."""

    def __init__(self, registry: FieldRegistry, context: str = RenderContext.ADMIN) -> None:
        self._registry = registry
        self._context = RenderContext(context)
        self._errors: dict[str, list[str]] = {}
        self._groups: dict[str, FieldGroup] = {}
        self._formatters: list[DisplayFormatter] = []

    @property
    def context(self) -> RenderContext:
        return self._context

    def set_context(self, context: str) -> None:
        """Switch context; raises ``ValueError`` for an unknown name."""
        self._context = RenderContext(context)

    @property
    def namespace(self) -> str:
        return self._registry.context.namespace

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def set_errors(self, errors: Mapping[str, FieldError | str | Iterable[str]]) -> None:
        """Messages to show next to fields, keyed by field name."""
        self._errors = {}
        for name, entry in errors.items():
            if isinstance(entry, FieldError):
                messages = [entry.message]
            elif isinstance(entry, str):
                messages = [entry]
            else:
                messages = [str(message) for message in entry]
            self._errors[name] = messages

    def clear_errors(self) -> None:
        self._errors = {}

    @property
    def errors(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._errors.items()}

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def register_group(
        self,
        group_id: str,
        *,
        title: str = "",
        description: str = "",
        priority: int = 10,
        collapsible: bool = False,
        collapsed: bool = False,
        fields: Iterable[str] = (),
    ) -> FieldGroup:
        group = FieldGroup(
            id=group_id,
            title=title,
            description=description,
            priority=priority,
            collapsible=collapsible,
            collapsed=collapsed,
            fields=tuple(fields),
        )
        self._groups[group_id] = group
        return group

    def unregister_group(self, group_id: str) -> bool:
        return self._groups.pop(group_id, None) is not None

    def groups(self) -> list[FieldGroup]:
        """Registered groups ordered by priority."""
        return sorted(self._groups.values(), key=lambda group: group.priority)

    # ------------------------------------------------------------------
    # Display formatters
    # ------------------------------------------------------------------

    def add_display_formatter(self, strategy: DisplayFormatter) -> None:
        self._formatters.append(strategy)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_field(self, name: str, value: Any = None) -> Markup:
        """Markup for one field, or empty markup when it is hidden here."""
        field = self._registry.get_field(name)
        if field is None:
            logger.debug("Skipping unknown field %s", name)
            return Markup("")
        if self._context is not RenderContext.ADMIN and field.admin_only:
            return Markup("")
        field_type = self._registry.field_type_for(field)
        if field_type is None:
            logger.warning("Field %s has unknown type %r", name, field.type)
            return Markup("")

        if value is None:
            value = field.default if field.default is not None else field_type.default_value()

        if self._context is RenderContext.DISPLAY:
            return self._render_display(field, field_type, value)
        return self._render_input(field, field_type, value)

    def render_fields(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        fields: Iterable[str] | None = None,
        exclude: Collection[str] = (),
    ) -> Markup:
        values = values or {}
        if fields is None:
            names = [field.name for field in self._registry.get_fields()]
        else:
            names = list(fields)
        return Markup("").join(
            self.render_field(name, values.get(name)) for name in names if name not in exclude
        )

    def render_group(self, group: FieldGroup, values: Mapping[str, Any] | None = None) -> Markup:
        """A group wrapper around its fields; empty when no field is visible."""
        if not group.fields:
            return Markup("")
        body = self.render_fields(values, fields=group.fields)
        if not body.strip():
            return Markup("")
        return self._render_template("field_group.html", group=group, body=body)

    def render_grouped_fields(self, values: Mapping[str, Any] | None = None) -> Markup:
        """Groups by priority, then every field no group claimed."""
        groups = self.groups()
        if not groups:
            return self.render_fields(values)
        claimed: set[str] = set()
        parts: list[Markup] = []
        for group in groups:
            claimed.update(group.fields)
            parts.append(self.render_group(group, values))
        ungrouped = [f.name for f in self._registry.get_fields() if f.name not in claimed]
        if ungrouped:
            parts.append(self.render_fields(values, fields=ungrouped))
        return Markup("").join(parts)

    def render_display_list(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        fields: Iterable[str] | None = None,
    ) -> Markup:
        """All displayable fields inside a ``<dl>``, regardless of current context."""
        previous = self._context
        self._context = RenderContext.DISPLAY
        try:
            body = self.render_fields(values, fields=fields)
        finally:
            self._context = previous
        return self._render_template("display_list.html", body=body)

    def render(self, values: Mapping[str, Any] | None = None) -> Markup:
        """Everything for the current context, grouped when groups exist."""
        if self._context is RenderContext.DISPLAY:
            return self.render_display_list(values)
        return self.render_grouped_fields(values)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render_input(self, field: FieldDefinition, field_type: FieldType, value: Any) -> Markup:
        shows_label = getattr(field_type, "renders_label", True)
        errors = self._errors.get(field.name, [])
        classes = [f"{self.namespace}-field", f"{self.namespace}-field--{self._context}"]
        if errors:
            classes.append(f"{self.namespace}-field--has-error")
        if field.required and shows_label:
            classes.append(f"{self.namespace}-field--required")
        return self._render_template(
            "field_wrapper.html",
            field=field,
            wrapper_class=" ".join(classes),
            field_id=f"{self.namespace}-field-{field.name}",
            label=field.label if shows_label else "",
            input=field_type.render(field, value),
            errors=errors,
        )

    def _render_display(self, field: FieldDefinition, field_type: FieldType, value: Any) -> Markup:
        if is_empty(value):
            return Markup("")
        formatted = str(field_type.format_value(value, field))
        for strategy in self._formatters:
            formatted = strategy(formatted, field, value)
        if not formatted.strip():
            return Markup("")
        return self._render_template("field_display.html", field=field, value=Markup(formatted))

    def _render_template(self, name: str, **context: Any) -> Markup:
        template = self._registry.context.templates.get_template(name)
        return Markup(template.render(ns=self.namespace, **context))

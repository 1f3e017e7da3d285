"""Command: list registered field types and their feature support."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fieldwright.commands._base import FieldwrightCommand

if TYPE_CHECKING:
    from fieldwright.commands._context import AppContext


@click.command(
    cls=FieldwrightCommand,
    examples="""\
  fieldwright types
  fieldwright --json types
  fieldwright -v types""",
)
@click.pass_obj
def types(app: AppContext) -> None:
    """List registered field types."""
    from fieldwright.fields.base import Feature
    from fieldwright.services.result import ServiceResult

    items = [
        {
            "type": tag,
            "class": type(field_type).__name__,
            "features": [feature.value for feature in Feature if field_type.supports(feature)],
        }
        for tag, field_type in app.registry.field_types().items()
    ]
    app.emit(ServiceResult(ok=True, op="list_types", data={"items": items, "count": len(items)}))

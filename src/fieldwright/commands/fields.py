"""Command: list configured field definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fieldwright.commands._base import FieldwrightCommand

if TYPE_CHECKING:
    from fieldwright.commands._context import AppContext


@click.command(
    cls=FieldwrightCommand,
    examples="""\
  fieldwright fields
  fieldwright fields --type text
  fieldwright fields --orderby name --desc
  fieldwright fields --searchable""",
)
@click.option("--type", "type_name", default=None, help="Only fields of this type.")
@click.option("--searchable/--not-searchable", default=None, help="Filter on searchable.")
@click.option("--filterable/--not-filterable", default=None, help="Filter on filterable.")
@click.option(
    "--orderby",
    type=click.Choice(["priority", "name"]),
    default="priority",
    help="Sort key.",
)
@click.option("--desc", is_flag=True, help="Sort descending.")
@click.pass_obj
def fields(
    app: AppContext,
    type_name: str | None,
    searchable: bool | None,
    filterable: bool | None,
    orderby: str,
    desc: bool,
) -> None:
    """List configured fields in priority order."""
    from fieldwright.services.result import ServiceResult

    registry = app.registry
    definitions = registry.get_fields(
        type=type_name,
        searchable=searchable,
        filterable=filterable,
        orderby=orderby,
        order="desc" if desc else "asc",
    )
    items = [
        {
            "name": field.name,
            "type": field.type,
            "label": field.label,
            "required": field.required,
            "priority": field.priority,
            "admin_only": field.admin_only,
            "meta_key": registry.meta_key(field.name),
        }
        for field in definitions
    ]
    app.emit(ServiceResult(ok=True, op="list_fields", data={"items": items, "count": len(items)}))

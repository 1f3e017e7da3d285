"""Command: render field markup."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from fieldwright.commands._base import FieldwrightCommand

if TYPE_CHECKING:
    from fieldwright.commands._context import AppContext


@click.command(
    cls=FieldwrightCommand,
    examples="""\
  fieldwright render
  fieldwright render listing.json --context display
  fieldwright render listing.json --context frontend --field email
  fieldwright render listing.json --stored""",
)
@click.argument("values", type=click.File("r"), required=False)
@click.option(
    "--context",
    "render_context",
    type=click.Choice(["admin", "frontend", "display"]),
    default="admin",
    help="Rendering context.",
)
@click.option("--field", "only", multiple=True, help="Render only these fields (repeatable).")
@click.option("--stored", is_flag=True, help="VALUES holds meta entries keyed by meta key.")
@click.pass_obj
def render(
    app: AppContext,
    values: IO[str] | None,
    render_context: str,
    only: tuple[str, ...],
    stored: bool,
) -> None:
    """Render markup for VALUES (a JSON object, or - for stdin)."""
    from fieldwright.commands._input import read_values
    from fieldwright.services.result import ServiceResult
    from fieldwright.services.storage import FieldStorage

    submitted = read_values(values)
    if stored:
        submitted = FieldStorage(app.registry).load(submitted)

    renderer = app.renderer(render_context)
    if render_context == "display":
        html = renderer.render_display_list(submitted, fields=only or None)
    elif only:
        html = renderer.render_fields(submitted, fields=only)
    else:
        html = renderer.render(submitted)
    app.emit(
        ServiceResult(
            ok=True,
            op="render_fields",
            data={"context": render_context, "html": str(html)},
        )
    )

"""Command: sanitize and validate submitted values."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from fieldwright.commands._base import FieldwrightCommand

if TYPE_CHECKING:
    from fieldwright.commands._context import AppContext


@click.command(
    cls=FieldwrightCommand,
    examples="""\
  fieldwright check listing.json
  echo '{"email": "owner@example.com"}' | fieldwright check -
  fieldwright --json check listing.json
  fieldwright check listing.json --field email --field phone""",
)
@click.argument("values", type=click.File("r"))
@click.option("--field", "only", multiple=True, help="Check only these fields (repeatable).")
@click.option("--exclude", multiple=True, help="Skip these fields (repeatable).")
@click.pass_obj
def check(app: AppContext, values: IO[str], only: tuple[str, ...], exclude: tuple[str, ...]) -> None:
    """Check a JSON object of field values; exits 1 on validation failure."""
    from fieldwright.commands._input import read_values

    submitted = read_values(values)
    validator = app.validator()
    app.emit(validator.process_fields(submitted, fields=only or None, exclude=exclude))

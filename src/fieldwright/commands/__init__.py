"""Subcommand modules for fieldwright.

Provides register_commands() which uses deferred imports to keep
``fieldwright --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from fieldwright.commands.check import check
    from fieldwright.commands.fields import fields
    from fieldwright.commands.render import render
    from fieldwright.commands.types import types

    cli.add_command(types)
    cli.add_command(fields)
    cli.add_command(check)
    cli.add_command(render)

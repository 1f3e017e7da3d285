"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy registry construction (plugins, stock
fields, configured fields) and centralized result emission.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from fieldwright.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from fieldwright.config.settings import FieldwrightSettings
    from fieldwright.fields.registry import FieldRegistry
    from fieldwright.plugins.manager import PluginManager
    from fieldwright.services.renderer import FieldRenderer
    from fieldwright.services.result import ServiceResult
    from fieldwright.services.validator import FieldValidator


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry is built on first use so ``--help`` and ``--version``
    never load plugins.
    """

    def __init__(self, settings: FieldwrightSettings) -> None:
        self.settings = settings
        self._registry: FieldRegistry | None = None
        self._plugins: PluginManager | None = None

        from fieldwright.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager | None:
        """The loaded plugin manager, or None when plugins are disabled."""
        if self._plugins is None and self.settings.plugins.enabled:
            from fieldwright.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(
                local_dir=self.settings.resolve_path(self.settings.plugins.local_dir)
            )
        return self._plugins

    @property
    def registry(self) -> FieldRegistry:
        """The field registry (created lazily on first access)."""
        if self._registry is None:
            from fieldwright.fields.context import FieldContext
            from fieldwright.fields.registry import create_registry

            registry = create_registry(FieldContext.from_settings(self.settings), self.plugins)
            if self.settings.registry.default_fields:
                registry.register_default_fields()
            try:
                registry.register_fields(self.settings.field_definitions())
                if self.plugins is not None:
                    registry.register_fields(self.plugins.collect_fields())
            except ValidationError as exc:
                msg = f"Invalid field definition: {exc}"
                raise click.ClickException(msg) from exc
            self._registry = registry
        return self._registry

    def validator(self) -> FieldValidator:
        """A validator over the registry with plugin validators appended."""
        from fieldwright.services.validator import FieldValidator

        validator = FieldValidator(self.registry)
        if self.plugins is not None:
            for strategy in self.plugins.collect_validators():
                validator.add_validator(strategy)
        return validator

    def renderer(self, context: str) -> FieldRenderer:
        """A renderer for *context* with plugin display formatters added."""
        from fieldwright.services.renderer import FieldRenderer

        renderer = FieldRenderer(self.registry, context)
        if self.plugins is not None:
            for strategy in self.plugins.collect_display_formatters():
                renderer.add_display_formatter(strategy)
        return renderer

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

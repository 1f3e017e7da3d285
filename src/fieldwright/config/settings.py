"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``FIELDWRIGHT_*`` prefix
  3. TOML file    — ``fieldwright.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`fieldwright.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from fieldwright.config.discovery import find_config
from fieldwright.config.models import (
    AttachmentConfig,
    DisplayConfig,
    MarkupConfig,
    PluginsConfig,
    RegistryConfig,
    SiteConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``fieldwright.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class FieldwrightSettings(BaseSettings):
    """Unified settings for the fieldwright CLI and host applications.

    Attributes:
        project_root: Directory holding ``fieldwright.toml`` (or CWD if no
            config was found); relative paths in the config resolve here.
        config_path: The config file actually loaded, or None.
        fields: ``[fields.<name>]`` tables, each a field definition.
        attachments: ``[attachments.<id>]`` tables for the static catalogue.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FIELDWRIGHT_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (derived from the config location, not read from TOML) ---
    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    markup: MarkupConfig = Field(default_factory=MarkupConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)
    attachments: dict[str, AttachmentConfig] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> FieldwrightSettings:
        """Construct settings from CLI invocation.

        Discovers ``fieldwright.toml`` via walk-up (or explicit
        *config_path*), resolves *project_root* from the config file's
        parent directory, and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def field_definitions(self) -> list[dict[str, Any]]:
        """``[fields.<name>]`` tables as definition mappings, name filled in."""
        return [{**table, "name": table.get("name", name)} for name, table in self.fields.items()]

    def resolve_path(self, path: Path | None) -> Path | None:
        """Anchor a configured relative path at the project root."""
        if path is None:
            return None
        return path if path.is_absolute() else self.project_root / path

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fieldwright.toml only contains
overrides. An empty file gives the stock listing fields under the ``fw``
namespace.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# --- fieldwright.toml sections ---


class MarkupConfig(BaseModel):
    """[markup] section."""

    model_config = {"frozen": True}

    namespace: str = "fw"
    template_dir: Path | None = None


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M"


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    home_url: str = "http://localhost"


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    default_fields: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: Path | None = None


class AttachmentConfig(BaseModel):
    """One [attachments.<id>] entry of the static attachment catalogue."""

    model_config = {"frozen": True}

    url: str
    file_path: str = ""
    mime_type: str = ""
    alt: str = ""
    sizes: dict[str, str] = Field(default_factory=dict)

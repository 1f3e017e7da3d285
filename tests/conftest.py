"""Shared pytest fixtures and test helpers for fieldwright tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from fieldwright.domain.definitions import FieldDefinition
from fieldwright.domain.ports import Attachment
from fieldwright.fields.adapters import InMemoryAttachmentLookup, StaticHostResolver
from fieldwright.fields.context import FieldContext
from fieldwright.fields.registry import FieldRegistry, create_registry

HOME_URL = "https://listings.example.com"

ATTACHMENTS = (
    Attachment(
        id=10,
        url="https://listings.example.com/uploads/storefront.jpg",
        file_path="/uploads/storefront.jpg",
        mime_type="image/jpeg",
        alt="Storefront",
        sizes={
            "thumbnail": "https://listings.example.com/uploads/storefront-150x150.jpg",
            "medium": "https://listings.example.com/uploads/storefront-300x200.jpg",
        },
    ),
    Attachment(
        id=11,
        url="https://listings.example.com/uploads/logo.png",
        file_path="/uploads/logo.png",
        mime_type="image/png",
        alt="Logo",
    ),
    Attachment(
        id=20,
        url="https://listings.example.com/uploads/menu.pdf",
        file_path="/uploads/menu.pdf",
        mime_type="application/pdf",
    ),
    Attachment(
        id=30,
        url="https://listings.example.com/uploads/icon.svg",
        file_path="/uploads/icon.svg",
        mime_type="image/svg+xml",
    ),
)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def context() -> FieldContext:
    """Field context with a small attachment catalogue and a fixed home host."""
    return FieldContext(
        attachments=InMemoryAttachmentLookup(ATTACHMENTS),
        host=StaticHostResolver(HOME_URL),
    )


@pytest.fixture
def registry(context: FieldContext) -> FieldRegistry:
    """Registry with every built-in field type and no fields."""
    return create_registry(context)


@pytest.fixture
def listing_registry(registry: FieldRegistry) -> FieldRegistry:
    """Registry holding the stock listing fields."""
    registry.register_default_fields()
    return registry


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty working directory isolated from any outer fieldwright.toml."""
    monkeypatch.delenv("FIELDWRIGHT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_field(name: str = "sample", **kwargs: Any) -> FieldDefinition:
    """Build a FieldDefinition, going through validation like config does."""
    return FieldDefinition.model_validate({"name": name, **kwargs})


@pytest.fixture
def _isolated_cli(project_root: Path) -> Iterator[Path]:
    """Run CLI commands in an empty project and restore logging afterwards.

    Every invocation reconfigures the root logger for the runner's streams.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    package_level = logging.getLogger("fieldwright").level
    yield project_root
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("fieldwright").setLevel(package_level)

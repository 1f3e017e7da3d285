"""Reading submitted values for the form commands."""

from __future__ import annotations

import json
from typing import IO, Any

import click


def read_values(stream: IO[str] | None) -> dict[str, Any]:
    """Parse a JSON object of field values from *stream* (None gives ``{}``)."""
    if stream is None:
        return {}
    raw = stream.read()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {stream.name}: {exc}"
        raise click.ClickException(msg) from exc
    if not isinstance(data, dict):
        msg = f"Expected a JSON object of field values in {stream.name}"
        raise click.ClickException(msg)
    return data

"""Markup helpers: attribute strings, tag stripping, and template loading.

Every field type renders through a Jinja2 environment with autoescaping
enabled. Attribute dicts are turned into pre-escaped ``Markup`` so they
can be dropped into templates unchanged.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import bleach
from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader
from markupsafe import Markup, escape

_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_WHITESPACE = re.compile(r"\s+")
_INLINE_WHITESPACE = re.compile(r"[ \t\f\v]+")


def build_attributes(attributes: Mapping[str, Any]) -> Markup:
    """Render an attribute mapping as an HTML attribute string.

    ``True`` renders the bare attribute name; ``False`` and ``None`` are
    omitted entirely; everything else renders as ``key="escaped value"``.
    """
    parts: list[str] = []
    for key, value in attributes.items():
        if value is True:
            parts.append(str(escape(key)))
        elif value is False or value is None:
            continue
        else:
            parts.append(f'{escape(key)}="{escape(_attribute_text(value))}"')
    return Markup(" ".join(parts))


def _attribute_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def strip_tags(text: str, *, keep_newlines: bool = False) -> str:
    """Remove every tag from *text* and trim it.

    Script and style blocks are dropped with their content. Entities are
    decoded, and the result is re-stripped until it is stable, so the
    output is a fixed point: stripping it again returns it unchanged.
    Runs of whitespace collapse to one space unless *keep_newlines*.
    """
    current = text
    # Each pass removes markup or decodes one entity level; the text never grows.
    while True:
        cleaned = _strip_once(current, keep_newlines=keep_newlines)
        if cleaned == current:
            return current
        current = cleaned


def _strip_once(text: str, *, keep_newlines: bool) -> str:
    text = _SCRIPT_STYLE.sub("", text)
    text = bleach.clean(text, tags=set(), attributes={}, strip=True, strip_comments=True)
    text = html.unescape(text)
    if keep_newlines:
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        text = "\n".join(_INLINE_WHITESPACE.sub(" ", line).strip() for line in lines)
    else:
        text = _WHITESPACE.sub(" ", text)
    return text.strip()


def build_template_environment(template_dir: Path | None = None) -> Environment:
    """Build the Jinja2 environment used by field types and renderers.

    Templates in *template_dir* (when given) override the packaged
    defaults file by file.
    """
    loaders: list[BaseLoader] = []
    if template_dir is not None:
        loaders.append(FileSystemLoader(str(template_dir)))
    loaders.append(PackageLoader("fieldwright", "templates/fields"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["attrs"] = build_attributes
    return env

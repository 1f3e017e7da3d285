"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from fieldwright.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from fieldwright.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if result.op == "render_fields":
        return str(result.data.get("html", ""))
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_item_label(item) for item in items if isinstance(item, dict))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _item_label(item: dict[str, Any]) -> str:
    return str(item.get("name") or item.get("type") or "")


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "fw.ok"), (f"  {result.op}", "fw.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(",", ":"))
    else:
        text = str(value)
    console.print(Text.assemble((f"  {key}: ", "fw.key"), text))


def _flag(value: Any) -> Text:
    return Text("yes", style="fw.yes") if value else Text("-", style="fw.no")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "fw.error"), (f"  {result.op}", "fw.op"), f": {msg}"))

    if err is None:
        return
    for name, entry in err.field_errors.items():
        console.print(
            Text.assemble(
                (f"  {name}", "fw.name"),
                (f" [{entry.get('code', '')}]", "fw.code"),
                f" {entry.get('message', '')}",
            )
        )
    if verbose:
        for k, v in err.detail.items():
            if k != "errors":
                console.print(f"    {k}: {v}")
        _render_meta(console, result)


# ── Listing renderers ─────────────────────────────────────────────────


def _render_types(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="fw.type", no_wrap=True)
    table.add_column("Searchable", justify="center")
    table.add_column("Filterable", justify="center")
    table.add_column("Sortable", justify="center")
    table.add_column("Repeater", justify="center")
    if verbose:
        table.add_column("Class", style="dim")

    for item in items:
        features = item.get("features", [])
        row: list[Any] = [
            str(item.get("type", "")),
            _flag("searchable" in features),
            _flag("filterable" in features),
            _flag("sortable" in features),
            _flag("repeater" in features),
        ]
        if verbose:
            row.append(str(item.get("class", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} field types")


def _render_fields(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="fw.name", no_wrap=True)
    table.add_column("Type", style="fw.type")
    table.add_column("Label")
    table.add_column("Required", justify="center")
    table.add_column("Priority", justify="right")
    if verbose:
        table.add_column("Meta key", style="dim")
        table.add_column("Admin only", justify="center")

    for item in items:
        row: list[Any] = [
            str(item.get("name", "")),
            str(item.get("type", "")),
            str(item.get("label", "")),
            _flag(item.get("required")),
            str(item.get("priority", "")),
        ]
        if verbose:
            row.append(str(item.get("meta_key", "")))
            row.append(_flag(item.get("admin_only")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} fields")


# ── Form renderers ────────────────────────────────────────────────────


def _render_processed(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    values = result.data.get("values", {})
    storage = result.data.get("storage", {})
    for name, value in values.items():
        _field(console, name, value)
    if verbose and storage:
        console.print()
        console.print(Text("  storage:", style="dim"))
        for key, stored in storage.items():
            console.print(Text.assemble((f"    {key}: ", "fw.key"), stored))
    if verbose:
        _render_meta(console, result)


def _render_markup(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(str(result.data.get("html", "")), markup=False, soft_wrap=True)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "list_types": _render_types,
    "list_fields": _render_fields,
    "process_fields": _render_processed,
    "render_fields": _render_markup,
}

"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from graphwalk.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from graphwalk.services.result import ServiceResult

# Per-level cap on listed vertex ids outside --verbose.
_MAX_VERTICES_SHOWN = 50


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
    """Render minimal output for ``--quiet`` mode.

    ``traverse`` prints one line of vertex ids per level; ``generate``
    prints the first vertices, one per line, ready to feed back to ``-i``.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "traverse":
        return "\n".join(" ".join(lvl.get("vertices", [])) for lvl in result.data.get("levels", []))
    if result.op == "generate":
        return "\n".join(result.data.get("first_vertices", []))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="gw.ok")
    op = Text(f"  {result.op}", style="gw.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gw.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="gw.id")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"

    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _vertex_list(vertices: list[str], *, verbose: bool) -> str:
    if verbose or len(vertices) <= _MAX_VERTICES_SHOWN:
        return ", ".join(vertices)
    shown = ", ".join(vertices[:_MAX_VERTICES_SHOWN])
    return f"{shown}, … (+{len(vertices) - _MAX_VERTICES_SHOWN} more)"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="gw.error")
    op = Text(f"  {result.op}", style="gw.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Traverse renderer ─────────────────────────────────────────────────


def _render_traverse(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render per-level frontiers with counts and timings."""
    d = result.data
    _status_line(console, result)
    start = str(d.get("start_vertex_id", ""))
    if d.get("sampled"):
        start += " (sampled)"
    _field(console, "start_vertex_id", start)
    _field(console, "vertex_table", d.get("vertex_table", ""))
    _field(console, "edge_table", d.get("edge_table", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Level", style="gw.level", justify="right")
    table.add_column("Count", style="gw.count", justify="right")
    table.add_column("Elapsed (ms)", style="gw.timing", justify="right")
    table.add_column("Vertices", style="gw.id")
    for lvl in d.get("levels", []):
        table.add_row(
            str(lvl.get("level", "")),
            str(lvl.get("count", 0)),
            f"{float(lvl.get('elapsed_ms', 0.0)):.2f}",
            _vertex_list(list(lvl.get("vertices", [])), verbose=verbose),
        )
    console.print()
    console.print(table)

    total = d.get("total_vertex_count", 0)
    elapsed = float(d.get("elapsed_ms", 0.0))
    console.print(f"\nTime elapsed: {elapsed:.2f}ms for getting {total} vertices")

    if verbose:
        _render_meta(console, result)


# ── Generate renderer ─────────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render generated table names, counts, and first vertices."""
    d = result.data
    _status_line(console, result)
    for key in ("vertex_table", "edge_table", "vertex_count", "edge_count"):
        if key in d:
            _field(console, key, d[key])
    if d.get("seed") is not None:
        _field(console, "seed", d["seed"])

    firsts = d.get("first_vertices", [])
    _field(console, "first_vertices", len(firsts))
    for vertex_id in firsts:
        console.print(f"    [gw.id]{vertex_id}[/gw.id]")

    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "traverse": _render_traverse,
    "generate": _render_generate,
}

"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from notereap.output.console import PATH_SEPARATOR, create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from notereap.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode: paths only for lists."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("path", "")) for item in items if isinstance(item, dict))
    deleted = result.data.get("deleted")
    if deleted and isinstance(deleted, list):
        return "\n".join(str(p) for p in deleted)
    return f"OK: {result.op}"


def render_candidates(items: list[dict[str, Any]], *, width: int | None = None) -> str:
    """Render a deletion candidate list (used by the confirmation prompt)."""
    console = create_console(width=width)
    _candidate_list(console, items)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="nr.ok")
    op = Text(f"  {result.op}", style="nr.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="nr.key")
    v = Text(str(value), style="nr.path" if key in ("root", "target") else "")
    console.print(Text.assemble(k, v))


def _path_text(path: str) -> Text:
    text = Text()
    parts = path.split("/")
    for i, part in enumerate(parts):
        if i:
            text.append(PATH_SEPARATOR, style="nr.sep")
        text.append(part, style="nr.path" if i == len(parts) - 1 else "")
    return text


def _candidate_list(console: Console, items: list[dict[str, Any]]) -> None:
    """One line per file: path segments joined by ›, extension tag for attachments."""
    console.print(Text(f"Files to be deleted: {len(items)}", style="nr.warning"))
    for item in items:
        line = Text("  ")
        line.append_text(_path_text(str(item["path"])))
        if item.get("kind") == "attachment" and item.get("extension"):
            line.append("  ")
            line.append(f" {str(item['extension']).upper()} ", style="nr.tag")
        console.print(line)


def _render_meta(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    if verbose and result.meta:
        console.print(Text("  meta:", style="dim"))
        for k, v in result.meta.items():
            console.print(f"    {k}: {v}")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "root", data.get("root", ""))
    _field(console, "scope", data.get("scope", ""))
    _field(console, "recursive", data.get("recursive", ""))
    if data.get("message"):
        console.print(Text(f"  {data['message']}", style="nr.warning"))
        return
    _candidate_list(console, data.get("items", []))
    _render_meta(console, result, verbose=verbose)


def _render_delete(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    if data.get("message"):
        console.print(Text(f"  {data['message']}", style="nr.ok"))
    _field(console, "deleted", data.get("deleted_count", 0))
    if data.get("backed_up"):
        _field(console, "backed up", len(data["backed_up"]))
    if data.get("rewritten"):
        _field(console, "references cleaned in", len(data["rewritten"]))
        if verbose:
            for path in data["rewritten"]:
                console.print(Text("    ").append_text(_path_text(path)))
    _render_meta(console, result, verbose=verbose)


def _render_backlinks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "target", data.get("target", ""))
    items = data.get("items", [])
    if not items:
        console.print(Text("  No backlinks.", style="dim"))
        return
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Referrer")
    table.add_column("Lines", justify="right")
    table.add_column("Kind")
    for item in items:
        table.add_row(
            _path_text(str(item["path"])),
            ", ".join(str(n) for n in item.get("lines", [])),
            ", ".join(item.get("kinds", [])),
        )
    console.print(table)


def _render_index(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("documents", "references", "unresolved", "indexed", "removed", "components"):
        _field(console, key, data.get(key, 0))
    for key in ("orphans", "unreferenced_attachments"):
        paths = data.get(key, [])
        _field(console, key, len(paths))
        if verbose:
            for path in paths:
                console.print(Text("    ").append_text(_path_text(path)))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    _render_meta(console, result, verbose=verbose)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(Text.assemble(("ERROR", "nr.error"), (f"  {result.op}", "nr.op")))
    console.print(Text(f"  {msg}"))
    if result.error and result.error.code:
        console.print(Text(f"  code: {result.error.code}", style="nr.key"))
    if verbose and result.error and result.error.detail:
        for k, v in result.error.detail.items():
            console.print(f"    {k}: {v}")
    failures = result.data.get("failures") if result.data else None
    if failures:
        for failure in failures:
            line = Text(f"  {failure['op']} failed: ", style="nr.warning")
            line.append_text(_path_text(str(failure["path"])))
            console.print(line)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "plan": _render_plan,
    "delete": _render_delete,
    "backlinks": _render_backlinks,
    "index": _render_index,
}

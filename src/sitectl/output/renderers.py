"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
pulls the text out with ``get_output(console)``. Renderers are dispatched
by ``result.op`` in :func:`render_result`, unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from sitectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from sitectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich.

    Plain text (no ANSI) comes back whenever Rich sees no terminal, which
    covers Click's CliRunner and piped output.
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
        return f"ERROR: {result.op} — {msg}"

    # The single most useful value per op, when there is one.
    for key in ("new_path", "url", "link", "path"):
        value = result.data.get(key)
        if value:
            return str(value)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="site.ok")
    op = Text(f"  {result.op}", style="site.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="site.key")
    if key in ("content_type", "id"):
        v = Text(str(value), style="site.id")
    elif key in ("path", "new_path", "source", "output"):
        v = Text(str(value), style="site.path")
    elif key in ("title", "heading", "name"):
        v = Text(str(value), style="site.title")
    elif key in ("url", "link"):
        v = Text(str(value), style="site.url")
    elif isinstance(value, (list, tuple)):
        v = Text(", ".join(str(item) for item in value) or "-")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _fields(console: Console, result: ServiceResult, keys: tuple[str, ...]) -> None:
    for key in keys:
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, timing spans included (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry" and isinstance(v, dict):
            duration = v.get("duration_ms", 0.0)
            style = "yellow" if duration > 100 else "dim"
            console.print(f"    [{style}]{duration:>8.2f}ms[/{style}]  {v.get('name', '?')}")
        else:
            console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="site.error")
    op = Text(f"  {result.op}", style="site.op")
    dash = Text(" — ")
    console.print(label, op, dash, Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Resolution renderers ──────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    _field(console, "content_type", result.data.get("content_type") or "-")
    _fields(console, result, ("name", "folder_pattern"))

    candidates = result.data.get("candidates") or []
    if verbose and candidates:
        chosen = result.data.get("content_type")
        conflicts = set(result.data.get("conflicts") or [])
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Candidate", style="site.id", no_wrap=True)
        table.add_column("Status")
        for type_id in candidates:
            if type_id == chosen:
                status = "selected"
            elif type_id in conflicts:
                status = "conflict"
            else:
                status = "less specific"
            table.add_row(type_id, status)
        console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_types(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    types: list[dict[str, Any]] = result.data.get("types", [])
    if not types:
        console.print(Text("  No content types configured.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="site.id", no_wrap=True)
    table.add_column("Name", style="site.title")
    table.add_column("Folder")
    table.add_column("Depth", justify="right")
    table.add_column("Mode")
    table.add_column("Enabled")
    if verbose:
        table.add_column("Link base", style="dim")

    for item in types:
        enabled = Text("yes") if item.get("enabled") else Text("no", style="site.disabled")
        row: list[str | Text] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("folder_pattern", "")) or "(root)",
            str(item.get("depth", "")),
            str(item.get("creation_mode", "")),
            enabled,
        ]
        if verbose:
            row.append(str(item.get("link_base_path") or "-"))
        table.add_row(*row)
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/rename/standardize/process_new_file results."""
    _status_line(console, result)
    _fields(
        console,
        result,
        ("path", "new_path", "title", "content_type", "source", "added", "extended"),
    )
    if result.data.get("dry_run"):
        changed = "would change" if result.data.get("changed") else "no changes"
        _field(console, "dry_run", changed)
    elif "written" in result.data and not result.data["written"]:
        console.print(Text("  unchanged", style="dim"))
    if verbose:
        _render_meta(console, result)


def _render_convert(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    summary = result.data.get("summary", "")
    if result.data.get("dry_run"):
        summary += " (dry run)"
    console.print(Text(f"  {summary}"))
    if verbose:
        for ref in result.data.get("skipped_refs", []):
            console.print(Text(f"    skipped: {ref}", style="dim"))
        _render_meta(console, result)


def _render_link(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render rewrite_link and heading_link: the link itself first."""
    link = result.data.get("link") or result.data.get("url", "")
    console.print(Text(str(link), style="site.url"))
    if verbose:
        _fields(console, result, ("ref", "path", "heading", "line", "content_type", "format"))
        if result.data.get("skipped"):
            console.print(Text("  unresolved, left unchanged", style="dim"))
        _render_meta(console, result)


def _render_inspect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _fields(console, result, ("path", "content_type", "candidate", "reason"))
    if verbose:
        _render_meta(console, result)


def _render_migrate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "migrated", result.data.get("migrated", []))
    _fields(console, result, ("output",))
    for key, value in (result.data.get("site") or {}).items():
        _field(console, f"site.{key}", value)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ─────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS = {
    "resolve": _render_resolve,
    "list_types": _render_types,
    "create": _render_mutation,
    "process_new_file": _render_mutation,
    "standardize": _render_mutation,
    "rename": _render_mutation,
    "convert_links": _render_convert,
    "rewrite_link": _render_link,
    "heading_link": _render_link,
    "inspect_new_file": _render_inspect,
    "migrate": _render_migrate,
}

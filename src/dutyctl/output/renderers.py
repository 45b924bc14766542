"""Human-readable rendering of ServiceResult, one renderer per op.

Renderers draw into a buffered Rich console (see ``output.console``);
ops without a dedicated renderer are printed as key/value fields. Under
``--verbose`` every successful render ends with the ``meta`` block,
including the telemetry span tree.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from rich.table import Table
from rich.text import Text

from dutyctl.output.console import create_console, get_output, style_for_band, style_for_level

if TYPE_CHECKING:
    from rich.console import Console

    from dutyctl.services.result import ServiceResult

Renderer: TypeAlias = Callable[..., None]

_SLOW_MS = 1000
_SLUGGISH_MS = 100


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Rich text for *result*; plain text when not writing to a terminal."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
        if verbose and result.meta:
            _render_meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per id for lists and scopes, the index for fairness, else a status."""
    if not result.ok:
        code = result.error.code if result.error else "ERROR"
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} [{code}] {message}"

    data = result.data
    if isinstance(data.get("items"), list) and data["items"]:
        return "\n".join(filter(None, map(_item_id, data["items"])))
    if result.op in {"resolve_scope", "resolve_principal_scope"}:
        return "\n".join(data.get("unit_ids", []))
    if result.op == "fairness_report":
        return str(data.get("fairness_index", ""))
    return f"OK: {result.op}"


def _item_id(item: Any) -> str:
    if not isinstance(item, dict):
        return ""
    value = item.get("id", item.get("personnel_id"))
    return "" if value is None else str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="duty.ok"), Text(f"  {result.op}", style="duty.op"))


_FIELD_STYLES = {"path": "duty.path", "name": "duty.name"}


def _field(console: Console, key: str, value: Any) -> None:
    """``  key: value`` with ids, paths and names styled."""
    if isinstance(value, (dict, list)):
        shown = Text(_json.dumps(value, separators=(",", ":")))
    elif key == "id" or key.endswith("_id"):
        shown = Text(str(value), style="duty.id")
    else:
        shown = Text(str(value), style=_FIELD_STYLES.get(key, ""))
    console.print(Text(f"  {key}: ", style="duty.key"), shown, sep="")


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            _render_span(console, value, depth=1)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], depth: int) -> None:
    """One line per span, children indented, slow spans highlighted."""
    duration = float(span.get("duration_ms", 0.0))
    if duration > _SLOW_MS:
        style = "bold red"
    elif duration > _SLUGGISH_MS:
        style = "yellow"
    else:
        style = "dim"
    line = f"{'    ' * depth}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    if annotations := span.get("annotations"):
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, depth + 1)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    error = result.error
    line = Text.assemble(("ERROR", "duty.error"), (f"  {result.op}", "duty.op"))
    if error is None:
        console.print(line, Text("  Unknown error"))
        return
    console.print(line, Text(f"  [{error.code}]", style="duty.key"), Text(f" {error.message}"))
    if verbose and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(f"    {key}: {value}")


# ── Scope renderers ───────────────────────────────────────────────────


def _render_scope(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render resolve_scope / resolve_principal_scope."""
    d = result.data
    _status_line(console, result)
    for key in ("role", "scope_unit_id", "principal_id"):
        if key in d:
            _field(console, key, d[key] if d[key] is not None else "-")
    if d.get("roles"):
        held = [f"{r['role_name']}@{r.get('scope_unit_id') or '-'}" for r in d["roles"]]
        _field(console, "roles", ", ".join(held))
    _field(console, "universal", d.get("universal", False))
    _field(console, "units", d.get("unit_count", 0))
    _field(console, "personnel", d.get("personnel_count", 0))
    if verbose:
        _field(console, "unit_ids", ", ".join(d.get("unit_ids", [])) or "-")
        _field(console, "personnel_ids", ", ".join(d.get("personnel_ids", [])) or "-")


def _render_tree(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render unit_tree as an indented outline."""
    items = result.data.get("items", [])
    for item in items:
        indent = "  " * int(item.get("depth", 0))
        level = str(item.get("level", ""))
        line = Text(indent)
        line.append(str(item.get("name", "")), style="duty.name")
        line.append(f"  {item.get('id', '')}", style="duty.id")
        line.append(f"  {level}", style=style_for_level(level))
        console.print(line)
    console.print(f"\n{result.data.get('count', len(items))} units")


# ── Eligibility renderers ─────────────────────────────────────────────


def _render_eligibility(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    eligible = bool(d.get("eligible"))
    verdict = Text(
        "ELIGIBLE" if eligible else "NOT ELIGIBLE",
        style="duty.ok" if eligible else "duty.error",
    )
    console.print(verdict, Text(f"  {d.get('personnel_id')} for {d.get('duty_type_id')}"))
    for name, passed in d.get("checks", {}).items():
        mark = "[duty.ok]pass[/duty.ok]" if passed else "[duty.error]fail[/duty.error]"
        console.print(f"  {name}: {mark}")


def _render_roster(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render eligible_roster as a table, lowest score first."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("ID", style="duty.id", no_wrap=True)
    table.add_column("Name", style="duty.name")
    table.add_column("Unit")
    table.add_column("Score", style="duty.score", justify="right")
    for item in items:
        table.add_row(
            str(item.get("position", "")),
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("unit_id", "")),
            f"{float(item.get('score', 0)):.2f}",
        )
    console.print(table)
    count = result.data.get("count", len(items))
    candidates = result.data.get("candidates", count)
    console.print(f"\n{count} eligible of {candidates} in scope")


# ── Fairness renderer ─────────────────────────────────────────────────


def _ranked_table(title: str, rows: list[dict[str, Any]]) -> Table:
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("ID", style="duty.id", no_wrap=True)
    table.add_column("Score", style="duty.score", justify="right")
    for row in rows:
        table.add_row(
            str(row.get("position", "")),
            str(row.get("personnel_id", "")),
            f"{float(row.get('score', 0)):.2f}",
        )
    return table


def _render_fairness(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    band = str(d.get("band", ""))
    index = Text(f"{float(d.get('fairness_index', 0)):.1f}", style=style_for_band(band))
    console.print(Text("Fairness index: ", style="bold"), index, Text(f"  ({band})"))
    _field(console, "population", d.get("count", 0))
    _field(console, "mean", f"{float(d.get('mean', 0)):.2f}")
    _field(console, "std_dev", f"{float(d.get('std_dev', 0)):.2f}")
    if d.get("highest"):
        console.print()
        console.print(_ranked_table("Highest load", d["highest"]))
    if d.get("lowest"):
        console.print()
        console.print(_ranked_table("Lowest load", d["lowest"]))


# ── Standby renderer ──────────────────────────────────────────────────


def _render_standby(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("duty_type_id", "start", "end", "days", "slots_per_period", "slots"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        for start, end in d.get("periods", []):
            console.print(f"    {start} .. {end}")


# ── Role renderer ─────────────────────────────────────────────────────


def _render_role_change(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "principal_id", d.get("principal_id"))
    _field(console, "added", d.get("added"))
    if d.get("saved"):
        _field(console, "saved", True)
    _field(console, "primary_role", d.get("primary_role") or "-")
    for role in d.get("roles", []):
        console.print(f"    {role['role_name']}  {role.get('scope_unit_id') or '-'}")
    for role in d.get("retired", []):
        console.print(
            f"    [duty.warning]retired[/duty.warning] {role['role_name']}"
            f"  {role.get('scope_unit_id') or '-'}"
        )


# ── Integrity checks ──────────────────────────────────────────────────

_SEVERITY_STYLES = {"error": "duty.error", "warning": "duty.warning"}


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Issues grouped under their category, then an error/warning tally."""
    issues: list[dict[str, Any]] = result.data.get("issues", [])
    if not issues:
        console.print("[duty.ok]OK[/duty.ok]  No issues found.")
        return

    categories: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        categories.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for category, grouped in categories.items():
        console.print(f"\n[bold]{category}[/bold]")
        for issue in grouped:
            severity = str(issue.get("severity", "warning"))
            style = _SEVERITY_STYLES.get(severity)
            label = f"[{style}]{severity}[/{style}]" if style else severity
            subject = f" \\[{issue['id']}]" if issue.get("id") else ""
            console.print(f"  {label}{subject}: {issue.get('message', '')}")
            if verbose and issue.get("kind"):
                console.print(f"    kind: {issue['kind']}")

    n_errors = sum(1 for issue in issues if issue.get("severity") == "error")
    console.print(f"\n{n_errors} errors, {len(issues) - n_errors} warnings")


def _render_hierarchy_errors(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    errors = result.data.get("errors", [])
    if not errors:
        console.print("[duty.ok]OK[/duty.ok]  Hierarchy is valid.")
        return
    for err in errors:
        console.print(
            f"  [duty.error]{err.get('kind')}[/duty.error] \\[{err.get('unit_id')}]: "
            f"{err.get('message', '')}"
        )
    console.print(f"\n{len(errors)} hierarchy errors")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    "resolve_scope": _render_scope,
    "resolve_principal_scope": _render_scope,
    "unit_tree": _render_tree,
    "check_eligibility": _render_eligibility,
    "eligible_roster": _render_roster,
    "fairness_report": _render_fairness,
    "expected_standby": _render_standby,
    "assign_role": _render_role_change,
    "check": _render_check,
    "validate_hierarchy": _render_hierarchy_errors,
}

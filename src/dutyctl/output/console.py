"""Rich console setup for human-readable output.

Renderers draw into an in-memory console and hand back the captured
text, so ``format_result`` stays a plain ``str`` function. Rich drops
color codes on its own when the target is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from dutyctl.domain.types import HierarchyLevel

DEFAULT_WIDTH = 120

_BAND_STYLES = {"good": "bold green", "fair": "yellow", "poor": "bold red"}
_LEVEL_STYLES = {
    HierarchyLevel.BATTALION.value: "bold",
    HierarchyLevel.COMPANY.value: "cyan",
    HierarchyLevel.SECTION.value: "green",
    HierarchyLevel.SUBSECTION.value: "dim",
}

DUTY_THEME = Theme(
    {
        "duty.ok": "bold green",
        "duty.error": "bold red",
        "duty.warning": "bold yellow",
        "duty.op": "bold cyan",
        "duty.key": "dim",
        "duty.id": "bold blue",
        "duty.path": "dim",
        "duty.name": "bold",
        "duty.score": "magenta",
        **{f"duty.band.{band}": style for band, style in _BAND_STYLES.items()},
        **{f"duty.level.{level}": style for level, style in _LEVEL_STYLES.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed console writing to a fresh buffer (see :func:`get_output`)."""
    return Console(
        file=StringIO(),
        theme=DUTY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()


def style_for_band(band: str) -> str:
    """Theme style for a fairness band; empty for anything unrecognised."""
    return f"duty.band.{band}" if band in _BAND_STYLES else ""


def style_for_level(level: str) -> str:
    """Theme style for a hierarchy level; empty for anything unrecognised."""
    return f"duty.level.{level}" if level in _LEVEL_STYLES else ""

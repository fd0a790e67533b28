"""Rich Console factory and build status rendering.

Creates Console instances that render to a StringIO buffer so callers
decide where the text goes.  In non-TTY environments (tests, pipes) Rich
automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

BACH_THEME = Theme(
    {
        "bach.ok": "bold green",
        "bach.error": "bold red",
        "bach.name": "bold cyan",
        "bach.time": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=BACH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_status(project: str, code: int, elapsed: float, *, no_color: bool = False) -> str:
    """Render the one-line build outcome, e.g. ``BUILD SUCCESS demo (0.42s)``."""
    console = create_console(no_color=no_color)
    if code == 0:
        status = "[bach.ok]BUILD SUCCESS[/]"
    else:
        status = f"[bach.error]BUILD FAILED (code {code})[/]"
    console.print(f"{status} [bach.name]{escape(project)}[/] [bach.time]({elapsed:.2f}s)[/]")
    return get_output(console).rstrip("\n")

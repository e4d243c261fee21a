"""Rich Console factory and theme for cmdgate output.

Consoles render into a StringIO buffer so ``format_result()`` keeps
returning a plain ``str``. Rich drops color codes on its own when the
buffer is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GATE_THEME = Theme(
    {
        "gate.ok": "bold green",
        "gate.error": "bold red",
        "gate.op": "bold cyan",
        "gate.key": "dim",
        "gate.null": "dim italic",
        "gate.header": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps table layout stable in tests).
    """
    return Console(
        file=StringIO(),
        theme=GATE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

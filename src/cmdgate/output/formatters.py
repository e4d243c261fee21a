"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich text, row tables) or
machines (--json). Human output is drawn on a StringIO-backed Console
from :mod:`cmdgate.output.console` and returned as a string.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cmdgate.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from cmdgate.services.result import ServiceResult


def _cell(value: Any) -> Text:
    if value is None:
        return Text("NULL", style="gate.null")
    if isinstance(value, (dict, list)):
        return Text(_json.dumps(value, separators=(",", ":"), default=str))
    return Text(str(value))


def _row_table(rows: list[dict[str, Any]]) -> Table:
    """Build a Rich Table whose columns follow the first row's keys."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    columns = list(rows[0].keys())
    for col in columns:
        table.add_column(Text(col, style="gate.header"))
    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))
    return table


def _render_rows(console: Console, rows: list[dict[str, Any]]) -> None:
    if not rows:
        console.print(Text("  (no rows)", style="gate.key"))
        return
    console.print(_row_table(rows))


def _render_ok(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="gate.ok"), Text(f": {result.op}", style="gate.op"), sep="")
    for key, value in result.data.items():
        if key == "rows" and isinstance(value, list):
            _render_rows(console, value)
        else:
            console.print(Text(f"  {key}: ", style="gate.key"), _cell(value), sep="")


def _render_error(console: Console, result: ServiceResult) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(
        Text("ERROR", style="gate.error"),
        Text(f": {result.op}", style="gate.op"),
        Text(f": {msg}"),
        sep="",
    )


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    console = create_console()
    if result.ok:
        _render_ok(console, result)
    else:
        _render_error(console, result)
    return get_output(console).rstrip("\n")

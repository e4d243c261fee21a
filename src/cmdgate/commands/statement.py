"""Commands: run SQL statements through the gateway."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdgate.commands._base import GateCommand, parse_params
from cmdgate.core.errors import GatewayError

if TYPE_CHECKING:
    from cmdgate.commands._context import AppContext
    from cmdgate.services.result import ServiceResult

_param_option = click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    metavar="NAME=VALUE",
    help="Bind a named parameter (repeatable). Values are parsed as JSON when possible.",
)
_async_option = click.option(
    "--async",
    "use_async",
    is_flag=True,
    help="Run through the async driver instead of the sync one.",
)


def _run(app: AppContext, op: str, sql: str, params: tuple[str, ...], use_async: bool) -> None:
    bound = parse_params(params)
    try:
        result: ServiceResult
        if use_async:
            result = app.run_async(lambda svc: getattr(svc, f"{op}_async")(sql, bound))
        else:
            result = getattr(app.statements, op)(sql, bound)
    except GatewayError as exc:
        raise click.ClickException(str(exc)) from exc
    app.emit(result)


@click.command(
    "exec",
    cls=GateCommand,
    examples="""\
  cmdgate exec "CREATE TABLE jobs (id INTEGER PRIMARY KEY, done INTEGER)"
  cmdgate exec "UPDATE jobs SET done = 1 WHERE id = :id" -p id=7
  cmdgate --mode transactional exec "DELETE FROM jobs" --async""",
)
@click.argument("sql")
@_param_option
@_async_option
@click.pass_obj
def exec_cmd(app: AppContext, sql: str, params: tuple[str, ...], use_async: bool) -> None:
    """Execute a statement for its side effects and report affected rows."""
    _run(app, "execute", sql, params, use_async)


@click.command(
    cls=GateCommand,
    examples="""\
  cmdgate query "SELECT * FROM jobs"
  cmdgate query "SELECT * FROM jobs WHERE done = :done" -p done=0
  cmdgate --json query "SELECT id FROM jobs" --async""",
)
@click.argument("sql")
@_param_option
@_async_option
@click.pass_obj
def query(app: AppContext, sql: str, params: tuple[str, ...], use_async: bool) -> None:
    """Run a query and print every row."""
    _run(app, "query", sql, params, use_async)


@click.command(
    cls=GateCommand,
    examples="""\
  cmdgate scalar "SELECT count(*) FROM jobs"
  cmdgate scalar "SELECT done FROM jobs WHERE id = :id" -p id=7""",
)
@click.argument("sql")
@_param_option
@_async_option
@click.pass_obj
def scalar(app: AppContext, sql: str, params: tuple[str, ...], use_async: bool) -> None:
    """Run a query and print the first column of the first row."""
    _run(app, "scalar", sql, params, use_async)

"""Root CLI group for cmdgate with global flags and command registration."""

from __future__ import annotations

import click
from pydantic import ValidationError

from cmdgate import __version__
from cmdgate.commands import register_commands
from cmdgate.commands._base import GateGroup
from cmdgate.commands._context import AppContext
from cmdgate.config.settings import GateSettings


@click.group(cls=GateGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cmdgate")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--url", default=None, help="Database URL (overrides [database] url).")
@click.option("--mode", default=None, help="Gateway mode: transactional or read_only.")
@click.option(
    "--isolation-level",
    default=None,
    help="Requested isolation level, e.g. read_committed (advisory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    url: str | None,
    mode: str | None,
    isolation_level: str | None,
) -> None:
    """cmdgate — run SQL through a connection-scoped command gateway."""
    ctx.ensure_object(dict)
    try:
        settings = GateSettings.from_cli(
            config_path=config_path,
            url=url,
            mode=mode,
            isolation_level=isolation_level,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
        )
    except ValidationError as exc:
        errors = "; ".join(str(err["msg"]) for err in exc.errors())
        raise click.UsageError(errors) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

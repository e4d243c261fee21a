"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy gateway construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click

from cmdgate.output.formatters import format_result

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cmdgate.config.settings import GateSettings
    from cmdgate.core.gateway import CommandGateway
    from cmdgate.infrastructure.database.connection import EngineConnectionFactory
    from cmdgate.services.result import ServiceResult
    from cmdgate.services.statement import StatementService

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The connection factory and gateway are created lazily on first use so
    ``--help``, ``--version`` and ``info`` never create an engine.
    """

    def __init__(self, settings: GateSettings) -> None:
        self.settings = settings
        self._factory: EngineConnectionFactory | None = None
        self._gateway: CommandGateway | None = None

        from cmdgate.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def factory(self) -> EngineConnectionFactory:
        """The engine-backed connection factory (created lazily)."""
        if self._factory is None:
            from cmdgate.infrastructure.database.connection import EngineConnectionFactory

            db = self.settings.database
            self._factory = EngineConnectionFactory.from_url(
                db.url, async_url=db.async_url, echo=db.echo
            )
        return self._factory

    @property
    def gateway(self) -> CommandGateway:
        """The command gateway (created lazily)."""
        if self._gateway is None:
            from cmdgate.core.gateway import CommandGateway

            gw = self.settings.gateway
            self._gateway = CommandGateway(
                self.factory, mode=gw.mode, isolation_level=gw.isolation_level
            )
        return self._gateway

    @property
    def statements(self) -> StatementService:
        from cmdgate.services.statement import StatementService

        return StatementService(self.gateway)

    def run_async(
        self, fn: Callable[[StatementService], Awaitable[ServiceResult]]
    ) -> ServiceResult:
        """Run an async service call on a fresh event loop.

        Async pool connections belong to that loop, so the engines are
        disposed before it closes.
        """
        svc = self.statements

        async def _main() -> ServiceResult:
            try:
                return await fn(svc)
            finally:
                await self.factory.dispose_async()

        return asyncio.run(_main())

    def close(self) -> None:
        """Dispose the gateway and engine pools if they were created."""
        if self._gateway is not None:
            self._gateway.close()
        if self._factory is not None:
            self._factory.dispose()
            logger.debug("Disposed connection factory")

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        json_output = self.settings.json_output
        output = format_result(result, json_output=json_output)
        if result.ok:
            click.echo(output)
            if not json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

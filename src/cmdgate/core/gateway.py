"""CommandGateway — one fresh connection per unit of work.

Every execution entry point follows the same envelope:

1. ``factory.create()`` a new connection (never the ambient one).
2. Open it (``open`` or ``await open_async(token)``).
3. Bind the caller's command to it, or create one from it.
4. Run the unit of work.
5. Close the connection, whatever happened in 2-4.

The envelope lives in exactly two places, :meth:`_per_call_connection` and
:meth:`_per_call_connection_async`. The public methods only decide how the
command is obtained and whether the result is returned.

INVARIANT: A per-call connection never outlives the call that opened it.
INVARIANT: The ambient connection is created by at most one factory call.
"""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager, contextmanager
from typing import TYPE_CHECKING, Any

from cmdgate.core.modes import GatewayMode, IsolationLevel, coerce_enum

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
    from types import TracebackType

    from cmdgate.core.cancellation import CancellationToken
    from cmdgate.core.contracts import Command, Connection, ConnectionFactory

__all__ = ["CommandGateway", "GatewayMode", "IsolationLevel"]

logger = logging.getLogger(__name__)


def _run_non_query(command: Command) -> None:
    command.run_non_query()


class CommandGateway:
    """Executes units of work, each on its own short-lived connection.

    Parameters:
        factory: Produces new, unopened connections.
        mode: Advisory execution mode; strings are accepted and coerced.
        isolation_level: Advisory isolation level; strings are accepted.

    Raises:
        GatewayConfigError: If *mode* or *isolation_level* is unrecognized.

    Usage::

        with CommandGateway(factory) as gateway:
            gateway.execute(SqlCommand("DELETE FROM jobs WHERE done = 1"))
            count = gateway.fetch(
                lambda cmd: cmd.with_sql("SELECT count(*) FROM jobs").run_scalar()
            )
    """

    def __init__(
        self,
        factory: ConnectionFactory,
        mode: GatewayMode | str = GatewayMode.READ_ONLY,
        isolation_level: IsolationLevel | str = IsolationLevel.READ_UNCOMMITTED,
    ) -> None:
        self._mode = coerce_enum(GatewayMode, mode)
        self._isolation_level = coerce_enum(IsolationLevel, isolation_level)
        self._factory = factory
        self._ambient: Connection | None = None
        self._ambient_lock = threading.Lock()
        self._closed = False

    @property
    def factory(self) -> ConnectionFactory:
        return self._factory

    @property
    def mode(self) -> GatewayMode:
        return self._mode

    @property
    def isolation_level(self) -> IsolationLevel:
        return self._isolation_level

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Ambient connection
    # ------------------------------------------------------------------

    @property
    def current_connection(self) -> Connection:
        """The ambient connection, created on first access.

        The gateway neither opens nor closes it until :meth:`close`; callers
        that use it own its open state and its synchronization.
        """
        conn = self._ambient
        if conn is None:
            with self._ambient_lock:
                if self._ambient is None:
                    self._ambient = self._factory.create()
                    logger.debug("Created ambient connection")
                conn = self._ambient
        return conn

    @property
    def has_current_connection(self) -> bool:
        """Whether the ambient connection has been created."""
        return self._ambient is not None

    # ------------------------------------------------------------------
    # Synchronous entry points
    # ------------------------------------------------------------------

    def execute(
        self,
        command: Command | None = None,
        action: Callable[[Command], Any] | None = None,
    ) -> None:
        """Run *action* against a fresh connection, discarding its result.

        With a *command*, the command is bound to the connection and
        *action* defaults to ``command.run_non_query()``. Without one, the
        gateway creates the command and *action* is required.
        """
        if command is None and action is None:
            msg = "execute() needs an action when no command is supplied"
            raise TypeError(msg)
        self._run(action or _run_non_query, command)

    def fetch[T](self, func: Callable[[Command], T], *, command: Command | None = None) -> T:
        """Run *func* against a fresh connection and return its result."""
        return self._run(func, command)

    # ------------------------------------------------------------------
    # Asynchronous entry points
    # ------------------------------------------------------------------

    async def execute_async(
        self,
        action: Callable[[Command, CancellationToken | None], Awaitable[Any]],
        *,
        command: Command | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Async twin of :meth:`execute`. There is no default action."""
        await self._run_async(action, command, token)

    async def fetch_async[T](
        self,
        func: Callable[[Command, CancellationToken | None], Awaitable[T]],
        *,
        command: Command | None = None,
        token: CancellationToken | None = None,
    ) -> T:
        """Async twin of :meth:`fetch`.

        *token* is passed to the connection open and to *func*. Cancelling
        it aborts whichever is pending; the connection is closed before
        :class:`~cmdgate.core.errors.OperationCancelledError` reaches the
        caller.
        """
        return await self._run_async(func, command, token)

    # ------------------------------------------------------------------
    # Disposal
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the ambient connection if it was created. Idempotent.

        The gateway counts as closed only once the release succeeds, so a
        failed release can be retried with :meth:`close` or
        :meth:`close_async`.
        """
        if self._closed:
            return
        ambient = self._ambient
        if ambient is not None:
            ambient.close()
            logger.debug("Closed ambient connection")
        self._closed = True

    async def close_async(self) -> None:
        """Async twin of :meth:`close`."""
        if self._closed:
            return
        ambient = self._ambient
        if ambient is not None:
            await ambient.close_async()
            logger.debug("Closed ambient connection")
        self._closed = True

    def __enter__(self) -> CommandGateway:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> CommandGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close_async()

    def __repr__(self) -> str:
        return (
            f"CommandGateway(mode={self._mode.value!r}, "
            f"isolation_level={self._isolation_level.value!r})"
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _prepare(conn: Connection, command: Command | None) -> Command:
        """Bind the caller's command, or create one from *conn*."""
        if command is None:
            return conn.create_command()
        command.connection = conn
        return command

    def _run[T](self, work: Callable[[Command], T], command: Command | None) -> T:
        with self._per_call_connection() as conn:
            return work(self._prepare(conn, command))

    async def _run_async[T](
        self,
        work: Callable[[Command, CancellationToken | None], Awaitable[T]],
        command: Command | None,
        token: CancellationToken | None,
    ) -> T:
        async with self._per_call_connection_async(token) as conn:
            bound = self._prepare(conn, command)
            if token is None:
                return await work(bound, None)
            return await token.guard(work(bound, token))

    @contextmanager
    def _per_call_connection(self) -> Iterator[Connection]:
        conn = self._factory.create()
        try:
            conn.open()
            logger.debug("Opened per-call connection")
            yield conn
        except BaseException:
            self._close_after_error(conn)
            raise
        conn.close()
        logger.debug("Closed per-call connection")

    @asynccontextmanager
    async def _per_call_connection_async(
        self, token: CancellationToken | None
    ) -> AsyncIterator[Connection]:
        conn = self._factory.create()
        try:
            await conn.open_async(token)
            logger.debug("Opened per-call connection (async)")
            yield conn
        except BaseException:
            await self._close_after_error_async(conn)
            raise
        await conn.close_async()
        logger.debug("Closed per-call connection (async)")

    @staticmethod
    def _close_after_error(conn: Connection) -> None:
        """Close *conn* while an error is in flight; never replace that error."""
        try:
            conn.close()
        except Exception:
            logger.warning("Failed to close connection after an error", exc_info=True)

    @staticmethod
    async def _close_after_error_async(conn: Connection) -> None:
        try:
            await conn.close_async()
        except Exception:
            logger.warning("Failed to close connection after an error", exc_info=True)

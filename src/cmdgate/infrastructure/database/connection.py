"""SQLAlchemy implementation of the gateway's connection contracts.

:class:`EngineConnectionFactory` hands out :class:`SqlConnection` objects
that are not yet checked out of the engine pool. Opening checks one out,
closing returns it. Each connection can be opened either synchronously
(``Engine.connect``) or asynchronously (``AsyncEngine.connect``), not both.

Connections run with driver-level autocommit so every statement commits on
its own. The gateway's advisory isolation level is not applied here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.exc import InvalidRequestError

from cmdgate.core.errors import ConnectionStateError
from cmdgate.infrastructure.database.engine import (
    async_url_for,
    create_async_db_engine,
    create_db_engine,
)

if TYPE_CHECKING:
    from sqlalchemy import Connection as SAConnection
    from sqlalchemy import TextClause
    from sqlalchemy.engine import Engine
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

    from cmdgate.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

_AUTOCOMMIT = "AUTOCOMMIT"


class SqlCommand:
    """A textual SQL statement with named parameters.

    The command is unbound until ``connection`` is set, either by the
    gateway or by :meth:`SqlConnection.create_command`.

    Usage::

        cmd = SqlCommand("UPDATE jobs SET done = 1 WHERE id = :id", {"id": 7})
        gateway.execute(cmd)
    """

    def __init__(
        self,
        sql: str = "",
        parameters: Mapping[str, Any] | None = None,
        *,
        connection: SqlConnection | None = None,
    ) -> None:
        self.sql = sql
        self.parameters: dict[str, Any] = dict(parameters or {})
        self.connection = connection

    def with_sql(self, sql: str, parameters: Mapping[str, Any] | None = None) -> SqlCommand:
        """Replace the statement text and parameters; returns ``self``."""
        self.sql = sql
        self.parameters = dict(parameters or {})
        return self

    # --- sync ---

    def run_non_query(self) -> int:
        """Execute for side effects. Returns the affected row count."""
        result = self._bound().sync_connection.execute(self._statement(), self.parameters)
        return result.rowcount

    def run_scalar(self) -> Any:
        """First column of the first row, or None."""
        return self._bound().sync_connection.execute(self._statement(), self.parameters).scalar()

    def run_query(self) -> list[dict[str, Any]]:
        """All rows as plain dicts."""
        result = self._bound().sync_connection.execute(self._statement(), self.parameters)
        return [dict(row) for row in result.mappings()]

    # --- async ---

    async def run_non_query_async(self) -> int:
        conn = self._bound().async_connection
        result = await conn.execute(self._statement(), self.parameters)
        return result.rowcount

    async def run_scalar_async(self) -> Any:
        conn = self._bound().async_connection
        result = await conn.execute(self._statement(), self.parameters)
        return result.scalar()

    async def run_query_async(self) -> list[dict[str, Any]]:
        conn = self._bound().async_connection
        result = await conn.execute(self._statement(), self.parameters)
        return [dict(row) for row in result.mappings()]

    # --- internal ---

    def _bound(self) -> SqlConnection:
        if self.connection is None:
            msg = "Command is not bound to a connection"
            raise ConnectionStateError(msg)
        return self.connection

    def _statement(self) -> TextClause:
        if not self.sql.strip():
            msg = "Command has no SQL text"
            raise ConnectionStateError(msg)
        return text(self.sql)

    def __repr__(self) -> str:
        return f"SqlCommand({self.sql!r}, {self.parameters!r})"


class SqlConnection:
    """One pooled connection, checked out on open and returned on close."""

    def __init__(self, engine: Engine, async_engine: AsyncEngine | None = None) -> None:
        self._engine = engine
        self._async_engine = async_engine
        self._sync_conn: SAConnection | None = None
        self._async_conn: AsyncConnection | None = None

    @property
    def is_open(self) -> bool:
        return self._sync_conn is not None or self._async_conn is not None

    @property
    def sync_connection(self) -> SAConnection:
        """The open SQLAlchemy connection (sync mode only)."""
        if self._sync_conn is None:
            msg = "Connection is not open for synchronous use"
            raise ConnectionStateError(msg)
        return self._sync_conn

    @property
    def async_connection(self) -> AsyncConnection:
        """The open SQLAlchemy async connection (async mode only)."""
        if self._async_conn is None:
            msg = "Connection is not open for asynchronous use"
            raise ConnectionStateError(msg)
        return self._async_conn

    def open(self) -> None:
        self._ensure_not_open()
        conn = self._engine.connect()
        try:
            conn.execution_options(isolation_level=_AUTOCOMMIT)
        except BaseException:
            conn.close()
            raise
        self._sync_conn = conn

    async def open_async(self, token: CancellationToken | None = None) -> None:
        """Check out an async connection, aborting if *token* fires first.

        The handle is recorded before it starts so that :meth:`close_async`
        can release a connection whose start was interrupted.
        """
        if self._async_engine is None:
            msg = "No async engine configured for this connection"
            raise ConnectionStateError(msg)
        self._ensure_not_open()
        conn = self._async_engine.connect()
        self._async_conn = conn

        async def _start() -> None:
            await conn.start()
            await conn.execution_options(isolation_level=_AUTOCOMMIT)

        if token is None:
            await _start()
        else:
            await token.guard(_start())

    def close(self) -> None:
        """Return the connection to the pool. No-op if not open.

        An async-opened connection is released on a private event loop.
        From inside a running loop that is impossible, and
        :class:`ConnectionStateError` asks for :meth:`close_async` instead;
        the connection stays open so that call can still release it.
        """
        if self._async_conn is not None:
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                asyncio.run(self.close_async())
                return
            msg = "Connection was opened asynchronously; use close_async()"
            raise ConnectionStateError(msg)
        conn, self._sync_conn = self._sync_conn, None
        if conn is not None:
            conn.close()

    async def close_async(self) -> None:
        """Return whichever connection is open to the pool."""
        if self._sync_conn is not None:
            self.close()
            return
        conn, self._async_conn = self._async_conn, None
        if conn is not None and conn.sync_connection is not None:
            await conn.close()

    def create_command(self) -> SqlCommand:
        return SqlCommand(connection=self)

    def _ensure_not_open(self) -> None:
        if self.is_open:
            msg = "Connection is already open"
            raise ConnectionStateError(msg)


class EngineConnectionFactory:
    """Creates unopened :class:`SqlConnection` objects over shared engines.

    Parameters:
        engine: Sync engine used by ``open()``.
        async_engine: Async engine used by ``open_async()``; optional.
    """

    def __init__(self, engine: Engine, async_engine: AsyncEngine | None = None) -> None:
        self._engine = engine
        self._async_engine = async_engine

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        async_url: str | None = None,
        echo: bool = False,
    ) -> EngineConnectionFactory:
        """Build both engines from *url*.

        The async URL defaults to :func:`async_url_for` (*url*). Backends
        with no async driver get a sync-only factory.
        """
        engine = create_db_engine(url, echo=echo)
        try:
            async_engine = create_async_db_engine(async_url or async_url_for(url), echo=echo)
        except InvalidRequestError as exc:
            logger.debug("Async access disabled for %s: %s", engine.url.drivername, exc)
            async_engine = None
        return cls(engine, async_engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def async_engine(self) -> AsyncEngine | None:
        return self._async_engine

    def create(self) -> SqlConnection:
        return SqlConnection(self._engine, self._async_engine)

    def dispose(self) -> None:
        """Close pooled sync connections."""
        self._engine.dispose()

    async def dispose_async(self) -> None:
        """Close pooled connections of both engines."""
        if self._async_engine is not None:
            await self._async_engine.dispose()
        self._engine.dispose()

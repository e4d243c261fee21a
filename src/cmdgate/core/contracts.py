"""Boundary contracts consumed by :class:`~cmdgate.core.gateway.CommandGateway`.

The gateway never depends on a concrete driver. Anything satisfying these
protocols can be plugged in; :mod:`cmdgate.infrastructure.database` ships
the SQLAlchemy implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cmdgate.core.cancellation import CancellationToken


@runtime_checkable
class Command(Protocol):
    """An executable statement that must be bound to one connection."""

    connection: Any

    def run_non_query(self) -> Any: ...


@runtime_checkable
class Connection(Protocol):
    """A single database connection handle.

    ``close`` and ``close_async`` must be safe on a connection that was never
    opened or is already closed.
    """

    def open(self) -> None: ...

    async def open_async(self, token: CancellationToken | None = None) -> None: ...

    def close(self) -> None: ...

    async def close_async(self) -> None: ...

    def create_command(self) -> Command: ...


@runtime_checkable
class ConnectionFactory(Protocol):
    """Produces a new, unopened, independent connection on every call."""

    def create(self) -> Connection: ...

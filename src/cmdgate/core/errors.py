"""Exception hierarchy for cmdgate.

Driver errors (connection refused, bad SQL) are never wrapped: they reach
the caller unchanged. Only gateway-level conditions get their own types.
"""

from __future__ import annotations

import asyncio


class GatewayError(Exception):
    """Base class for errors raised by cmdgate itself."""


class GatewayConfigError(GatewayError, ValueError):
    """Unrecognized mode or isolation level, raised at construction."""


class ConnectionStateError(GatewayError, RuntimeError):
    """A connection or command was used in a state that does not allow it."""


class OperationCancelledError(asyncio.CancelledError):
    """Raised when a :class:`CancellationToken` aborts an async call.

    Subclasses ``asyncio.CancelledError`` so cancellation stays distinct from
    ordinary failures: ``except Exception`` handlers never catch it.
    """

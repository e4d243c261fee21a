"""cmdgate — connection-scoped command execution gateway."""

from cmdgate.core.cancellation import CancellationToken
from cmdgate.core.errors import (
    ConnectionStateError,
    GatewayConfigError,
    GatewayError,
    OperationCancelledError,
)
from cmdgate.core.gateway import CommandGateway, GatewayMode, IsolationLevel

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "CommandGateway",
    "ConnectionStateError",
    "GatewayConfigError",
    "GatewayError",
    "GatewayMode",
    "IsolationLevel",
    "OperationCancelledError",
    "__version__",
]

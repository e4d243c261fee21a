"""Execution mode and isolation level accepted by the gateway.

Both are advisory metadata: the gateway stores them and exposes them, but
never begins a transaction or sets a session isolation level from them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from cmdgate.core.errors import GatewayConfigError


class GatewayMode(StrEnum):
    """Whether the gateway's owner intends to write."""

    TRANSACTIONAL = "transactional"
    READ_ONLY = "read_only"


class IsolationLevel(StrEnum):
    """Requested transaction isolation, least restrictive first."""

    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    REPEATABLE_READ = "repeatable_read"
    SNAPSHOT = "snapshot"
    SERIALIZABLE = "serializable"


def coerce_enum[E: StrEnum](enum_cls: type[E], value: Any) -> E:
    """Convert *value* to a member of *enum_cls* or raise GatewayConfigError.

    Strings are matched case-insensitively, with ``-`` and spaces treated as
    ``_`` (``"Read-Only"`` and ``"read committed"`` are accepted).
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return enum_cls(normalized)
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in enum_cls)
    msg = f"Unrecognized {enum_cls.__name__} {value!r} (expected one of: {allowed})"
    raise GatewayConfigError(msg)

"""SQLAlchemy engines and connection adapters for the gateway."""

from cmdgate.infrastructure.database.connection import (
    EngineConnectionFactory,
    SqlCommand,
    SqlConnection,
)
from cmdgate.infrastructure.database.engine import (
    async_url_for,
    create_async_db_engine,
    create_db_engine,
    mask_url,
)

__all__ = [
    "EngineConnectionFactory",
    "SqlCommand",
    "SqlConnection",
    "async_url_for",
    "create_async_db_engine",
    "create_db_engine",
    "mask_url",
]

"""Engine construction for sync and async SQLAlchemy access.

SQLAlchemy Core (not ORM) is used: the gateway only needs connections and
textual statements, no session management or identity maps. Pooling is
left entirely to the engine.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

# Async driver used when a URL names only the backend.
ASYNC_DRIVERS: dict[str, str] = {
    "sqlite": "aiosqlite",
    "postgresql": "asyncpg",
    "mysql": "aiomysql",
}


def _install_sqlite_pragmas(engine: Engine) -> None:
    """Enable WAL mode and foreign keys on every new SQLite DBAPI connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Create a sync engine; SQLite gets WAL mode and foreign keys."""
    engine = create_engine(url, echo=echo)
    _install_sqlite_pragmas(engine)
    return engine


def create_async_db_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for *url* (which must name an async driver)."""
    engine = create_async_engine(url, echo=echo)
    _install_sqlite_pragmas(engine.sync_engine)
    return engine


def async_url_for(url: str) -> str:
    """Derive the async driver URL for *url*.

    ``sqlite:///x.db`` becomes ``sqlite+aiosqlite:///x.db``. URLs that
    already name a driver, and backends without a known async driver, are
    returned unchanged.
    """
    parsed = make_url(url)
    if "+" in parsed.drivername:
        return url
    driver = ASYNC_DRIVERS.get(parsed.drivername)
    if driver is None:
        return url
    return parsed.set(drivername=f"{parsed.drivername}+{driver}").render_as_string(
        hide_password=False
    )


def mask_url(url: str) -> str:
    """Render *url* with its password hidden, for display and logs."""
    return make_url(url).render_as_string(hide_password=True)

"""Tests for engine construction and URL helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import text

from cmdgate.infrastructure.database.engine import (
    async_url_for,
    create_async_db_engine,
    create_db_engine,
    mask_url,
)


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        finally:
            engine.dispose()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        finally:
            engine.dispose()


@pytest.mark.asyncio
class TestCreateAsyncDbEngine:
    async def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_async_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text("PRAGMA foreign_keys"))
                assert result.scalar() == 1
        finally:
            await engine.dispose()


class TestAsyncUrlFor:
    def test_sqlite_file(self) -> None:
        assert async_url_for("sqlite:///data/app.db") == "sqlite+aiosqlite:///data/app.db"

    def test_postgresql_keeps_credentials(self) -> None:
        url = async_url_for("postgresql://app:secret@db:5432/app")
        assert url == "postgresql+asyncpg://app:secret@db:5432/app"

    def test_explicit_driver_unchanged(self) -> None:
        url = "postgresql+psycopg://app@db/app"
        assert async_url_for(url) == url

    def test_unknown_backend_unchanged(self) -> None:
        url = "oracle://scott@db/orcl"
        assert async_url_for(url) == url


class TestMaskUrl:
    def test_hides_password(self) -> None:
        masked = mask_url("postgresql://app:secret@db/app")
        assert "secret" not in masked
        assert "app:***@db" in masked

    def test_no_password(self) -> None:
        assert mask_url("sqlite:///app.db") == "sqlite:///app.db"

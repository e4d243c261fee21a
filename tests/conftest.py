"""Shared pytest fixtures and test helpers for cmdgate tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from cmdgate.infrastructure.database.connection import EngineConnectionFactory
from tests.fakes import RecordingCommand, RecordingFactory


@pytest.fixture
def factory() -> Generator[RecordingFactory]:
    """Recording factory; asserts nothing leaked at teardown."""
    f = RecordingFactory()
    yield f
    assert f.leaked() == []


@pytest.fixture
def new_command(factory: RecordingFactory) -> Callable[[], RecordingCommand]:
    """Build unbound caller-supplied commands sharing the factory trace."""
    return lambda: RecordingCommand(factory.trace)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file in the test's tmp directory."""
    return f"sqlite:///{tmp_path / 'cmdgate.db'}"


@pytest.fixture
def sql_factory(db_url: str) -> Generator[EngineConnectionFactory]:
    """Engine-backed factory on a temp SQLite file (sync use only)."""
    f = EngineConnectionFactory.from_url(db_url)
    try:
        yield f
    finally:
        f.dispose()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env vars from leaking into settings under test."""
    for name in (
        "CMDGATE_CONFIG",
        "CMDGATE_DATABASE__URL",
        "CMDGATE_GATEWAY__MODE",
        "CMDGATE_GATEWAY__ISOLATION_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

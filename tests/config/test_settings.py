"""Tests for GateSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from cmdgate.config.models import DEFAULT_DATABASE_URL
from cmdgate.config.settings import GateSettings
from cmdgate.core.modes import GatewayMode, IsolationLevel


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GateSettings.from_cli(start_dir=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.database.url == DEFAULT_DATABASE_URL
        assert settings.gateway.mode is GatewayMode.READ_ONLY

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GateSettings.from_cli(start_dir=tmp_path)
        with pytest.raises(ValidationError):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "cmdgate.toml"
        toml.write_text('[database]\nurl = "sqlite:///t.db"\n[gateway]\nmode = "transactional"\n')
        settings = GateSettings.from_cli(start_dir=tmp_path)
        assert settings.config_path == toml
        assert settings.database.url == "sqlite:///t.db"
        assert settings.gateway.mode is GatewayMode.TRANSACTIONAL
        assert settings.gateway.isolation_level is IsolationLevel.READ_UNCOMMITTED

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "gate.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[database]\nurl = "sqlite:///custom.db"\n')
        settings = GateSettings.from_cli(config_path=str(custom), start_dir=tmp_path)
        assert settings.database.url == "sqlite:///custom.db"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "cmdgate.toml").write_text("[database\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GateSettings.from_cli(start_dir=tmp_path)

    def test_invalid_mode_in_toml(self, tmp_path: Path) -> None:
        (tmp_path / "cmdgate.toml").write_text('[gateway]\nmode = "sometimes"\n')
        with pytest.raises(ValidationError):
            GateSettings.from_cli(start_dir=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "cmdgate.toml").write_text('[database]\nurl = "sqlite:///toml.db"\n')
        monkeypatch.setenv("CMDGATE_DATABASE__URL", "sqlite:///env.db")
        settings = GateSettings.from_cli(start_dir=tmp_path)
        assert settings.database.url == "sqlite:///env.db"

    def test_cli_overrides_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cmdgate.toml").write_text(
            '[database]\nurl = "sqlite:///toml.db"\necho = true\n'
            '[gateway]\nisolation_level = "serializable"\n'
        )
        monkeypatch.setenv("CMDGATE_DATABASE__URL", "sqlite:///env.db")
        settings = GateSettings.from_cli(
            start_dir=tmp_path, url="sqlite:///cli.db", mode="transactional"
        )
        assert settings.database.url == "sqlite:///cli.db"
        assert settings.database.echo is True
        assert settings.gateway.mode is GatewayMode.TRANSACTIONAL
        assert settings.gateway.isolation_level is IsolationLevel.SERIALIZABLE

    def test_cli_invalid_isolation_level(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            GateSettings.from_cli(start_dir=tmp_path, isolation_level="whenever")

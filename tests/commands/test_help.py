"""Tests for help, version and --examples output."""

import pytest
from click.testing import CliRunner

from cmdgate import __version__
from cmdgate.cli import cli

COMMANDS = ["exec", "query", "scalar", "info"]


class TestHelp:
    def test_root_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in COMMANDS:
            assert name in result.output

    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestExamples:
    @pytest.mark.parametrize("name", COMMANDS)
    def test_examples_flag(self, cli_runner: CliRunner, name: str) -> None:
        result = cli_runner.invoke(cli, [name, "--examples"])
        assert result.exit_code == 0
        assert f"Examples for 'cli {name}'" in result.output
        assert "cmdgate" in result.output

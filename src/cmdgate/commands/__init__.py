"""Subcommand modules for cmdgate.

Provides register_commands() which uses deferred imports to keep
``cmdgate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from cmdgate.commands.info import info
    from cmdgate.commands.statement import exec_cmd, query, scalar

    cli.add_command(exec_cmd)
    cli.add_command(query)
    cli.add_command(scalar)
    cli.add_command(info)

"""Command: show the resolved gateway configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdgate.commands._base import GateCommand
from cmdgate.infrastructure.database.engine import async_url_for, mask_url
from cmdgate.services.result import ServiceResult

if TYPE_CHECKING:
    from cmdgate.commands._context import AppContext


@click.command(
    cls=GateCommand,
    examples="""\
  cmdgate info
  cmdgate --json info
  cmdgate --url postgresql://app:secret@db/app info""",
)
@click.pass_obj
def info(app: AppContext) -> None:
    """Show database URL, mode and isolation level without connecting."""
    settings = app.settings
    db = settings.database
    app.emit(
        ServiceResult(
            ok=True,
            op="info",
            data={
                "url": mask_url(db.url),
                "async_url": mask_url(db.async_url or async_url_for(db.url)),
                "mode": settings.gateway.mode.value,
                "isolation_level": settings.gateway.isolation_level.value,
                "config_path": str(settings.config_path) if settings.config_path else None,
            },
        )
    )

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cmdgate.toml only contains
overrides. A fresh project needs only ``[database] url``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from cmdgate.core.modes import GatewayMode, IsolationLevel, coerce_enum

DEFAULT_DATABASE_URL = "sqlite:///cmdgate.db"


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str = DEFAULT_DATABASE_URL
    async_url: str | None = None
    echo: bool = False


class GatewayConfig(BaseModel):
    """[gateway] section.

    Unrecognized values fail validation here, before any gateway exists.
    """

    model_config = {"frozen": True}

    mode: GatewayMode = GatewayMode.READ_ONLY
    isolation_level: IsolationLevel = IsolationLevel.READ_UNCOMMITTED

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> GatewayMode:
        return coerce_enum(GatewayMode, value)

    @field_validator("isolation_level", mode="before")
    @classmethod
    def _coerce_isolation_level(cls, value: Any) -> IsolationLevel:
        return coerce_enum(IsolationLevel, value)


class CmdgateConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)

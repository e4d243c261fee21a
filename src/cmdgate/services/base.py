"""BaseService — abstract foundation for gateway-backed services.

Every service receives a :class:`CommandGateway` at construction time and
runs all database work through it, so every operation gets its own
connection and releases it before returning.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cmdgate.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from sqlalchemy.exc import SQLAlchemyError

    from cmdgate.core.gateway import CommandGateway

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class StatementService(BaseService):
            def query(self, sql: str) -> ServiceResult:
                rows = self._gateway.fetch(lambda cmd: cmd.with_sql(sql).run_query())
                ...
    """

    def __init__(self, gateway: CommandGateway) -> None:
        self._gateway = gateway

    @property
    def gateway(self) -> CommandGateway:
        return self._gateway

    def _db_error(self, op: str, exc: SQLAlchemyError) -> ServiceResult:
        """Convert a driver failure into a failed ServiceResult."""
        logger.debug("%s failed", op, exc_info=True)
        detail = {"type": type(exc).__name__}
        orig = getattr(exc, "orig", None)
        message = str(orig) if orig is not None else str(exc)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code="DB_ERROR", message=message, detail=detail),
        )

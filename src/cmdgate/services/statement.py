"""StatementService — ad-hoc SQL through the gateway.

Each method is one gateway call, so each gets a private connection that is
closed before the result is built. Driver errors become failed results;
cancellation always propagates.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from cmdgate.infrastructure.database.connection import SqlCommand
from cmdgate.services.base import BaseService
from cmdgate.services.result import ServiceResult

if TYPE_CHECKING:
    from cmdgate.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class StatementService(BaseService):
    """Runs non-query, query and scalar statements."""

    # --- sync ---

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ServiceResult:
        """Run a statement for its side effects; reports the affected row count."""
        op = "execute"
        started = time.perf_counter()
        try:
            rowcount = self._gateway.fetch(
                lambda cmd: cmd.run_non_query(), command=SqlCommand(sql, params)
            )
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"rowcount": rowcount}, started)

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> ServiceResult:
        """Run a statement and return all rows."""
        op = "query"
        started = time.perf_counter()
        try:
            rows = self._gateway.fetch(lambda cmd: cmd.with_sql(sql, params).run_query())
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"count": len(rows), "rows": rows}, started)

    def scalar(self, sql: str, params: Mapping[str, Any] | None = None) -> ServiceResult:
        """Run a statement and return the first column of the first row."""
        op = "scalar"
        started = time.perf_counter()
        try:
            value = self._gateway.fetch(lambda cmd: cmd.with_sql(sql, params).run_scalar())
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"value": value}, started)

    # --- async ---

    async def execute_async(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> ServiceResult:
        op = "execute"
        started = time.perf_counter()

        async def _work(cmd: Any, _token: CancellationToken | None) -> int:
            return await cmd.run_non_query_async()

        try:
            rowcount = await self._gateway.fetch_async(
                _work, command=SqlCommand(sql, params), token=token
            )
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"rowcount": rowcount}, started)

    async def query_async(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> ServiceResult:
        op = "query"
        started = time.perf_counter()

        async def _work(cmd: Any, _token: CancellationToken | None) -> list[dict[str, Any]]:
            return await cmd.with_sql(sql, params).run_query_async()

        try:
            rows = await self._gateway.fetch_async(_work, token=token)
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"count": len(rows), "rows": rows}, started)

    async def scalar_async(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> ServiceResult:
        op = "scalar"
        started = time.perf_counter()

        async def _work(cmd: Any, _token: CancellationToken | None) -> Any:
            return await cmd.with_sql(sql, params).run_scalar_async()

        try:
            value = await self._gateway.fetch_async(_work, token=token)
        except SQLAlchemyError as exc:
            return self._db_error(op, exc)
        return self._ok(op, {"value": value}, started)

    # --- internal ---

    def _ok(self, op: str, data: dict[str, Any], started: float) -> ServiceResult:
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug("%s completed in %.2f ms", op, duration_ms)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            meta={"duration_ms": duration_ms, "mode": self._gateway.mode.value},
        )

"""Tests for GatewayMode, IsolationLevel and enum coercion."""

from __future__ import annotations

import pytest

from cmdgate.core.errors import GatewayConfigError
from cmdgate.core.modes import GatewayMode, IsolationLevel, coerce_enum


class TestCoerceEnum:
    def test_member_passthrough(self) -> None:
        assert coerce_enum(GatewayMode, GatewayMode.TRANSACTIONAL) is GatewayMode.TRANSACTIONAL

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("read_only", GatewayMode.READ_ONLY),
            ("READ-ONLY", GatewayMode.READ_ONLY),
            (" Read Only ", GatewayMode.READ_ONLY),
            ("transactional", GatewayMode.TRANSACTIONAL),
        ],
    )
    def test_mode_strings(self, raw: str, expected: GatewayMode) -> None:
        assert coerce_enum(GatewayMode, raw) is expected

    def test_isolation_strings(self) -> None:
        assert coerce_enum(IsolationLevel, "Repeatable Read") is IsolationLevel.REPEATABLE_READ
        assert coerce_enum(IsolationLevel, "serializable") is IsolationLevel.SERIALIZABLE

    def test_error_lists_allowed_values(self) -> None:
        with pytest.raises(GatewayConfigError) as exc_info:
            coerce_enum(GatewayMode, "sometimes")
        assert "read_only" in str(exc_info.value)
        assert "transactional" in str(exc_info.value)

    def test_none_rejected(self) -> None:
        with pytest.raises(GatewayConfigError):
            coerce_enum(IsolationLevel, None)


class TestIsolationOrder:
    def test_least_restrictive_first(self) -> None:
        assert list(IsolationLevel)[0] is IsolationLevel.READ_UNCOMMITTED

"""Shared test fixtures for redis-mcp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from redis_mcp.connection.manager import ConnectionManager
from redis_mcp.core.retry import ReconnectPolicy
from redis_mcp.mcp.dispatcher import Dispatcher
from redis_mcp.tools.definitions import build_registry
from tests.fixtures.fake_redis import FakeRedis

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Empty in-memory Redis double."""
    return FakeRedis()


@pytest.fixture
def make_manager() -> Any:
    """Factory fixture for a ConnectionManager over canned clients.

    Each connection attempt takes the next client from *clients*.
    """

    def _make(*clients: FakeRedis, **policy: Any) -> ConnectionManager:
        factory = MagicMock(side_effect=list(clients))
        return ConnectionManager(
            "redis://localhost:6379",
            policy=ReconnectPolicy(**policy),
            client_factory=factory,
        )

    return _make


@pytest.fixture
async def manager(fake_redis: FakeRedis, make_manager: Any) -> AsyncIterator[ConnectionManager]:
    """Connected manager backed by ``fake_redis``."""
    mgr: ConnectionManager = make_manager(fake_redis)
    await mgr.connect()
    yield mgr
    await mgr.close()


@pytest.fixture
def dispatcher(manager: ConnectionManager) -> Dispatcher:
    """Dispatcher over the full tool table and a live fake connection."""
    return Dispatcher(build_registry(), manager)

"""Redis connection manager: single connection, bounded reconnection.

Owns the one Redis connection of the process and the
:class:`ConnectionState` machine around it::

    DISCONNECTED -> CONNECTING -> CONNECTED
    CONNECTED    -> CONNECTING            (transport error)
    CONNECTING   -> RECONNECT_EXHAUSTED   (budget spent, terminal)

Upper layers only get command execution through :meth:`execute`.
Commands issued while not CONNECTED fail fast with
:class:`NotConnectedError`; they are never queued.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from typing import TYPE_CHECKING, Any

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from redis_mcp.core.errors import (
    ConnectionStateError,
    NotConnectedError,
    ReconnectExhaustedError,
    UpstreamError,
)
from redis_mcp.core.retry import ReconnectPolicy, delay_schedule

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    RedisConnectionError,
    RedisTimeoutError,
    OSError,
)


class ConnectionState(enum.Enum):
    """States of the process-wide Redis connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECT_EXHAUSTED = "reconnect_exhausted"


class ConnectionEvent(enum.Enum):
    """Advisory lifecycle notifications."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"
    EXHAUSTED = "exhausted"


_VALID_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset(
        {
            ConnectionState.CONNECTED,
            ConnectionState.RECONNECT_EXHAUSTED,
            ConnectionState.DISCONNECTED,
        }
    ),
    ConnectionState.CONNECTED: frozenset(
        {ConnectionState.CONNECTING, ConnectionState.DISCONNECTED}
    ),
    ConnectionState.RECONNECT_EXHAUSTED: frozenset(),
}


def create_client(
    url: str,
    *,
    socket_timeout: float | None = None,
    socket_connect_timeout: float | None = None,
) -> Redis:
    """Build a single-connection client with redis-py's own retries disabled.

    Reconnection is driven by :class:`ConnectionManager`, so the client
    must surface transport errors immediately.
    """
    return Redis.from_url(
        url,
        decode_responses=True,
        single_connection_client=True,
        retry=Retry(NoBackoff(), 0),
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_connect_timeout,
    )


class ConnectionManager:
    """The single Redis connection and its reconnection state machine.

    Args:
        url: Redis connection string (``redis://host:port``).
        policy: Reconnection budget. Uses defaults if None.
        client_factory: Callable building a fresh client for *url*.
            Defaults to :func:`create_client`.
    """

    def __init__(
        self,
        url: str,
        policy: ReconnectPolicy | None = None,
        client_factory: Callable[[str], Redis] | None = None,
    ) -> None:
        self._url = url
        self._policy = policy or ReconnectPolicy()
        self._client_factory = client_factory or create_client
        self._client: Redis | None = None
        self._state = ConnectionState.DISCONNECTED
        self._listeners: list[Callable[[ConnectionEvent], None]] = []
        self._reconnect_task: asyncio.Task[None] | None = None
        self._exhausted = asyncio.Event()
        self._attempts = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def policy(self) -> ReconnectPolicy:
        return self._policy

    @property
    def reconnect_attempts(self) -> int:
        """Reconnection attempts made in the current outage."""
        return self._attempts

    def add_listener(self, callback: Callable[[ConnectionEvent], None]) -> None:
        """Register a callback for lifecycle notifications."""
        self._listeners.append(callback)

    async def wait_exhausted(self) -> None:
        """Block until the reconnection budget is spent."""
        await self._exhausted.wait()

    # ── Public contract ───────────────────────────────────────

    async def connect(self) -> None:
        """Establish the initial connection.

        A failed first attempt follows the same backoff schedule as a
        mid-session reconnection.

        Raises:
            ReconnectExhaustedError: If every reconnection attempt failed.
        """
        if self._state is not ConnectionState.DISCONNECTED:
            msg = f"Cannot connect from state {self._state.value}"
            raise ConnectionStateError(msg)
        self._transition(ConnectionState.CONNECTING)
        self._emit(ConnectionEvent.CONNECTING)
        try:
            await self._open()
        except (RedisError, OSError) as e:
            logger.error("Redis Client Error: %s", e)
            await self._reconnect()
            return
        self._mark_connected()

    async def execute(self, command: str, *args: Any) -> Any:
        """Run one Redis command on the live connection.

        Store-reported errors are never retried here; only the
        connection itself is re-established.

        Raises:
            NotConnectedError: If the state is not CONNECTED, or the
                connection dropped while the command was in flight.
            UpstreamError: If Redis replied with an error.
        """
        client = self._client
        if self._state is not ConnectionState.CONNECTED or client is None:
            raise NotConnectedError(self._state.value)
        try:
            return await client.execute_command(command, *args)
        except ResponseError as e:
            raise UpstreamError(str(e)) from e
        except _TRANSPORT_ERRORS as e:
            logger.error("Redis Client Error: %s", e)
            self._connection_lost()
            raise NotConnectedError(self._state.value) from e
        except RedisError as e:
            raise UpstreamError(str(e)) from e

    async def close(self) -> None:
        """Close the connection gracefully (best-effort)."""
        task = self._reconnect_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._reconnect_task = None

        client, self._client = self._client, None
        if client is not None:
            await self._discard(client)

        if self._state in {ConnectionState.CONNECTING, ConnectionState.CONNECTED}:
            self._transition(ConnectionState.DISCONNECTED)
        logger.info("Redis connection closed")
        self._emit(ConnectionEvent.CLOSED)

    # ── Internals ─────────────────────────────────────────────

    async def _open(self) -> None:
        """Create a client and prove the connection with PING."""
        client = self._client_factory(self._url)
        try:
            await client.ping()
        except BaseException:
            await self._discard(client)
            raise
        self._client = client

    async def _discard(self, client: Redis) -> None:
        try:
            await client.aclose()
        except (RedisError, OSError) as e:
            logger.warning("Error during cleanup: %s", e)

    async def _reconnect(self) -> None:
        """Walk the backoff schedule until connected or out of budget."""
        max_retries = self._policy.max_retries
        for attempt, delay in enumerate(delay_schedule(self._policy)):
            logger.warning(
                "Reconnection attempt %d/%d in %dms",
                attempt + 1,
                max_retries,
                int(delay * 1000),
            )
            self._emit(ConnectionEvent.RECONNECTING)
            await asyncio.sleep(delay)
            self._attempts = attempt + 1
            try:
                await self._open()
            except (RedisError, OSError) as e:
                logger.error("Redis Client Error: %s", e)
                continue
            self._mark_connected()
            return

        self._transition(ConnectionState.RECONNECT_EXHAUSTED)
        logger.error("Maximum retries (%d) reached. Giving up.", max_retries)
        self._emit(ConnectionEvent.EXHAUSTED)
        self._exhausted.set()
        raise ReconnectExhaustedError(max_retries)

    async def _reconnect_in_background(self, stale: Redis | None) -> None:
        if stale is not None:
            await self._discard(stale)
        try:
            await self._reconnect()
        except ReconnectExhaustedError:
            # Reported through wait_exhausted() and the EXHAUSTED event.
            logger.debug("Background reconnection exhausted")

    def _connection_lost(self) -> None:
        """Leave CONNECTED and start reconnecting in the background."""
        if self._state is not ConnectionState.CONNECTED:
            return
        stale, self._client = self._client, None
        self._transition(ConnectionState.CONNECTING)
        self._reconnect_task = asyncio.create_task(self._reconnect_in_background(stale))

    def _mark_connected(self) -> None:
        self._transition(ConnectionState.CONNECTED)
        self._attempts = 0
        logger.info("Connected to Redis at %s", self._url)
        self._emit(ConnectionEvent.CONNECTED)

    def _transition(self, to: ConnectionState) -> None:
        current = self._state
        if to not in _VALID_TRANSITIONS[current]:
            msg = f"Invalid transition: {current.value} -> {to.value}"
            raise ConnectionStateError(msg)
        self._state = to

    def _emit(self, event: ConnectionEvent) -> None:
        for callback in self._listeners:
            callback(event)

"""Lifecycle controller — startup and shutdown sequencing.

Startup connects to Redis before any invocation is accepted. Shutdown
happens on SIGINT/SIGTERM, on client disconnect, or when the
reconnection budget is spent; the connection is closed best-effort in
every case.

Exit status: 0 for a clean stop, 1 when reconnection was exhausted or
the server failed.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import signal
from typing import TYPE_CHECKING

from redis_mcp.connection.manager import ConnectionManager, create_client
from redis_mcp.core.errors import ReconnectExhaustedError
from redis_mcp.core.retry import ReconnectPolicy
from redis_mcp.mcp.dispatcher import Dispatcher
from redis_mcp.mcp.server import create_server, run_server
from redis_mcp.tools.definitions import build_registry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mcp.server import Server

    from redis_mcp.config.schema import BridgeConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_manager(config: BridgeConfig) -> ConnectionManager:
    """Connection manager configured from *config*."""
    policy = ReconnectPolicy(
        max_retries=config.reconnect.max_retries,
        base_delay=config.reconnect.base_delay,
        max_delay=config.reconnect.max_delay,
    )
    factory = functools.partial(
        create_client,
        socket_timeout=config.redis.socket_timeout,
        socket_connect_timeout=config.redis.socket_connect_timeout,
    )
    return ConnectionManager(config.redis.url, policy=policy, client_factory=factory)


class LifecycleController:
    """Runs the bridge from first connection to process exit status."""

    def __init__(
        self,
        config: BridgeConfig,
        manager: ConnectionManager | None = None,
        serve: Callable[[Server], Awaitable[None]] = run_server,
    ) -> None:
        self._config = config
        self._manager = manager or build_manager(config)
        self._serve = serve
        self._stop = asyncio.Event()

    @property
    def manager(self) -> ConnectionManager:
        return self._manager

    def request_shutdown(self) -> None:
        """Ask the controller to stop (signal handler entry point)."""
        logger.info("Shutdown requested")
        self._stop.set()

    async def run(self) -> int:
        """Connect, serve, then shut down. Returns the exit status."""
        self._install_signal_handlers()
        try:
            return await self._run()
        finally:
            self._remove_signal_handlers()
            await self._manager.close()

    async def _run(self) -> int:
        connecting = await self._wait_first(self._manager.connect())
        if connecting is None:
            return EXIT_OK
        try:
            connecting.result()
        except ReconnectExhaustedError as e:
            logger.error("Error during startup: %s", e)
            return EXIT_FAILURE

        dispatcher = Dispatcher(build_registry(), self._manager)
        server = create_server(
            dispatcher,
            name=self._config.server.name,
            version=self._config.server.version,
        )
        logger.info("Redis MCP Server running on stdio")

        serving = asyncio.create_task(self._serve(server))
        exhausted = asyncio.create_task(self._manager.wait_exhausted())
        stopping = asyncio.create_task(self._stop.wait())
        done, _ = await self._settle(serving, exhausted, stopping)

        if exhausted in done:
            logger.error("Reconnection exhausted, shutting down")
            return EXIT_FAILURE
        if serving in done and serving.exception() is not None:
            logger.error("Fatal error in server: %s", serving.exception())
            return EXIT_FAILURE
        return EXIT_OK

    async def _wait_first(self, work: Awaitable[None]) -> asyncio.Task[None] | None:
        """Run *work* unless shutdown is requested first.

        Returns the finished task, or None if shutdown won the race.
        """
        task = asyncio.ensure_future(work)
        stopping = asyncio.create_task(self._stop.wait())
        done, _ = await self._settle(task, stopping)
        if task in done and not task.cancelled():
            return task
        return None

    async def _settle(
        self, *tasks: asyncio.Future[object]
    ) -> tuple[set[asyncio.Future[object]], set[asyncio.Future[object]]]:
        """Wait for the first task to finish and cancel the rest."""
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        return done, pending

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SHUTDOWN_SIGNALS:
            # Not available on Windows event loops
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, self.request_shutdown)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SHUTDOWN_SIGNALS:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(sig)

# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process lifecycle: startup ordering, signal handling and graceful shutdown."""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from craftbot.client.mineflayer import create_mineflayer_client
from craftbot.connection import ConnectionManager, ConnectionState
from craftbot.logging import get_logger
from craftbot.status import StatusServer, create_status_app

if TYPE_CHECKING:
    from craftbot.client.base import ClientFactory
    from craftbot.settings import Settings

logger = get_logger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class BotService:
    """Wires the connection manager and the status server together."""

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory = create_mineflayer_client,
    ) -> None:
        self.settings = settings
        self.state = ConnectionState()
        self.manager = ConnectionManager(settings, client_factory, self.state)
        self.status_server = StatusServer(
            create_status_app(self.state),
            host=settings.http_host,
            port=settings.http_port,
        )
        self._stop_event: asyncio.Event | None = None
        self._shutdown_done = False

    @property
    def stop_requested(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask :meth:`run` to shut down. Safe to call repeatedly."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        if not self._stop_event.is_set():
            logger.info("shutdown_requested")
        self._stop_event.set()

    async def run(self) -> None:
        """Serve until a termination signal or :meth:`request_stop`.

        Raises:
            StatusServerError: If the status server cannot bind
        """
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()

        # Handlers go in first so a signal during startup still shuts down cleanly.
        installed = self._install_signal_handlers(loop)
        try:
            self.status_server.bind()
            try:
                await self.status_server.start()
                if not self._stop_event.is_set():
                    self.manager.initiate()
                await self._stop_event.wait()
            finally:
                await self.shutdown()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    async def shutdown(self) -> None:
        """Disconnect and close the status server. Idempotent."""
        if self._shutdown_done:
            return
        self._shutdown_done = True
        try:
            self.manager.shutdown()
        except Exception as e:
            logger.warning("connection_shutdown_failed", error=str(e))
        await self.status_server.stop()
        logger.info("shutdown_complete")

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[signal.Signals]:
        installed: list[signal.Signals] = []
        for sig in HANDLED_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                # Not the main thread, or a loop without signal support.
                continue
            installed.append(sig)
        return installed

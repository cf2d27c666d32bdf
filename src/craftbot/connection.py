# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Connection supervision: one live client handle and a single reconnect timer."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from craftbot import defaults
from craftbot.client.base import ClientObservers, GameClient
from craftbot.logging import get_logger

if TYPE_CHECKING:
    from craftbot.client.base import ClientFactory
    from craftbot.settings import Settings

logger = get_logger(__name__)


@dataclass
class ConnectionState:
    """State shared between the connection manager and the status server.

    Only the event loop thread touches it.
    """

    client: GameClient | None = None
    connected: bool = False
    reconnect_timer: asyncio.TimerHandle | None = None
    username: str | None = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def reconnect_pending(self) -> bool:
        return self.reconnect_timer is not None

    def uptime(self) -> float:
        return time.monotonic() - self.started_at


class ConnectionManager:
    """Owns the lifecycle of one outbound game client connection.

    Every way a connection can end funnels into :meth:`schedule_reconnect`,
    which arms at most one timer at a time. Retries are unbounded with a fixed
    delay.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory,
        state: ConnectionState | None = None,
    ) -> None:
        self.settings = settings
        self.state = state if state is not None else ConnectionState()
        self._client_factory = client_factory
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def initiate(self) -> None:
        """Replace the current client handle with a freshly constructed one."""
        if self._closed:
            logger.debug("initiate_skipped_after_shutdown")
            return
        self._cancel_reconnect()
        self._teardown_client()

        options = self.settings.client_options()
        logger.info("connecting", host=options.host, port=options.port, username=options.username)
        try:
            client = self._client_factory(options)
        except Exception as e:
            logger.error("client_creation_failed", error=str(e), host=options.host, port=options.port)
            self.state.connected = False
            self.schedule_reconnect("creation_error")
            return

        self.state.client = client
        client.attach(self._observers_for(client))

    def schedule_reconnect(self, reason: str, delay_ms: int | None = None) -> bool:
        """Arm the reconnect timer unless one is already pending.

        Returns:
            True if a new timer was armed
        """
        if self._closed:
            logger.debug("reconnect_skipped_after_shutdown", reason=reason)
            return False
        if self.state.reconnect_timer is not None:
            logger.debug("reconnect_already_pending", reason=reason)
            return False
        if delay_ms is None:
            delay_ms = self.settings.reconnect_delay_ms

        logger.info("reconnect_scheduled", reason=reason, delay_ms=delay_ms)
        loop = asyncio.get_running_loop()
        self.state.reconnect_timer = loop.call_later(delay_ms / 1000, self._on_reconnect_timer)
        return True

    def shutdown(self) -> None:
        """Cancel any pending reconnect and disconnect the current client.

        Idempotent; teardown errors are suppressed.
        """
        if self._closed:
            return
        self._closed = True
        self._cancel_reconnect()
        self._teardown_client()
        self.state.connected = False
        logger.info("connection_manager_stopped")

    def _on_reconnect_timer(self) -> None:
        self.state.reconnect_timer = None
        self.initiate()

    def _cancel_reconnect(self) -> None:
        timer = self.state.reconnect_timer
        if timer is not None:
            timer.cancel()
            self.state.reconnect_timer = None

    def _teardown_client(self) -> None:
        client = self.state.client
        if client is None:
            return
        self.state.client = None
        try:
            client.detach()
        except Exception as e:
            logger.debug("client_detach_failed", error=str(e))
        try:
            client.quit()
        except Exception as e:
            logger.debug("client_quit_failed", error=str(e))

    def _is_current(self, client: GameClient) -> bool:
        if client is self.state.client:
            return True
        logger.debug("stale_client_event_ignored")
        return False

    def _observers_for(self, client: GameClient) -> ClientObservers:
        state = self.state

        def on_login() -> None:
            if not self._is_current(client):
                return
            state.connected = True
            state.username = client.username or self.settings.username
            logger.info("logged_in", username=state.username, position=client.position)

        def on_spawn() -> None:
            if not self._is_current(client):
                return
            game_mode = client.game_mode
            difficulty = client.difficulty
            if game_mode is not None or difficulty is not None:
                logger.info("spawned", game_mode=game_mode, difficulty=difficulty)
            else:
                logger.info("spawned")

        def on_chat(username: str, message: str) -> None:
            if not self._is_current(client):
                return
            if username == (client.username or self.settings.username):
                return
            logger.info("chat", sender=username, message=message)

        def on_error(error: Any) -> None:
            if not self._is_current(client):
                return
            logger.error("connection_error", error=str(error), username=self.settings.username)
            state.connected = False

        def on_kicked(reason: str) -> None:
            if not self._is_current(client):
                return
            logger.warning("kicked", reason=reason, username=self.settings.username)
            state.connected = False

        def on_end(reason: str | None) -> None:
            if not self._is_current(client):
                return
            logger.warning("disconnected", reason=reason, username=self.settings.username)
            state.connected = False
            self.schedule_reconnect(reason or "unknown")

        def on_death() -> None:
            if not self._is_current(client):
                return
            logger.info("died", username=state.username)
            try:
                client.chat(defaults.DEATH_MESSAGE)
            except Exception as e:
                logger.debug("death_chat_failed", error=str(e))

        def on_message(text: str) -> None:
            logger.debug("server_message", text=text)

        return ClientObservers(
            on_login=on_login,
            on_spawn=on_spawn,
            on_chat=on_chat,
            on_error=on_error,
            on_kicked=on_kicked,
            on_end=on_end,
            on_death=on_death,
            on_message=on_message,
        )

# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Game client backed by mineflayer through the javascript bridge.

The bridge invokes listeners on its own worker thread. Every event is handed
to the asyncio loop with ``call_soon_threadsafe`` so observers only ever run on
the loop thread.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from craftbot.client.base import ClientEvent, ClientOptions, GameClient
from craftbot.errors import ClientCreationError
from craftbot.logging import get_logger

logger = get_logger(__name__)

_EVENT_NAMES = {
    ClientEvent.LOGIN: "login",
    ClientEvent.SPAWN: "spawn",
    ClientEvent.CHAT: "chat",
    ClientEvent.ERROR: "error",
    ClientEvent.KICKED: "kicked",
    ClientEvent.END: "end",
    ClientEvent.DEATH: "death",
    ClientEvent.MESSAGE: "messagestr",
}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


class MineflayerClient(GameClient):
    """Wraps a mineflayer ``Bot`` proxy.

    Args:
        bot: Bot proxy returned by ``mineflayer.createBot``
        loop: Event loop that observers run on
        on: Bridge listener registration, ``on(emitter, event)(handler)``
        off: Bridge listener removal, ``off(emitter, event, handler)``
    """

    def __init__(
        self,
        bot: Any,
        loop: asyncio.AbstractEventLoop,
        on: Callable[[Any, str], Callable[[Callable[..., None]], Any]],
        off: Callable[[Any, str, Callable[..., None]], None],
    ) -> None:
        super().__init__()
        self._bot = bot
        self._loop = loop
        self._off = off
        self._listeners: dict[str, Callable[..., None]] = {}
        for event, js_name in _EVENT_NAMES.items():
            # The bridge may register a wrapper; off() needs the function it returns.
            self._listeners[js_name] = on(bot, js_name)(self._make_listener(event))

    def _make_listener(self, event: ClientEvent) -> Callable[..., None]:
        def _listener(this: Any, *args: Any) -> None:
            try:
                self._loop.call_soon_threadsafe(self._deliver, event, args)
            except RuntimeError:
                # Loop already closed; the process is shutting down.
                return

        return _listener

    def _deliver(self, event: ClientEvent, args: tuple[Any, ...]) -> None:
        if event is ClientEvent.CHAT:
            username = args[0] if args else None
            message = args[1] if len(args) > 1 else None
            self.emit(event, _text(username) or "", _text(message) or "")
        elif event is ClientEvent.ERROR:
            self.emit(event, args[0] if args else None)
        elif event in (ClientEvent.KICKED, ClientEvent.END, ClientEvent.MESSAGE):
            self.emit(event, _text(args[0]) if args else None)
        else:
            self.emit(event)

    def detach(self) -> None:
        super().detach()
        listeners, self._listeners = self._listeners, {}
        for js_name, handler in listeners.items():
            try:
                self._off(self._bot, js_name, handler)
            except Exception as e:
                logger.debug("mineflayer_listener_removal_failed", js_event=js_name, error=str(e))

    def quit(self, reason: str | None = None) -> None:
        if reason is None:
            self._bot.quit()
        else:
            self._bot.quit(reason)

    def chat(self, message: str) -> None:
        self._bot.chat(message)

    @property
    def username(self) -> str | None:
        return _text(self._bot.username)

    @property
    def position(self) -> tuple[float, float, float] | None:
        entity = self._bot.entity
        if entity is None or entity.position is None:
            return None
        pos = entity.position
        return (float(pos.x), float(pos.y), float(pos.z))

    @property
    def game_mode(self) -> str | None:
        game = self._bot.game
        return _text(game.gameMode) if game is not None else None

    @property
    def difficulty(self) -> str | None:
        game = self._bot.game
        return _text(game.difficulty) if game is not None else None


def create_mineflayer_client(options: ClientOptions) -> MineflayerClient:
    """Construct a mineflayer bot for ``options`` and wrap it.

    Must be called from the event loop thread.

    Raises:
        ClientCreationError: If the bridge or mineflayer rejects the call
    """
    loop = asyncio.get_running_loop()
    try:
        from javascript import On, off, require

        mineflayer = require("mineflayer")
        bot = mineflayer.createBot(options.model_dump())
    except Exception as e:
        raise ClientCreationError(f"mineflayer.createBot failed: {e}") from e
    logger.debug("mineflayer_bot_created", host=options.host, port=options.port, username=options.username)
    return MineflayerClient(bot, loop, on=On, off=off)

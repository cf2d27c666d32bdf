# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Observer-registration interface for game client connection handles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from craftbot.logging import get_logger

logger = get_logger(__name__)


class ClientOptions(BaseModel):
    """Arguments of the client library's construction call."""

    host: str
    port: int
    username: str
    version: str
    auth: Literal["offline"] = "offline"

    model_config = ConfigDict(frozen=True)


class ClientEvent(str, Enum):
    """Lifecycle events a connection handle delivers."""

    LOGIN = "login"
    SPAWN = "spawn"
    CHAT = "chat"
    ERROR = "error"
    KICKED = "kicked"
    END = "end"
    DEATH = "death"
    MESSAGE = "message"


@dataclass
class ClientObservers:
    """Named callback slots, one per ClientEvent."""

    on_login: Callable[[], None] | None = None
    on_spawn: Callable[[], None] | None = None
    on_chat: Callable[[str, str], None] | None = None
    on_error: Callable[[Any], None] | None = None
    on_kicked: Callable[[str], None] | None = None
    on_end: Callable[[str | None], None] | None = None
    on_death: Callable[[], None] | None = None
    on_message: Callable[[str], None] | None = None

    def slot(self, event: ClientEvent) -> Callable[..., None] | None:
        return getattr(self, f"on_{event.value}")


class GameClient(ABC):
    """Abstract base for a live session with a game server.

    Concrete clients call :meth:`emit` from the event loop thread whenever the
    underlying library reports an event. Only the currently attached observers
    receive it; after :meth:`detach` events are dropped.
    """

    def __init__(self) -> None:
        self._observers: ClientObservers | None = None

    @property
    def observers(self) -> ClientObservers | None:
        return self._observers

    def attach(self, observers: ClientObservers) -> None:
        self._observers = observers

    def detach(self) -> None:
        """Remove every registered observer.

        Should be idempotent - safe to call multiple times.
        """
        self._observers = None

    def emit(self, event: ClientEvent, *args: Any) -> None:
        """Deliver an event to its observer slot.

        Observer failures are logged and never propagate to the caller.
        """
        observers = self._observers
        if observers is None:
            return
        callback = observers.slot(event)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.exception("client_observer_failed", client_event=event.value, error=str(e))

    @abstractmethod
    def quit(self, reason: str | None = None) -> None:
        """Request disconnection from the server."""

    @abstractmethod
    def chat(self, message: str) -> None:
        """Send a chat message."""

    @property
    @abstractmethod
    def username(self) -> str | None:
        """Identity the server knows this session by, once logged in."""

    @property
    @abstractmethod
    def position(self) -> tuple[float, float, float] | None:
        """Current in-world coordinates, if the entity has spawned."""

    @property
    @abstractmethod
    def game_mode(self) -> str | None:
        """Game mode reported by the server, if known."""

    @property
    @abstractmethod
    def difficulty(self) -> str | None:
        """World difficulty reported by the server, if known."""


ClientFactory = Callable[[ClientOptions], GameClient]

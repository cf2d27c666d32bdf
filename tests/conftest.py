# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from craftbot.client.base import ClientEvent, ClientOptions, GameClient
from craftbot.connection import ConnectionManager, ConnectionState
from craftbot.settings import Settings


class FakeClient(GameClient):
    """In-memory GameClient that records calls and lets tests emit events."""

    def __init__(self, options: ClientOptions) -> None:
        super().__init__()
        self.options = options
        self.quit_calls = 0
        self.detach_calls = 0
        self.sent: list[str] = []
        self.fail_quit = False
        self.fail_chat = False
        self._username: str | None = None
        self._position: tuple[float, float, float] | None = None
        self.game_mode_value: str | None = None
        self.difficulty_value: str | None = None

    def login(self, position: tuple[float, float, float] = (0.0, 64.0, 0.0)) -> None:
        self._username = self.options.username
        self._position = position
        self.emit(ClientEvent.LOGIN)

    def detach(self) -> None:
        self.detach_calls += 1
        super().detach()

    def quit(self, reason: str | None = None) -> None:
        self.quit_calls += 1
        if self.fail_quit:
            raise RuntimeError("socket already closed")

    def chat(self, message: str) -> None:
        if self.fail_chat:
            raise RuntimeError("not connected")
        self.sent.append(message)

    @property
    def username(self) -> str | None:
        return self._username

    @property
    def position(self) -> tuple[float, float, float] | None:
        return self._position

    @property
    def game_mode(self) -> str | None:
        return self.game_mode_value

    @property
    def difficulty(self) -> str | None:
        return self.difficulty_value


class RecordingFactory:
    """Client factory that remembers every client it builds."""

    def __init__(self) -> None:
        self.clients: list[FakeClient] = []
        self.failures_left = 0

    def __call__(self, options: ClientOptions) -> FakeClient:
        if self.failures_left > 0:
            self.failures_left -= 1
            raise ConnectionRefusedError("connect ECONNREFUSED")
        client = FakeClient(options)
        self.clients.append(client)
        return client

    @property
    def last(self) -> FakeClient:
        return self.clients[-1]


@pytest.fixture
def settings() -> Settings:
    """Settings with a short reconnect delay and an ephemeral status port."""
    return Settings(username="TestBot", reconnect_delay_ms=20, http_host="127.0.0.1", http_port=0)


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def state() -> ConnectionState:
    return ConnectionState()


@pytest.fixture
def manager(settings: Settings, factory: RecordingFactory, state: ConnectionState) -> Iterator[ConnectionManager]:
    manager = ConnectionManager(settings, factory, state)
    yield manager
    manager.shutdown()


@pytest.fixture
def client_options() -> ClientOptions:
    return ClientOptions(host="localhost", port=25565, username="Bot", version="1.20.1")


@pytest.fixture
def fake_client(client_options: ClientOptions) -> FakeClient:
    return FakeClient(client_options)

# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP status server.

Serves ``GET /health`` with a JSON snapshot of the connection state and a
static informational line on every other path.
"""

from __future__ import annotations

import asyncio
import contextlib
import socket
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Literal

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from craftbot import defaults
from craftbot.connection import ConnectionState
from craftbot.errors import StatusServerError
from craftbot.logging import get_logger

logger = get_logger(__name__)

INFO_TEXT = "craftbot is running. See /health for status.\n"

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class StatusSnapshot(BaseModel):
    """Health check response body."""

    status: Literal["connected", "disconnected"]
    bot: str
    uptime: float
    timestamp: str


def _iso_now() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_snapshot(state: ConnectionState) -> StatusSnapshot:
    return StatusSnapshot(
        status="connected" if state.connected else "disconnected",
        bot=state.username or defaults.UNINITIALIZED_BOT,
        uptime=state.uptime(),
        timestamp=_iso_now(),
    )


def create_status_app(state: ConnectionState) -> FastAPI:
    """Create the status FastAPI application reading from ``state``."""
    app = FastAPI(title="craftbot", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/health", response_model=StatusSnapshot)
    async def health() -> StatusSnapshot:
        return build_snapshot(state)

    @app.api_route("/{path:path}", methods=_ALL_METHODS, response_class=PlainTextResponse)
    async def info(path: str) -> PlainTextResponse:
        return PlainTextResponse(INFO_TEXT)

    return app


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the owning service."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class StatusServer:
    """Runs the status app on a socket bound before serving starts."""

    def __init__(self, app: FastAPI, host: str, port: int) -> None:
        self.app = app
        self.host = host
        self.port = port
        self._sock: socket.socket | None = None
        self._server: _Server | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def bound_port(self) -> int | None:
        if self._sock is None or self._sock.fileno() == -1:
            return None
        return self._sock.getsockname()[1]

    def bind(self) -> socket.socket:
        """Bind the listening socket, reusing it if already bound.

        Raises:
            StatusServerError: If the address cannot be bound
        """
        if self._sock is not None:
            return self._sock
        try:
            sock = socket.create_server((self.host, self.port))
        except OSError as e:
            raise StatusServerError(f"cannot bind status server to {self.host}:{self.port}: {e}") from e
        self._sock = sock
        logger.info("status_server_bound", host=self.host, port=self.bound_port)
        return sock

    async def start(self) -> None:
        """Start serving in a background task and wait until it accepts requests."""
        sock = self.bind()
        config = uvicorn.Config(
            self.app,
            log_level="warning",
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._server = _Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[sock]))
        while not self._server.started:
            if self._task.done():
                self._task.result()
                raise StatusServerError("status server exited during startup")
            await asyncio.sleep(0.01)
        logger.info("status_server_started", url=f"http://{self.host}:{self.bound_port}/health")

    async def stop(self) -> None:
        """Stop serving and close the listening socket. Idempotent."""
        if self._server is not None:
            self._server.should_exit = True
        task, self._task = self._task, None
        if task is not None:
            try:
                await task
            except Exception as e:
                logger.warning("status_server_stop_failed", error=str(e))
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        logger.info("status_server_stopped")

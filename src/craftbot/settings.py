# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from craftbot import defaults
from craftbot.client.base import ClientOptions


class Settings(BaseSettings):
    host: str = defaults.SERVER_HOST
    port: int = Field(default=defaults.SERVER_PORT, ge=1, le=65535)
    username: str = defaults.BOT_USERNAME
    version: str = defaults.GAME_VERSION
    log_level: str = "INFO"
    http_host: str = defaults.STATUS_HOST
    http_port: int = Field(default=defaults.STATUS_PORT, ge=0, le=65535)
    reconnect_delay_ms: int = Field(default=defaults.RECONNECT_DELAY_MS, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="CRAFTBOT_",
        extra="ignore",
        frozen=True,
    )

    def client_options(self) -> ClientOptions:
        """Connection parameters handed to the game client library."""
        return ClientOptions(
            host=self.host,
            port=self.port,
            username=self.username,
            version=self.version,
        )

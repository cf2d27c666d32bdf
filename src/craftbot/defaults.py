# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized default values for craftbot."""

from __future__ import annotations

SERVER_HOST = "localhost"
SERVER_PORT = 25565
BOT_USERNAME = "Bot"
GAME_VERSION = "1.20.1"

STATUS_HOST = "0.0.0.0"
STATUS_PORT = 3000
STATUS_URL = f"http://localhost:{STATUS_PORT}/health"

RECONNECT_DELAY_MS = 5000

UNINITIALIZED_BOT = "not initialized"
DEATH_MESSAGE = "I died! Respawning..."

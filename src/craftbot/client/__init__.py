# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Game client boundary."""

from __future__ import annotations

from craftbot.client.base import ClientEvent, ClientFactory, ClientObservers, ClientOptions, GameClient
from craftbot.client.mineflayer import MineflayerClient, create_mineflayer_client

__all__ = [
    "ClientEvent",
    "ClientFactory",
    "ClientObservers",
    "ClientOptions",
    "GameClient",
    "MineflayerClient",
    "create_mineflayer_client",
]

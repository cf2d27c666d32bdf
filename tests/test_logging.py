# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for logging configuration."""

from __future__ import annotations

import pytest
import structlog

from craftbot.logging import bind_bot_context, configure_logging
from craftbot.settings import Settings


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def test_bind_bot_context_tags_identity() -> None:
    bind_bot_context(Settings(username="Scout", host="mc.local", port=25570))

    assert structlog.contextvars.get_contextvars() == {"bot": "Scout", "server": "mc.local:25570"}


def test_bind_bot_context_replaces_previous_binding() -> None:
    structlog.contextvars.bind_contextvars(stale="value")

    bind_bot_context(Settings(username="Scout"))

    assert "stale" not in structlog.contextvars.get_contextvars()


def test_configure_logging_merges_context_and_binds() -> None:
    configure_logging(Settings(username="Scout", log_level="debug"))

    processors = structlog.get_config()["processors"]
    assert processors[0] is structlog.contextvars.merge_contextvars
    assert structlog.contextvars.get_contextvars()["bot"] == "Scout"

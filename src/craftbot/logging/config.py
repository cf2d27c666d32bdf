# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized logging configuration for craftbot.

This module provides structured logging using structlog, configured to:
- Write all logs to stderr
- Respect CRAFTBOT_LOG_LEVEL environment variable (default: INFO)
- Use ISO timestamps and console rendering
- Tag every line with the bot identity and target server via contextvars
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from craftbot.settings import Settings

__all__ = ["bind_bot_context", "configure_logging", "get_logger"]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for craftbot.

    This should be called once at application startup.
    Respects CRAFTBOT_LOG_LEVEL environment variable via Settings (default: INFO).

    Args:
        settings: Settings instance (will be created if None)
    """
    if settings is None:
        from craftbot.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
    bind_bot_context(settings)


def bind_bot_context(settings: Settings) -> None:
    """Bind the bot identity to the logging context.

    Tasks started afterwards inherit the binding, so reconnect logs from any
    callback name the bot and server they belong to.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        bot=settings.username,
        server=f"{settings.host}:{settings.port}",
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)

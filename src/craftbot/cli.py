from __future__ import annotations

import asyncio
from typing import Any

import click
import httpx
from pydantic import ValidationError

from craftbot import defaults
from craftbot.errors import StatusServerError
from craftbot.logging import configure_logging, get_logger
from craftbot.settings import Settings

logger = get_logger(__name__)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """craftbot command line interface."""


@cli.command("run")
@click.option("--host", type=str, help="Game server host (env CRAFTBOT_HOST).")
@click.option("--port", type=int, help="Game server port (env CRAFTBOT_PORT).")
@click.option("--username", type=str, help="Bot identity (env CRAFTBOT_USERNAME).")
@click.option("--version", "game_version", type=str, help="Protocol version (env CRAFTBOT_VERSION).")
@click.option("--http-port", type=int, help="Status server port (env CRAFTBOT_HTTP_PORT).")
@click.option("--log-level", type=str, help="Log level (env CRAFTBOT_LOG_LEVEL).")
def run(
    host: str | None,
    port: int | None,
    username: str | None,
    game_version: str | None,
    http_port: int | None,
    log_level: str | None,
) -> None:
    """Connect the bot and serve the health endpoint until interrupted."""
    from craftbot.service import BotService

    overrides: dict[str, Any] = {
        "host": host,
        "port": port,
        "username": username,
        "version": game_version,
        "http_port": http_port,
        "log_level": log_level,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    configure_logging(settings)
    service = BotService(settings)
    try:
        asyncio.run(service.run())
    except StatusServerError as e:
        logger.error("status_server_bind_failed", error=str(e))
        raise click.ClickException(str(e)) from e


@cli.command("check")
@click.option("--url", default=defaults.STATUS_URL, show_default=True, help="Health endpoint to probe.")
@click.option("--timeout", default=5.0, type=float, show_default=True, help="Request timeout in seconds.")
def check(url: str, timeout: float) -> None:
    """Probe a running instance; exit non-zero unless it reports connected."""
    try:
        resp = httpx.get(url, timeout=timeout)
        resp.raise_for_status()
        body = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise click.ClickException(f"health check failed: {e}") from e

    status = body.get("status")
    click.echo(f"{status} bot={body.get('bot')} uptime={body.get('uptime', 0):.1f}s")
    if status != "connected":
        raise SystemExit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

"""CLI entry point for phabslack.

- serve: run the slash command webhook under uvicorn
- lookup: resolve a ticket reference from the shell, printing the Slack message
"""

from __future__ import annotations

import json
import os
import sys

import click

from phabslack import __version__
from phabslack.config import ConfigError, Settings
from phabslack.logging import setup_logging
from phabslack.phabricator import ConduitClient, PhabricatorError
from phabslack.tickets import InvalidTicketReferenceError, TicketLookup

DEFAULT_PORT = 8080


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="phabslack")
def main() -> None:
    """Slack slash command for looking up Phabricator tasks."""
    pass


@main.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option(
    "--port",
    type=int,
    default=None,
    help=f"Port to listen on (default: $PORT or {DEFAULT_PORT})",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: $PHABSLACK_LOG_LEVEL or INFO)",
)
@click.option("--no-log-file", is_flag=True, help="Log to the console only")
def serve(host: str, port: int | None, log_level: str | None, no_log_file: bool) -> None:
    """Run the webhook server."""
    import uvicorn  # noqa: PLC0415

    from phabslack.api import create_app  # noqa: PLC0415

    settings = _load_settings()
    setup_logging(level=log_level, file=not no_log_file)

    if port is None:
        port = int(os.environ.get("PORT", DEFAULT_PORT))

    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


@main.command()
@click.argument("text")
def lookup(text: str) -> None:
    """Look up TEXT (e.g. T123) and print the Slack message as JSON."""
    settings = _load_settings()
    setup_logging(level="WARNING", file=False)

    with ConduitClient(
        base_url=settings.phabricator_base_url,
        api_token=settings.phabricator_api_token,
        timeout=settings.phabricator_timeout,
    ) as client:
        try:
            message = TicketLookup(client, settings.phabricator_base_url).lookup(text)
        except InvalidTicketReferenceError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(2)
        except PhabricatorError as e:
            click.echo(f"Phabricator error: {e}", err=True)
            sys.exit(1)

    click.echo(json.dumps(message.to_payload(), indent=2))

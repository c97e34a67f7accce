"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from phabslack import __version__
from phabslack.api.models import ErrorResponse
from phabslack.api.routes import commands, health
from phabslack.config import Settings
from phabslack.phabricator import (
    ConduitClient,
    PhabricatorError,
    UpstreamTimeoutError,
)
from phabslack.slack import InvalidCommandError, SignatureVerificationError, SignatureVerifier
from phabslack.tickets import TicketLookup

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from phabslack.tickets import TicketSearcher

logger = logging.getLogger("phabslack.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Serving slash commands for %s", app.state.settings.phabricator_base_url)
    yield
    # Shutdown
    client: ConduitClient | None = app.state.conduit_client
    if client is not None:
        client.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def create_app(settings: Settings, searcher: TicketSearcher | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service configuration
        searcher: Ticket source. Defaults to a ConduitClient built from settings,
                  which the app closes on shutdown.
    """
    app = FastAPI(
        title="phabslack",
        description="Slack slash command for looking up Phabricator tasks",
        version=__version__,
        lifespan=lifespan,
    )

    conduit_client: ConduitClient | None = None
    if searcher is None:
        conduit_client = ConduitClient(
            base_url=settings.phabricator_base_url,
            api_token=settings.phabricator_api_token,
            timeout=settings.phabricator_timeout,
        )
        searcher = conduit_client

    app.state.settings = settings
    app.state.conduit_client = conduit_client
    app.state.signature_verifier = SignatureVerifier(
        settings.slack_signing_secret, max_age=settings.max_request_age
    )
    app.state.ticket_lookup = TicketLookup(searcher, settings.phabricator_base_url)

    # Exception handlers
    @app.exception_handler(SignatureVerificationError)
    async def signature_error_handler(
        request: Request, exc: SignatureVerificationError
    ) -> JSONResponse:
        logger.warning(
            "Rejected request to %s: %s (%s)", request.url.path, type(exc).__name__, exc
        )
        return _error(status.HTTP_401_UNAUTHORIZED, "invalid request signature")

    @app.exception_handler(InvalidCommandError)
    async def invalid_command_handler(_request: Request, exc: InvalidCommandError) -> JSONResponse:
        logger.warning("Malformed slash command: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(UpstreamTimeoutError)
    async def upstream_timeout_handler(
        _request: Request, exc: UpstreamTimeoutError
    ) -> JSONResponse:
        logger.error("Phabricator timed out: %s", exc, exc_info=exc)
        return _error(status.HTTP_504_GATEWAY_TIMEOUT, "Phabricator did not respond in time")

    @app.exception_handler(PhabricatorError)
    async def upstream_error_handler(_request: Request, exc: PhabricatorError) -> JSONResponse:
        logger.error("Phabricator lookup failed: %s", exc, exc_info=exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Phabricator is unavailable")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error: %s", exc, exc_info=exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(commands.router)
    app.include_router(health.router)

    return app


def create_app_from_env() -> FastAPI:
    """Application factory for ``uvicorn --factory``.

    Raises:
        ConfigError: If required environment variables are missing
    """
    return create_app(Settings.from_env())

"""REST API for the slash command webhook."""

from phabslack.api.app import create_app, create_app_from_env
from phabslack.api.models import ErrorResponse, HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "create_app",
    "create_app_from_env",
]

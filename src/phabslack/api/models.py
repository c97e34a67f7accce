"""Pydantic models for the HTTP API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every non-200 response."""

    error: str


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str = "ok"
    version: str

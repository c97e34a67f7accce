"""Health check endpoint for the hosting runtime."""

from fastapi import APIRouter

from phabslack import get_version
from phabslack.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
def health() -> HealthResponse:
    """Report that the process is up. Does not contact Phabricator."""
    return HealthResponse(version=get_version())

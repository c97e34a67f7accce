"""Phabricator - Conduit API client for Maniphest task lookups."""

from phabslack.phabricator.client import ConduitClient
from phabslack.phabricator.exceptions import (
    ConduitError,
    PhabricatorError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from phabslack.phabricator.models import Ticket, ticket_url

__all__ = [
    "ConduitClient",
    "ConduitError",
    "PhabricatorError",
    "Ticket",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "ticket_url",
]

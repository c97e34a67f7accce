"""FastAPI dependencies for dependency injection.

Everything a request needs is built once in create_app() and stored on
app.state, so the dependencies below only read from there.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from phabslack.slack.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, SignatureVerifier
from phabslack.tickets import TicketLookup


def get_signature_verifier(request: Request) -> SignatureVerifier:
    """Dependency that provides the Slack signature verifier."""
    verifier: SignatureVerifier = request.app.state.signature_verifier
    return verifier


SignatureVerifierDep = Annotated[SignatureVerifier, Depends(get_signature_verifier)]


def get_ticket_lookup(request: Request) -> TicketLookup:
    """Dependency that provides the TicketLookup instance."""
    lookup: TicketLookup = request.app.state.ticket_lookup
    return lookup


TicketLookupDep = Annotated[TicketLookup, Depends(get_ticket_lookup)]


async def verified_body(request: Request, verifier: SignatureVerifierDep) -> bytes:
    """Read the raw request body and check its Slack signature.

    Returns:
        The raw body bytes, for the route to parse

    Raises:
        SignatureVerificationError: If the request is not from Slack or is stale
    """
    body = await request.body()
    verifier.verify(
        body,
        request.headers.get(TIMESTAMP_HEADER),
        request.headers.get(SIGNATURE_HEADER),
    )
    return body


VerifiedBodyDep = Annotated[bytes, Depends(verified_body)]

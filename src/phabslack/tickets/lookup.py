"""TicketLookup - Resolves slash command text into a Slack message."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Protocol

from phabslack.tickets.exceptions import InvalidTicketReferenceError
from phabslack.tickets.formatter import not_found_message, ticket_message

if TYPE_CHECKING:
    from phabslack.phabricator.models import Ticket
    from phabslack.slack.models import SlackMessage

logger = logging.getLogger("phabslack.tickets")

TICKET_REFERENCE = re.compile(r"[Tt]([0-9]+)")

# Conduit task IDs are signed 64-bit integers
MAX_TICKET_ID = 2**63 - 1


class TicketSearcher(Protocol):
    """Interface for anything that can fetch a ticket by ID."""

    def search_ticket(self, ticket_id: int) -> Ticket | None:
        """Return the ticket, or None if it does not exist."""
        ...


def parse_ticket_reference(text: str) -> int:
    """Extract the task ID from command text such as "T123".

    Args:
        text: The slash command argument

    Returns:
        The numeric task ID

    Raises:
        InvalidTicketReferenceError: If the text is not a ticket reference
    """
    match = TICKET_REFERENCE.fullmatch(text.strip())
    if match is None:
        raise InvalidTicketReferenceError(text)
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_TICKET_ID)) or int(digits) > MAX_TICKET_ID:
        raise InvalidTicketReferenceError(text)
    return int(digits)


class TicketLookup:
    """Looks up the ticket named in command text and formats the reply."""

    def __init__(self, searcher: TicketSearcher, base_url: str) -> None:
        """Initialize the lookup.

        Args:
            searcher: Source of tickets (normally a ConduitClient)
            base_url: Phabricator install URL used to build task links
        """
        self.searcher = searcher
        self.base_url = base_url.rstrip("/")

    def lookup(self, text: str) -> SlackMessage:
        """Resolve command text into a message.

        Args:
            text: The slash command argument

        Returns:
            The task summary, or a "not found" message

        Raises:
            InvalidTicketReferenceError: If the text is not a ticket reference.
                No remote call is made in that case.
            PhabricatorError: If Phabricator could not be queried
        """
        ticket_id = parse_ticket_reference(text)
        logger.info("Looking up T%d", ticket_id)

        ticket = self.searcher.search_ticket(ticket_id)
        if ticket is None:
            logger.info("T%d not found", ticket_id)
            return not_found_message()

        return ticket_message(ticket, self.base_url)

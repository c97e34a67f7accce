"""Tickets - Parses ticket references and formats lookups for Slack."""

from phabslack.tickets.exceptions import InvalidTicketReferenceError, TicketLookupError
from phabslack.tickets.formatter import not_found_message, ticket_message, usage_message
from phabslack.tickets.lookup import TicketLookup, TicketSearcher, parse_ticket_reference

__all__ = [
    "InvalidTicketReferenceError",
    "TicketLookup",
    "TicketLookupError",
    "TicketSearcher",
    "not_found_message",
    "parse_ticket_reference",
    "ticket_message",
    "usage_message",
]

"""Custom exceptions for ticket lookups."""


class TicketLookupError(Exception):
    """Base exception for ticket lookup errors."""


class InvalidTicketReferenceError(TicketLookupError):
    """Command text is not a ticket reference such as T123."""

    def __init__(self, text: str) -> None:
        super().__init__(f"{text!r} is not a ticket reference")
        self.text = text

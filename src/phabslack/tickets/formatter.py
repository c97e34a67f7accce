"""Formatting of Maniphest tasks into Slack messages."""

from __future__ import annotations

from datetime import datetime, timezone

from phabslack.phabricator.models import Ticket, ticket_url
from phabslack.slack.models import Attachment, AttachmentField, ResponseType, SlackMessage

DATE_FORMAT = "%Y-%m-%d"
NOT_FOUND_TEXT = "Task not found"
REFINE_SEARCH_TEXT = "Please refine your search"
DEFAULT_COMMAND = "/phab"


def format_date(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(DATE_FORMAT)


def ticket_message(ticket: Ticket, base_url: str) -> SlackMessage:
    """Build the message describing a single task."""
    url = ticket_url(base_url, ticket.id)
    return SlackMessage(
        response_type=ResponseType.IN_CHANNEL,
        text=url,
        attachments=(
            Attachment(
                title=ticket.name,
                title_link=url,
                fields=(
                    AttachmentField(title="Description", value=ticket.description),
                    AttachmentField(title="Status", value=ticket.status),
                    AttachmentField(title="Created", value=format_date(ticket.date_created)),
                    AttachmentField(
                        title="Last Updated", value=format_date(ticket.date_modified)
                    ),
                ),
            ),
        ),
    )


def not_found_message() -> SlackMessage:
    return SlackMessage(
        response_type=ResponseType.IN_CHANNEL,
        text=NOT_FOUND_TEXT,
        attachments=(Attachment(text=REFINE_SEARCH_TEXT),),
    )


def usage_message(command: str = "") -> SlackMessage:
    """Build the reply for text that is not a ticket reference.

    Only the invoking user sees it.
    """
    return SlackMessage(
        response_type=ResponseType.EPHEMERAL,
        text=f"Usage: {command or DEFAULT_COMMAND} T123",
        attachments=(Attachment(text="Give a Maniphest task ID such as T123 or t42."),),
    )

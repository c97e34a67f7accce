"""Slash command endpoint."""

import logging

from fastapi import APIRouter

from phabslack.api.dependencies import TicketLookupDep, VerifiedBodyDep
from phabslack.api.models import ErrorResponse
from phabslack.slack.models import SlackMessage, SlashCommand
from phabslack.tickets import InvalidTicketReferenceError, usage_message

logger = logging.getLogger("phabslack.api")

router = APIRouter(tags=["commands"])

ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Malformed slash command payload"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or stale Slack signature"},
    502: {"model": ErrorResponse, "description": "Phabricator unavailable or returned an error"},
    504: {"model": ErrorResponse, "description": "Phabricator did not answer in time"},
}


@router.post("/", response_model=SlackMessage, responses=ERROR_RESPONSES)
@router.post("/slack/commands", response_model=SlackMessage, responses=ERROR_RESPONSES)
def handle_command(body: VerifiedBodyDep, lookup: TicketLookupDep) -> SlackMessage:
    """Answer a slash command with a summary of the referenced task."""
    command = SlashCommand.from_form(body)
    logger.info(
        "Slash command %s %r from %s in %s",
        command.command or "?",
        command.text,
        command.user_name or command.user_id or "?",
        command.channel_name or command.channel_id or "?",
    )

    try:
        return lookup.lookup(command.text)
    except InvalidTicketReferenceError:
        logger.info("Not a ticket reference: %r", command.text)
        return usage_message(command.command)

"""Slack - slash command payloads, request signing and message models."""

from phabslack.slack.exceptions import (
    InvalidCommandError,
    InvalidTimestampError,
    MalformedSignatureError,
    MissingHeaderError,
    SignatureMismatchError,
    SignatureVerificationError,
    SlackError,
    StaleTimestampError,
)
from phabslack.slack.models import (
    Attachment,
    AttachmentField,
    ResponseType,
    SlackMessage,
    SlashCommand,
)
from phabslack.slack.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    SignatureVerifier,
    compute_signature,
)

__all__ = [
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "Attachment",
    "AttachmentField",
    "InvalidCommandError",
    "InvalidTimestampError",
    "MalformedSignatureError",
    "MissingHeaderError",
    "ResponseType",
    "SignatureMismatchError",
    "SignatureVerificationError",
    "SignatureVerifier",
    "SlackError",
    "SlackMessage",
    "SlashCommand",
    "StaleTimestampError",
    "compute_signature",
]

"""Pydantic models for Slack slash command payloads and messages.

See https://api.slack.com/interactivity/slash-commands and
https://api.slack.com/reference/messaging/attachments
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field

from phabslack.slack.exceptions import InvalidCommandError


class ResponseType(str, Enum):
    """Visibility of a slash command response."""

    IN_CHANNEL = "in_channel"
    EPHEMERAL = "ephemeral"


class AttachmentField(BaseModel):
    """A title/value pair rendered as a table row inside an attachment."""

    model_config = ConfigDict(frozen=True)

    title: str
    value: str
    short: bool = False


class Attachment(BaseModel):
    """Secondary message content. Every key is always serialized."""

    model_config = ConfigDict(frozen=True)

    color: str = ""
    title: str = ""
    title_link: str = ""
    text: str = ""
    image_url: str = ""
    fields: tuple[AttachmentField, ...] = ()


class SlackMessage(BaseModel):
    """Message returned to Slack as the slash command response."""

    model_config = ConfigDict(frozen=True)

    response_type: ResponseType = ResponseType.IN_CHANNEL
    text: str
    attachments: tuple[Attachment, ...] = ()

    def to_payload(self) -> dict:
        """Return the JSON-compatible dict Slack expects."""
        return self.model_dump(mode="json")


class SlashCommand(BaseModel):
    """Form fields Slack posts when a user invokes a slash command.

    Only ``text`` is required; the other fields are used for logging.
    """

    text: str
    command: str = ""
    team_id: str = ""
    team_domain: str = ""
    channel_id: str = ""
    channel_name: str = ""
    user_id: str = ""
    user_name: str = ""
    response_url: str = ""
    trigger_id: str = ""
    extra: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_form(cls, body: bytes) -> SlashCommand:
        """Parse an application/x-www-form-urlencoded request body.

        Args:
            body: Raw request body

        Returns:
            Parsed slash command

        Raises:
            InvalidCommandError: If the body is not valid UTF-8 or has no text field
        """
        try:
            decoded = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidCommandError("request body is not valid UTF-8") from e

        params = parse_qs(decoded, keep_blank_values=True)
        if "text" not in params:
            raise InvalidCommandError("empty text in form")

        # First value wins for repeated keys
        values = {key: vals[0] for key, vals in params.items()}
        known = {name for name in cls.model_fields if name != "extra"}
        return cls(
            **{key: value for key, value in values.items() if key in known},
            extra={key: value for key, value in values.items() if key not in known},
        )

"""Custom exceptions for Slack request handling."""


class SlackError(Exception):
    """Base exception for Slack request errors."""


class SignatureVerificationError(SlackError):
    """Request could not be proven to come from Slack."""


class MissingHeaderError(SignatureVerificationError):
    """Timestamp or signature header is missing or empty."""


class InvalidTimestampError(SignatureVerificationError):
    """Timestamp header is not a decimal Unix epoch."""


class StaleTimestampError(SignatureVerificationError):
    """Request timestamp is older than the accepted window."""

    def __init__(self, message: str, age_seconds: float) -> None:
        super().__init__(message)
        self.age_seconds = age_seconds


class MalformedSignatureError(SignatureVerificationError):
    """Signature header lacks the version prefix or is not valid hex."""


class SignatureMismatchError(SignatureVerificationError):
    """Computed signature does not match the one Slack sent."""


class InvalidCommandError(SlackError):
    """Slash command payload is malformed or missing required fields."""

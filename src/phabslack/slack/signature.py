"""Slack request signature verification.

See https://api.slack.com/authentication/verifying-requests-from-slack
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import logging
import re
import time
from collections.abc import Callable
from datetime import timedelta

from phabslack.slack.exceptions import (
    InvalidTimestampError,
    MalformedSignatureError,
    MissingHeaderError,
    SignatureMismatchError,
    SignatureVerificationError,
    StaleTimestampError,
)

logger = logging.getLogger("phabslack.slack")

VERSION = "v0"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"
DEFAULT_MAX_AGE = timedelta(minutes=5)
TIMESTAMP_PATTERN = re.compile(r"[0-9]{1,19}")


def _to_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def _digest(secret: bytes, timestamp: str, body: bytes) -> bytes:
    base = b":".join([VERSION.encode(), timestamp.encode("utf-8"), body])
    return hmac.new(secret, base, hashlib.sha256).digest()


def compute_signature(secret: bytes | str, timestamp: str | int, body: bytes | str) -> str:
    """Compute the signature header value Slack would send for a request.

    Args:
        secret: Slack signing secret
        timestamp: Request timestamp (Unix epoch seconds)
        body: Raw request body

    Returns:
        Header value in the form "v0=<hex digest>"
    """
    digest = _digest(_to_bytes(secret), str(timestamp), _to_bytes(body))
    return f"{VERSION}={digest.hex()}"


class SignatureVerifier:
    """Verifies that a request was signed by Slack and is recent.

    Requests timestamped further in the past than ``max_age`` are rejected.
    Timestamps in the future are accepted.
    """

    def __init__(
        self,
        signing_secret: bytes | str,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the verifier.

        Args:
            signing_secret: Slack app signing secret
            max_age: Oldest request accepted
            clock: Returns the current Unix time (injectable for tests)
        """
        self._secret = _to_bytes(signing_secret)
        self.max_age = max_age
        self._clock = clock

    def verify(self, body: bytes, timestamp: str | None, signature: str | None) -> None:
        """Verify a request.

        Args:
            body: Raw request body, exactly as received
            timestamp: Value of the X-Slack-Request-Timestamp header
            signature: Value of the X-Slack-Signature header

        Raises:
            MissingHeaderError: If either header is missing or empty
            InvalidTimestampError: If the timestamp is not an integer
            StaleTimestampError: If the request is too old
            MalformedSignatureError: If the signature is not "v0=<hex>"
            SignatureMismatchError: If the signature does not match
        """
        if not timestamp or not signature:
            raise MissingHeaderError("timestamp or slack signature is empty")

        if TIMESTAMP_PATTERN.fullmatch(timestamp) is None:
            raise InvalidTimestampError(f"timestamp {timestamp!r} is not an integer")
        ts = int(timestamp)

        age = self._clock() - ts
        if age > self.max_age.total_seconds():
            raise StaleTimestampError(f"request timestamp is {age:.0f}s old", age_seconds=age)

        prefix = f"{VERSION}="
        if not signature.startswith(prefix):
            raise MalformedSignatureError(f"signature does not start with {prefix!r}")
        try:
            received = bytes.fromhex(signature[len(prefix) :])
        except (ValueError, binascii.Error) as e:
            raise MalformedSignatureError("signature is not valid hex") from e

        expected = _digest(self._secret, timestamp, body)
        if not hmac.compare_digest(expected, received):
            raise SignatureMismatchError("signatures did not match")

    def is_valid(self, body: bytes, timestamp: str | None, signature: str | None) -> bool:
        """Return True if the request verifies, False otherwise."""
        try:
            self.verify(body, timestamp, signature)
        except SignatureVerificationError as e:
            logger.debug("Signature verification failed (%s): %s", type(e).__name__, e)
            return False
        return True

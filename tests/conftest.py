"""Shared pytest fixtures and configuration."""

import logging
import time
from urllib.parse import urlencode

import pytest

from phabslack.config import Settings
from phabslack.slack import SIGNATURE_HEADER, TIMESTAMP_HEADER, compute_signature

SIGNING_SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
BASE_URL = "https://phabricator.example.com"
API_TOKEN = "api-abcdefghijklmnopqrstuvwxyz12"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: talks to a real Phabricator (local only)")


# Shared fixtures


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake Phabricator."""
    return Settings(
        slack_signing_secret=SIGNING_SECRET,
        phabricator_base_url=BASE_URL,
        phabricator_api_token=API_TOKEN,
        phabricator_timeout=2.0,
    )


def slack_form(text: str | None = "T123", **fields: str) -> bytes:
    """Build a slash command form body like the one Slack posts."""
    params = {
        "token": "deprecated-verification-token",
        "team_id": "T0001",
        "team_domain": "example",
        "channel_id": "C2147483705",
        "channel_name": "dev",
        "user_id": "U2147483697",
        "user_name": "alex",
        "command": "/phab",
        "response_url": "https://hooks.slack.com/commands/1234/5678",
        "trigger_id": "13345224609.738474920.8088930838d88f008e0",
    }
    if text is not None:
        params["text"] = text
    params.update(fields)
    return urlencode(params).encode()


def signed_headers(
    body: bytes, secret: str = SIGNING_SECRET, timestamp: int | None = None
) -> dict[str, str]:
    """Headers Slack would send for the given body."""
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "Content-Type": "application/x-www-form-urlencoded",
        TIMESTAMP_HEADER: ts,
        SIGNATURE_HEADER: compute_signature(secret, ts, body),
    }


@pytest.fixture
def make_form():
    """Factory for slash command form bodies."""
    return slack_form


@pytest.fixture
def sign():
    """Factory for signed Slack request headers."""
    return signed_headers


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a test."""
    yield
    logger = logging.getLogger("phabslack")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

"""Configuration loading for the webhook service.

All settings come from the environment and are read once at process start.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_PHABRICATOR_TIMEOUT = 10.0
DEFAULT_MAX_REQUEST_AGE = 300  # seconds

# Environment variable names
ENV_SIGNING_SECRET = "SLACK_SIGNING_SECRET"
ENV_BASE_URL = "PHABRICATOR_BASE_URL"
ENV_API_TOKEN = "PHABRICATOR_API_TOKEN"
ENV_TIMEOUT = "PHABRICATOR_TIMEOUT"
ENV_MAX_REQUEST_AGE = "SLACK_MAX_REQUEST_AGE"

REQUIRED_VARIABLES = (ENV_SIGNING_SECRET, ENV_BASE_URL, ENV_API_TOKEN)


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class Settings:
    """Service configuration.

    Attributes:
        slack_signing_secret: Secret Slack uses to sign slash command requests.
        phabricator_base_url: Phabricator install URL, e.g. https://phab.example.com
        phabricator_api_token: Conduit API token (api-...).
        phabricator_timeout: Seconds to wait for a Conduit response.
        max_request_age_seconds: Oldest request timestamp accepted.
    """

    slack_signing_secret: str = field(repr=False)
    phabricator_base_url: str
    phabricator_api_token: str = field(repr=False)
    phabricator_timeout: float = DEFAULT_PHABRICATOR_TIMEOUT
    max_request_age_seconds: int = DEFAULT_MAX_REQUEST_AGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "phabricator_base_url", self.phabricator_base_url.rstrip("/"))

    @property
    def max_request_age(self) -> timedelta:
        return timedelta(seconds=self.max_request_age_seconds)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a required variable is missing or a value is invalid.
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in REQUIRED_VARIABLES if not environ.get(name, "").strip()]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        try:
            timeout = float(environ.get(ENV_TIMEOUT, DEFAULT_PHABRICATOR_TIMEOUT))
        except ValueError as e:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number of seconds") from e
        if timeout <= 0:
            raise ConfigError(f"{ENV_TIMEOUT} must be positive")

        try:
            max_age = int(environ.get(ENV_MAX_REQUEST_AGE, DEFAULT_MAX_REQUEST_AGE))
        except ValueError as e:
            raise ConfigError(f"{ENV_MAX_REQUEST_AGE} must be an integer number of seconds") from e
        if max_age <= 0:
            raise ConfigError(f"{ENV_MAX_REQUEST_AGE} must be positive")

        return cls(
            slack_signing_secret=environ[ENV_SIGNING_SECRET].strip(),
            phabricator_base_url=environ[ENV_BASE_URL].strip(),
            phabricator_api_token=environ[ENV_API_TOKEN].strip(),
            phabricator_timeout=timeout,
            max_request_age_seconds=max_age,
        )

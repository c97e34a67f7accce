"""Custom exceptions for the Phabricator Conduit client."""


class PhabricatorError(Exception):
    """Base exception for Phabricator errors."""


class UpstreamUnavailableError(PhabricatorError):
    """Phabricator could not be reached or returned an unusable response."""


class UpstreamTimeoutError(UpstreamUnavailableError):
    """Phabricator did not respond within the configured timeout."""


class ConduitError(PhabricatorError):
    """Conduit returned an API-level error (bad token, bad params, ...)."""

    def __init__(self, code: str, info: str | None) -> None:
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info

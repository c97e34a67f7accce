"""ConduitClient - Talks to the Phabricator Conduit API over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from phabslack.logging import sanitize_for_log, truncate_output
from phabslack.phabricator.exceptions import (
    ConduitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from phabslack.phabricator.models import Ticket

logger = logging.getLogger("phabslack.phabricator")


class ConduitClient:
    """Client for the Phabricator Conduit API.

    Authenticates with an API token. The underlying HTTP client (and its
    connection pool) is created on first use and reused until close().
    """

    def __init__(self, base_url: str, api_token: str, timeout: float = 10.0) -> None:
        """Initialize Conduit client.

        Args:
            base_url: Phabricator install URL, e.g. https://phab.example.com
            api_token: Conduit API token
            timeout: Seconds to wait for each request
        """
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the Conduit API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ConduitClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def call(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Call a Conduit method.

        Args:
            method: Conduit method name, e.g. "maniphest.search"
            params: Method parameters

        Returns:
            The ``result`` member of the Conduit response

        Raises:
            UpstreamTimeoutError: If Phabricator does not answer in time
            UpstreamUnavailableError: On transport errors or non-JSON/non-200 responses
            ConduitError: If Conduit reports an error_code
        """
        payload: dict[str, Any] = dict(params or {})
        payload["__conduit__"] = {"token": self.api_token}
        form = {
            "params": json.dumps(payload),
            "output": "json",
            "__conduit__": "1",
        }

        logger.debug("Calling Conduit method %s", method)
        try:
            response = self.client.post(f"/api/{method}", data=form)
        except httpx.TimeoutException as e:
            logger.error("Conduit %s timed out after %ss", method, self.timeout)
            raise UpstreamTimeoutError(f"{method} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error("Conduit %s failed: %s", method, sanitize_for_log(str(e)))
            raise UpstreamUnavailableError(f"{method} request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Conduit %s returned HTTP %s: %s",
                method,
                response.status_code,
                sanitize_for_log(truncate_output(response.text)),
            )
            raise UpstreamUnavailableError(
                f"{method} returned HTTP {response.status_code}"
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"{method} returned a non-JSON response") from e

        if data.get("error_code"):
            logger.error(
                "Conduit %s error %s: %s", method, data["error_code"], data.get("error_info")
            )
            raise ConduitError(data["error_code"], data.get("error_info"))

        result = data.get("result")
        if not isinstance(result, dict):
            raise UpstreamUnavailableError(f"{method} response has no result")
        return result

    def maniphest_search(self, ids: list[int]) -> list[Ticket]:
        """Search Maniphest tasks by ID.

        Args:
            ids: Task IDs to constrain the search to

        Returns:
            Matching tickets, in the order Conduit returned them

        Raises:
            UpstreamUnavailableError: If the result data is not a list of task records
        """
        method = "maniphest.search"
        result = self.call(method, {"constraints": {"ids": list(ids)}})
        records = result.get("data") or []
        if not isinstance(records, list):
            raise UpstreamUnavailableError(f"{method} returned data that is not a list")
        try:
            tickets = [Ticket.from_conduit(record) for record in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("%s returned a malformed record: %r", method, e)
            raise UpstreamUnavailableError(f"{method} returned a malformed record") from e
        logger.info("maniphest.search ids=%s returned %d task(s)", ids, len(tickets))
        return tickets

    def search_ticket(self, ticket_id: int) -> Ticket | None:
        """Look up a single task by ID.

        If Conduit returns several records, the one whose ID matches is
        used, otherwise the lowest ID.

        Args:
            ticket_id: Maniphest task ID (the 123 of T123)

        Returns:
            The ticket, or None if it does not exist or is not visible
        """
        tickets = self.maniphest_search([ticket_id])
        if not tickets:
            return None
        for ticket in tickets:
            if ticket.id == ticket_id:
                return ticket
        return min(tickets, key=lambda t: t.id)

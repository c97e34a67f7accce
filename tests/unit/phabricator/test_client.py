"""Unit tests for ConduitClient."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from phabslack.phabricator import (
    ConduitClient,
    ConduitError,
    PhabricatorError,
    Ticket,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock HTTP client."""
    return MagicMock()


@pytest.fixture
def conduit(mock_client: MagicMock) -> ConduitClient:
    """Create a ConduitClient instance with mocked client."""
    client = ConduitClient(
        base_url="https://phab.example.com/",
        api_token="api-test-token",
    )
    client._client = mock_client
    return client


def _mock_response(result: dict | None, error_code: str | None = None) -> MagicMock:
    """Create a mock Conduit response."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {
        "result": result,
        "error_code": error_code,
        "error_info": "Something went wrong." if error_code else None,
    }
    return response


def _task(task_id: int, name: str = "Fix bug", **fields: object) -> dict:
    """A maniphest.search result record."""
    return {
        "id": task_id,
        "type": "TASK",
        "phid": f"PHID-TASK-{task_id}",
        "fields": {
            "name": name,
            "description": {"raw": "Steps to reproduce"},
            "status": {"value": "open", "name": "Open", "color": None},
            "dateCreated": 1590000000,
            "dateModified": 1590100000,
            **fields,
        },
    }


def _search_result(*records: dict) -> dict:
    return {"data": list(records), "maps": {}, "query": {"queryKey": None}, "cursor": {}}


@pytest.mark.unit
class TestCall:
    """Tests for ConduitClient.call."""

    def test_posts_to_method_endpoint(
        self, conduit: ConduitClient, mock_client: MagicMock
    ) -> None:
        mock_client.post.return_value = _mock_response({"ok": True})

        conduit.call("conduit.ping")

        args, _ = mock_client.post.call_args
        assert args[0] == "/api/conduit.ping"

    def test_sends_token_in_params(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        """The API token travels in the __conduit__ member of params."""
        mock_client.post.return_value = _mock_response({"ok": True})

        conduit.call("maniphest.search", {"constraints": {"ids": [1]}})

        form = mock_client.post.call_args.kwargs["data"]
        params = json.loads(form["params"])
        assert params["__conduit__"] == {"token": "api-test-token"}
        assert params["constraints"] == {"ids": [1]}
        assert form["output"] == "json"

    def test_returns_result(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response({"answer": 42})

        assert conduit.call("conduit.ping") == {"answer": 42}

    def test_conduit_error(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        """error_code in the body raises ConduitError."""
        mock_client.post.return_value = _mock_response(None, error_code="ERR-INVALID-AUTH")

        with pytest.raises(ConduitError) as exc_info:
            conduit.call("maniphest.search")

        assert exc_info.value.code == "ERR-INVALID-AUTH"
        assert exc_info.value.info == "Something went wrong."

    def test_http_error_status(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        response = MagicMock()
        response.status_code = 500
        response.text = "Internal Server Error"
        mock_client.post.return_value = response

        with pytest.raises(UpstreamUnavailableError, match="HTTP 500"):
            conduit.call("maniphest.search")

    def test_non_json_response(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        response = MagicMock()
        response.status_code = 200
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        mock_client.post.return_value = response

        with pytest.raises(UpstreamUnavailableError):
            conduit.call("maniphest.search")

    def test_missing_result(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(None)

        with pytest.raises(UpstreamUnavailableError):
            conduit.call("maniphest.search")

    def test_timeout(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(UpstreamTimeoutError):
            conduit.call("maniphest.search")

    def test_connection_error(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            conduit.call("maniphest.search")

        assert not isinstance(exc_info.value, UpstreamTimeoutError)

    def test_errors_share_base_class(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(PhabricatorError):
            conduit.call("maniphest.search")


@pytest.mark.unit
class TestManiphestSearch:
    """Tests for maniphest_search and search_ticket."""

    def test_constrains_by_ids(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(_search_result())

        conduit.maniphest_search([123])

        params = json.loads(mock_client.post.call_args.kwargs["data"]["params"])
        assert params["constraints"] == {"ids": [123]}

    def test_parses_tickets(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(_search_result(_task(123)))

        tickets = conduit.maniphest_search([123])

        assert len(tickets) == 1
        assert isinstance(tickets[0], Ticket)
        assert tickets[0].id == 123
        assert tickets[0].name == "Fix bug"

    def test_search_ticket_found(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        mock_client.post.return_value = _mock_response(_search_result(_task(123)))

        ticket = conduit.search_ticket(123)

        assert ticket is not None
        assert ticket.id == 123
        mock_client.post.assert_called_once()

    def test_search_ticket_not_found(
        self, conduit: ConduitClient, mock_client: MagicMock
    ) -> None:
        mock_client.post.return_value = _mock_response(_search_result())

        assert conduit.search_ticket(404) is None

    def test_search_ticket_prefers_exact_id(
        self, conduit: ConduitClient, mock_client: MagicMock
    ) -> None:
        """With several records, the one matching the requested ID wins."""
        mock_client.post.return_value = _mock_response(
            _search_result(_task(7, "Other"), _task(12, "Wanted"), _task(3, "Lowest"))
        )

        ticket = conduit.search_ticket(12)

        assert ticket is not None
        assert ticket.name == "Wanted"

    def test_search_ticket_falls_back_to_lowest_id(
        self, conduit: ConduitClient, mock_client: MagicMock
    ) -> None:
        mock_client.post.return_value = _mock_response(
            _search_result(_task(7, "Other"), _task(3, "Lowest"))
        )

        ticket = conduit.search_ticket(12)

        assert ticket is not None
        assert ticket.name == "Lowest"

    def test_search_ticket_propagates_errors(
        self, conduit: ConduitClient, mock_client: MagicMock
    ) -> None:
        """Upstream failures are not turned into "not found"."""
        mock_client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(UpstreamUnavailableError):
            conduit.search_ticket(123)

    @pytest.mark.parametrize(
        "result",
        [
            {"data": [{"fields": {"name": "No id"}}]},
            {"data": [{"id": 1, "fields": {"name": "Bad date", "dateCreated": "soon"}}]},
            {"data": [{"id": "one", "fields": {}}]},
            {"data": ["T1"]},
            {"data": {"id": 1}},
        ],
        ids=["missing-id", "bad-date", "bad-id", "string-record", "data-not-list"],
    )
    def test_malformed_records(
        self, conduit: ConduitClient, mock_client: MagicMock, result: dict
    ) -> None:
        """Records that cannot be read as tasks are an upstream failure."""
        mock_client.post.return_value = _mock_response(result)

        with pytest.raises(UpstreamUnavailableError, match="maniphest.search"):
            conduit.maniphest_search([1])


@pytest.mark.unit
class TestTicketFromConduit:
    """Tests for Ticket.from_conduit."""

    def test_maps_fields(self) -> None:
        ticket = Ticket.from_conduit(_task(123))

        assert ticket.description == "Steps to reproduce"
        assert ticket.status == "open"
        assert ticket.status_name == "Open"
        assert ticket.phid == "PHID-TASK-123"
        assert ticket.date_created == datetime(2020, 5, 20, 18, 40, tzinfo=timezone.utc)
        assert ticket.date_modified == datetime(2020, 5, 21, 22, 26, 40, tzinfo=timezone.utc)

    def test_tolerates_missing_optional_fields(self) -> None:
        ticket = Ticket.from_conduit({"id": "5", "fields": {"name": "Bare", "description": None}})

        assert ticket.id == 5
        assert ticket.description == ""
        assert ticket.status == ""


@pytest.mark.unit
class TestClientLifecycle:
    """Tests for client creation and cleanup."""

    def test_strips_trailing_slash(self) -> None:
        assert ConduitClient("https://phab.example.com/", "t").base_url == (
            "https://phab.example.com"
        )

    def test_client_created_lazily_with_timeout(self) -> None:
        conduit = ConduitClient("https://phab.example.com", "t", timeout=3.0)
        try:
            client = conduit.client

            assert client is conduit.client
            assert client.timeout.read == 3.0
        finally:
            conduit.close()

    def test_close_resets_client(self, conduit: ConduitClient, mock_client: MagicMock) -> None:
        conduit.close()

        mock_client.close.assert_called_once()
        assert conduit._client is None

    def test_context_manager_closes(self, mock_client: MagicMock) -> None:
        with ConduitClient("https://phab.example.com", "t") as conduit:
            conduit._client = mock_client

        mock_client.close.assert_called_once()

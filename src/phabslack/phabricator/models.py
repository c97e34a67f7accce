"""Data models for the Phabricator Conduit client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def ticket_url(base_url: str, ticket_id: int) -> str:
    """Return the web URL of a Maniphest task."""
    return f"{base_url.rstrip('/')}/T{ticket_id}"


def _epoch(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value or 0), tz=timezone.utc)


@dataclass(frozen=True)
class Ticket:
    """A Maniphest task as returned by maniphest.search."""

    id: int
    name: str
    description: str
    status: str
    date_created: datetime
    date_modified: datetime
    phid: str = ""
    status_name: str = ""

    @classmethod
    def from_conduit(cls, record: dict[str, Any]) -> Ticket:
        """Build a Ticket from one entry of a maniphest.search result.

        Args:
            record: An item of ``result.data``

        Returns:
            Parsed ticket
        """
        fields = record.get("fields") or {}
        description = fields.get("description") or {}
        status = fields.get("status") or {}
        return cls(
            id=int(record["id"]),
            name=fields.get("name") or "",
            description=description.get("raw") or "",
            status=status.get("value") or "",
            date_created=_epoch(fields.get("dateCreated")),
            date_modified=_epoch(fields.get("dateModified")),
            phid=record.get("phid") or "",
            status_name=status.get("name") or "",
        )

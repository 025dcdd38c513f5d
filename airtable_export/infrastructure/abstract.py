"""
Record store interface for the Airtable CSV export layer.

The exporter and CLI depend on this protocol rather than on the concrete HTTP
client, so tests (and alternative backends) can supply an in-memory store.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Protocol, runtime_checkable

from airtable_export.domain.models import Record


@runtime_checkable
class RecordStore(Protocol):
    """
    CRUD operations scoped to a table name.

    Every method returns (or accepts) records in the normalized `Record` shape
    and raises `RemoteError` on any failure reported by the backing store.
    """

    def list_all(self, table: str) -> List[Record]:
        """Return every record of ``table``, following pagination to the end."""
        ...

    def create(self, table: str, fields: Mapping[str, Any]) -> Record:
        """Create one record and return it as stored."""
        ...

    def update(self, table: str, record_id: str, fields: Mapping[str, Any]) -> Record:
        """Patch the given fields of one record and return it as stored."""
        ...

    def delete(self, table: str, record_id: str) -> None:
        """Delete one record."""
        ...


__all__ = ["RecordStore"]

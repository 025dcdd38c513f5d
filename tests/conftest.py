"""
Pytest configuration for the Airtable CSV export layer.

Provides fixtures for:
- Settings built explicitly (no `.env` lookup, project root under tmp_path)
- Sample record batches
- A fake `requests` session and an in-memory record store, so unit tests
  never touch the network
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

from airtable_export.config import Settings
from airtable_export.domain.models import Record
from airtable_export.errors import RemoteError


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)
        self.reason = "Fake"

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """
    Stand-in for `requests.Session` that replays queued responses and records calls.
    """

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.headers: Dict[str, str] = {}
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


class FakeStore:
    """
    In-memory record store keyed by table name.
    """

    def __init__(self, tables: Optional[Dict[str, List[Record]]] = None) -> None:
        self.tables = tables or {}
        self.fetched: List[str] = []

    def list_all(self, table: str) -> List[Record]:
        self.fetched.append(table)
        if table not in self.tables:
            raise RemoteError(table, "fetching records", "NOT_FOUND", status_code=404)
        return list(self.tables[table])

    def create(self, table: str, fields: Mapping[str, Any]) -> Record:
        record = Record(id=f"rec{len(self.tables.get(table, [])) + 1}", fields=dict(fields), createdTime="2024-03-01T00:00:00.000Z")
        self.tables.setdefault(table, []).append(record)
        return record

    def update(self, table: str, record_id: str, fields: Mapping[str, Any]) -> Record:
        records = self.tables[table]
        for index, record in enumerate(records):
            if record.id == record_id:
                updated = record.model_copy(update={"fields": {**record.fields, **fields}})
                records[index] = updated
                return updated
        raise RemoteError(table, f"updating record {record_id}", "NOT_FOUND", status_code=404)

    def delete(self, table: str, record_id: str) -> None:
        self.tables[table] = [record for record in self.tables[table] if record.id != record_id]


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings(project_root: Path) -> Settings:
    """
    Settings with test credentials; ignores any `.env` in the working directory.
    """
    return Settings(
        _env_file=None,
        airtable_api_key="keyTEST1234",
        airtable_base_id="appTESTBASE",
        airtable_api_url="https://api.example.test/v0",
        project_root=project_root,
        page_size=2,
    )


@pytest.fixture
def sample_records() -> List[Record]:
    return [
        Record(id="r1", fields={"Name": "Alice", "Tags": ["a", "b"]}, createdTime="2024-01-01T00:00:00Z"),
        Record(id="r2", fields={"Name": "Bob"}, createdTime="2024-01-02T00:00:00Z"),
    ]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_store(sample_records: List[Record]) -> FakeStore:
    return FakeStore({"Contacts": sample_records})


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses: make_response(status, payload, text=None)."""
    return FakeResponse


@pytest.fixture
def make_store():
    """Factory for in-memory stores: make_store({"Table": [records...]})."""
    return FakeStore

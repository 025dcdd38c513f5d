"""
HTTP client for the Airtable REST API.

Covers exactly what the export layer needs:
- list every record of a table (offset pagination)
- create / update (PATCH) / delete a single record

Each call is a single request (or one request per page) with no retries; rate
limits and transient failures surface as `RemoteError` with the table name,
operation, HTTP status, and Airtable's own error message when available.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from airtable_export.config import Settings
from airtable_export.domain.models import Record
from airtable_export.errors import RemoteError
from airtable_export.utils.logging import get_logger

log = get_logger(__name__)


def _error_detail(resp: requests.Response) -> str:
    """
    Extract Airtable's error message from a failed response.

    Airtable answers errors with ``{"error": {"type": ..., "message": ...}}``
    (or ``{"error": "NOT_FOUND"}``); fall back to the raw body otherwise.
    """
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        parts = [str(error[key]) for key in ("type", "message") if error.get(key)]
        return ": ".join(parts)
    if error:
        return str(error)
    return resp.text.strip()


class AirtableClient:
    """
    Airtable client scoped to one base.

    Parameters
    ----------
    settings : Settings
        Supplies the API key, base id, API URL, timeout, and page size.
    session : requests.Session | None
        Optional pre-built session (tests inject a fake). When omitted the
        client creates and owns one; call `close()` or use it as a context
        manager to release it.
    """

    def __init__(self, settings: Settings, *, session: Optional[requests.Session] = None) -> None:
        self._base_id = settings.airtable_base_id
        self._base_url = settings.airtable_api_url.rstrip("/")
        self._timeout_s = settings.request_timeout_seconds
        self._page_size = settings.page_size
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {settings.airtable_api_key}",
                "Content-Type": "application/json",
            }
        )

    def __enter__(self) -> "AirtableClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def _table_url(self, table: str) -> str:
        return f"{self._base_url}/{self._base_id}/{quote(table, safe='')}"

    def _request_json(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: Optional[Any] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Issue one request and return the decoded JSON body.

        Any transport error, non-2xx status, or non-JSON body becomes RemoteError.
        """
        try:
            resp = self._session.request(
                method=method,
                url=self._table_url(table),
                params=params,
                json=json_body,
                timeout=self._timeout_s,
            )
        except requests.RequestException as exc:
            raise RemoteError(table, operation, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise RemoteError(table, operation, _error_detail(resp), status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RemoteError(table, operation, "response body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise RemoteError(table, operation, "unexpected response shape")
        return payload

    @staticmethod
    def _to_record(table: str, operation: str, raw: Any) -> Record:
        if not isinstance(raw, Mapping):
            raise RemoteError(table, operation, "unexpected record shape")
        try:
            return Record.from_api(raw)
        except ValidationError as exc:
            raise RemoteError(table, operation, f"malformed record: {exc}") from exc

    def _single_record(self, table: str, operation: str, payload: Dict[str, Any]) -> Record:
        records = payload.get("records") or []
        if not records:
            raise RemoteError(table, operation, "response contained no records")
        return self._to_record(table, operation, records[0])

    def list_all(self, table: str) -> List[Record]:
        """
        Fetch every record of ``table``, following the ``offset`` token until exhausted.
        """
        records: List[Record] = []
        offset: Optional[str] = None
        pages = 0

        while True:
            params: Dict[str, Any] = {"pageSize": self._page_size}
            if offset:
                params["offset"] = offset

            payload = self._request_json("GET", table, "fetching records", params=params)
            pages += 1
            for raw in payload.get("records") or []:
                records.append(self._to_record(table, "fetching records", raw))

            offset = payload.get("offset")
            if not offset:
                break

        log.info(
            f"Fetched {len(records)} records from {table}",
            extra={"table": table, "rows": len(records), "pages": pages},
        )
        return records

    def create(self, table: str, fields: Mapping[str, Any]) -> Record:
        """Create a record with ``fields`` and return it as stored by Airtable."""
        try:
            payload = self._request_json(
                "POST",
                table,
                "creating record",
                json_body={"records": [{"fields": dict(fields)}]},
            )
            record = self._single_record(table, "creating record", payload)
        except RemoteError:
            log.exception("Error creating record in Airtable", extra={"table": table})
            raise
        log.info(f"Created record {record.id} in {table}", extra={"table": table, "record_id": record.id})
        return record

    def update(self, table: str, record_id: str, fields: Mapping[str, Any]) -> Record:
        """
        Update the given ``fields`` of a record (PATCH: other fields are left as-is).
        """
        try:
            payload = self._request_json(
                "PATCH",
                table,
                f"updating record {record_id}",
                json_body={"records": [{"id": record_id, "fields": dict(fields)}]},
            )
            record = self._single_record(table, f"updating record {record_id}", payload)
        except RemoteError:
            log.exception(
                "Error updating record in Airtable",
                extra={"table": table, "record_id": record_id},
            )
            raise
        log.info(f"Updated record {record_id} in {table}", extra={"table": table, "record_id": record_id})
        return record

    def delete(self, table: str, record_id: str) -> None:
        """Delete a single record."""
        try:
            self._request_json(
                "DELETE",
                table,
                f"deleting record {record_id}",
                params=[("records[]", record_id)],
            )
        except RemoteError:
            log.exception(
                "Error deleting record from Airtable",
                extra={"table": table, "record_id": record_id},
            )
            raise
        log.info(f"Deleted record {record_id} from {table}", extra={"table": table, "record_id": record_id})


__all__ = ["AirtableClient"]

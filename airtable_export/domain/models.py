"""
Domain models for the Airtable CSV export layer.

`Record` mirrors one Airtable row: an immutable id and creation timestamp
assigned by the store, plus an open, per-record map of field values. Different
records of the same table may carry different keys (sparse schema).
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field, JsonValue

# Any JSON value: str | int | float | bool | None | list[...] | dict[str, ...]
FieldValue = JsonValue

ID_COLUMN = "id"
CREATED_TIME_COLUMN = "createdTime"
FIXED_COLUMNS = (ID_COLUMN, CREATED_TIME_COLUMN)


class Record(BaseModel):
    """
    Representation of a single record returned by the Airtable API.
    """

    id: str = Field(..., min_length=1, description="Record identifier assigned by Airtable.")
    fields: Dict[str, FieldValue] = Field(
        default_factory=dict, description="Open map of field name to value."
    )
    created_time: str = Field(
        ..., alias=CREATED_TIME_COLUMN, description="Creation timestamp as returned by Airtable."
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Record":
        """
        Build a Record from a raw Airtable record object.

        Airtable omits ``fields`` entirely for rows where every cell is empty.
        """
        return cls.model_validate(
            {
                "id": payload.get("id"),
                "fields": payload.get("fields") or {},
                CREATED_TIME_COLUMN: payload.get("createdTime"),
            }
        )

    def to_api(self) -> Dict[str, Any]:
        """Return the record in Airtable's JSON shape."""
        return self.model_dump(by_alias=True)


def _slugify(name: str) -> str:
    slug = re.sub(r"[^0-9A-Za-z]+", "_", name).strip("_").lower()
    return slug or "table"


class TableConfig(BaseModel):
    """
    A table to export and the file it is written to.
    """

    name: str = Field(..., min_length=1, description="Airtable table name or id.")
    filename: str = Field(..., min_length=1, description="Output path, relative to the project root.")

    model_config = {"frozen": True}

    @classmethod
    def for_table(cls, name: str, output_dir: Path | str = "data") -> "TableConfig":
        """Derive the default output file (``<output_dir>/<slug>.csv``) for a table."""
        return cls(name=name, filename=str(Path(output_dir) / f"{_slugify(name)}.csv"))


class ExportResult(BaseModel):
    """
    Summary of one table written to disk.
    """

    table: str
    path: Path
    rows: int
    columns: list[str]

    model_config = {"frozen": True}


__all__ = [
    "CREATED_TIME_COLUMN",
    "ExportResult",
    "FIXED_COLUMNS",
    "FieldValue",
    "ID_COLUMN",
    "Record",
    "TableConfig",
]

"""
Domain package for the Airtable CSV export layer.

Exports the record, table, and export-summary models shared by the client,
projector, and exporter. Keep this package free of I/O.
"""

from airtable_export.domain.models import (
    CREATED_TIME_COLUMN,
    FIXED_COLUMNS,
    ID_COLUMN,
    ExportResult,
    FieldValue,
    Record,
    TableConfig,
)

__all__ = [
    "CREATED_TIME_COLUMN",
    "ExportResult",
    "FIXED_COLUMNS",
    "FieldValue",
    "ID_COLUMN",
    "Record",
    "TableConfig",
]

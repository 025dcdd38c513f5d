"""
Airtable CSV Export - thin data-access layer over the Airtable REST API.

This package fetches records from a named Airtable table, projects them into a
single CSV file with a deterministic column layout, and performs
create/update/delete operations against individual records:

- Remote store client (authentication, offset pagination, error wrapping)
- Flat-file projector (column discovery, value normalization, safe output paths)
- Sequential multi-table exporter and a typer CLI

Configuration is read once from the environment (or `.env`) and passed
explicitly into the client and projector.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from airtable_export.config import Settings, load_settings
from airtable_export.domain.models import ExportResult, Record, TableConfig
from airtable_export.errors import (
    AirtableExportError,
    ColumnCollisionError,
    ConfigError,
    OutputWriteError,
    PathSafetyError,
    RemoteError,
)
from airtable_export.exporter import export_table, export_tables
from airtable_export.infrastructure import AirtableClient, RecordStore
from airtable_export.projection import CsvProjector, normalize_value
from airtable_export.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "load_settings",
    # Domain
    "ExportResult",
    "Record",
    "TableConfig",
    # Errors
    "AirtableExportError",
    "ColumnCollisionError",
    "ConfigError",
    "OutputWriteError",
    "PathSafetyError",
    "RemoteError",
    # Remote store
    "AirtableClient",
    "RecordStore",
    # Projection / export
    "CsvProjector",
    "normalize_value",
    "export_table",
    "export_tables",
    # Logging
    "configure_logging",
    "get_logger",
]

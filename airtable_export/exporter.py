"""
Exporter: fetch tables from a record store and project them to CSV files.

Usage (example from CLI):
    from airtable_export.exporter import export_tables

    results = export_tables(client, CsvProjector(settings.project_root), tables)

Tables are exported one at a time, in the order given. The first failure stops
the run and propagates unchanged; files already written stay on disk.
"""

from __future__ import annotations

from typing import Iterable, List

from airtable_export.domain.models import ExportResult, TableConfig
from airtable_export.infrastructure.abstract import RecordStore
from airtable_export.projection.csv_projector import CsvProjector
from airtable_export.utils.logging import get_logger

log = get_logger(__name__)


def export_table(store: RecordStore, projector: CsvProjector, table: TableConfig) -> ExportResult:
    """Fetch every record of one table and write it to ``table.filename``."""
    log.info(f"[EXPORT START] {table.name}", extra={"table": table.name})
    records = store.list_all(table.name)
    path, columns = projector.write_table(records, table.filename)
    result = ExportResult(
        table=table.name,
        path=path,
        rows=len(records),
        columns=columns,
    )
    log.info(
        f"[EXPORT COMPLETE] {table.name}",
        extra={"table": table.name, "rows": result.rows, "path": str(path)},
    )
    return result


def export_tables(
    store: RecordStore,
    projector: CsvProjector,
    tables: Iterable[TableConfig],
) -> List[ExportResult]:
    """
    Export several tables sequentially.

    Parameters
    ----------
    store : RecordStore
        Source of records (normally an `AirtableClient`).
    projector : CsvProjector
        Writer bound to the permitted output root.
    tables : iterable[TableConfig]
        Tables and their destination files.

    Returns
    -------
    List[ExportResult]
        One summary per table, in input order.
    """
    results: List[ExportResult] = []
    for table in tables:
        results.append(export_table(store, projector, table))

    log.info(
        f"[EXPORTER COMPLETE] {len(results)} table(s) exported",
        extra={"tables": [result.table for result in results]},
    )
    return results


__all__ = ["export_table", "export_tables"]

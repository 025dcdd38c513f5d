from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from airtable_export.domain.models import CREATED_TIME_COLUMN, ID_COLUMN, ExportResult, Record
from airtable_export.projection.csv_projector import normalize_value, union_columns

_MAX_CELL_WIDTH = 40


def _truncate(text: str, width: int = _MAX_CELL_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def print_export_summary(results: List[ExportResult], console: Optional[Console] = None) -> None:
    """
    Render export results as a rich table.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No tables exported.[/yellow]")
        return

    table = Table(title="Airtable Export", box=box.ROUNDED)
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Columns", justify="right", style="green")
    table.add_column("File", style="yellow")

    for result in results:
        table.add_row(
            Text(result.table),
            f"{result.rows:,}",
            str(len(result.columns) + 2),
            Text(str(result.path)),
        )

    console.print(table)


def print_records(
    table_name: str,
    records: Sequence[Record],
    limit: Optional[int] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render records with the same column layout the CSV export uses.

    Long cells are truncated for display; the CSV itself is never truncated.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]Table {escape(table_name)} has no records.[/yellow]")
        return

    shown = list(records if limit is None else records[:limit])
    columns = union_columns(shown)

    table = Table(
        title=Text(table_name),
        box=box.ROUNDED,
        caption=f"Showing {len(shown)} of {len(records)} records",
    )
    table.add_column(ID_COLUMN, style="cyan", no_wrap=True)
    table.add_column(CREATED_TIME_COLUMN, style="dim", no_wrap=True)
    for column in columns:
        table.add_column(Text(column))

    for record in shown:
        table.add_row(
            Text(record.id),
            Text(record.created_time),
            *(Text(_truncate(normalize_value(record.fields.get(column)))) for column in columns),
        )

    console.print(table)


__all__ = ["print_export_summary", "print_records"]

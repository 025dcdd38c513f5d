from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from airtable_export.config import Settings, load_settings
from airtable_export.domain.models import TableConfig
from airtable_export.errors import AirtableExportError
from airtable_export.exporter import export_tables
from airtable_export.infrastructure.airtable_client import AirtableClient
from airtable_export.projection.csv_projector import CsvProjector
from airtable_export.reporter import print_export_summary, print_records
from airtable_export.utils.logging import configure_logging

app = typer.Typer(help="Export Airtable tables to CSV and edit individual records.")


def _settings() -> Settings:
    """
    Load settings and configure logging; exit with a message when credentials are missing.
    """
    try:
        settings = load_settings()
    except AirtableExportError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


def _build_client(settings: Settings) -> AirtableClient:
    return AirtableClient(settings)


def _parse_fields(pairs: List[str]) -> Dict[str, Any]:
    """
    Turn ``KEY=VALUE`` options into a fields mapping.

    Values that parse as JSON keep their type (numbers, booleans, lists,
    objects, null); anything else is sent as text.
    """
    fields: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{pair}'", param_hint="--field")
        try:
            fields[key.strip()] = json.loads(raw)
        except ValueError:
            fields[key.strip()] = raw
    return fields


def _fail(exc: AirtableExportError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = _settings()
    typer.echo(
        f"base={settings.airtable_base_id} key={settings.masked_api_key()} "
        f"api={settings.airtable_api_url} root={settings.project_root} "
        f"output_dir={settings.output_dir} page_size={settings.page_size}"
    )


@app.command()
def export(
    tables: List[str] = typer.Argument(..., help="Airtable table names (or ids) to export."),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-d",
        help="Directory (relative to the project root) for the CSV files (default from settings).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Explicit CSV path; only valid when exporting a single table.",
    ),
) -> None:
    """
    Fetch every record of each table and write one CSV file per table.
    """
    if output is not None and len(tables) != 1:
        raise typer.BadParameter("--output can only be used with a single table", param_hint="--output")

    settings = _settings()
    directory = output_dir or settings.output_dir
    configs = [
        TableConfig(name=name, filename=str(output)) if output is not None
        else TableConfig.for_table(name, directory)
        for name in tables
    ]

    projector = CsvProjector(settings.project_root)
    try:
        with _build_client(settings) as client:
            results = export_tables(client, projector, configs)
    except AirtableExportError as exc:
        _fail(exc)
    print_export_summary(results)


@app.command("list")
def list_records(
    table: str = typer.Argument(..., help="Airtable table name (or id)."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Show at most N records."),
) -> None:
    """
    Fetch a table and print its records.
    """
    settings = _settings()
    try:
        with _build_client(settings) as client:
            records = client.list_all(table)
    except AirtableExportError as exc:
        _fail(exc)
    print_records(table, records, limit=limit)


@app.command()
def create(
    table: str = typer.Argument(..., help="Airtable table name (or id)."),
    field: List[str] = typer.Option(..., "--field", "-f", help="Field as KEY=VALUE (repeatable)."),
) -> None:
    """
    Create a record and print it as JSON.
    """
    fields = _parse_fields(field)
    settings = _settings()
    try:
        with _build_client(settings) as client:
            record = client.create(table, fields)
    except AirtableExportError as exc:
        _fail(exc)
    typer.echo(json.dumps(record.to_api(), indent=2, ensure_ascii=False))


@app.command()
def update(
    table: str = typer.Argument(..., help="Airtable table name (or id)."),
    record_id: str = typer.Argument(..., help="Id of the record to update."),
    field: List[str] = typer.Option(..., "--field", "-f", help="Field as KEY=VALUE (repeatable)."),
) -> None:
    """
    Update fields of a record and print the result as JSON.
    """
    fields = _parse_fields(field)
    settings = _settings()
    try:
        with _build_client(settings) as client:
            record = client.update(table, record_id, fields)
    except AirtableExportError as exc:
        _fail(exc)
    typer.echo(json.dumps(record.to_api(), indent=2, ensure_ascii=False))


@app.command()
def delete(
    table: str = typer.Argument(..., help="Airtable table name (or id)."),
    record_id: str = typer.Argument(..., help="Id of the record to delete."),
) -> None:
    """
    Delete a record.
    """
    settings = _settings()
    try:
        with _build_client(settings) as client:
            client.delete(table, record_id)
    except AirtableExportError as exc:
        _fail(exc)
    typer.echo(f"Deleted {record_id} from {table}.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

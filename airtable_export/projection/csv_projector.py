"""
Record-to-CSV projection.

Turns a batch of sparse, heterogeneous records into one CSV table with a
deterministic column layout:

    id, createdTime, <field names in first-seen order>

Cells are untyped text, so every field value is normalized first: lists and
objects become compact JSON (re-parseable), ``None`` becomes an empty cell, and
scalars use their string form. The output path is confined to a root
directory, and the file is replaced atomically (temp file + ``os.replace``).
"""

from __future__ import annotations

import csv
import io
import json
import os
import stat
import tempfile
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from airtable_export.domain.models import CREATED_TIME_COLUMN, FIXED_COLUMNS, ID_COLUMN, Record
from airtable_export.errors import ColumnCollisionError, OutputWriteError, PathSafetyError
from airtable_export.utils.logging import get_logger

log = get_logger(__name__)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def normalize_value(value: Any) -> str:
    """
    Render a single field value as CSV cell text. Never raises.

    Containers that cannot be encoded as JSON (non-string keys, cycles) fall
    back to their ``str`` form.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, Mapping)):
        try:
            return json.dumps(
                value,
                ensure_ascii=False,
                separators=(",", ":"),
                default=str,
            )
        except (TypeError, ValueError):
            return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def union_columns(records: Sequence[Record]) -> List[str]:
    """Return the union of field names across all records, in first-seen order."""
    seen: Dict[str, None] = {}
    for record in records:
        for name in record.fields:
            seen.setdefault(name, None)
    return list(seen)


def discover_columns(records: Sequence[Record]) -> List[str]:
    """
    Return the dynamic CSV columns for a batch (see `union_columns`).

    Raises
    ------
    ColumnCollisionError
        If a record has a field named like one of the fixed columns.
    """
    for record in records:
        for name in record.fields:
            if name in FIXED_COLUMNS:
                raise ColumnCollisionError(name, record.id)
    return union_columns(records)


def build_rows(records: Sequence[Record], columns: Sequence[str]) -> List[List[str]]:
    """Assemble one output row per record, aligned to ``columns``."""
    return [
        [record.id, record.created_time]
        + [normalize_value(record.fields.get(column)) for column in columns]
        for record in records
    ]


def render_csv(records: Sequence[Record]) -> tuple[str, List[str]]:
    """
    Render the full CSV document for a batch in memory.

    Returns the document text and the discovered dynamic columns.
    """
    columns = discover_columns(records)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([ID_COLUMN, CREATED_TIME_COLUMN, *columns])
    writer.writerows(build_rows(records, columns))
    return buffer.getvalue(), columns


class CsvProjector:
    """
    Writes record batches to CSV files inside a fixed root directory.

    Parameters
    ----------
    root_dir : Path | str
        Boundary directory; every output path must resolve inside it. Relative
        output paths are resolved against it.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self.root_dir = Path(root_dir).resolve()

    def resolve_output_path(self, output_path: Path | str) -> Path:
        """
        Resolve ``output_path`` and check that it stays inside the root.

        Raises
        ------
        PathSafetyError
            If the resolved path escapes the root directory.
        """
        candidate = Path(output_path)
        if not candidate.is_absolute():
            candidate = self.root_dir / candidate
        resolved = candidate.resolve()
        if resolved == self.root_dir or not resolved.is_relative_to(self.root_dir):
            raise PathSafetyError(output_path, self.root_dir)
        return resolved

    def project(self, records: Sequence[Record], output_path: Path | str) -> Path:
        """
        Write ``records`` as a CSV table to ``output_path`` and return the resolved path.

        Nothing touches the filesystem until the path check and column discovery
        have passed. On write failure the previous file (if any) is left intact.
        """
        target, _ = self.write_table(records, output_path)
        return target

    def write_table(self, records: Sequence[Record], output_path: Path | str) -> Tuple[Path, List[str]]:
        """
        Same as `project`, but also return the dynamic columns that were written.
        """
        target = self.resolve_output_path(output_path)
        document, columns = render_csv(records)
        log.debug("Discovered columns", extra={"path": str(target), "columns": columns})

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError("directory creation", target.parent) from exc

        self._write_atomic(target, document)
        log.info(
            f"Data saved to {target}",
            extra={"path": str(target), "rows": len(records), "columns": len(columns)},
        )
        return target, columns

    @staticmethod
    def _write_atomic(target: Path, document: str) -> None:
        # mkstemp creates 0600 files; keep the mode a plain open() would give
        # (or the existing file's mode when replacing one).
        try:
            mode = stat.S_IMODE(target.stat().st_mode)
        except OSError:
            mode = 0o666 & ~_current_umask()

        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(document)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise OutputWriteError("write", target) from exc


__all__ = [
    "CsvProjector",
    "build_rows",
    "discover_columns",
    "normalize_value",
    "render_csv",
    "union_columns",
]

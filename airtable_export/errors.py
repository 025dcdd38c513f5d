"""
Error taxonomy for the Airtable CSV export layer.

Every failure raised by this package derives from AirtableExportError so callers
can catch one type at the CLI boundary. Wrapped failures keep the original
exception on ``__cause__`` (raise ... from exc); nothing here retries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class AirtableExportError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(AirtableExportError):
    """
    Required configuration is missing or empty.

    Raised at startup, before any remote call is attempted.
    """

    def __init__(self, missing: Sequence[str], message: Optional[str] = None) -> None:
        self.missing = list(missing)
        if message is None:
            noun = "variable" if len(self.missing) == 1 else "variables"
            message = f"Missing required environment {noun}: {', '.join(self.missing)}"
        super().__init__(message)


class PathSafetyError(AirtableExportError):
    """The requested output path resolves outside the permitted root directory."""

    def __init__(self, path: Path | str, root: Path | str) -> None:
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(
            f"Path traversal detected: {self.path} resolves outside the project directory {self.root}"
        )


class ColumnCollisionError(AirtableExportError):
    """A record field uses the name of one of the fixed metadata columns."""

    def __init__(self, column: str, record_id: str) -> None:
        self.column = column
        self.record_id = record_id
        super().__init__(
            f"Field '{column}' on record {record_id} collides with a reserved column name"
        )


class OutputWriteError(AirtableExportError, OSError):
    """Creating the output directory or writing the CSV file failed."""

    def __init__(self, operation: str, path: Path | str) -> None:
        self.operation = operation
        self.path = Path(path)
        super().__init__(f"Error during {operation} for CSV file {self.path}")

    def __str__(self) -> str:
        message = f"Error during {self.operation} for CSV file {self.path}"
        if self.__cause__ is not None:
            message = f"{message}: {self.__cause__}"
        return message


class RemoteError(AirtableExportError):
    """Any failure reported by (or while talking to) the Airtable API."""

    def __init__(
        self,
        table: str,
        operation: str,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.table = table
        self.operation = operation
        self.status_code = status_code
        message = f"Error during {operation} on table {table}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


__all__ = [
    "AirtableExportError",
    "ColumnCollisionError",
    "ConfigError",
    "OutputWriteError",
    "PathSafetyError",
    "RemoteError",
]

"""
Projection package: converts record batches into flat CSV files.
"""

from airtable_export.projection.csv_projector import (
    CsvProjector,
    build_rows,
    discover_columns,
    normalize_value,
    render_csv,
    union_columns,
)

__all__ = [
    "CsvProjector",
    "build_rows",
    "discover_columns",
    "normalize_value",
    "render_csv",
    "union_columns",
]

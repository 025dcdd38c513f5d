"""
Infrastructure package for the Airtable CSV export layer.

Centralizes remote-store concerns (HTTP client, authentication, pagination).
Keep this layer focused on I/O, decoupled from projection and export logic.
"""

from airtable_export.infrastructure.abstract import RecordStore
from airtable_export.infrastructure.airtable_client import AirtableClient

__all__ = [
    "AirtableClient",
    "RecordStore",
]

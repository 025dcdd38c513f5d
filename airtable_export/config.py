"""
Configuration settings for the Airtable CSV export layer.

Uses Pydantic Settings to load the Airtable credentials, the output root
directory, and logging options from environment variables (or a `.env` file).
Settings are built once by the caller (the CLI is the composition root) and
passed explicitly into the client and projector; nothing is cached globally.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from airtable_export.errors import ConfigError

_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


class Settings(BaseSettings):
    # Airtable
    airtable_api_key: str = Field(..., alias="AIRTABLE_API_KEY", min_length=1)
    airtable_base_id: str = Field(..., alias="AIRTABLE_BASE_ID", min_length=1)
    airtable_api_url: str = Field("https://api.airtable.com/v0", alias="AIRTABLE_API_URL")
    request_timeout_seconds: float = Field(30.0, alias="AIRTABLE_TIMEOUT_SECONDS", gt=0)
    page_size: int = Field(100, alias="AIRTABLE_PAGE_SIZE", ge=1, le=100)

    # Output
    project_root: Path = Field(default_factory=Path.cwd, alias="PROJECT_ROOT")
    output_dir: Path = Field(Path("data"), alias="OUTPUT_DIR")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def masked_api_key(self) -> str:
        """Return the API key with everything but the last four characters hidden."""
        key = self.airtable_api_key
        if len(key) <= 4:
            return "*" * len(key)
        return "*" * (len(key) - 4) + key[-4:]


def _env_name(loc: Any) -> str:
    """Map a validation error location back to the environment variable name."""
    key = str(loc[0]) if loc else ""
    field = Settings.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key


def load_settings(**overrides: Any) -> Settings:
    """
    Build Settings from the environment, failing fast on missing credentials.

    Parameters
    ----------
    **overrides
        Keyword values that take precedence over the environment (field names
        or their env aliases; ``_env_file`` is passed through to pydantic).

    Raises
    ------
    ConfigError
        When a required variable is absent or empty. The error names every
        offending variable.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = [
            _env_name(error["loc"])
            for error in exc.errors()
            if error["type"] in _REQUIRED_ERROR_TYPES
        ]
        if missing:
            raise ConfigError(missing) from exc
        raise ConfigError([], f"Invalid configuration: {exc}") from exc


__all__ = ["Settings", "load_settings"]

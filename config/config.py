"""
Base schema definitions for configuration models.

These are the core schema models used by the configurator library to
ensure type safety and validation of its own configuration values.
"""

from typing import Optional
from pydantic import BaseModel, Field


class ExportConfig(BaseModel):
    """Settings for exporting containers to plain data."""

    type_tag_key: str = Field(
        default="_class_name",
        description="Reserved key recording the concrete type of an exported object"
    )
    json_indent: int = Field(
        default=2,
        description="Indentation level for JSON output"
    )


class ValidationConfig(BaseModel):
    """Settings for construction-time and write-time validation."""

    strict_unknown_keys: bool = Field(
        default=False,
        description="Reject writes to settings that the schema does not declare instead of dropping them"
    )


class SystemConfig(BaseModel):
    """System-level configuration settings."""

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the configurator loggers (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    error_log_dir: Optional[str] = Field(
        default=None,
        description="Directory for rotating error log files; disabled when unset"
    )

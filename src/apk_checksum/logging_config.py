"""Logging section of the apk-checksum configuration."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator


class LoggingConfig(BaseModel):
    """Diagnostics settings.

    Off by default: only warnings and errors reach stderr unless the level is
    lowered (``--debug``, ``--log-level`` or a config file).
    """

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Root log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console format; the log file is always JSON"
    )
    file: str | None = Field(default=None, description="Optional log file path")
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        description="Size at which the log file is rotated"
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        description="Rotated log files to keep"
    )

    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v: str, info) -> str:
        """Accept levels and formats in any case."""
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == 'level' else v.lower()

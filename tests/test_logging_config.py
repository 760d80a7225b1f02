"""Tests for logging configuration."""

import pytest
from pydantic import ValidationError

from apk_checksum.logging_config import LoggingConfig


class TestLoggingConfig:
    """Test LoggingConfig validation."""

    def test_default_values(self):
        """Diagnostics are quiet by default."""
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.format == "simple"

    def test_rejects_invalid_log_level(self):
        """Test that invalid log levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")

        with pytest.raises(ValidationError):
            LoggingConfig(level="CRITICAL")

    def test_rejects_invalid_format(self):
        """Test that invalid formats are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")

    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError):
            LoggingConfig(colour=True)

    def test_case_insensitive(self):
        """Level and format accept any case."""
        config = LoggingConfig(level="debug", format="JSON")
        assert config.level == "DEBUG"
        assert config.format == "json"

    def test_serialization(self):
        """Test that config can be serialized."""
        config = LoggingConfig(level="DEBUG", format="detailed")

        assert config.model_dump() == {
            "level": "DEBUG",
            "format": "detailed",
            "file": None,
            "max_file_size_mb": 10,
            "backup_count": 5,
        }

    def test_rotation_limits_validated(self):
        """Rotation limits must be sensible."""
        with pytest.raises(ValidationError):
            LoggingConfig(max_file_size_mb=0)

        with pytest.raises(ValidationError):
            LoggingConfig(backup_count=-1)

    def test_rotation_limits_from_strings(self):
        """Environment strings are coerced by the schema."""
        config = LoggingConfig(max_file_size_mb="3", backup_count="0", file="2024")

        assert config.max_file_size_mb == 3
        assert config.backup_count == 0
        assert config.file == "2024"

"""Tests for the error hierarchy."""

from apk_checksum.errors import (
    ApkChecksumError, ConfigurationError, ArchiveError,
    ArchiveOpenError, ArchiveReadError, TruncatedArchiveError,
)


class TestErrors:
    """Test error types."""

    def test_base_error(self):
        """Message and context are kept."""
        error = ApkChecksumError("Test error", path="/tmp/app.apk")

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.context == {"path": "/tmp/app.apk"}

    def test_hierarchy(self):
        """Archive errors share a base; config errors do not."""
        assert issubclass(ArchiveOpenError, ArchiveError)
        assert issubclass(TruncatedArchiveError, ArchiveError)
        assert issubclass(ArchiveReadError, ArchiveError)
        assert issubclass(ArchiveError, ApkChecksumError)
        assert issubclass(ConfigurationError, ApkChecksumError)
        assert not issubclass(ConfigurationError, ArchiveError)

    def test_truncated_context(self):
        error = TruncatedArchiveError("short", field="filename", offset=30, expected=11, actual=3)

        assert error.context["field"] == "filename"
        assert error.context["expected"] - error.context["actual"] == 8

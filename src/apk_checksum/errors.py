"""Error definitions for apk_checksum."""

from typing import Any, Dict


class ApkChecksumError(Exception):
    """Base exception for all apk_checksum errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(ApkChecksumError):
    """Configuration could not be loaded or is invalid."""
    pass


class ArchiveError(ApkChecksumError):
    """Base exception for archive processing errors."""
    pass


class ArchiveOpenError(ArchiveError):
    """Archive could not be opened for reading."""
    pass


class TruncatedArchiveError(ArchiveError):
    """Archive ended before a required block could be read."""
    pass


class ArchiveReadError(ArchiveError):
    """I/O error while reading an archive that was opened successfully."""
    pass

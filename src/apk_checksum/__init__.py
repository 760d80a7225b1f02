"""Checksum of the native code and dex entries of an Android APK."""

from .checksum import (
    CHECKSUM_KEY, CHECKSUM_SIZE, RELEVANT_SUFFIXES, ChecksumResult,
    fold, is_relevant, compute_checksum, compute_checksum_file, format_checksum
)
from .config import ConfigLoader, ChecksumToolConfig
from .errors import (
    ApkChecksumError, ConfigurationError, ArchiveError,
    ArchiveOpenError, ArchiveReadError, TruncatedArchiveError
)
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .zip_walker import LocalFileHeader, ZipEntry, scan

__version__ = "0.1.0"

__all__ = [
    'CHECKSUM_KEY',
    'CHECKSUM_SIZE',
    'RELEVANT_SUFFIXES',
    'ChecksumResult',
    'fold',
    'is_relevant',
    'compute_checksum',
    'compute_checksum_file',
    'format_checksum',
    'ConfigLoader',
    'ChecksumToolConfig',
    'ApkChecksumError',
    'ConfigurationError',
    'ArchiveError',
    'ArchiveOpenError',
    'ArchiveReadError',
    'TruncatedArchiveError',
    'setup_logging',
    'LogContext',
    'LoggingConfig',
    'LocalFileHeader',
    'ZipEntry',
    'scan',
]

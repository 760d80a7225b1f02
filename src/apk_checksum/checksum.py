"""Keyed folding checksum over the native code of an APK.

The compressed bytes of every ``*.so`` and ``*classes.dex`` entry are folded
into 256 wrapping byte counters with a fixed 8-byte key.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from .errors import ArchiveOpenError
from .zip_walker import scan

logger = logging.getLogger(__name__)

CHECKSUM_KEY = b"c+r3k7:1"
CHECKSUM_SIZE = 256
RELEVANT_SUFFIXES = (b".so", b"classes.dex")

# _XOR_TABLES[k] maps every byte b to b ^ CHECKSUM_KEY[k]
_XOR_TABLES = tuple(
    bytes(b ^ key_byte for b in range(256)) for key_byte in CHECKSUM_KEY
)


def fold(state: bytearray, data: bytes) -> None:
    """Fold data into the checksum state in place.

    For each position ``i`` of ``data``, ``state[i % 256]`` is increased by
    ``CHECKSUM_KEY[i % 8] ^ data[i]`` modulo 256. ``i`` starts at zero on
    every call.

    Since the key length divides the state size, every state slot sees a
    single key byte, so each slot is updated from one strided slice.

    Args:
        state: Checksum state of CHECKSUM_SIZE bytes
        data: Bytes to fold in
    """
    key_length = len(CHECKSUM_KEY)
    for slot in range(min(CHECKSUM_SIZE, len(data))):
        column = data[slot::CHECKSUM_SIZE].translate(_XOR_TABLES[slot % key_length])
        state[slot] = (state[slot] + sum(column)) & 0xFF


def is_relevant(name: bytes) -> bool:
    """Whether an entry with this raw name contributes to the checksum."""
    return name.endswith(RELEVANT_SUFFIXES)


@dataclass(frozen=True)
class ChecksumResult:
    """Outcome of a checksum run."""

    digest: bytes
    entries_seen: int
    entries_folded: int
    bytes_folded: int

    def format(self) -> str:
        return format_checksum(self.digest)


def compute_checksum(stream: BinaryIO) -> ChecksumResult:
    """Compute the checksum of an archive stream.

    Args:
        stream: Seekable binary stream positioned at the first local header

    Returns:
        ChecksumResult with the 256-byte digest

    Raises:
        TruncatedArchiveError: If the archive ends inside a header, a name,
            or the data of a relevant entry
    """
    state = bytearray(CHECKSUM_SIZE)
    entries_seen = 0
    entries_folded = 0
    bytes_folded = 0

    for entry in scan(stream):
        entries_seen += 1
        if not is_relevant(entry.name):
            continue

        data = entry.read_data()
        fold(state, data)
        entries_folded += 1
        bytes_folded += len(data)
        logger.debug(f"Folded {len(data)} bytes from {entry.name!r}")

    return ChecksumResult(
        digest=bytes(state),
        entries_seen=entries_seen,
        entries_folded=entries_folded,
        bytes_folded=bytes_folded,
    )


def compute_checksum_file(path: Union[str, Path]) -> ChecksumResult:
    """Compute the checksum of the archive at ``path``.

    Raises:
        ArchiveOpenError: If the file cannot be opened
        TruncatedArchiveError: If the archive is truncated
    """
    try:
        stream = open(path, "rb")
    except OSError as e:
        raise ArchiveOpenError(
            f"Cannot open file {path}: {e.strerror or e}",
            path=str(path)
        ) from e

    with stream:
        return compute_checksum(stream)


def format_checksum(digest: bytes) -> str:
    """Render a digest as 16 space-terminated hex bytes per line.

    Every byte is followed by a space, every 16th byte by a newline, and the
    block ends with one extra newline.
    """
    lines = [
        "".join(f"{b:02x} " for b in digest[i:i + 16]) + "\n"
        for i in range(0, len(digest), 16)
    ]
    return "".join(lines) + "\n"

"""Minimal walker over the local file headers of a ZIP archive.

Only local file headers are visited, in archive order. The central directory
is never read; the walk stops at the first record that does not carry the
local file header signature.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Optional

from .errors import ArchiveReadError, TruncatedArchiveError

logger = logging.getLogger(__name__)

LOCAL_FILE_HEADER_SIGNATURE = 0x04034B50

# Longest entry name that is read from the stream. Longer declared names are
# truncated and the rest of the name is left in the stream.
MAX_NAME_LENGTH = 511

# General purpose flag bit 3: sizes and CRC follow the data in a descriptor
FLAG_DATA_DESCRIPTOR = 1 << 3

# Always 16 bytes, whichever descriptor layout the archive actually uses
DATA_DESCRIPTOR_SKIP = 16

# version, flags, time/date + CRC-32, compressed size, uncompressed size,
# name length, extra field length
_HEADER_FIELDS = struct.Struct("<HH10sIIHH")
_MAGIC = struct.Struct("<I")


@dataclass(frozen=True)
class LocalFileHeader:
    """Fields of a local file header that follow the signature."""

    flags: int
    compressed_size: int
    name_length: int
    extra_length: int

    @classmethod
    def parse(cls, raw: bytes) -> "LocalFileHeader":
        (_version, flags, _time_crc, compressed_size, _uncompressed_size,
         name_length, extra_length) = _HEADER_FIELDS.unpack(raw)
        return cls(
            flags=flags,
            compressed_size=compressed_size,
            name_length=name_length,
            extra_length=extra_length,
        )


@dataclass
class ZipEntry:
    """One archive entry, yielded with the stream positioned at its data.

    Attributes:
        name: Raw entry name bytes (at most MAX_NAME_LENGTH, not decoded)
        header: Parsed local file header
        header_offset: Offset of the entry's signature
        data_offset: Offset of the first byte of compressed data
    """

    name: bytes
    header: LocalFileHeader
    header_offset: int
    data_offset: int
    stream: BinaryIO = field(repr=False, compare=False)

    @property
    def compressed_size(self) -> int:
        return self.header.compressed_size

    @property
    def has_data_descriptor(self) -> bool:
        return bool(self.header.flags & FLAG_DATA_DESCRIPTOR)

    @property
    def data_end(self) -> int:
        """Offset just past the compressed data."""
        return self.data_offset + self.compressed_size

    def read_data(self) -> bytes:
        """Read the entry's compressed bytes.

        Raises:
            TruncatedArchiveError: If the archive ends inside the data
            ArchiveReadError: If the underlying read fails
        """
        return _read_exact(self.stream, self.compressed_size, "entry data", self.data_offset)


def _read(stream: BinaryIO, size: int, what: str, offset: Optional[int] = None) -> bytes:
    """Read up to ``size`` bytes, raising ArchiveReadError on I/O failure."""
    try:
        if offset is not None:
            stream.seek(offset)
        return stream.read(size)
    except OSError as e:
        raise ArchiveReadError(
            f"Failed to read {what} from zip structure: {e}",
            field=what,
            offset=offset,
        ) from e


def _read_exact(stream: BinaryIO, size: int, what: str, offset: Optional[int] = None) -> bytes:
    data = _read(stream, size, what, offset)
    if offset is None:
        offset = stream.tell() - len(data)
    if len(data) != size:
        raise TruncatedArchiveError(
            f"Failed to read {what} from zip structure at offset {offset:#x}: "
            f"expected {size} bytes, got {len(data)}",
            field=what,
            offset=offset,
            expected=size,
            actual=len(data),
        )
    return data


def scan(stream: BinaryIO) -> Iterator[ZipEntry]:
    """Walk the local file headers of a seekable binary stream.

    Each entry is yielded with the stream positioned at its compressed data.
    The caller may read the data or not; when iteration resumes the walker
    moves past the data (and a data descriptor, if flagged) on its own.

    The generator consumes the stream's cursor and cannot be restarted.

    Args:
        stream: Seekable binary stream positioned at the first header

    Yields:
        ZipEntry for every local file header found

    Raises:
        TruncatedArchiveError: If the archive ends inside a header or name
        ArchiveReadError: If the underlying stream fails
    """
    while True:
        header_offset = stream.tell()
        raw_magic = _read(stream, _MAGIC.size, "signature")
        magic = _MAGIC.unpack(raw_magic)[0] if len(raw_magic) == _MAGIC.size else None

        if magic != LOCAL_FILE_HEADER_SIGNATURE:
            logger.debug(
                f"Done at {header_offset:#x} : "
                f"{'end of file' if magic is None else f'{magic:#x}'}"
            )
            return

        header = LocalFileHeader.parse(
            _read_exact(stream, _HEADER_FIELDS.size, "local file header")
        )
        name_length = min(header.name_length, MAX_NAME_LENGTH)

        logger.debug(
            f"Sizes at {header_offset:#x}: data={header.compressed_size:#x} "
            f"name={header.name_length:#x} extra={header.extra_length:#x}"
        )

        name = _read_exact(stream, name_length, "filename")
        logger.debug(f"Filename: {name!r}")

        stream.seek(header.extra_length, 1)

        entry = ZipEntry(
            name=name,
            header=header,
            header_offset=header_offset,
            data_offset=stream.tell(),
            stream=stream,
        )
        yield entry

        stream.seek(entry.data_end)

        if entry.has_data_descriptor:
            logger.debug(f"Skipping data descriptor after {name!r}")
            stream.seek(DATA_DESCRIPTOR_SKIP, 1)

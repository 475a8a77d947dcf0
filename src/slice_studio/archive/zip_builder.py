"""
Module: archive.zip_builder

Purpose:
    Build an uncompressed (stored) ZIP archive in memory from named byte
    buffers, byte for byte: local file headers, central directory and
    end-of-central-directory record.

    Layout of the produced bytes:
        [local header | name | data] x N     (entry order)
        [central header | name] x N          (same order)
        [end of central directory]

    Each central header records the offset of its entry's local header;
    the EOCD records where the central directory starts and how long it
    is. Offsets are tracked while the local region is assembled.

Key Functions:
    - build_zip(): Entries to archive bytes
    - to_dos_datetime(): DOS (time, date) words for a datetime
    - encode_local_header() / encode_central_header() / encode_end_record()

Dependencies:
    - struct (std)
    - archive.crc: CRC-32
    - slice_studio.core.models: ZipEntry

Used By:
    - archive.zip_writer: Export to disk
    - cli: zip command
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from slice_studio.core.models import ZipEntry

from .crc import crc32

logger = logging.getLogger(__name__)

LOCAL_HEADER_SIGNATURE = 0x04034B50
CENTRAL_HEADER_SIGNATURE = 0x02014B50
END_RECORD_SIGNATURE = 0x06054B50

ZIP_VERSION = 20  # 2.0: stored entries, no extensions
METHOD_STORED = 0
MAX_ENTRIES = 0xFFFF

DOS_EPOCH_YEAR = 1980
DOS_MAX_YEAR = 2107  # 7-bit year field

LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")
CENTRAL_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")
END_RECORD = struct.Struct("<IHHHHIIH")

LOCAL_HEADER_SIZE = LOCAL_HEADER.size  # 30
CENTRAL_HEADER_SIZE = CENTRAL_HEADER.size  # 46
END_RECORD_SIZE = END_RECORD.size  # 22

ZIP_MIME_TYPE = "application/zip"


@dataclass(frozen=True, slots=True)
class EntryRecord:
    """Header fields shared by an entry's local and central records."""
    name: bytes
    crc: int
    size: int
    offset: int


def to_dos_datetime(moment: datetime) -> Tuple[int, int]:
    """
    Encode a timestamp as DOS (time, date) words.

    Seconds are stored at 2-second resolution. Years before 1980 are
    raised to 1980 and years after 2107 lowered to 2107, the limits of
    the format.

    Example:
        >>> to_dos_datetime(datetime(2024, 3, 15, 13, 45, 31))
        (28079, 22639)
    """
    year = min(max(DOS_EPOCH_YEAR, moment.year), DOS_MAX_YEAR)
    dos_time = (moment.hour << 11) | (moment.minute << 5) | (moment.second // 2)
    dos_date = ((year - DOS_EPOCH_YEAR) << 9) | (moment.month << 5) | moment.day
    return dos_time, dos_date


def encode_local_header(record: EntryRecord, dos_time: int, dos_date: int) -> bytes:
    """30-byte local file header (name not included)."""
    return LOCAL_HEADER.pack(
        LOCAL_HEADER_SIGNATURE,
        ZIP_VERSION,        # version needed
        0,                  # flags
        METHOD_STORED,
        dos_time,
        dos_date,
        record.crc,
        record.size,        # compressed size
        record.size,        # uncompressed size
        len(record.name),
        0,                  # extra length
    )


def encode_central_header(record: EntryRecord, dos_time: int, dos_date: int) -> bytes:
    """46-byte central directory header (name not included)."""
    return CENTRAL_HEADER.pack(
        CENTRAL_HEADER_SIGNATURE,
        ZIP_VERSION,        # version made by
        ZIP_VERSION,        # version needed
        0,                  # flags
        METHOD_STORED,
        dos_time,
        dos_date,
        record.crc,
        record.size,
        record.size,
        len(record.name),
        0,                  # extra length
        0,                  # comment length
        0,                  # disk number start
        0,                  # internal attributes
        0,                  # external attributes
        record.offset,
    )


def encode_end_record(entry_count: int, central_size: int, central_offset: int) -> bytes:
    """22-byte end-of-central-directory record for a single-disk archive."""
    return END_RECORD.pack(
        END_RECORD_SIGNATURE,
        0,                  # this disk
        0,                  # disk with central directory
        entry_count,        # entries on this disk
        entry_count,        # total entries
        central_size,
        central_offset,
        0,                  # comment length
    )


def build_zip(
    entries: Iterable[ZipEntry],
    *,
    timestamp: Optional[datetime] = None,
) -> bytes:
    """
    Serialize entries into a stored ZIP archive.

    All entries share one timestamp (the build time unless given).
    An empty entry list produces a valid empty archive (EOCD only).

    Args:
        entries: Named buffers in archive order
        timestamp: Modification time stamped on every entry

    Returns:
        Complete archive bytes

    Raises:
        ValueError: If there are more than 65535 entries or the archive
            would exceed 4 GiB (ZIP64 is not supported)

    Example:
        >>> data = build_zip([ZipEntry("a.txt", b"hello")])
        >>> data[:4]
        b'PK\\x03\\x04'
    """
    entries = list(entries)
    if len(entries) > MAX_ENTRIES:
        raise ValueError(f"too many entries for a ZIP archive: {len(entries)}")

    dos_time, dos_date = to_dos_datetime(timestamp or datetime.now())

    local_parts: List[bytes] = []
    central_parts: List[bytes] = []
    offset = 0

    for entry in entries:
        record = EntryRecord(
            name=entry.name_bytes,
            crc=crc32(entry.data),
            size=entry.size,
            offset=offset,
        )
        if offset > 0xFFFFFFFF:
            raise ValueError(f"archive exceeds 4 GiB at entry {entry.name!r}")

        local_parts.extend((encode_local_header(record, dos_time, dos_date), record.name, entry.data))
        central_parts.extend((encode_central_header(record, dos_time, dos_date), record.name))
        offset += LOCAL_HEADER_SIZE + len(record.name) + record.size

    central_size = sum(len(part) for part in central_parts)
    if offset > 0xFFFFFFFF:
        raise ValueError("archive exceeds 4 GiB")

    end_record = encode_end_record(len(entries), central_size, offset)
    archive = b"".join(local_parts + central_parts + [end_record])

    logger.debug(
        f"Built ZIP with {len(entries)} entries "
        f"({offset} local bytes, {central_size} central bytes)"
    )
    return archive

"""
Module: archive.crc

Purpose:
    Table-driven CRC-32 (reflected polynomial 0xEDB88320), the checksum
    ZIP readers validate for every entry.

Key Functions:
    - crc_table(): 256-entry lookup table, built once per process
    - crc32(): Checksum of a byte buffer

Dependencies:
    - functools (std)

Used By:
    - archive.zip_builder: Per-entry checksums
"""

from __future__ import annotations

from functools import lru_cache
from typing import Tuple

POLYNOMIAL = 0xEDB88320
MASK_32 = 0xFFFFFFFF


@lru_cache(maxsize=1)
def crc_table() -> Tuple[int, ...]:
    """
    Build the CRC-32 lookup table.

    Entry i is i shifted right through eight rounds, xoring in the
    polynomial whenever the low bit is set. The tuple is read-only and
    shared by all callers.
    """
    table = []
    for i in range(256):
        c = i
        for _ in range(8):
            c = (POLYNOMIAL ^ (c >> 1)) if c & 1 else (c >> 1)
        table.append(c)
    return tuple(table)


def crc32(data: bytes) -> int:
    """
    CRC-32 of a buffer as an unsigned 32-bit integer.

    Example:
        >>> hex(crc32(b"123456789"))
        '0xcbf43926'
        >>> crc32(b"")
        0
    """
    table = crc_table()
    c = MASK_32
    for byte in data:
        c = table[(c ^ byte) & 0xFF] ^ (c >> 8)
    return (c ^ MASK_32) & MASK_32

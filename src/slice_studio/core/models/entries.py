"""
Module: core.models.entries

Purpose:
    Provides the ZipEntry dataclass - one named file going into a stored
    ZIP archive.

Dependencies:
    - dataclasses (std)

Used By:
    - archive.zip_builder
    - workspace.session: export of the processing area
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_NAME_BYTES = 0xFFFF
MAX_ENTRY_BYTES = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class ZipEntry:
    """
    Named byte buffer for archive export.

    Attributes:
        name: Relative path inside the archive, e.g. "1.png"
        data: Raw file content

    Invariants:
        - name is non-empty and encodes to at most 65535 UTF-8 bytes
        - data is at most 4 GiB - 1 bytes (no ZIP64)

    Example:
        >>> entry = ZipEntry("1.png", b"...")
        >>> entry.size
        3
    """

    name: str
    data: bytes

    def __post_init__(self) -> None:
        """Validate entry on construction."""
        if not self.name:
            raise ValueError("entry name must be non-empty")
        if len(self.name.encode("utf-8")) > MAX_NAME_BYTES:
            raise ValueError(f"entry name too long: {self.name[:32]!r}...")
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise ValueError(f"entry data must be bytes, got {type(self.data).__name__}")
        if len(self.data) > MAX_ENTRY_BYTES:
            raise ValueError(f"entry {self.name!r} exceeds {MAX_ENTRY_BYTES} bytes")
        # Freeze mutable buffers so the archive sees a stable snapshot
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @property
    def name_bytes(self) -> bytes:
        return self.name.encode("utf-8")

    @property
    def size(self) -> int:
        return len(self.data)

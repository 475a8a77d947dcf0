"""
Module: archive

Purpose:
    Stored (uncompressed) ZIP archives built byte for byte, with no
    compression library involved.

Key Functions:
    - crc32(): Standard CRC-32 checksum
    - build_zip(): Entries to archive bytes
    - write_zip(): Archive to disk
    - write_slices_zip(): Timestamped slice export

Dependencies:
    - slice_studio.core.models: ZipEntry

Used By:
    - cli: slice and zip commands
"""

from .crc import crc32
from .zip_builder import ZIP_MIME_TYPE, build_zip, to_dos_datetime
from .zip_writer import ExportError, export_filename, write_slices_zip, write_zip

__all__ = [
    "crc32",
    "ZIP_MIME_TYPE",
    "build_zip",
    "to_dos_datetime",
    "ExportError",
    "export_filename",
    "write_slices_zip",
    "write_zip",
]

"""
Module: archive.zip_writer

Purpose:
    Write stored ZIP archives to disk. Slice exports land in a
    timestamped file, e.g. slices_2024-03-15T13-45-31-123Z.zip.

Key Functions:
    - write_zip(): Build and atomically write an archive to a path
    - write_slices_zip(): Export processing-area entries to a directory
    - export_filename(): Timestamped archive name

Dependencies:
    - archive.zip_builder: build_zip
    - slice_studio.core.models: ZipEntry

Used By:
    - cli: slice and zip commands
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from slice_studio.core.models import ZipEntry

from .zip_builder import build_zip

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Error exporting an archive."""
    pass


def export_filename(moment: datetime, *, prefix: str = "slices") -> str:
    """
    Timestamped archive filename with ':' and '.' made filesystem-safe.

    Example:
        >>> export_filename(datetime(2024, 3, 15, 13, 45, 31, 123000, tzinfo=timezone.utc))
        'slices_2024-03-15T13-45-31-123Z.zip'
    """
    utc = moment.astimezone(timezone.utc) if moment.tzinfo else moment
    stamp = utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"
    stamp = stamp.replace(":", "-").replace(".", "-")
    return f"{prefix}_{stamp}.zip"


def _atomic_write_bytes(data: bytes, path: Path) -> None:
    """Write bytes atomically using temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=".zip",
        dir=path.parent,
        delete=False,
    ) as f:
        temp_path = Path(f.name)
        try:
            f.write(data)
        except OSError:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    # replace() overwrites an existing archive on all platforms
    temp_path.replace(path)


def write_zip(
    entries: Sequence[ZipEntry],
    output_path: Path,
    *,
    timestamp: Optional[datetime] = None,
) -> Path:
    """
    Build an archive and write it to output_path.

    The write is atomic (temp file then rename) so a failed export never
    leaves a truncated archive behind.

    Args:
        entries: Named buffers in archive order
        output_path: Destination (".zip" appended if missing)
        timestamp: Entry modification time (defaults to now)

    Returns:
        Path of the written archive

    Raises:
        ExportError: If the archive cannot be built or written
    """
    if output_path.suffix != ".zip":
        output_path = output_path.with_suffix(".zip")

    try:
        data = build_zip(entries, timestamp=timestamp)
    except ValueError as e:
        raise ExportError(f"Cannot build archive: {e}") from e

    try:
        _atomic_write_bytes(data, output_path)
    except OSError as e:
        raise ExportError(f"Failed to write {output_path}: {e}") from e

    logger.info(f"Wrote {len(entries)} entries ({len(data)} bytes) to {output_path}")
    return output_path


def write_slices_zip(
    entries: Sequence[ZipEntry],
    output_dir: Path,
    *,
    now: Optional[datetime] = None,
) -> Path:
    """
    Export slice entries as slices_<timestamp>.zip inside output_dir.

    Args:
        entries: Entries from SlicerSession.export_entries()
        output_dir: Directory to create the archive in
        now: Export time (defaults to the current UTC time)

    Returns:
        Path of the written archive

    Raises:
        ExportError: If there is nothing to export or writing fails
    """
    if not entries:
        raise ExportError("Processing area is empty, nothing to export")

    now = now or datetime.now(timezone.utc)
    output_path = Path(output_dir) / export_filename(now)
    logger.info(f"Exporting {len(entries)} slices to {output_path}")
    local_time = now.astimezone() if now.tzinfo else now
    return write_zip(entries, output_path, timestamp=local_time)

"""
Module: slicing.cropper

Purpose:
    Rasterize slice rectangles into independent PNG images. Each rectangle
    becomes its own image blob, ready for the processing area or export.

Key Functions:
    - load_image(): Open a path or bytes as a PNG-encodable image
    - crop_rect(): Crop a single rectangle from the source image
    - encode_png(): Encode an image as PNG bytes
    - slice_image(): Crop every rectangle into SliceItems

Dependencies:
    - PIL: Image manipulation
    - slice_studio.core.models: SliceRect, SliceItem

Used By:
    - workspace.session: perform_slice()
    - cli: slice command
"""

from __future__ import annotations

import logging
import time
from io import BytesIO
from pathlib import Path
from typing import List, Sequence, Union

from PIL import Image

from slice_studio.core.models import SliceItem, SliceRect

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, Image.Image]


def load_image(source: ImageSource) -> Image.Image:
    """
    Load an image and normalize its mode for PNG output.

    Palette and exotic modes are converted to RGBA (if they carry
    transparency) or RGB. The returned image is fully loaded, so the
    underlying file can be closed or deleted afterwards.

    Args:
        source: File path, raw encoded bytes, or an open PIL image

    Returns:
        PIL Image in RGB, RGBA or L mode

    Raises:
        FileNotFoundError: If a path does not exist
        PIL.UnidentifiedImageError: If the data is not a readable image
    """
    if isinstance(source, Image.Image):
        image = source
    elif isinstance(source, (bytes, bytearray)):
        image = Image.open(BytesIO(source))
    else:
        with Image.open(Path(source)) as opened:
            opened.load()
            image = opened.copy()

    image.load()
    if image.mode in ("RGB", "RGBA", "L"):
        return image
    if image.mode in ("P", "LA", "PA") or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def crop_rect(image: Image.Image, rect: SliceRect) -> Image.Image:
    """
    Crop one rectangle from an image.

    Args:
        image: Source image
        rect: Region to crop

    Returns:
        Cropped image (new copy, not a view)

    Raises:
        ValueError: If the rectangle extends outside the image

    Example:
        >>> tile = crop_rect(image, SliceRect(0, 0, 0, 0, 100, 100))
        >>> tile.size
        (100, 100)
    """
    if rect.right > image.width:
        raise ValueError(f"Rect right {rect.right} exceeds image width {image.width}")
    if rect.bottom > image.height:
        raise ValueError(f"Rect bottom {rect.bottom} exceeds image height {image.height}")
    return image.crop(rect.crop_box())


def encode_png(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def slice_image(
    image: Image.Image,
    rects: Sequence[SliceRect],
    *,
    id_prefix: str = "",
) -> List[SliceItem]:
    """
    Crop every rectangle into a PNG SliceItem.

    Items keep rectangle order; their index is row * cols + col. Empty
    rectangles (possible only for images smaller than the grid) are
    skipped with a warning.

    Args:
        image: Source image
        rects: Row-major rectangles from compute_rectangles()
        id_prefix: Prefix for item ids (defaults to a timestamp)

    Returns:
        List of SliceItems in rectangle order
    """
    if not id_prefix:
        id_prefix = f"slice-{int(time.time() * 1000)}"
    cols = max((rect.col for rect in rects), default=0) + 1

    items: List[SliceItem] = []
    for rect in rects:
        if rect.is_empty:
            logger.warning(f"Skipping empty slice at row {rect.row}, col {rect.col}")
            continue
        index = rect.row * cols + rect.col
        tile = crop_rect(image, rect)
        items.append(
            SliceItem(
                id=f"{id_prefix}-{index}",
                index=index,
                rect=rect,
                data=encode_png(tile),
            )
        )

    logger.info(f"Cropped {len(items)} slices from {image.width}x{image.height} image")
    return items

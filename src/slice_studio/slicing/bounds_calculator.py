"""
Module: slicing.bounds_calculator

Purpose:
    Convert per-axis slice fractions into pixel rectangles that tile an
    image exactly. Boundaries are rounded to whole pixels, each slice
    starts where the previous one ended, and the last slice on each axis
    is forced to end on the image edge so rounding never drops a pixel.

Key Functions:
    - compute_axis_edges(): Pixel boundaries along one axis
    - compute_rectangles(): Row-major rectangles for the full grid

Dependencies:
    - math (std)
    - slice_studio.core.models: SliceRect

Used By:
    - slicing.editor: GridEditor.rectangles()
    - workspace.session: perform_slice()
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from slice_studio.core.models import SliceRect

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def compute_axis_edges(length: int, fractions: Sequence[float]) -> List[int]:
    """
    Pixel edges for one axis.

    Returns len(fractions) + 1 edges starting at 0 and ending at length.
    Edge i + 1 is round(edge_i + fraction_i * length); the final edge is
    length exactly.

    Args:
        length: Image width or height in pixels
        fractions: Slice fractions along the axis (sum to 1)

    Returns:
        Monotonic list of integer edges

    Example:
        >>> compute_axis_edges(301, [1/3, 1/3, 1/3])
        [0, 100, 200, 301]
    """
    count = len(fractions)
    if count <= 1:
        return [0, length]

    edges = [0]
    position = 0
    for index, fraction in enumerate(fractions):
        if index == count - 1:
            next_edge = length
        else:
            next_edge = round_half_up(position + fraction * length)
            # Clamp so fractions that over-sum cannot push past the image
            next_edge = min(max(next_edge, edges[-1]), length)
        edges.append(next_edge)
        position = next_edge
    return edges


def compute_rectangles(
    image_width: int,
    image_height: int,
    row_fractions: Sequence[float],
    col_fractions: Sequence[float],
) -> List[SliceRect]:
    """
    Compute crop rectangles for a rows x cols grid.

    Rectangles are returned row-major (top row left to right, then the
    next row). Their union covers [0, width) x [0, height) with no gaps
    or overlaps.

    An image with a zero dimension yields one rectangle covering the
    whole (empty) image instead of a grid of empty cells.

    Args:
        image_width: Source width in pixels
        image_height: Source height in pixels
        row_fractions: Height fraction of each row
        col_fractions: Width fraction of each column

    Returns:
        List of len(row_fractions) * len(col_fractions) SliceRects

    Raises:
        ValueError: If a dimension is negative

    Example:
        >>> rects = compute_rectangles(300, 300, [1/3] * 3, [1/3] * 3)
        >>> [(r.x, r.y, r.width, r.height) for r in rects[:2]]
        [(0, 0, 100, 100), (100, 0, 100, 100)]
    """
    if image_width < 0 or image_height < 0:
        raise ValueError(
            f"image dimensions must be >= 0: {image_width}x{image_height}"
        )

    if image_width == 0 or image_height == 0:
        logger.debug(f"Empty image {image_width}x{image_height}, returning single rectangle")
        return [SliceRect(0, 0, 0, 0, image_width, image_height)]

    row_edges = compute_axis_edges(image_height, row_fractions or [1.0])
    col_edges = compute_axis_edges(image_width, col_fractions or [1.0])

    rects: List[SliceRect] = []
    for row in range(len(row_edges) - 1):
        top, bottom = row_edges[row], row_edges[row + 1]
        for col in range(len(col_edges) - 1):
            left, right = col_edges[col], col_edges[col + 1]
            rects.append(
                SliceRect(
                    row=row,
                    col=col,
                    x=left,
                    y=top,
                    width=right - left,
                    height=bottom - top,
                )
            )
    return rects

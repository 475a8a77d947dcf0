"""
Module: core.models.rect

Purpose:
    Provides the SliceRect dataclass - one cell of a slicing grid expressed
    as a pixel rectangle within the source image.

Key Functions:
    - SliceRect.crop_box(): (left, top, right, bottom) tuple for PIL crop
    - SliceRect.contains(x, y): Check if a pixel is in the rectangle
    - SliceRect.overlaps(other): Check for overlap with another rectangle
    - SliceRect.to_dict(): Serialize for JSON
    - SliceRect.from_dict(data): Deserialize from JSON

Dependencies:
    - dataclasses (std)

Used By:
    - slicing.bounds_calculator
    - slicing.cropper
    - core.models.slice_item
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SliceRect:
    """
    Pixel rectangle for one grid cell.

    The region is [x, x + width) x [y, y + height), origin at the top-left
    corner of the source image.

    Attributes:
        row: Grid row index (0-based, top to bottom)
        col: Grid column index (0-based, left to right)
        x: Left edge (inclusive)
        y: Top edge (inclusive)
        width: Width in pixels
        height: Height in pixels

    Invariants:
        - row >= 0, col >= 0
        - x >= 0, y >= 0
        - width >= 0, height >= 0

    Example:
        >>> rect = SliceRect(row=0, col=1, x=100, y=0, width=100, height=100)
        >>> rect.right
        200
        >>> rect.crop_box()
        (100, 0, 200, 100)
    """

    row: int
    col: int
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate rectangle on construction."""
        if self.row < 0 or self.col < 0:
            raise ValueError(f"grid position must be >= 0: ({self.row}, {self.col})")
        if self.x < 0:
            raise ValueError(f"x must be >= 0: {self.x}")
        if self.y < 0:
            raise ValueError(f"y must be >= 0: {self.y}")
        if self.width < 0:
            raise ValueError(f"width must be >= 0: {self.width}")
        if self.height < 0:
            raise ValueError(f"height must be >= 0: {self.height}")

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def right(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """True when the rectangle covers no pixels."""
        return self.width == 0 or self.height == 0

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def contains(self, x: int, y: int) -> bool:
        """
        Check if a pixel lies within this rectangle.

        Args:
            x: Pixel column
            y: Pixel row

        Returns:
            True if x <= px < right and y <= py < bottom
        """
        return self.x <= x < self.right and self.y <= y < self.bottom

    def overlaps(self, other: SliceRect) -> bool:
        """
        Check if this rectangle shares at least one pixel with another.

        Adjacent rectangles (one.right == other.x) do NOT overlap.
        """
        if self.is_empty or other.is_empty:
            return False
        return not (
            self.right <= other.x
            or other.right <= self.x
            or self.bottom <= other.y
            or other.bottom <= self.y
        )

    def crop_box(self) -> tuple[int, int, int, int]:
        """
        Get as (left, top, right, bottom) tuple for PIL.

        Returns:
            Tuple suitable for Image.crop()
        """
        return (self.x, self.y, self.right, self.bottom)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SliceRect:
        return cls(
            row=data["row"],
            col=data["col"],
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"SliceRect(r{self.row}c{self.col}, "
            f"{self.x},{self.y} {self.width}x{self.height})"
        )

"""
Module: core.models.slice_item

Purpose:
    Provides the SliceItem dataclass - one cropped grid cell with its PNG
    bytes, selection flag and enhancement state. Items are immutable;
    state changes produce new instances via dataclasses.replace().

Dependencies:
    - dataclasses (std)
    - .rect.SliceRect

Used By:
    - slicing.cropper: Creates items
    - workspace.session: Selection and processing area
    - enhance.enhancer: Enhancement progress and results
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .rect import SliceRect


@dataclass(frozen=True, slots=True)
class SliceItem:
    """
    Cropped slice of the master image.

    Attributes:
        id: Unique id within a session, e.g. "slice-1712345678901-2-4" (stamp, pass, index)
        index: Grid position as row * cols + col
        rect: Source rectangle in the master image
        data: PNG bytes of the crop
        selected: Whether the slice is ticked in the slice grid
        enhanced: Whether an enhanced version is available
        enhanced_data: Enhanced image bytes (None until enhanced)
        enhance_model: Model that produced enhanced_data
        enhancing: True while an enhancement request is in flight
        enhance_progress: Last reported progress, 0-100
        enhance_error: Error text from the last failed enhancement
    """

    id: str
    index: int
    rect: SliceRect
    data: bytes
    selected: bool = False
    enhanced: bool = False
    enhanced_data: Optional[bytes] = None
    enhance_model: Optional[str] = None
    enhancing: bool = False
    enhance_progress: Optional[float] = None
    enhance_error: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate item on construction."""
        if not self.id:
            raise ValueError("slice id must be non-empty")
        if self.index < 0:
            raise ValueError(f"index must be >= 0: {self.index}")
        if self.enhanced and self.enhanced_data is None:
            raise ValueError(f"slice {self.id} marked enhanced without data")

    @property
    def row(self) -> int:
        return self.rect.row

    @property
    def col(self) -> int:
        return self.rect.col

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    @property
    def output_data(self) -> bytes:
        """Bytes to export: the enhanced image when present, else the crop."""
        return self.enhanced_data if self.enhanced_data is not None else self.data

    def with_selected(self, selected: bool) -> SliceItem:
        return replace(self, selected=selected)

    def with_enhancement(self, data: bytes, model: str) -> SliceItem:
        """Record a finished enhancement."""
        return replace(
            self,
            enhanced=True,
            enhanced_data=data,
            enhance_model=model,
            enhancing=False,
            enhance_progress=100.0,
            enhance_error=None,
        )

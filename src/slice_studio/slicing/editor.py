"""
Module: slicing.editor

Purpose:
    Interactive grid state for the slicer: the active slice mode, the
    custom row/column splits and the divider currently being dragged.
    Stops, fractions and rectangles are always derived from the stored
    breakpoints, so there is no cached geometry to invalidate.

Key Classes:
    - GridEditor: Mutable editor over two AxisSplits
    - DragState: Divider being dragged (axis + breakpoint index)

Dependencies:
    - slice_studio.core.models: Axis, AxisSplit, SliceRect
    - slicing.splits: Breakpoint math
    - slicing.bounds_calculator: Rectangle computation

Used By:
    - workspace.session: SlicerSession
    - cli: Grid configuration from command-line flags
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from slice_studio.core.models import Axis, AxisSplit, MAX_GRID, MIN_GRID, SliceRect

from .bounds_calculator import compute_rectangles
from .modes import CUSTOM_MODE_ID, SLICE_MODES, SliceMode, get_mode
from .splits import (
    build_even_splits,
    build_fractions,
    build_stops,
    clamp_breakpoint,
    clamp_value,
    min_gap,
)

logger = logging.getLogger(__name__)

# Pointer ratios are kept off the overlay edges while dragging
DRAG_MIN_RATIO = 0.01
DRAG_MAX_RATIO = 0.99


@dataclass(frozen=True, slots=True)
class DragState:
    """Divider currently held by the pointer."""
    axis: Axis
    index: int


class GridEditor:
    """
    Editable N x M slicing grid.

    Preset modes always use even splits. Editing a count or a breakpoint
    while a preset is active switches to custom mode, seeded with the
    preset's even layout, so every edit is visible in the derived
    geometry.

    Example:
        >>> editor = GridEditor()
        >>> editor.set_breakpoint(Axis.COL, 0, 0.2)
        0.2
        >>> editor.grid_label
        '3×3'
        >>> [r.width for r in editor.rectangles(300, 300)[:3]]
        [60, 140, 100]
    """

    def __init__(self, mode_id: str = SLICE_MODES[0].id) -> None:
        self._mode: SliceMode = get_mode(mode_id)
        self._custom: Dict[Axis, AxisSplit] = {
            Axis.ROW: AxisSplit.even(3),
            Axis.COL: AxisSplit.even(3),
        }
        self._drag: Optional[DragState] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Mode
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> SliceMode:
        return self._mode

    @property
    def is_custom(self) -> bool:
        return self._mode.is_custom

    def select_mode(self, mode_id: str) -> SliceMode:
        """Activate a preset or the custom mode; unknown ids fall back to the first preset."""
        self._mode = get_mode(mode_id)
        self._drag = None
        logger.debug(f"Slice mode set to {self._mode.id}")
        return self._mode

    @property
    def grid_label(self) -> str:
        if self.is_custom:
            return f"{self.row_count}×{self.col_count}"
        return self._mode.label

    # ─────────────────────────────────────────────────────────────────────────
    # Derived geometry
    # ─────────────────────────────────────────────────────────────────────────

    def split(self, axis: Axis) -> AxisSplit:
        """Active split for an axis (custom state or the preset's even split)."""
        axis = Axis(axis)
        if self.is_custom:
            return self._custom[axis]
        count = self._mode.rows if axis is Axis.ROW else self._mode.cols
        return AxisSplit.even(count)

    def count(self, axis: Axis) -> int:
        return self.split(axis).count

    def breakpoints(self, axis: Axis) -> List[float]:
        return list(self.split(axis).breakpoints)

    def stops(self, axis: Axis) -> List[float]:
        split = self.split(axis)
        return build_stops(split.count, split.breakpoints)

    def fractions(self, axis: Axis) -> List[float]:
        return build_fractions(self.stops(axis))

    @property
    def row_count(self) -> int:
        return self.count(Axis.ROW)

    @property
    def col_count(self) -> int:
        return self.count(Axis.COL)

    @property
    def row_stops(self) -> List[float]:
        return self.stops(Axis.ROW)

    @property
    def col_stops(self) -> List[float]:
        return self.stops(Axis.COL)

    @property
    def row_fractions(self) -> List[float]:
        return self.fractions(Axis.ROW)

    @property
    def col_fractions(self) -> List[float]:
        return self.fractions(Axis.COL)

    def rectangles(self, image_width: int, image_height: int) -> List[SliceRect]:
        """Crop rectangles for the current grid over an image of the given size."""
        return compute_rectangles(
            image_width, image_height, self.row_fractions, self.col_fractions
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────────

    def set_grid_size(self, axis: Axis, count: float) -> int:
        """
        Set the slice count for an axis and reset its breakpoints to even.

        Out-of-range counts are clamped into [1, 8]; non-finite input
        counts as 1.

        Returns:
            The count actually applied
        """
        axis = Axis(axis)
        if count is None or not math.isfinite(count):
            count = MIN_GRID
        applied = int(clamp_value(int(count), MIN_GRID, MAX_GRID))
        self._ensure_custom()
        self._custom[axis] = AxisSplit(applied, tuple(build_even_splits(applied)))
        logger.debug(f"Set {axis} count to {applied}")
        return applied

    def set_breakpoint(self, axis: Axis, index: int, value: float) -> Optional[float]:
        """
        Move one divider, clamped between its neighbors.

        The stored value lies in [prev + gap, next - gap] where prev/next
        default to 0/1 at the ends, so dividers never cross or touch.

        Returns:
            The stored value, or None when the axis has no such breakpoint
        """
        axis = Axis(axis)
        current = self.split(axis)
        if not 0 <= index < len(current.breakpoints):
            logger.debug(f"Ignoring {axis} breakpoint {index} (have {len(current.breakpoints)})")
            return None
        self._ensure_custom()
        split = self._custom[axis]
        clamped = clamp_breakpoint(split.breakpoints, index, value, split.count)
        self._custom[axis] = split.with_breakpoint(index, clamped)
        return clamped

    def set_breakpoints(self, axis: Axis, values: Sequence[float]) -> List[float]:
        """
        Replace every breakpoint of an axis at once.

        The axis count becomes len(values) + 1. Values are sorted, then
        clamped left to right so each lies at least one gap after the
        previous value and leaves room for the dividers still to come.
        Well-separated input is stored unchanged; non-finite entries fall
        back to the even position for their slot.

        Example:
            >>> GridEditor().set_breakpoints(Axis.ROW, [0.8, 0.9])
            [0.8, 0.9]
        """
        axis = Axis(axis)
        count = self.set_grid_size(axis, len(values) + 1)
        defaults = build_even_splits(count)
        raw = [
            value if math.isfinite(value) else defaults[index]
            for index, value in enumerate(list(values)[: count - 1])
        ]

        gap = min_gap(count)
        applied: List[float] = []
        previous = 0.0
        for index, value in enumerate(sorted(raw)):
            upper = 1 - (count - 1 - index) * gap
            previous = clamp_value(value, previous + gap, upper)
            applied.append(previous)

        if applied != sorted(raw):
            logger.debug(f"Clamped {axis} breakpoints {list(values)} to {applied}")
        self._custom[axis] = AxisSplit(count, tuple(applied))
        return list(applied)

    def reset_splits(self) -> None:
        """Reset custom breakpoints on both axes to even spacing."""
        for axis, split in list(self._custom.items()):
            self._custom[axis] = AxisSplit.even(split.count)

    def _ensure_custom(self) -> None:
        if self.is_custom:
            return
        self._custom = {
            Axis.ROW: AxisSplit.even(self._mode.rows),
            Axis.COL: AxisSplit.even(self._mode.cols),
        }
        self._mode = get_mode(CUSTOM_MODE_ID)
        logger.debug("Switched to custom mode from preset")

    # ─────────────────────────────────────────────────────────────────────────
    # Dragging
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def drag_state(self) -> Optional[DragState]:
        return self._drag

    def begin_drag(self, axis: Axis, index: int) -> bool:
        """Grab a divider. Returns False when the axis has no such divider."""
        axis = Axis(axis)
        if not 0 <= index < len(self.split(axis).breakpoints):
            return False
        self._drag = DragState(axis, index)
        return True

    def drag_to(self, ratio: float) -> Optional[float]:
        """
        Move the grabbed divider to a [0, 1] position along its axis.

        Every intermediate position is a valid grid, so there is no
        commit step: the new breakpoint takes effect immediately.

        Returns:
            The stored breakpoint, or None if nothing is being dragged
        """
        if self._drag is None:
            return None
        ratio = clamp_value(ratio, DRAG_MIN_RATIO, DRAG_MAX_RATIO)
        return self.set_breakpoint(self._drag.axis, self._drag.index, ratio)

    def drag_pointer(self, pointer: float, origin: float, extent: float) -> Optional[float]:
        """
        Move the grabbed divider from a raw pointer coordinate.

        Args:
            pointer: Pointer x (column dividers) or y (row dividers)
            origin: Overlay left (or top) coordinate
            extent: Overlay width (or height)

        Returns:
            The stored breakpoint, or None if not dragging or the overlay
            has no size
        """
        if self._drag is None or not extent:
            return None
        return self.drag_to((pointer - origin) / extent)

    def end_drag(self) -> None:
        self._drag = None

"""
Module: core.models.grid

Purpose:
    Grid axis models for the slicing tool. An AxisSplit records how one
    axis (rows or columns) is divided: a slice count and the fractional
    breakpoints between slices.

Key Classes:
    - Axis: Row or column axis
    - AxisSplit: Count + breakpoints for one axis (immutable)

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - slicing.splits: Stop and fraction derivation
    - slicing.editor: GridEditor state
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

MIN_GRID = 1
MAX_GRID = 8


class Axis(str, Enum):
    """Grid axis."""
    ROW = "row"  # Horizontal divider lines, splits image height
    COL = "col"  # Vertical divider lines, splits image width

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AxisSplit:
    """
    Division of one grid axis (immutable).

    Attributes:
        count: Number of slices along the axis, in [1, 8]
        breakpoints: count - 1 fractional positions in (0, 1)

    Invariants:
        - MIN_GRID <= count <= MAX_GRID
        - len(breakpoints) == count - 1
        - every breakpoint lies in [0, 1]

    Strict ordering of breakpoints is maintained by the editor's clamping
    rather than rejected here, so a hand-built split may still be sliced.

    Example:
        >>> AxisSplit.even(4).breakpoints
        (0.25, 0.5, 0.75)
    """

    count: int
    breakpoints: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        """Validate split on construction."""
        if not MIN_GRID <= self.count <= MAX_GRID:
            raise ValueError(
                f"count must be in [{MIN_GRID}, {MAX_GRID}]: {self.count}"
            )
        if len(self.breakpoints) != self.count - 1:
            raise ValueError(
                f"expected {self.count - 1} breakpoints, got {len(self.breakpoints)}"
            )
        for value in self.breakpoints:
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"breakpoint out of [0, 1]: {value}")

    @classmethod
    def even(cls, count: int) -> AxisSplit:
        """Evenly spaced split: breakpoint i is i / count."""
        if count <= 1:
            return cls(count=max(count, MIN_GRID))
        return cls(count=count, breakpoints=tuple(i / count for i in range(1, count)))

    def with_breakpoint(self, index: int, value: float) -> AxisSplit:
        """Return a copy with one breakpoint replaced (value used as given)."""
        values = list(self.breakpoints)
        values[index] = value
        return AxisSplit(count=self.count, breakpoints=tuple(values))

    def to_dict(self) -> dict:
        return {"count": self.count, "breakpoints": list(self.breakpoints)}

    @classmethod
    def from_dict(cls, data: dict) -> AxisSplit:
        return cls(count=data["count"], breakpoints=tuple(data.get("breakpoints", ())))

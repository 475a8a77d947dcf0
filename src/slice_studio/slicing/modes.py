"""
Module: slicing.modes

Purpose:
    Preset grid layouts offered by the slicer, plus the custom mode whose
    row/column counts and divider positions are user-editable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

CUSTOM_MODE_ID = "custom"


@dataclass(frozen=True, slots=True)
class SliceMode:
    """
    Named grid layout.

    Attributes:
        id: Stable identifier, e.g. "3x3"
        label: Display label, e.g. "3×3"
        rows: Default row count
        cols: Default column count
    """

    id: str
    label: str
    rows: int
    cols: int

    @property
    def is_custom(self) -> bool:
        return self.id == CUSTOM_MODE_ID


SLICE_MODES: Tuple[SliceMode, ...] = (
    SliceMode("3x3", "3×3", 3, 3),
    SliceMode("2x2", "2×2", 2, 2),
    SliceMode("4x4", "4×4", 4, 4),
    SliceMode("2x3", "2×3", 2, 3),
    SliceMode("3x2", "3×2", 3, 2),
    SliceMode(CUSTOM_MODE_ID, "Custom", 3, 3),
)

_MODES_BY_ID: Dict[str, SliceMode] = {mode.id: mode for mode in SLICE_MODES}


def get_mode(mode_id: str) -> SliceMode:
    """
    Look up a slice mode, falling back to the first preset.

    Example:
        >>> get_mode("2x3").cols
        3
        >>> get_mode("unknown").id
        '3x3'
    """
    return _MODES_BY_ID.get(mode_id, SLICE_MODES[0])

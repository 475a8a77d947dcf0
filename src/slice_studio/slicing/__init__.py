"""
Module: slicing

Purpose:
    Grid slicing subpackage: fractional split math, pixel-exact rectangle
    computation, the interactive grid editor and the Pillow cropper.

Key Modules:
    - splits: Even splits, stops, fractions, breakpoint clamping
    - bounds_calculator: Rectangles that tile the image exactly
    - modes: Preset grid layouts
    - editor: GridEditor with divider dragging
    - cropper: Rectangles to PNG SliceItems

Dependencies:
    - PIL: Image manipulation (cropper only)
    - slice_studio.core.models: SliceRect, AxisSplit, SliceItem

Used By:
    - workspace.session: SlicerSession
    - cli: slice command
"""

from .bounds_calculator import compute_axis_edges, compute_rectangles
from .editor import GridEditor
from .modes import SLICE_MODES, SliceMode, get_mode
from .splits import build_even_splits, build_fractions, build_stops, min_gap

__all__ = [
    "compute_axis_edges",
    "compute_rectangles",
    "GridEditor",
    "SLICE_MODES",
    "SliceMode",
    "get_mode",
    "build_even_splits",
    "build_fractions",
    "build_stops",
    "min_gap",
]

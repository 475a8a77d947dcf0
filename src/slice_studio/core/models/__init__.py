"""
Core Models Package

Immutable, validated data models shared by the slicing and archive
subsystems. All models are frozen dataclasses that validate themselves in
__post_init__, so an instance that exists is always well-formed.
"""

from .rect import SliceRect
from .grid import Axis, AxisSplit, MAX_GRID, MIN_GRID
from .entries import ZipEntry
from .slice_item import SliceItem

__all__ = [
    "SliceRect",
    "Axis",
    "AxisSplit",
    "MAX_GRID",
    "MIN_GRID",
    "ZipEntry",
    "SliceItem",
]

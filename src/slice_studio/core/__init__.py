"""
Slice Studio Core Package

Shared data models for the grid slicer and the ZIP archive builder.
"""

from .models import Axis, AxisSplit, SliceItem, SliceRect, ZipEntry

__all__ = [
    "Axis",
    "AxisSplit",
    "SliceItem",
    "SliceRect",
    "ZipEntry",
]

"""
Module: workspace

Purpose:
    Slicing session state: master image, slice grid, processing area.

Key Classes:
    - SlicerSession: One slicing workspace
    - TimelineItem: Record of a slicing pass
"""

from .session import SlicerSession, TimelineItem

__all__ = [
    "SlicerSession",
    "TimelineItem",
]

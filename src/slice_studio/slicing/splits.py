"""
Module: slicing.splits

Purpose:
    Pure helpers for fractional split positions along one grid axis:
    even defaults, stops, fractions, minimum divider gap and breakpoint
    clamping. Every function is O(n) in the slice count so it can run on
    each pointer move while a divider is dragged.

Key Functions:
    - build_even_splits(): Default breakpoints i / n
    - build_stops(): [0, b_1, ..., b_{n-1}, 1]
    - build_fractions(): Consecutive stop differences
    - min_gap(): Minimum spacing between neighboring breakpoints
    - clamp_breakpoint(): Constrain one breakpoint between its neighbors

Dependencies:
    - math (std)

Used By:
    - slicing.editor: GridEditor
    - slicing.bounds_calculator: Fractions feed rectangle computation
"""

from __future__ import annotations

import math
from typing import List, Sequence

MAX_GAP = 0.05
GAP_BUDGET = 0.6


def clamp_value(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper] (upper wins if the range is inverted)."""
    return min(max(value, lower), upper)


def build_even_splits(count: int) -> List[float]:
    """
    Evenly spaced breakpoints for count slices.

    Example:
        >>> build_even_splits(3)
        [0.3333333333333333, 0.6666666666666666]
        >>> build_even_splits(1)
        []
    """
    if count <= 1:
        return []
    return [(i + 1) / count for i in range(count - 1)]


def build_stops(count: int, splits: Sequence[float]) -> List[float]:
    """
    Interval edges for an axis.

    Extra breakpoints beyond count - 1 are ignored and each is clamped
    into [0, 1]. A single-slice axis always yields [0, 1].

    Example:
        >>> build_stops(3, [0.25, 0.5])
        [0, 0.25, 0.5, 1]
    """
    if count <= 1:
        return [0, 1]
    trimmed = [clamp_value(value, 0, 1) for value in list(splits)[: count - 1]]
    return [0, *trimmed, 1]


def build_fractions(stops: Sequence[float]) -> List[float]:
    """
    Size of each interval as a fraction of the axis.

    Example:
        >>> build_fractions([0, 0.25, 1])
        [0.25, 0.75]
    """
    return [max(0, stop - stops[index]) for index, stop in enumerate(stops[1:])]


def min_gap(count: int) -> float:
    """
    Minimum distance between neighboring breakpoints (and from 0 / 1).

    Example:
        >>> min_gap(3)
        0.05
    """
    return min(MAX_GAP, GAP_BUDGET / max(count, 1))


def clamp_breakpoint(
    splits: Sequence[float],
    index: int,
    value: float,
    count: int,
) -> float:
    """
    Constrain a raw breakpoint value between its neighbors.

    The result lies in [prev + gap, next - gap], where prev/next are the
    neighboring breakpoints, or 0/1 at the ends of the list.

    Args:
        splits: Current breakpoints for the axis
        index: Breakpoint being moved
        value: Raw requested position (may be out of range or NaN)
        count: Slice count for the axis (determines the gap)

    Returns:
        Clamped breakpoint position
    """
    gap = min_gap(count)
    lower = 0 if index == 0 else splits[index - 1]
    upper = 1 if index == len(splits) - 1 else splits[index + 1]
    if isinstance(value, float) and math.isnan(value):
        value = splits[index]
    return clamp_value(value, lower + gap, upper - gap)

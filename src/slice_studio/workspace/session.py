"""
Module: workspace.session

Purpose:
    State of one slicing session: the master image, the grid editor, the
    slices cut from the image, and the ordered processing area that
    feeds enhancement and export. The session is an explicit object
    passed to whoever needs it; nothing here is module-global.

Key Classes:
    - SlicerSession: Selection, processing area, export entries
    - TimelineItem: Record of one slicing pass

Dependencies:
    - PIL: Master image
    - slicing: GridEditor, cropper
    - slice_studio.core.models: SliceItem, ZipEntry

Used By:
    - enhance.enhancer: Processing-area enhancement
    - cli: slice command
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from PIL import Image

from slice_studio.core.models import SliceItem, ZipEntry
from slice_studio.slicing.cropper import ImageSource, load_image, slice_image
from slice_studio.slicing.editor import GridEditor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimelineItem:
    """One slicing pass, labelled SH1, SH2, ..."""
    id: str
    label: str
    grid_label: str
    slice_count: int


class SlicerSession:
    """
    Slicing workspace.

    Loading a new master image clears the slice grid but keeps the
    processing area, so slices from several images can be collected
    before export.

    Example:
        >>> session = SlicerSession()
        >>> session.load_image("storyboard.png")
        >>> session.perform_slice()
        >>> session.add_all_to_processing()
        >>> entries = session.export_entries()
        >>> entries[0].name
        '1.png'
    """

    def __init__(
        self,
        editor: Optional[GridEditor] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.editor = editor or GridEditor()
        self._clock = clock
        self._master: Optional[Image.Image] = None
        self._slices: List[SliceItem] = []
        self._processing: List[SliceItem] = []
        self._timeline: List[TimelineItem] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Master image
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def master_image(self) -> Optional[Image.Image]:
        return self._master

    @property
    def image_size(self) -> Optional[tuple[int, int]]:
        return self._master.size if self._master is not None else None

    def load_image(self, source: ImageSource) -> None:
        """Set the master image; clears current slices, keeps the processing area."""
        self._master = load_image(source)
        self._slices = []
        logger.info(f"Loaded master image {self._master.width}x{self._master.height}")

    def perform_slice(self) -> List[SliceItem]:
        """
        Cut the master image along the current grid.

        Returns:
            New slices in row-major order (also stored on the session)

        Raises:
            RuntimeError: If no master image is loaded
        """
        if self._master is None:
            raise RuntimeError("No master image loaded")

        width, height = self._master.size
        rects = self.editor.rectangles(width, height)
        stamp = int(self._clock() * 1000)
        # Pass number keeps ids unique when passes share a millisecond
        pass_number = len(self._timeline) + 1
        self._slices = slice_image(
            self._master, rects, id_prefix=f"slice-{stamp}-{pass_number}"
        )

        self._timeline.append(
            TimelineItem(
                id=f"timeline-{stamp}-{pass_number}",
                label=f"SH{pass_number}",
                grid_label=self.editor.grid_label,
                slice_count=len(self._slices),
            )
        )
        logger.info(f"Sliced {self.editor.grid_label} grid into {len(self._slices)} slices")
        return list(self._slices)

    @property
    def timeline(self) -> List[TimelineItem]:
        return list(self._timeline)

    # ─────────────────────────────────────────────────────────────────────────
    # Slice selection
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def slices(self) -> List[SliceItem]:
        return list(self._slices)

    @property
    def selected_slices(self) -> List[SliceItem]:
        return [s for s in self._slices if s.selected]

    def toggle_selection(self, slice_id: str) -> None:
        self._slices = [
            s.with_selected(not s.selected) if s.id == slice_id else s
            for s in self._slices
        ]

    def toggle_select_all(self) -> None:
        """Select every slice, or clear the selection if all are already selected."""
        all_selected = all(s.selected for s in self._slices)
        self._slices = [s.with_selected(not all_selected) for s in self._slices]

    def select_indices(self, indices: Sequence[int]) -> None:
        """Select slices by 1-based grid position (row-major), clearing others."""
        wanted = {i - 1 for i in indices}
        self._slices = [s.with_selected(s.index in wanted) for s in self._slices]

    # ─────────────────────────────────────────────────────────────────────────
    # Processing area
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def processing_area(self) -> List[SliceItem]:
        return list(self._processing)

    def add_selected_to_processing(self) -> int:
        """Append selected slices not already queued. Returns how many were added."""
        return self._append_to_processing(self.selected_slices)

    def add_all_to_processing(self) -> int:
        """Append every slice not already queued. Returns how many were added."""
        return self._append_to_processing(self._slices)

    def add_to_processing(self, slice_ids: Sequence[str]) -> int:
        """Append slices by id in the given order, skipping unknown or queued ids."""
        by_id = {s.id: s for s in self._slices}
        return self._append_to_processing([by_id[i] for i in slice_ids if i in by_id])

    def _append_to_processing(self, items: Sequence[SliceItem]) -> int:
        existing = {p.id for p in self._processing}
        added = 0
        for item in items:
            if item.id in existing:
                continue
            existing.add(item.id)
            self._processing.append(item)
            added += 1
        return added

    def remove_from_processing(self, slice_id: str) -> None:
        self._processing = [p for p in self._processing if p.id != slice_id]

    def move_processing(self, from_index: int, to_index: int) -> None:
        """
        Reorder the processing area like a drag-and-drop.

        The item at from_index is removed and reinserted at to_index.
        Same-index moves and out-of-range sources are ignored.
        """
        if from_index == to_index or not 0 <= from_index < len(self._processing):
            return
        item = self._processing.pop(from_index)
        self._processing.insert(to_index, item)

    def clear_processing(self) -> None:
        self._processing = []

    def update_item(self, item: SliceItem, *, mirror: bool = False) -> None:
        """
        Replace a processing-area item by id.

        With mirror=True the matching slice in the grid is updated too,
        keeping enhancement results visible in both places.
        """
        self._processing = [item if p.id == item.id else p for p in self._processing]
        if mirror:
            self._slices = [
                item.with_selected(s.selected) if s.id == item.id else s
                for s in self._slices
            ]

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def export_entries(self) -> List[ZipEntry]:
        """
        Archive entries for the processing area in its current order.

        Files are named 1.png, 2.png, ... by position and use the
        enhanced image when one exists.
        """
        return [
            ZipEntry(f"{position}.png", item.output_data)
            for position, item in enumerate(self._processing, start=1)
        ]

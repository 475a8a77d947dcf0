"""
Tests for workspace.session

Test Coverage:
- Loading and slicing the master image, timeline records
- Selection toggles
- Processing area: add, dedup, remove, reorder, clear
- Export entries naming and enhanced-data preference
"""

import zipfile
from io import BytesIO

import pytest
from PIL import Image

from slice_studio.archive import build_zip
from slice_studio.core.models import Axis
from slice_studio.slicing import GridEditor
from slice_studio.workspace import SlicerSession


@pytest.fixture
def session(gradient_image):
    s = SlicerSession(clock=lambda: 1700000000.0)
    s.load_image(gradient_image)
    s.perform_slice()
    return s


def ids(items):
    return [item.id for item in items]


class TestSlicing:

    def test_perform_slice_when_no_image_then_raises_error(self):
        with pytest.raises(RuntimeError, match="No master image"):
            SlicerSession().perform_slice()

    def test_perform_slice_when_default_grid_then_nine_slices(self, session):
        assert len(session.slices) == 9
        assert session.slices[0].id == "slice-1700000000000-1-0"
        assert session.image_size == (300, 300)

    def test_perform_slice_when_repeated_then_timeline_grows(self, session):
        session.editor.select_mode("2x2")
        session.perform_slice()
        labels = [(t.label, t.grid_label, t.slice_count) for t in session.timeline]
        assert labels == [("SH1", "3×3", 9), ("SH2", "2×2", 4)]

    def test_perform_slice_when_custom_editor_then_uses_its_grid(self, gradient_image):
        editor = GridEditor("custom")
        editor.set_grid_size(Axis.ROW, 1)
        editor.set_breakpoints(Axis.COL, [0.5])
        s = SlicerSession(editor)
        s.load_image(gradient_image)
        slices = s.perform_slice()
        assert [(item.width, item.height) for item in slices] == [(150, 300), (150, 300)]

    def test_load_image_when_new_image_then_slices_cleared_processing_kept(self, session):
        session.add_all_to_processing()
        session.load_image(Image.new("RGB", (10, 10)))
        assert session.slices == []
        assert len(session.processing_area) == 9

    def test_perform_slice_when_two_images_same_millisecond_then_all_slices_queued(self):
        s = SlicerSession(clock=lambda: 1000.0)
        s.load_image(Image.new("RGB", (30, 30), "red"))
        s.perform_slice()
        assert s.add_all_to_processing() == 9

        s.load_image(Image.new("RGB", (30, 30), "blue"))
        s.perform_slice()
        assert s.add_all_to_processing() == 9

        queued = s.processing_area
        assert len(queued) == 18
        assert len(set(ids(queued))) == 18
        colors = [Image.open(BytesIO(item.data)).convert("RGB").getpixel((0, 0)) for item in queued]
        assert colors == [(255, 0, 0)] * 9 + [(0, 0, 255)] * 9

    def test_update_item_when_passes_share_a_millisecond_then_mirrors_only_current_grid(self):
        s = SlicerSession(clock=lambda: 1000.0)
        s.load_image(Image.new("RGB", (30, 30), "red"))
        s.perform_slice()
        s.add_all_to_processing()
        s.load_image(Image.new("RGB", (30, 30), "blue"))
        s.perform_slice()

        first_pass_item = s.processing_area[0]
        s.update_item(first_pass_item.with_enhancement(b"better", "m"), mirror=True)

        assert s.processing_area[0].enhanced is True
        assert not any(item.enhanced for item in s.slices)


class TestSelection:

    def test_toggle_selection_when_called_twice_then_deselected(self, session):
        target = session.slices[4].id
        session.toggle_selection(target)
        assert ids(session.selected_slices) == [target]
        session.toggle_selection(target)
        assert session.selected_slices == []

    def test_toggle_select_all_when_partial_then_selects_all(self, session):
        session.toggle_selection(session.slices[0].id)
        session.toggle_select_all()
        assert len(session.selected_slices) == 9
        session.toggle_select_all()
        assert session.selected_slices == []

    def test_select_indices_when_one_based_then_matches_grid_positions(self, session):
        session.select_indices([1, 5, 9])
        assert [s.index for s in session.selected_slices] == [0, 4, 8]


class TestProcessingArea:

    def test_add_selected_when_repeated_then_no_duplicates(self, session):
        session.select_indices([2, 3])
        assert session.add_selected_to_processing() == 2
        assert session.add_selected_to_processing() == 0
        assert [p.index for p in session.processing_area] == [1, 2]

    def test_add_all_when_some_queued_then_appends_rest_in_grid_order(self, session):
        session.select_indices([9])
        session.add_selected_to_processing()
        assert session.add_all_to_processing() == 8
        assert [p.index for p in session.processing_area] == [8, 0, 1, 2, 3, 4, 5, 6, 7]

    def test_add_to_processing_when_ids_then_keeps_given_order(self, session):
        slices = session.slices
        added = session.add_to_processing([slices[6].id, "unknown", slices[2].id, slices[6].id])
        assert added == 2
        assert ids(session.processing_area) == [slices[6].id, slices[2].id]

    def test_remove_from_processing_when_present_then_removed(self, session):
        session.add_all_to_processing()
        victim = session.processing_area[3].id
        session.remove_from_processing(victim)
        assert victim not in ids(session.processing_area)
        assert len(session.processing_area) == 8

    @pytest.mark.parametrize("src, dst, expected", [
        (0, 2, [1, 2, 0, 3]),
        (3, 0, [3, 0, 1, 2]),
        (1, 1, [0, 1, 2, 3]),
        (7, 0, [0, 1, 2, 3]),
    ])
    def test_move_processing_when_dragged_then_spliced(self, gradient_image, src, dst, expected):
        s = SlicerSession(GridEditor("2x2"))
        s.load_image(gradient_image)
        s.perform_slice()
        s.add_all_to_processing()
        s.move_processing(src, dst)
        assert [p.index for p in s.processing_area] == expected

    def test_clear_processing_when_called_then_empty(self, session):
        session.add_all_to_processing()
        session.clear_processing()
        assert session.processing_area == []

    def test_update_item_when_mirrored_then_grid_slice_updated_and_keeps_selection(self, session):
        target = session.slices[0]
        session.toggle_selection(target.id)
        session.add_to_processing([target.id])

        enhanced = session.processing_area[0].with_enhancement(b"better", "nano-banana")
        session.update_item(enhanced, mirror=True)

        assert session.processing_area[0].enhanced is True
        assert session.slices[0].enhanced is True
        assert session.slices[0].selected is True

    def test_update_item_when_not_mirrored_then_grid_untouched(self, session):
        target = session.slices[0]
        session.add_to_processing([target.id])
        session.update_item(target.with_enhancement(b"x", "m"))
        assert session.slices[0].enhanced is False


class TestExportEntries:

    def test_export_entries_when_reordered_then_named_by_position(self, session):
        session.add_to_processing([session.slices[8].id, session.slices[0].id])
        entries = session.export_entries()
        assert [e.name for e in entries] == ["1.png", "2.png"]
        assert entries[0].data == session.slices[8].data

    def test_export_entries_when_enhanced_then_uses_enhanced_bytes(self, session):
        session.add_to_processing([session.slices[0].id])
        session.update_item(session.processing_area[0].with_enhancement(b"better", "m"))
        assert session.export_entries()[0].data == b"better"

    def test_export_entries_when_zipped_then_pngs_readable(self, session):
        session.add_all_to_processing()
        archive = build_zip(session.export_entries())
        with zipfile.ZipFile(BytesIO(archive)) as zf:
            assert zf.testzip() is None
            first = Image.open(BytesIO(zf.read("1.png")))
            assert first.size == (100, 100)

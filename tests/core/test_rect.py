"""
Unit Tests for SliceRect Model

Tests for the SliceRect dataclass describing one grid cell.
"""

import pytest
from PIL import Image

from slice_studio.core.models.rect import SliceRect


class TestSliceRect:
    """Tests for SliceRect dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_valid_then_creates_rect(self):
        """Valid rectangles should be created successfully."""
        r = SliceRect(row=1, col=2, x=200, y=100, width=100, height=50)
        assert (r.row, r.col) == (1, 2)
        assert r.right == 300
        assert r.bottom == 150

    def test_init_when_negative_x_then_raises_error(self):
        with pytest.raises(ValueError, match="x must be >= 0"):
            SliceRect(0, 0, -1, 0, 10, 10)

    def test_init_when_negative_height_then_raises_error(self):
        with pytest.raises(ValueError, match="height must be >= 0"):
            SliceRect(0, 0, 0, 0, 10, -5)

    def test_init_when_negative_grid_position_then_raises_error(self):
        with pytest.raises(ValueError, match="grid position"):
            SliceRect(-1, 0, 0, 0, 10, 10)

    def test_is_empty_when_zero_width_then_true(self):
        assert SliceRect(0, 0, 0, 0, 0, 10).is_empty is True
        assert SliceRect(0, 0, 0, 0, 1, 1).is_empty is False

    # ─────────────────────────────────────────────────────────────────────────
    # Query Method Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_contains_when_on_far_edge_then_false(self):
        """right and bottom edges are exclusive."""
        r = SliceRect(0, 0, 10, 10, 20, 20)
        assert r.contains(10, 10) is True
        assert r.contains(29, 29) is True
        assert r.contains(30, 15) is False
        assert r.contains(15, 30) is False

    def test_overlaps_when_adjacent_then_false(self):
        a = SliceRect(0, 0, 0, 0, 100, 100)
        b = SliceRect(0, 1, 100, 0, 100, 100)
        assert a.overlaps(b) is False
        assert b.overlaps(a) is False

    def test_overlaps_when_sharing_pixels_then_true(self):
        a = SliceRect(0, 0, 0, 0, 100, 100)
        b = SliceRect(0, 1, 99, 99, 10, 10)
        assert a.overlaps(b) is True

    def test_crop_box_when_called_then_returns_pil_box(self):
        r = SliceRect(0, 1, 100, 0, 100, 50)
        assert r.crop_box() == (100, 0, 200, 50)
        cropped = Image.new("RGB", (300, 300)).crop(r.crop_box())
        assert cropped.size == (100, 50)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_to_dict_when_called_then_includes_all_fields(self):
        r = SliceRect(2, 1, 100, 200, 100, 100)
        assert r.to_dict() == {
            "row": 2, "col": 1, "x": 100, "y": 200, "width": 100, "height": 100,
        }

    def test_from_dict_when_valid_then_equals_original(self):
        original = SliceRect(2, 1, 100, 200, 100, 100)
        assert SliceRect.from_dict(original.to_dict()) == original

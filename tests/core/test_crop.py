"""
Tests for CropSpec model.

Test Coverage:
- Edge and box properties
- Zoom validation
- is_within for inside, outside and degenerate rectangles
- clamped_to shrinking and shifting
- String form
"""

import pytest

from photo_framer.core.models import CropSpec


class TestCropSpecProperties:
    """Tests for derived geometry."""

    def test_box_matches_pil_convention(self):
        """Box is (left, top, right, bottom) with exclusive right/bottom."""
        crop = CropSpec(x=100, y=50, width=400, height=300)

        assert crop.right == 500
        assert crop.bottom == 350
        assert crop.box == (100, 50, 500, 350)

    def test_zoom_defaults_to_one(self):
        assert CropSpec(0, 0, 10, 10).zoom == 1.0

    @pytest.mark.parametrize("zoom", [0.05, 2.5, -1.0])
    def test_rejects_out_of_range_zoom(self, zoom):
        """Zoom outside [0.1, 2.0] is rejected."""
        with pytest.raises(ValueError, match="zoom"):
            CropSpec(0, 0, 10, 10, zoom=zoom)

    @pytest.mark.parametrize("zoom", [0.1, 2.0])
    def test_accepts_zoom_bounds(self, zoom):
        assert CropSpec(0, 0, 10, 10, zoom=zoom).zoom == zoom


class TestCropSpecBounds:
    """Tests for bounds checking and clamping."""

    def test_is_within_inside(self):
        assert CropSpec(100, 100, 400, 400).is_within(800, 600)

    def test_is_within_touching_edges(self):
        """Rectangle ending exactly at the image edge is inside."""
        assert CropSpec(400, 200, 400, 400).is_within(800, 600)

    @pytest.mark.parametrize("crop", [
        CropSpec(-1, 0, 100, 100),
        CropSpec(0, -1, 100, 100),
        CropSpec(701, 0, 100, 100),
        CropSpec(0, 501, 100, 100),
    ])
    def test_is_within_outside(self, crop):
        assert not crop.is_within(800, 600)

    @pytest.mark.parametrize("crop", [
        CropSpec(10, 10, 0, 100),
        CropSpec(10, 10, 100, 0),
        CropSpec(10, 10, -5, 100),
    ])
    def test_degenerate_is_never_within(self, crop):
        assert crop.is_degenerate
        assert not crop.is_within(800, 600)

    def test_clamped_to_leaves_valid_crop_unchanged(self):
        crop = CropSpec(100, 100, 400, 400, zoom=0.8)
        assert crop.clamped_to(800, 600) == crop

    def test_clamped_to_shifts_overhanging_crop(self):
        """Crop hanging off the bottom-right is moved back inside."""
        # Arrange
        crop = CropSpec(600, 400, 400, 400)

        # Act
        clamped = crop.clamped_to(800, 600)

        # Assert
        assert clamped == CropSpec(400, 200, 400, 400)
        assert clamped.is_within(800, 600)

    def test_clamped_to_shrinks_oversized_crop(self):
        clamped = CropSpec(-50, -50, 1000, 1000).clamped_to(800, 600)

        assert clamped == CropSpec(0, 0, 800, 600)

    def test_clamped_to_repairs_degenerate_crop(self):
        clamped = CropSpec(900, 10, 0, 0).clamped_to(800, 600)

        assert clamped.width == 1 and clamped.height == 1
        assert clamped.is_within(800, 600)

    def test_clamped_to_keeps_zoom(self):
        assert CropSpec(700, 0, 400, 400, zoom=1.5).clamped_to(800, 600).zoom == 1.5

    def test_clamped_to_rejects_empty_image(self):
        with pytest.raises(ValueError):
            CropSpec(0, 0, 10, 10).clamped_to(0, 600)


class TestCropSpecFormatting:
    """Tests for the readable form used in logs."""

    def test_str(self):
        assert str(CropSpec(1, 2, 30, 40, zoom=0.8)) == "CropSpec(30x40 @ (1,2), zoom=0.80)"

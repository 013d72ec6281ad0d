"""
Tests for framed compositing.

Test Coverage:
- Circle mask geometry
- Photo clipped to the circle, transparent outside, filling it at any radius
- Frame overlay drawn on top of the photo
- Outline fallback when no frame is available
- Determinism of the composite
- Upscaling an existing composite
"""

import math

import pytest
from PIL import Image, ImageChops

from photo_framer.core.models import CropSpec
from photo_framer.framing.config import RenderConfig
from photo_framer.framing.render import (
    RenderError,
    circle_mask,
    composite,
    render_crop,
    render_framed,
    upscale_composite,
)

OUTLINE_RGB = (0x66, 0x7E, 0xEA)
FRAME_RGBA = (0, 160, 0, 255)


def _close(actual, expected, tolerance=4):
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


@pytest.fixture
def cropped(photo) -> Image.Image:
    """Square crop straddling the colour boundary: left half red, right half blue."""
    return render_crop(photo, CropSpec(200, 100, 400, 400), 200)


class TestCircleMask:
    def test_inside_and_outside(self):
        mask = circle_mask(100, 40)

        assert mask.mode == "L"
        assert mask.size == (100, 100)
        assert mask.getpixel((50, 50)) == 255
        assert mask.getpixel((0, 0)) == 0
        assert mask.getpixel((50, 5)) == 0

    def test_area_matches_circle(self):
        mask = circle_mask(200, 80)

        coverage = sum(mask.getdata()) / 255

        assert coverage == pytest.approx(math.pi * 80 ** 2, rel=0.02)


class TestComposite:
    def test_output_size_and_mode(self, cropped, frame_asset):
        result = composite(cropped, frame_asset, 300)

        assert result.size == (300, 300)
        assert result.mode == "RGBA"

    def test_photo_visible_through_cutout(self, cropped, frame_asset, photo):
        """The circle shows the photo; the frame covers the corners."""
        left = photo.getpixel((0, 0))

        result = composite(cropped, frame_asset, 200)

        assert _close(result.getpixel((60, 100)), (*left, 255))
        assert _close(result.getpixel((2, 2)), FRAME_RGBA)

    def test_clipped_to_circle_without_frame(self, cropped, photo):
        """Only pixels inside the circle carry photo content."""
        # Arrange
        config = RenderConfig(circle_fraction=0.35, outline_min_width=0, outline_width_fraction=0)
        left = photo.getpixel((0, 0))
        right = photo.getpixel((799, 0))

        # Act
        result = composite(cropped, None, 200, config=config)

        # Assert: circle radius is 70px around (100, 100)
        assert _close(result.getpixel((50, 100)), (*left, 255))
        assert _close(result.getpixel((150, 100)), (*right, 255))
        assert result.getpixel((20, 100))[3] == 0
        assert result.getpixel((100, 10))[3] == 0
        assert result.getpixel((0, 0))[3] == 0

    def test_photo_is_scaled_to_circle_diameter(self, cropped, photo):
        """The whole crop fits the circle, so both colours sit near its rim."""
        config = RenderConfig(circle_fraction=0.25, outline_min_width=0, outline_width_fraction=0)
        left = photo.getpixel((0, 0))
        right = photo.getpixel((799, 0))

        result = composite(cropped, None, 400, config=config)

        assert _close(result.getpixel((110, 200))[:3], left)
        assert _close(result.getpixel((290, 200))[:3], right)

    @pytest.mark.parametrize("size, fraction", [(999, 0.3), (201, 0.35), (1181, 0.35)])
    def test_photo_fills_circle_with_fractional_radius(self, size, fraction):
        """Every pixel the mask covers is covered by the photo as well."""
        config = RenderConfig(circle_fraction=fraction, outline_min_width=0, outline_width_fraction=0)
        solid = Image.new("RGBA", (64, 64), (10, 200, 30, 255))

        result = composite(solid, None, size, config=config)

        mask = circle_mask(size, config.circle_radius(size))
        assert ImageChops.difference(result.getchannel("A"), mask).getbbox() is None

    def test_outline_drawn_without_frame(self, cropped):
        result = composite(cropped, None, 200)

        assert result.getpixel((100, 1)) == (*OUTLINE_RGB, 255)
        assert result.getpixel((0, 0))[3] == 0
        assert result.getpixel((199, 199))[3] == 0

    def test_outline_width_zero_skips_stroke(self, cropped):
        config = RenderConfig(outline_min_width=0, outline_width_fraction=0)

        result = composite(cropped, None, 200, config=config)

        assert result.getpixel((100, 1))[:3] != OUTLINE_RGB

    def test_frame_scaled_to_canvas(self, cropped, frame_asset):
        result = composite(cropped, frame_asset, 50)
        assert _close(result.getpixel((0, 0)), FRAME_RGBA)

    def test_deterministic(self, cropped, frame_asset):
        first = composite(cropped, frame_asset, 200)
        second = composite(cropped, frame_asset, 200)

        assert first.tobytes() == second.tobytes()

    def test_rejects_bad_size(self, cropped):
        with pytest.raises(RenderError):
            composite(cropped, None, 0)


class TestRenderFramed:
    def test_crop_then_composite(self, photo, frame_asset):
        result = render_framed(photo, CropSpec(200, 100, 400, 400), frame_asset, 240)

        assert result.size == (240, 240)
        assert _close(result.getpixel((0, 0)), FRAME_RGBA)

    def test_invalid_crop_raises(self, photo, frame_asset):
        with pytest.raises(RenderError):
            render_framed(photo, CropSpec(700, 500, 400, 400), frame_asset, 240)


class TestUpscaleComposite:
    def test_resizes(self, cropped, frame_asset):
        preview = composite(cropped, frame_asset, 100)

        result = upscale_composite(preview, 300)

        assert result.size == (300, 300)

    def test_same_size_returns_copy(self, cropped):
        preview = composite(cropped, None, 100)

        result = upscale_composite(preview, 100)

        assert result is not preview
        assert result.tobytes() == preview.tobytes()

    def test_rejects_bad_size(self, cropped):
        with pytest.raises(RenderError):
            upscale_composite(cropped, -1)

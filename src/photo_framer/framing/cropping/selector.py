"""
Module: framing.cropping.selector

Purpose:
    The pipeline's view of the crop widget. The pipeline only needs a
    CropSpec on demand; ViewportCropSelector provides one from a pan/zoom
    model of a fixed square viewport laid over the photo, and is shared by
    the interactive Qt crop view and by headless callers.

Key Classes:
    - CropSelector: Abstract interface producing CropSpec
    - ViewportCropSelector: Headless pan/zoom model

Dependencies:
    - core.models.crop: CropSpec

Used By:
    - gui.widgets.crop_view: Interactive crop widget
    - framing.controller callers (tests, scripts)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Tuple

from photo_framer.core.models.crop import CropSpec, MIN_ZOOM, MAX_ZOOM

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_SIZE = 320
DEFAULT_ZOOM = 0.8
DEFAULT_ZOOM_STEP = 0.1


class CropSelector(ABC):
    """
    Anything that can report the user's current square crop.

    Implementations must return a square rectangle inside the image the
    selector was bound to; the compositor does not enforce squareness.
    """

    @abstractmethod
    def current_crop(self) -> CropSpec:
        """
        Get the crop for the current pan/zoom.

        Returns:
            Square CropSpec in source pixel coordinates
        """

    @abstractmethod
    def reset(self) -> None:
        """Return to the default pan/zoom."""


class ViewportCropSelector(CropSelector):
    """
    Pan/zoom model of a square viewport over an image.

    Zoom is display pixels per source pixel, so the crop side in source
    pixels is viewport_size / zoom. The viewport is never allowed to leave
    the image: zoom has a floor that keeps the crop no larger than the
    shorter image side, and the centre is clamped after every change.

    Attributes:
        image_size: (width, height) of the bound image
        viewport_size: Viewport side in display pixels

    Example:
        >>> selector = ViewportCropSelector((800, 600), viewport_size=320, zoom=0.8)
        >>> selector.current_crop()
        CropSpec(x=200, y=100, width=400, height=400, zoom=0.8)
    """

    def __init__(
        self,
        image_size: Tuple[int, int],
        *,
        viewport_size: int = DEFAULT_VIEWPORT_SIZE,
        zoom: float = DEFAULT_ZOOM,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
    ) -> None:
        width, height = image_size
        if width <= 0 or height <= 0:
            raise ValueError(f"Image has no area: {width}x{height}")
        if viewport_size <= 0:
            raise ValueError(f"viewport_size must be positive: {viewport_size}")
        if not MIN_ZOOM <= min_zoom <= max_zoom <= MAX_ZOOM:
            raise ValueError(f"Invalid zoom bounds: {min_zoom}, {max_zoom}")

        self._width = width
        self._height = height
        self._viewport = viewport_size
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._initial_zoom = zoom

        self._zoom = self._clamp_zoom(zoom)
        self._cx = width / 2
        self._cy = height / 2

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def image_size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def viewport_size(self) -> int:
        return self._viewport

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def center(self) -> Tuple[float, float]:
        """Viewport centre in source pixels."""
        return (self._cx, self._cy)

    @property
    def effective_min_zoom(self) -> float:
        """
        Lowest zoom at which the viewport is still covered by the image.

        Capped at max_zoom for images smaller than the viewport; those are
        handled by limiting the crop side to the shorter image side.
        """
        cover = self._viewport / min(self._width, self._height)
        return min(max(self._min_zoom, cover), self._max_zoom)

    @property
    def crop_side(self) -> float:
        """Crop side in source pixels for the current zoom."""
        return min(self._viewport / self._zoom, min(self._width, self._height))

    # ─────────────────────────────────────────────────────────────────────────
    # Gestures
    # ─────────────────────────────────────────────────────────────────────────

    def set_zoom(self, zoom: float) -> float:
        """
        Set zoom, clamped to [effective_min_zoom, max_zoom].

        Keeps the viewport centre where it is (re-clamped to the image).

        Returns:
            The zoom actually applied
        """
        self._zoom = self._clamp_zoom(zoom)
        self._clamp_center()
        return self._zoom

    def zoom_in(self, step: float = DEFAULT_ZOOM_STEP) -> float:
        return self.set_zoom(self._zoom + step)

    def zoom_out(self, step: float = DEFAULT_ZOOM_STEP) -> float:
        return self.set_zoom(self._zoom - step)

    def scale_zoom(self, factor: float) -> float:
        """Multiply zoom by factor (pinch and wheel gestures)."""
        if factor <= 0:
            raise ValueError(f"factor must be positive: {factor}")
        return self.set_zoom(self._zoom * factor)

    def pan_by(self, dx: float, dy: float) -> None:
        """
        Drag the image by (dx, dy) viewport pixels.

        Dragging right moves the image right, so the viewport centre moves
        left in source coordinates.
        """
        self._cx -= dx / self._zoom
        self._cy -= dy / self._zoom
        self._clamp_center()

    def center_on(self, x: float, y: float) -> None:
        """Centre the viewport on a source pixel (clamped)."""
        self._cx = x
        self._cy = y
        self._clamp_center()

    def reset(self) -> None:
        self._zoom = self._clamp_zoom(self._initial_zoom)
        self._cx = self._width / 2
        self._cy = self._height / 2
        logger.debug(f"Crop reset to zoom {self._zoom:.2f}")

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    def current_crop(self) -> CropSpec:
        min_side = min(self._width, self._height)
        side = max(1, min(round(self.crop_side), min_side))
        x = round(self._cx - side / 2)
        y = round(self._cy - side / 2)
        x = max(0, min(x, self._width - side))
        y = max(0, min(y, self._height - side))
        return CropSpec(x=x, y=y, width=side, height=side, zoom=self._zoom)

    def image_offset(self) -> Tuple[float, float]:
        """
        Position of the image's top-left corner in viewport coordinates.

        Used by views to paint the image scaled by zoom under the viewport.
        """
        half = self._viewport / 2
        return (half - self._cx * self._zoom, half - self._cy * self._zoom)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _clamp_zoom(self, zoom: float) -> float:
        return max(self.effective_min_zoom, min(zoom, self._max_zoom))

    def _clamp_center(self) -> None:
        half = self.crop_side / 2
        self._cx = max(half, min(self._cx, self._width - half))
        self._cy = max(half, min(self._cy, self._height - half))

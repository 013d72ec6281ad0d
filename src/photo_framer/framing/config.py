"""
Module: framing.config

Purpose:
    Configuration dataclass for the framing pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - RenderConfig: Output sizes, circle geometry, fallback outline,
      export naming and crop selector defaults

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - framing.render.compositor: Circle and outline geometry
    - framing.controller: Preview/download sizes, export naming
    - gui.main_window: Crop view defaults
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from photo_framer.core.models.crop import MIN_ZOOM, MAX_ZOOM

# Preview canvas side; also the crop output size the preview is built from
DEFAULT_PREVIEW_SIZE = 1200
# Native size of the frame artwork
DEFAULT_DOWNLOAD_SIZE = 3375


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for rendering and exporting a framed photo (immutable).

    circle_fraction is tied to the frame artwork: it must match the radius of
    the transparent cutout in the frame, as a fraction of the frame's side.
    Both preview and download renders read it from the same instance, so the
    geometry stays consistent within a session.

    Attributes:
        preview_size: Canvas side for the on-screen preview
        download_size: Canvas side for the saved PNG
        circle_fraction: Circle radius as a fraction of the canvas side
        outline_color: Stroke colour used when no frame is available
        outline_min_width: Minimum outline stroke width in pixels
        outline_width_fraction: Outline width as a fraction of the canvas side
        product_name: Prefix of exported file names
        png_compress_level: zlib level for PNG export (lossless at any level)
        viewport_size: Side of the crop viewport in display pixels
        default_zoom: Zoom applied when an image is first bound or reset
        min_zoom: Lower zoom bound
        max_zoom: Upper zoom bound
        zoom_step: Increment for zoom in/out buttons
        frame_path: Frame overlay to load at startup (None = bundled asset)

    Example:
        >>> config = RenderConfig(circle_fraction=0.35)
        >>> config.circle_radius(1200)
        420.0
    """

    # Output
    preview_size: int = DEFAULT_PREVIEW_SIZE
    download_size: int = DEFAULT_DOWNLOAD_SIZE

    # Circle geometry
    circle_fraction: float = 0.5

    # Fallback border when the frame is missing
    outline_color: str = "#667eea"
    outline_min_width: int = 4
    outline_width_fraction: float = 0.005

    # Export
    product_name: str = "donance-s-pro-photo"
    png_compress_level: int = 6

    # Crop selector
    viewport_size: int = 320
    default_zoom: float = 0.8
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    zoom_step: float = 0.1

    # Assets
    frame_path: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.preview_size <= 0:
            raise ValueError(f"preview_size must be positive: {self.preview_size}")
        if self.download_size <= 0:
            raise ValueError(f"download_size must be positive: {self.download_size}")
        if not 0 < self.circle_fraction <= 0.5:
            raise ValueError(f"circle_fraction must be in (0, 0.5]: {self.circle_fraction}")
        if self.outline_min_width < 0:
            raise ValueError(f"outline_min_width must be non-negative: {self.outline_min_width}")
        if self.outline_width_fraction < 0:
            raise ValueError(f"outline_width_fraction must be non-negative: {self.outline_width_fraction}")
        if not self.product_name or any(c in self.product_name for c in '/\\:'):
            raise ValueError(f"product_name must be a plain file name prefix: {self.product_name!r}")
        if not 0 <= self.png_compress_level <= 9:
            raise ValueError(f"png_compress_level must be 0-9: {self.png_compress_level}")
        if self.viewport_size <= 0:
            raise ValueError(f"viewport_size must be positive: {self.viewport_size}")
        if not MIN_ZOOM <= self.min_zoom <= self.max_zoom <= MAX_ZOOM:
            raise ValueError(
                f"zoom bounds must satisfy {MIN_ZOOM} <= min <= max <= {MAX_ZOOM}: "
                f"{self.min_zoom}, {self.max_zoom}"
            )
        if not self.min_zoom <= self.default_zoom <= self.max_zoom:
            raise ValueError(f"default_zoom outside zoom bounds: {self.default_zoom}")
        if self.zoom_step <= 0:
            raise ValueError(f"zoom_step must be positive: {self.zoom_step}")

    def circle_radius(self, output_size: int) -> float:
        """Photo circle radius in pixels for a canvas of the given side."""
        return self.circle_fraction * output_size

    def outline_width(self, output_size: int) -> int:
        """Fallback outline stroke width in pixels, scaled with the canvas."""
        return max(self.outline_min_width, round(output_size * self.outline_width_fraction))

    def with_frame_path(self, frame_path: Optional[Path]) -> RenderConfig:
        """Return a copy using a different frame overlay."""
        return replace(self, frame_path=Path(frame_path) if frame_path else None)

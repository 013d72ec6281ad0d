"""
Module: crop

Purpose:
    Provides the CropSpec dataclass - the square region of a source photo
    that becomes the framed picture, expressed in source pixel coordinates,
    plus the zoom the user selected it at.

Key Functions:
    - CropSpec.is_within(w, h): Check the rectangle lies inside an image
    - CropSpec.clamped_to(w, h): Repair the rectangle to fit an image
    - CropSpec.box: Pillow-style (left, top, right, bottom) tuple

Dependencies:
    - dataclasses (std)

Used By:
    - framing.cropping.selector: Produces CropSpec from pan/zoom state
    - framing.render.cropper: Projects the rectangle onto the output canvas
    - framing.controller: Clamps before rendering
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

MIN_ZOOM = 0.1
MAX_ZOOM = 2.0


@dataclass(frozen=True, slots=True)
class CropSpec:
    """
    Crop rectangle in source image pixels.

    The region is [x, x + width) x [y, y + height). Geometry is NOT validated
    on construction: consumers decide whether to reject (render_crop raises
    RenderError) or repair (clamped_to) a rectangle that is degenerate or
    falls outside the image.

    Attributes:
        x: Left edge (inclusive)
        y: Top edge (inclusive)
        width: Rectangle width in pixels
        height: Rectangle height in pixels
        zoom: Display zoom the rectangle was chosen at, in [0.1, 2.0]

    Invariants:
        - MIN_ZOOM <= zoom <= MAX_ZOOM

    Example:
        >>> crop = CropSpec(x=100, y=100, width=400, height=400)
        >>> crop.box
        (100, 100, 500, 500)
        >>> crop.is_within(800, 600)
        True
    """

    x: int
    y: int
    width: int
    height: int
    zoom: float = 1.0

    def __post_init__(self) -> None:
        """Validate zoom on construction."""
        if not MIN_ZOOM <= self.zoom <= MAX_ZOOM:
            raise ValueError(
                f"zoom must be within [{MIN_ZOOM}, {MAX_ZOOM}]: {self.zoom}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def right(self) -> int:
        """X-coordinate of right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Y-coordinate of bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) as used by PIL."""
        return (self.x, self.y, self.right, self.bottom)

    @property
    def is_degenerate(self) -> bool:
        """True if the rectangle has no area."""
        return self.width <= 0 or self.height <= 0

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def is_within(self, image_width: int, image_height: int) -> bool:
        """
        Check the rectangle is non-empty and inside an image.

        Args:
            image_width: Source image width in pixels
            image_height: Source image height in pixels

        Returns:
            True if 0 <= x, 0 <= y, right <= image_width, bottom <= image_height
            and the rectangle has non-zero area.
        """
        if self.is_degenerate:
            return False
        return (
            self.x >= 0
            and self.y >= 0
            and self.right <= image_width
            and self.bottom <= image_height
        )

    def clamped_to(self, image_width: int, image_height: int) -> CropSpec:
        """
        Return a copy shrunk and shifted to fit inside an image.

        Width and height are clamped to [1, image size]; the origin is then
        moved so the whole rectangle lies inside the image.

        Args:
            image_width: Source image width in pixels
            image_height: Source image height in pixels

        Returns:
            New CropSpec satisfying is_within(image_width, image_height)

        Raises:
            ValueError: If the image itself has no area
        """
        if image_width <= 0 or image_height <= 0:
            raise ValueError(f"Image has no area: {image_width}x{image_height}")

        width = max(1, min(self.width, image_width))
        height = max(1, min(self.height, image_height))
        x = max(0, min(self.x, image_width - width))
        y = max(0, min(self.y, image_height - height))
        return CropSpec(x=x, y=y, width=width, height=height, zoom=self.zoom)

    def __str__(self) -> str:
        return f"CropSpec({self.width}x{self.height} @ ({self.x},{self.y}), zoom={self.zoom:.2f})"

"""
Module: framing.render.cropper

Purpose:
    Project a CropSpec rectangle from the source photo onto a square
    output canvas with high-quality resampling. Validates the rectangle
    instead of silently producing black or garbage pixels.

Key Functions:
    - render_crop(): Crop + Lanczos resample in one pass

Key Classes:
    - RenderError: Invalid crop geometry or output size

Dependencies:
    - PIL: Resampling
    - core.models: CropSpec, SourceImage

Used By:
    - framing.render.compositor: render_framed()
    - framing.controller: Preview and download renders
"""

from __future__ import annotations

import logging
from typing import Union

from PIL import Image

from photo_framer.core.models import CropSpec, SourceImage

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS


class RenderError(Exception):
    """Crop geometry or output size cannot be rendered."""
    pass


def _bitmap_of(source: Union[SourceImage, Image.Image]) -> Image.Image:
    if isinstance(source, SourceImage):
        return source.bitmap
    return source


def render_crop(
    source: Union[SourceImage, Image.Image],
    crop: CropSpec,
    output_size: int,
) -> Image.Image:
    """
    Render the cropped region as a square bitmap.

    The rectangle is scaled straight onto output_size x output_size; no
    aspect correction is applied, so a non-square crop is stretched.

    Args:
        source: Source photo (or its bitmap)
        crop: Region in source pixel coordinates
        output_size: Side of the output square in pixels

    Returns:
        New RGBA image of exactly output_size x output_size

    Raises:
        RenderError: If the crop has no area, leaves the image, or
                     output_size is not positive

    Example:
        >>> cropped = render_crop(source, CropSpec(100, 100, 400, 400), 2400)
        >>> cropped.size
        (2400, 2400)
    """
    if output_size <= 0:
        raise RenderError(f"output_size must be positive: {output_size}")

    bitmap = _bitmap_of(source)

    if crop.is_degenerate:
        raise RenderError(f"Crop has no area: {crop}")
    if not crop.is_within(bitmap.width, bitmap.height):
        raise RenderError(
            f"Crop {crop} exceeds image bounds {bitmap.width}x{bitmap.height}"
        )

    if bitmap.mode != "RGBA":
        bitmap = bitmap.convert("RGBA")

    logger.debug(f"Rendering {crop} to {output_size}x{output_size}")
    return bitmap.resize((output_size, output_size), RESAMPLE, box=crop.box)

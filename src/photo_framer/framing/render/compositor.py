"""
Module: framing.render.compositor

Purpose:
    Build the final framed picture: the cropped photo clipped to a centred
    circle, with the frame overlay drawn on top (or a plain outline when
    the frame is unavailable).

Key Functions:
    - composite(): Circle clip + frame/outline at one output size
    - render_framed(): render_crop() followed by composite()
    - upscale_composite(): Download fallback from an existing preview

Dependencies:
    - PIL: Drawing, masking, alpha compositing
    - framing.config: Circle and outline geometry

Used By:
    - framing.controller: Preview and download renders
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

from PIL import Image, ImageChops, ImageDraw

from photo_framer.core.models import CropSpec, FrameAsset, SourceImage
from photo_framer.framing.config import RenderConfig

from .cropper import RESAMPLE, RenderError, render_crop

logger = logging.getLogger(__name__)

# Circle mask is drawn this many times larger than box-filtered down
MASK_SUPERSAMPLE = 4
# Cap on the supersampled mask side to bound memory on download renders
MAX_MASK_SIDE = 8192

_DEFAULT_CONFIG = RenderConfig()


def circle_mask(output_size: int, radius: float) -> Image.Image:
    """
    Anti-aliased circular mask centred in a square canvas.

    The edge is box-filtered from a supersampled drawing, so a pixel gets
    coverage only if some of its area is inside the circle.

    Args:
        output_size: Canvas side in pixels
        radius: Circle radius in pixels

    Returns:
        Mode "L" image, 255 inside the circle, 0 outside
    """
    scale = max(1, min(MASK_SUPERSAMPLE, MAX_MASK_SIDE // output_size))
    side = output_size * scale
    center = side / 2
    r = radius * scale

    mask = Image.new("L", (side, side), 0)
    draw = ImageDraw.Draw(mask)
    draw.ellipse((center - r, center - r, center + r - 1, center + r - 1), fill=255)

    if scale > 1:
        mask = mask.resize((output_size, output_size), Image.Resampling.BOX)
    return mask


def composite(
    cropped: Image.Image,
    frame: Optional[FrameAsset],
    output_size: int,
    *,
    config: RenderConfig = _DEFAULT_CONFIG,
) -> Image.Image:
    """
    Composite a cropped photo into the frame.

    Layers, bottom to top:
    1. Transparent canvas of output_size x output_size
    2. Cropped photo scaled to cover the circle, centred, clipped to it
    3. Frame scaled to the full canvas, unclipped; or, if frame is None,
       an outline ring just outside the circle

    Args:
        cropped: Square cropped photo (any size; it is rescaled)
        frame: Frame overlay, or None to draw the fallback outline
        output_size: Canvas side in pixels
        config: Circle fraction and outline style

    Returns:
        New RGBA image of output_size x output_size

    Raises:
        RenderError: If output_size is not positive
    """
    if output_size <= 0:
        raise RenderError(f"output_size must be positive: {output_size}")

    radius = config.circle_radius(output_size)
    # Photo square must cover every pixel the mask touches
    center = output_size / 2
    offset = max(0, math.floor(center - radius))
    diameter = max(1, min(output_size, math.ceil(center + radius)) - offset)

    photo = cropped if cropped.mode == "RGBA" else cropped.convert("RGBA")
    if photo.size != (diameter, diameter):
        photo = photo.resize((diameter, diameter), RESAMPLE)

    layer = Image.new("RGBA", (output_size, output_size), (0, 0, 0, 0))
    layer.paste(photo, (offset, offset))

    # Clip: photo alpha scaled by circle coverage
    mask = circle_mask(output_size, radius)
    layer.putalpha(ImageChops.multiply(layer.getchannel("A"), mask))

    if frame is not None:
        overlay = frame.bitmap
        if overlay.mode != "RGBA":
            overlay = overlay.convert("RGBA")
        if overlay.size != (output_size, output_size):
            overlay = overlay.resize((output_size, output_size), RESAMPLE)
        result = Image.alpha_composite(layer, overlay)
        logger.debug(f"Frame drawn on {output_size}px canvas")
    else:
        result = layer
        _draw_outline(result, radius, config)
        logger.debug(f"Default border drawn on {output_size}px canvas")

    return result


def _draw_outline(canvas: Image.Image, radius: float, config: RenderConfig) -> None:
    """
    Stroke the fallback ring around the photo circle, kept inside the canvas.

    ImageDraw strokes inward from the bounding box, so the ring spans
    [outer - width, outer].
    """
    size = canvas.width
    width = config.outline_width(size)
    if width <= 0:
        return
    center = size / 2
    outer = min(radius + width, size / 2)
    draw = ImageDraw.Draw(canvas)
    draw.ellipse(
        (center - outer, center - outer, center + outer - 1, center + outer - 1),
        outline=config.outline_color,
        width=width,
    )


def render_framed(
    source: Union[SourceImage, Image.Image],
    crop: CropSpec,
    frame: Optional[FrameAsset],
    output_size: int,
    *,
    config: RenderConfig = _DEFAULT_CONFIG,
) -> Image.Image:
    """
    Crop and composite at one output size.

    Args:
        source: Source photo
        crop: Region to frame
        frame: Frame overlay or None
        output_size: Canvas side in pixels
        config: Render configuration

    Returns:
        Composite RGBA image

    Raises:
        RenderError: If the crop or size is invalid
    """
    cropped = render_crop(source, crop, output_size)
    return composite(cropped, frame, output_size, config=config)


def upscale_composite(preview: Image.Image, output_size: int) -> Image.Image:
    """
    Resize an existing composite to a new output size.

    Lower quality than re-rendering from the source; used only when the
    source photo is no longer available.

    Raises:
        RenderError: If output_size is not positive
    """
    if output_size <= 0:
        raise RenderError(f"output_size must be positive: {output_size}")
    if preview.size == (output_size, output_size):
        return preview.copy()
    logger.warning(
        f"Upscaling {preview.width}px preview to {output_size}px; "
        "quality is limited by the preview"
    )
    return preview.resize((output_size, output_size), RESAMPLE)

"""
Module: framing.render

Purpose:
    Rendering of the framed picture: crop projection, circular clip and
    frame overlay, at preview or download resolution.

Key Functions:
    - render_crop(): Square crop at an output size
    - composite(): Circle clip + frame or outline
    - render_framed(): Both steps
    - upscale_composite(): Fallback when the source is gone

Key Classes:
    - RenderError: Invalid crop geometry

Dependencies:
    - PIL: Resampling and drawing

Used By:
    - framing.controller
"""

from .cropper import RenderError, render_crop
from .compositor import composite, render_framed, upscale_composite, circle_mask

__all__ = [
    "RenderError",
    "render_crop",
    "composite",
    "render_framed",
    "upscale_composite",
    "circle_mask",
]

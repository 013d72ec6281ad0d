"""
Module: framing.cropping

Purpose:
    Crop selection contract between the interactive widget and the
    rendering pipeline.

Key Classes:
    - CropSelector: Interface returning a square CropSpec
    - ViewportCropSelector: Headless pan/zoom implementation

Used By:
    - gui.widgets.crop_view
"""

from .selector import CropSelector, ViewportCropSelector

__all__ = [
    "CropSelector",
    "ViewportCropSelector",
]

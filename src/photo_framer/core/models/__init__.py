"""
Core Models Package

Immutable data models shared by the framing pipeline and the GUI.

All models are frozen dataclasses so they can be handed to worker threads
and kept in a session as-is.
"""

from .crop import CropSpec, MIN_ZOOM, MAX_ZOOM
from .images import SourceImage, FrameAsset

__all__ = [
    "CropSpec",
    "MIN_ZOOM",
    "MAX_ZOOM",
    "SourceImage",
    "FrameAsset",
]

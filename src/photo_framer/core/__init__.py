"""
Core Package

Data models used across the framing pipeline and GUI.

Subpackages:
    - models: CropSpec, SourceImage, FrameAsset
"""

from .models import CropSpec, SourceImage, FrameAsset

__all__ = [
    "CropSpec",
    "SourceImage",
    "FrameAsset",
]

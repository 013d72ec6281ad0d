"""
Module: framing.loading

Purpose:
    Decoding of the user's photo and of the frame overlay.

Key Functions:
    - load_image(): Decode uploaded bytes into a SourceImage
    - load_image_file(): Read and decode a photo from disk
    - load_frame_asset(): Decode the frame overlay

Key Classes:
    - FrameAssetLoader: Background startup load of the frame
    - DecodeError: Rejected upload
    - FrameLoadError: Missing frame (non-fatal)

Dependencies:
    - PIL: Image decoding

Used By:
    - framing.controller
    - gui.main_window
"""

from .loader import (
    DecodeError,
    load_image,
    load_image_file,
    guess_content_type,
    is_image_content_type,
)
from .frame import FrameAssetLoader, FrameLoadError, load_frame_asset, default_frame_path

__all__ = [
    "DecodeError",
    "load_image",
    "load_image_file",
    "guess_content_type",
    "is_image_content_type",
    "FrameAssetLoader",
    "FrameLoadError",
    "load_frame_asset",
    "default_frame_path",
]

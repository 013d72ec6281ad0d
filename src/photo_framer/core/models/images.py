"""
Module: images

Purpose:
    Immutable containers for the two decoded bitmaps a framing session
    works with: the user's photo (SourceImage) and the decorative frame
    overlay (FrameAsset).

Key Classes:
    - SourceImage: Uploaded photo, bitmap plus raw encoded bytes
    - FrameAsset: Decoded frame overlay and where it came from

Dependencies:
    - PIL.Image: Bitmaps

Used By:
    - framing.loading: Construction
    - framing.render: Cropping and compositing
    - framing.session: Session ownership
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image


@dataclass(frozen=True)
class SourceImage:
    """
    The user's uploaded photo (immutable).

    The bitmap is already EXIF-transposed so (width, height) are the upright
    dimensions the crop selector works in.

    Attributes:
        bitmap: Decoded RGBA image
        data: Raw encoded bytes as uploaded
        format: Pillow format name, e.g. "JPEG"
        content_type: Declared or guessed MIME type
        name: Original file name, if known
    """

    bitmap: Image.Image = field(repr=False, compare=False)
    data: bytes = field(repr=False)
    format: Optional[str] = None
    content_type: Optional[str] = None
    name: Optional[str] = None

    @property
    def width(self) -> int:
        return self.bitmap.width

    @property
    def height(self) -> int:
        return self.bitmap.height

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return self.bitmap.size

    @property
    def byte_size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class FrameAsset:
    """
    Decorative frame overlay (read-only for the life of the app).

    Expected to be square with a transparent circular cutout matching the
    configured circle fraction; the alignment is a property of the artwork.

    Attributes:
        bitmap: Decoded RGBA image
        path: File the frame was loaded from
    """

    bitmap: Image.Image = field(repr=False, compare=False)
    path: Path

    @property
    def size(self) -> Tuple[int, int]:
        return self.bitmap.size

    @property
    def is_square(self) -> bool:
        return self.bitmap.width == self.bitmap.height

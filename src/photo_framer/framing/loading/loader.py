"""
Module: framing.loading.loader

Purpose:
    Decode user-supplied photo bytes into a SourceImage. Rejects anything
    that is not declared as an image before decoding, then lets Pillow
    decide whether the bytes are a usable raster.

Key Functions:
    - load_image(): Decode bytes with a declared content type
    - load_image_file(): Read and decode a file from disk
    - guess_content_type(): MIME type from a file name

Key Classes:
    - DecodeError: Upload is not an acceptable, decodable image

Dependencies:
    - PIL: Decoding, EXIF transpose
    - mimetypes (std): Content type guessing

Used By:
    - framing.controller: Upload task
    - gui.main_window: File dialog / drag-and-drop
"""

from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from photo_framer.core.models import SourceImage

logger = logging.getLogger(__name__)

IMAGE_FAMILY = "image/"


class DecodeError(Exception):
    """Upload is not an accepted or decodable image."""
    pass


def guess_content_type(name: Optional[str]) -> Optional[str]:
    """Guess a MIME type from a file name, or None if unknown."""
    if not name:
        return None
    content_type, _ = mimetypes.guess_type(name)
    return content_type


def is_image_content_type(content_type: Optional[str]) -> bool:
    """True if the MIME type belongs to the image family."""
    return bool(content_type) and content_type.lower().startswith(IMAGE_FAMILY)


def load_image(
    data: bytes,
    content_type: Optional[str] = None,
    *,
    name: Optional[str] = None,
) -> SourceImage:
    """
    Decode an uploaded photo.

    The declared content type (or one guessed from ``name``) must be in the
    image/ family; otherwise the upload is rejected without decoding. The
    decoded bitmap is EXIF-transposed and converted to RGBA.

    Args:
        data: Raw encoded bytes
        content_type: Declared MIME type, e.g. "image/jpeg"
        name: Original file name, used to guess a missing content type

    Returns:
        SourceImage with bitmap, bytes and metadata

    Raises:
        DecodeError: If the type is not image/*, or bytes cannot be decoded

    Example:
        >>> source = load_image(jpeg_bytes, "image/jpeg")
        >>> source.size
        (800, 600)
    """
    if content_type is None:
        content_type = guess_content_type(name)

    if not is_image_content_type(content_type):
        raise DecodeError(
            f"Please select a valid image file (got {content_type or 'unknown type'})."
        )

    if not data:
        raise DecodeError("The selected file is empty.")

    try:
        with Image.open(io.BytesIO(data)) as opened:
            opened.load()
            image_format = opened.format
            upright = ImageOps.exif_transpose(opened)
            bitmap = upright.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not read image: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        # Truncated or corrupt files surface as OSError/SyntaxError from plugins
        raise DecodeError(f"Image data is corrupt: {e}") from e

    if bitmap.width == 0 or bitmap.height == 0:
        raise DecodeError("Image has no pixels.")

    source = SourceImage(
        bitmap=bitmap,
        data=bytes(data),
        format=image_format,
        content_type=content_type,
        name=name,
    )
    logger.info(
        f"Loaded {image_format or 'image'} {source.width}x{source.height} "
        f"({source.byte_size} bytes){f' from {name}' if name else ''}"
    )
    return source


def load_image_file(path: Path) -> SourceImage:
    """
    Read a photo from disk and decode it.

    Args:
        path: Image file path

    Returns:
        SourceImage

    Raises:
        DecodeError: If the file cannot be read or is not an image
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Could not read {path.name}: {e}") from e

    return load_image(data, guess_content_type(path.name), name=path.name)

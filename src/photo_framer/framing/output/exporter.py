"""
Module: framing.output.exporter

Purpose:
    Encode the final composite as a lossless PNG and save it under a
    timestamped name. Terminal step of the pipeline; failures are reported,
    never retried.

Key Functions:
    - encode_png(): Composite -> PNG bytes
    - export_filename(): "<product>-YYYY-MM-DDTHH-MM-SS.png"
    - save_png(): Write bytes without overwriting an existing file
    - export_composite(): Encode + save

Key Classes:
    - EncodeError: Encoding or writing failed

Dependencies:
    - PIL: PNG encoder

Used By:
    - framing.controller: Download task
"""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)

PNG_SUFFIX = ".png"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
MAX_NAME_ATTEMPTS = 1000


class EncodeError(Exception):
    """Composite could not be encoded or written."""
    pass


def encode_png(image: Image.Image, *, compress_level: int = 6) -> bytes:
    """
    Encode an image as PNG.

    PNG is lossless at every compress_level; the level only trades
    encode time for file size.

    Args:
        image: Composite to encode
        compress_level: zlib level 0-9

    Returns:
        PNG file bytes

    Raises:
        EncodeError: If the encoder fails
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG", compress_level=compress_level)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode PNG: {e}") from e
    data = buffer.getvalue()
    logger.debug(f"Encoded {image.width}x{image.height} PNG ({len(data)} bytes)")
    return data


def export_filename(product: str, timestamp: Optional[datetime] = None) -> str:
    """
    Build the download file name.

    Args:
        product: Product name prefix
        timestamp: Time of export; defaults to now. Naive values are taken
                   as UTC, aware values are converted to UTC.

    Returns:
        e.g. "donance-s-pro-photo-2026-10-19T14-03-59.png"
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    elif timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return f"{product}-{timestamp.strftime(TIMESTAMP_FORMAT)}{PNG_SUFFIX}"


def _available_path(directory: Path, filename: str) -> Path:
    candidate = directory / filename
    if not candidate.exists():
        return candidate
    stem = candidate.stem
    for n in range(1, MAX_NAME_ATTEMPTS):
        candidate = directory / f"{stem} ({n}){PNG_SUFFIX}"
        if not candidate.exists():
            return candidate
    raise EncodeError(f"Too many files named {filename} in {directory}")


def save_png(data: bytes, directory: Path, filename: str) -> Path:
    """
    Write PNG bytes into a directory.

    Creates the directory if needed. An existing file is never overwritten:
    " (1)", " (2)", ... is appended to the stem instead.

    Args:
        data: PNG bytes
        directory: Target directory
        filename: Desired file name

    Returns:
        Path actually written

    Raises:
        EncodeError: If the file cannot be written
    """
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EncodeError(f"Failed to save {filename}: {e}") from e

    try:
        path = _available_path(directory, filename)
        # "xb" so a file created between the check and the write is not clobbered
        with open(path, "xb") as f:
            f.write(data)
    except FileExistsError as e:
        raise EncodeError(f"File appeared while saving: {e.filename}") from e
    except OSError as e:
        raise EncodeError(f"Failed to save {filename}: {e}") from e

    logger.info(f"Saved {path.name} ({len(data)} bytes) to {directory}")
    return path


def export_composite(
    image: Image.Image,
    directory: Path,
    *,
    product: str,
    timestamp: Optional[datetime] = None,
    compress_level: int = 6,
) -> Path:
    """
    Encode a composite and save it with a timestamped name.

    Args:
        image: Composite to export
        directory: Download directory
        product: File name prefix
        timestamp: Export time (defaults to now, UTC)
        compress_level: PNG zlib level

    Returns:
        Path of the written file

    Raises:
        EncodeError: If encoding or writing fails

    Example:
        >>> export_composite(final, Path("~/Downloads").expanduser(), product="donance-s-pro-photo")
        PosixPath('/home/me/Downloads/donance-s-pro-photo-2026-10-19T14-03-59.png')
    """
    data = encode_png(image, compress_level=compress_level)
    return save_png(data, directory, export_filename(product, timestamp))

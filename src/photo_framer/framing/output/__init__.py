"""
Module: framing.output

Purpose:
    PNG export of the final composite.

Key Functions:
    - encode_png(): Lossless PNG bytes
    - export_filename(): Timestamped file name
    - save_png(): Collision-safe write
    - export_composite(): Encode + save

Dependencies:
    - PIL: PNG encoding

Used By:
    - framing.controller: Download task
"""

from .exporter import (
    EncodeError,
    encode_png,
    export_filename,
    save_png,
    export_composite,
)

__all__ = [
    "EncodeError",
    "encode_png",
    "export_filename",
    "save_png",
    "export_composite",
]

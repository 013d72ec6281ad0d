"""
Module: framing

Purpose:
    Qt-free pipeline that turns an uploaded photo into a framed PNG.
    Upload → circular crop → frame composite → export, with an explicit
    per-upload session and background tasks.

Key Functions:
    - load_image(): Decode uploaded bytes
    - render_crop(): Crop rectangle → square bitmap
    - composite(): Circle clip + frame overlay
    - export_composite(): PNG encode + save

Key Classes:
    - RenderConfig: Output sizes and frame geometry
    - FramingController: Session owner and task runner
    - ViewportCropSelector: Headless pan/zoom crop model

Dependencies:
    - PIL: All pixel work
    - photo_framer.core.models: CropSpec, SourceImage, FrameAsset

Used By:
    - photo_framer.gui: Desktop front end
"""

from .config import RenderConfig, DEFAULT_PREVIEW_SIZE, DEFAULT_DOWNLOAD_SIZE
from .loading import (
    DecodeError,
    FrameLoadError,
    FrameAssetLoader,
    load_image,
    load_image_file,
    load_frame_asset,
    default_frame_path,
)
from .cropping import CropSelector, ViewportCropSelector
from .render import RenderError, render_crop, composite, render_framed, upscale_composite
from .output import EncodeError, encode_png, export_filename, export_composite
from .session import FrameSession, SessionState, InvalidTransitionError
from .controller import FramingController, RenderStage, PipelineCancelled

__all__ = [
    # Config
    "RenderConfig",
    "DEFAULT_PREVIEW_SIZE",
    "DEFAULT_DOWNLOAD_SIZE",
    # Loading
    "DecodeError",
    "FrameLoadError",
    "FrameAssetLoader",
    "load_image",
    "load_image_file",
    "load_frame_asset",
    "default_frame_path",
    # Cropping
    "CropSelector",
    "ViewportCropSelector",
    # Rendering
    "RenderError",
    "render_crop",
    "composite",
    "render_framed",
    "upscale_composite",
    # Output
    "EncodeError",
    "encode_png",
    "export_filename",
    "export_composite",
    # Session
    "FrameSession",
    "SessionState",
    "InvalidTransitionError",
    "FramingController",
    "RenderStage",
    "PipelineCancelled",
]

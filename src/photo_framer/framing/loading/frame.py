"""
Module: framing.loading.frame

Purpose:
    Load the decorative frame overlay once at startup, in the background,
    so the user can upload and crop while it decodes. Failure is non-fatal:
    waiters receive None and the compositor draws an outline instead.

Key Functions:
    - load_frame_asset(): Synchronous decode of a frame file
    - default_frame_path(): Frame bundled with the package

Key Classes:
    - FrameAssetLoader: One-shot background loader with wait/callbacks
    - FrameLoadError: Frame file missing or undecodable

Dependencies:
    - concurrent.futures: Background load
    - PIL: Decoding

Used By:
    - framing.controller: Waits for readiness before compositing
    - gui.main_window: Started at launch, failure shown as a warning
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional

from PIL import Image, UnidentifiedImageError

from photo_framer.core.models import FrameAsset

logger = logging.getLogger(__name__)

BUNDLED_FRAME_NAME = "frame.png"


class FrameLoadError(Exception):
    """Frame overlay could not be loaded."""
    pass


def default_frame_path() -> Path:
    """Path of the frame overlay shipped in photo_framer/assets."""
    return Path(__file__).resolve().parent.parent.parent / "assets" / BUNDLED_FRAME_NAME


def load_frame_asset(path: Path) -> FrameAsset:
    """
    Decode a frame overlay from disk.

    Args:
        path: Frame image file

    Returns:
        FrameAsset with an RGBA bitmap

    Raises:
        FrameLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise FrameLoadError(f"Frame image not found: {path}")

    try:
        with Image.open(path) as opened:
            bitmap = opened.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise FrameLoadError(f"Failed to load frame image {path.name}: {e}") from e

    asset = FrameAsset(bitmap=bitmap, path=path)
    if not asset.is_square:
        logger.warning(
            f"Frame {path.name} is not square ({bitmap.width}x{bitmap.height}); "
            "it will be stretched to the canvas"
        )

    logger.info(f"Frame image loaded: {bitmap.width}x{bitmap.height}")
    return asset


class FrameAssetLoader:
    """
    Background, one-shot loader for the frame overlay.

    start() kicks off the decode; wait() blocks until it has finished and
    returns the asset, or None if it failed. The error never propagates out
    of wait() - callers degrade instead.

    Usage:
        loader = FrameAssetLoader(default_frame_path())
        loader.start()
        ...
        frame = loader.wait()  # FrameAsset or None
        if loader.error:
            show_warning(str(loader.error))
    """

    def __init__(self, path: Optional[Path], *, executor: Optional[Executor] = None) -> None:
        """
        Initialize loader.

        Args:
            path: Frame file; None means no frame is configured
            executor: Executor to run the load on. A private single-thread
                      executor is created (and shut down after load) if omitted.
        """
        self._path = Path(path) if path else None
        self._executor = executor
        self._owns_executor = executor is None
        self._future: Optional[Future] = None
        self._lock = threading.Lock()
        self._callbacks: List[Callable[["FrameAssetLoader"], None]] = []

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def start(self) -> None:
        """Begin loading. Safe to call more than once."""
        with self._lock:
            if self._future is not None:
                return
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frame-loader")
            future = self._future = self._executor.submit(self._load)
        # Runs _on_done inline when the load has already finished
        future.add_done_callback(self._on_done)
        if self._owns_executor:
            # Already-submitted work still runs to completion
            self._executor.shutdown(wait=False)

    def _load(self) -> FrameAsset:
        if self._path is None:
            raise FrameLoadError("No frame image configured")
        return load_frame_asset(self._path)

    def _on_done(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.warning(f"Frame unavailable, using outline instead: {error}")
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(self)

    @property
    def done(self) -> bool:
        """True once loading has finished (successfully or not)."""
        return self._future is not None and self._future.done()

    def wait(self, timeout: Optional[float] = None) -> Optional[FrameAsset]:
        """
        Block until the frame has loaded or failed.

        Starts the load if start() has not been called.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            FrameAsset, or None if loading failed

        Raises:
            TimeoutError: If the timeout elapses first
        """
        self.start()
        assert self._future is not None
        error = self._future.exception(timeout=timeout)
        if error is not None:
            return None
        return self._future.result()

    @property
    def error(self) -> Optional[FrameLoadError]:
        """The load failure, or None if loading succeeded or is pending."""
        if not self.done:
            return None
        error = self._future.exception()
        if error is None:
            return None
        if isinstance(error, FrameLoadError):
            return error
        return FrameLoadError(str(error))

    def add_done_callback(self, fn: Callable[["FrameAssetLoader"], None]) -> None:
        """
        Call fn(loader) once loading has finished.

        Runs immediately (in the caller's thread) if already finished,
        otherwise in the loader thread.
        """
        with self._lock:
            pending = not self.done
            if pending:
                self._callbacks.append(fn)
        if not pending:
            fn(self)

"""
Module: framing.controller

Purpose:
    Orchestrate the framing pipeline for the current session.
    Upload → Crop → Preview render → Download render → Export

    Every step that touches pixels runs as a future on a thread pool. Each
    task captures the session it was started for and commits only if that
    session is still current and not cancelled, so a stale render can never
    overwrite the result of a newer upload.

Key Classes:
    - FramingController: Owns the current FrameSession and runs tasks
    - RenderStage: Progress events emitted by real pipeline stages
    - PipelineCancelled: Task belonged to a superseded session

Dependencies:
    - concurrent.futures: Background tasks
    - framing.loading / render / output: Pipeline steps
    - framing.session: State machine

Used By:
    - gui.main_window: All user actions
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from PIL import Image

from photo_framer.core.models import CropSpec, SourceImage

from .config import RenderConfig
from .loading import DecodeError, FrameAssetLoader, default_frame_path, load_image
from .output import EncodeError, encode_png, export_filename, save_png
from .render import RenderError, composite, render_crop, render_framed, upscale_composite
from .session import FrameSession, InvalidTransitionError, SessionState

logger = logging.getLogger(__name__)

# Failures whose message is already user-facing
_PIPELINE_ERRORS = (DecodeError, RenderError, EncodeError)


class PipelineCancelled(Exception):
    """Task result discarded because its session is no longer current."""
    pass


class RenderStage(Enum):
    """
    Progress milestones, emitted as the work actually happens.

    Each member carries the message shown to the user and a nominal
    completion percentage for a progress bar.
    """
    WAITING_FOR_FRAME = ("Loading frame...", 15)
    PROCESSING_IMAGE = ("Processing image...", 45)
    APPLYING_FRAME = ("Applying frame...", 75)
    COMPLETE = ("Complete!", 100)
    RENDERING_DOWNLOAD = ("Rendering full resolution...", 40)
    SAVING = ("Saving PNG...", 85)
    SAVED = ("Saved!", 100)

    def __init__(self, message: str, percent: int) -> None:
        self.message = message
        self.percent = percent


StateListener = Callable[[FrameSession], None]
StageListener = Callable[[int, RenderStage], None]


class FramingController:
    """
    Runs the framing pipeline for one current session at a time.

    Usage:
        controller = FramingController(RenderConfig())
        source = controller.submit_upload(data, "image/jpeg").result()
        controller.begin_crop()
        selector = ViewportCropSelector(source.size)
        preview = controller.submit_preview(selector.current_crop()).result()
        path = controller.submit_download(Path("out")).result()
        controller.shutdown()

    Listeners are called from worker threads as well as the caller's
    thread; GUI code must marshal them onto its own thread.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        frame_loader: Optional[FrameAssetLoader] = None,
        *,
        executor: Optional[Executor] = None,
    ) -> None:
        """
        Initialize controller and start loading the frame.

        Args:
            config: Render configuration (defaults to RenderConfig())
            frame_loader: Frame loader; one for config.frame_path (or the
                          bundled frame) is created if omitted
            executor: Executor for pipeline tasks; a private pool is created
                      and owned if omitted
        """
        self._config = config or RenderConfig()
        if frame_loader is None:
            frame_loader = FrameAssetLoader(self._config.frame_path or default_frame_path())
        self._frame_loader = frame_loader
        self._frame_loader.start()

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="framing")

        self._lock = threading.RLock()
        self._session = FrameSession()
        self._state_listeners: List[StateListener] = []
        self._stage_listeners: List[StageListener] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def frame_loader(self) -> FrameAssetLoader:
        return self._frame_loader

    @property
    def session(self) -> FrameSession:
        """The current session."""
        with self._lock:
            return self._session

    def is_current(self, session_id: int) -> bool:
        with self._lock:
            return self._session.session_id == session_id and not self._session.cancelled

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def add_state_listener(self, fn: StateListener) -> None:
        """Call fn(session) after every state change or session switch."""
        self._state_listeners.append(fn)

    def add_stage_listener(self, fn: StageListener) -> None:
        """Call fn(session_id, stage) as render/export stages begin."""
        self._stage_listeners.append(fn)

    def _notify_state(self, session: FrameSession) -> None:
        for fn in list(self._state_listeners):
            try:
                fn(session)
            except Exception:
                logger.exception("State listener failed")

    def _emit_stage(self, session: FrameSession, stage: RenderStage) -> None:
        logger.debug(f"Session {session.session_id}: {stage.message}")
        for fn in list(self._stage_listeners):
            try:
                fn(session.session_id, stage)
            except Exception:
                logger.exception("Stage listener failed")

    # ─────────────────────────────────────────────────────────────────────────
    # Session management
    # ─────────────────────────────────────────────────────────────────────────

    def start_over(self) -> FrameSession:
        """
        Discard the current session and start an empty one.

        In-flight work for the old session is cancelled and its results
        are dropped.

        Returns:
            The new IDLE session
        """
        with self._lock:
            old = self._session
            old.cancel()
            session = FrameSession()
            self._session = session
        logger.info(f"Started session {session.session_id} (replaced {old.session_id})")
        self._notify_state(session)
        return session

    def change_frame(self, frame_path: Optional[Path]) -> FrameAssetLoader:
        """
        Switch to a different frame overlay.

        The new frame is loaded in the background; renders started after
        this call wait for it.

        Returns:
            The new loader (already started)
        """
        with self._lock:
            self._config = self._config.with_frame_path(frame_path)
            loader = FrameAssetLoader(self._config.frame_path or default_frame_path())
            loader.start()
            self._frame_loader = loader
        logger.info(f"Frame changed to {loader.path}")
        return loader

    def acknowledge_error(self) -> SessionState:
        """
        Dismiss the current error and return to the step that failed.

        Raises:
            InvalidTransitionError: If the session is not in ERROR
        """
        with self._lock:
            session = self._session
            resumed = session.acknowledge_error()
        self._notify_state(session)
        return resumed

    def shutdown(self, wait: bool = True) -> None:
        """Cancel the current session and stop the executor if owned."""
        with self._lock:
            self._session.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _ensure_current(self, session: FrameSession) -> None:
        if session is not self._session or session.cancelled:
            raise PipelineCancelled(f"Session {session.session_id} was superseded")

    def _check_cancelled(self, session: FrameSession) -> None:
        with self._lock:
            self._ensure_current(session)

    @contextmanager
    def _commit(self, session: FrameSession) -> Iterator[None]:
        """Apply a result to session atomically, only if it is still current."""
        with self._lock:
            self._ensure_current(session)
            yield
        self._notify_state(session)

    def _fail(self, session: FrameSession, message: str) -> bool:
        """Put a current session into ERROR. Returns False if it is stale."""
        with self._lock:
            if session is not self._session or session.cancelled:
                return False
            session.fail(message)
        self._notify_state(session)
        return True

    def _guarded(self, session: FrameSession, work: Callable[[], object]):
        """
        Run a task body, turning failures into session errors.

        Failures of a stale session surface as PipelineCancelled so callers
        can ignore them uniformly.
        """
        try:
            return work()
        except PipelineCancelled:
            raise
        except Exception as e:
            message = str(e) if isinstance(e, _PIPELINE_ERRORS) else f"Unexpected error: {e}"
            if not self._fail(session, message):
                raise PipelineCancelled(f"Session {session.session_id} was superseded") from e
            logger.error(f"Session {session.session_id}: {message}")
            raise

    # ─────────────────────────────────────────────────────────────────────────
    # Upload
    # ─────────────────────────────────────────────────────────────────────────

    def submit_upload(
        self,
        data: bytes,
        content_type: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Future:
        """
        Start a new session from uploaded bytes.

        The previous session is cancelled immediately; decoding happens in
        the background.

        Args:
            data: Encoded image bytes
            content_type: Declared MIME type
            name: Original file name

        Returns:
            Future resolving to the SourceImage. Raises DecodeError on a bad
            upload, or PipelineCancelled if another upload superseded it.
        """
        session = self.start_over()
        return self._executor.submit(self._upload_task, session, data, content_type, name)

    def _upload_task(
        self,
        session: FrameSession,
        data: bytes,
        content_type: Optional[str],
        name: Optional[str],
    ) -> SourceImage:
        source = self._guarded(session, lambda: load_image(data, content_type, name=name))
        with self._commit(session):
            session.source = source
            session.transition(SessionState.UPLOADED)
        return source

    # ─────────────────────────────────────────────────────────────────────────
    # Crop
    # ─────────────────────────────────────────────────────────────────────────

    def begin_crop(self) -> SourceImage:
        """
        Enter CROPPING (after upload, or to adjust a previewed crop).

        Returns:
            The source image to bind to the crop selector

        Raises:
            InvalidTransitionError: If there is no photo or the state forbids it
        """
        with self._lock:
            session = self._session
            if session.source is None:
                raise InvalidTransitionError("No photo to crop")
            session.transition(SessionState.CROPPING)
            source = session.source
        self._notify_state(session)
        return source

    # ─────────────────────────────────────────────────────────────────────────
    # Preview
    # ─────────────────────────────────────────────────────────────────────────

    def submit_preview(self, crop: CropSpec) -> Future:
        """
        Confirm a crop and render the preview composite.

        The crop is clamped to the photo first. Rendering waits for the frame
        load to finish (or fail) before compositing.

        Args:
            crop: Crop from the selector

        Returns:
            Future resolving to the preview composite

        Raises:
            InvalidTransitionError: If not CROPPING
        """
        with self._lock:
            session = self._session
            source = session.source
            if source is None:
                raise InvalidTransitionError("No photo to render")
            session.transition(SessionState.RENDERING)
        clamped = crop.clamped_to(source.width, source.height)
        if clamped != crop:
            logger.debug(f"Clamped {crop} to {clamped}")
        self._notify_state(session)
        return self._executor.submit(self._preview_task, session, source, clamped)

    def _preview_task(self, session: FrameSession, source: SourceImage, crop: CropSpec) -> Image.Image:
        size = self._config.preview_size
        start_time = time.perf_counter()

        def work() -> Image.Image:
            self._emit_stage(session, RenderStage.WAITING_FOR_FRAME)
            frame = self._frame_loader.wait()
            self._check_cancelled(session)

            self._emit_stage(session, RenderStage.PROCESSING_IMAGE)
            cropped = render_crop(source, crop, size)
            self._check_cancelled(session)

            self._emit_stage(session, RenderStage.APPLYING_FRAME)
            return composite(cropped, frame, size, config=self._config)

        result = self._guarded(session, work)
        with self._commit(session):
            session.crop = crop
            session.preview = result
            session.transition(SessionState.PREVIEWED)
        self._emit_stage(session, RenderStage.COMPLETE)
        logger.info(f"Preview {size}px ready in {time.perf_counter() - start_time:.2f}s")
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Download
    # ─────────────────────────────────────────────────────────────────────────

    def render_download(self, session: FrameSession) -> Image.Image:
        """
        Render the download-size composite for a previewed session.

        Re-renders from the source photo and confirmed crop so quality is
        limited only by the upload. Falls back to upscaling the preview if
        the source is unavailable or the full render runs out of memory.

        Raises:
            RenderError: If the session has nothing to render
        """
        size = self._config.download_size
        frame = self._frame_loader.wait()

        if session.source is not None and session.crop is not None:
            try:
                return render_framed(session.source, session.crop, frame, size, config=self._config)
            except MemoryError:
                if session.preview is None:
                    raise
                logger.warning("Full-resolution render ran out of memory; upscaling preview")
        elif session.preview is None:
            raise RenderError("Nothing to download: no preview has been rendered")
        else:
            logger.warning("Source photo unavailable; upscaling preview")

        return upscale_composite(session.preview, size)

    def submit_download(self, directory: Path, *, timestamp: Optional[datetime] = None) -> Future:
        """
        Render at download size and save the PNG.

        Args:
            directory: Folder to save into
            timestamp: Export time for the file name (defaults to now)

        Returns:
            Future resolving to the saved file path

        Raises:
            InvalidTransitionError: If not PREVIEWED
        """
        with self._lock:
            session = self._session
            session.transition(SessionState.EXPORTING)
        self._notify_state(session)
        return self._executor.submit(self._download_task, session, Path(directory), timestamp)

    def _download_task(
        self,
        session: FrameSession,
        directory: Path,
        timestamp: Optional[datetime],
    ) -> Path:
        def work() -> Path:
            self._emit_stage(session, RenderStage.RENDERING_DOWNLOAD)
            image = self.render_download(session)
            self._check_cancelled(session)

            self._emit_stage(session, RenderStage.SAVING)
            data = encode_png(image, compress_level=self._config.png_compress_level)
            # Nothing is written for a session replaced while encoding
            self._check_cancelled(session)
            return save_png(data, directory, export_filename(self._config.product_name, timestamp))

        path = self._guarded(session, work)
        try:
            with self._commit(session):
                session.transition(SessionState.PREVIEWED)
        except PipelineCancelled:
            logger.info(f"Saved {path} after session {session.session_id} was replaced")
            raise
        self._emit_stage(session, RenderStage.SAVED)
        return path

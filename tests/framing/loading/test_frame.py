"""
Tests for frame overlay loading.

Test Coverage:
- Bundled frame asset is present and square
- load_frame_asset success and failures
- FrameAssetLoader background load, wait, error and callbacks
- start() returning when the load finishes before callbacks are attached
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from pathlib import Path

import pytest
from PIL import Image

from photo_framer.framing.loading import (
    FrameAssetLoader,
    FrameLoadError,
    default_frame_path,
    load_frame_asset,
)


class InlineExecutor(Executor):
    """Runs submitted work in the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def _start_in_thread(loader: FrameAssetLoader) -> bool:
    """Run loader.start() in a worker thread; True if it returned."""
    thread = threading.Thread(target=loader.start, daemon=True)
    thread.start()
    thread.join(timeout=5)
    return not thread.is_alive()


class TestLoadFrameAsset:
    def test_bundled_frame_is_square_rgba(self):
        asset = load_frame_asset(default_frame_path())

        assert asset.is_square
        assert asset.bitmap.mode == "RGBA"
        # Transparent cutout in the middle, opaque artwork in the corner
        side = asset.size[0]
        assert asset.bitmap.getpixel((side // 2, side // 2))[3] == 0
        assert asset.bitmap.getpixel((0, 0))[3] == 255

    def test_loads_from_path(self, frame_path: Path):
        asset = load_frame_asset(frame_path)

        assert asset.path == frame_path
        assert asset.size == (200, 200)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FrameLoadError, match="not found"):
            load_frame_asset(tmp_path / "nope.png")

    def test_undecodable_file(self, tmp_path: Path):
        path = tmp_path / "frame.png"
        path.write_bytes(b"not a png")

        with pytest.raises(FrameLoadError, match="Failed to load"):
            load_frame_asset(path)

    def test_non_square_frame_still_loads(self, tmp_path: Path):
        path = tmp_path / "wide.png"
        Image.new("RGBA", (300, 200)).save(path)

        assert not load_frame_asset(path).is_square


class TestFrameAssetLoader:
    def test_wait_returns_asset(self, frame_path: Path):
        loader = FrameAssetLoader(frame_path)
        loader.start()

        asset = loader.wait(timeout=5)

        assert asset is not None
        assert loader.done
        assert loader.error is None

    def test_wait_starts_load(self, frame_path: Path):
        """wait() without start() still loads."""
        assert FrameAssetLoader(frame_path).wait(timeout=5) is not None

    def test_failure_yields_none_and_error(self, tmp_path: Path):
        loader = FrameAssetLoader(tmp_path / "missing.png")

        assert loader.wait(timeout=5) is None
        assert isinstance(loader.error, FrameLoadError)

    def test_no_path_configured(self):
        loader = FrameAssetLoader(None)

        assert loader.wait(timeout=5) is None
        assert "No frame" in str(loader.error)

    def test_error_is_none_while_pending(self, frame_path: Path):
        # Arrange: block the executor so the load cannot start yet
        gate = threading.Event()
        with ThreadPoolExecutor(max_workers=1) as executor:
            executor.submit(gate.wait)
            loader = FrameAssetLoader(frame_path, executor=executor)
            loader.start()

            # Assert
            assert not loader.done
            assert loader.error is None
            with pytest.raises(FutureTimeoutError):
                loader.wait(timeout=0.01)

            gate.set()
            assert loader.wait(timeout=5) is not None

    def test_start_is_idempotent(self, frame_path: Path):
        loader = FrameAssetLoader(frame_path)
        loader.start()
        loader.start()
        assert loader.wait(timeout=5) is not None

    def test_callback_after_load(self, frame_path: Path):
        done = threading.Event()
        seen = []

        def on_done(loader):
            seen.append(loader.error)
            done.set()

        gate = threading.Event()
        with ThreadPoolExecutor(max_workers=1) as executor:
            executor.submit(gate.wait)
            loader = FrameAssetLoader(frame_path, executor=executor)
            loader.start()
            loader.add_done_callback(on_done)
            gate.set()
            assert done.wait(timeout=5)

        assert seen == [None]

    def test_callback_when_already_done(self, tmp_path: Path):
        """Callbacks added after completion run immediately."""
        loader = FrameAssetLoader(tmp_path / "missing.png")
        loader.wait(timeout=5)
        seen = []

        loader.add_done_callback(lambda l: seen.append(l.error))

        assert len(seen) == 1
        assert isinstance(seen[0], FrameLoadError)


class TestStartCompletesImmediately:
    """start() must return when the load is already finished."""

    def test_failed_load_finished_before_start_returns(self, tmp_path: Path):
        loader = FrameAssetLoader(tmp_path / "missing.png", executor=InlineExecutor())

        assert _start_in_thread(loader)
        assert isinstance(loader.error, FrameLoadError)

    def test_successful_load_finished_before_start_returns(self, frame_path: Path):
        loader = FrameAssetLoader(frame_path, executor=InlineExecutor())

        assert _start_in_thread(loader)
        assert loader.wait(timeout=1) is not None

    def test_callback_registered_before_start_runs_once(self, tmp_path: Path):
        loader = FrameAssetLoader(tmp_path / "missing.png", executor=InlineExecutor())
        seen = []
        loader.add_done_callback(lambda l: seen.append(l.error))

        assert _start_in_thread(loader)
        assert len(seen) == 1

    @pytest.mark.parametrize("attempt", range(10))
    def test_missing_frame_start_never_hangs(self, tmp_path: Path, attempt):
        loader = FrameAssetLoader(tmp_path / "missing.png")

        assert _start_in_thread(loader)
        assert loader.wait(timeout=5) is None

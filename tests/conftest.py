import io
import os
import sys
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

# Headless runs (CI) have no display for the Qt widget tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import photo_framer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from photo_framer.core.models import FrameAsset  # noqa: E402
from photo_framer.framing.config import RenderConfig  # noqa: E402

# Colours of the two halves of the test photo
LEFT_COLOR = (220, 40, 40)
RIGHT_COLOR = (40, 80, 220)


# Common test fixtures
@pytest.fixture
def photo() -> Image.Image:
    """800x600 RGB photo: red left half, blue right half."""
    img = Image.new("RGB", (800, 600), color=LEFT_COLOR)
    ImageDraw.Draw(img).rectangle((400, 0, 799, 599), fill=RIGHT_COLOR)
    return img


@pytest.fixture
def jpeg_bytes(photo: Image.Image) -> bytes:
    """The test photo encoded as JPEG."""
    buffer = io.BytesIO()
    photo.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture
def png_bytes(photo: Image.Image) -> bytes:
    """The test photo encoded as PNG (lossless)."""
    buffer = io.BytesIO()
    photo.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def frame_image() -> Image.Image:
    """200x200 frame: opaque green border, transparent circular cutout."""
    img = Image.new("RGBA", (200, 200), color=(0, 160, 0, 255))
    ImageDraw.Draw(img).ellipse((0, 0, 199, 199), fill=(0, 0, 0, 0))
    return img


@pytest.fixture
def frame_path(tmp_path: Path, frame_image: Image.Image) -> Path:
    """Frame image saved as PNG."""
    path = tmp_path / "frame.png"
    frame_image.save(path)
    return path


@pytest.fixture
def frame_asset(frame_image: Image.Image, frame_path: Path) -> FrameAsset:
    return FrameAsset(bitmap=frame_image, path=frame_path)


@pytest.fixture
def small_config(frame_path: Path) -> RenderConfig:
    """Render config with small canvases so pipeline tests stay fast."""
    return RenderConfig(preview_size=200, download_size=400, frame_path=frame_path)


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    return tmp_path / "downloads"

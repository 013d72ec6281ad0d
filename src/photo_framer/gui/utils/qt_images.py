"""Conversion from Pillow images to Qt image types."""
from PIL import Image
from PySide6.QtGui import QImage, QPixmap


def pil_to_qimage(pil_img: Image.Image) -> QImage:
    """
    Convert a PIL Image to a QImage that owns its pixel data.

    QImage does not take ownership of the buffer passed to its constructor,
    so the result is copied before the bytes go out of scope.
    """
    if pil_img.mode != "RGBA":
        pil_img = pil_img.convert("RGBA")
    data = pil_img.tobytes("raw", "RGBA")
    qimage = QImage(data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format.Format_RGBA8888)
    return qimage.copy()


def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    """Convert a PIL Image to QPixmap (GUI thread only)."""
    return QPixmap.fromImage(pil_to_qimage(pil_img))

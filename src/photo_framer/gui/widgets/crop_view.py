"""
Interactive circular crop view.

Wraps a ViewportCropSelector: the photo is painted under a fixed square
viewport with the area outside the crop circle dimmed. Dragging pans,
the mouse wheel and trackpad or touchscreen pinch zoom.
"""
import math
from typing import List, Optional, Tuple

from PySide6.QtCore import QEvent, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QEventPoint, QPainter, QPainterPath, QPen, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from photo_framer.core.models import CropSpec, SourceImage
from photo_framer.framing.config import RenderConfig
from photo_framer.framing.cropping import ViewportCropSelector
from photo_framer.gui.styles.theme import get_colors
from photo_framer.gui.utils.qt_images import pil_to_qpixmap

# Space around the viewport where the dimmed photo stays visible
VIEWPORT_MARGIN = 40
# Zoom factor per wheel notch (120 units of angleDelta)
WHEEL_ZOOM_FACTOR = 1.1

_TOUCH_EVENTS = (
    QEvent.Type.TouchBegin,
    QEvent.Type.TouchUpdate,
    QEvent.Type.TouchEnd,
    QEvent.Type.TouchCancel,
)


class CropView(QWidget):
    """
    Interactive view over a ViewportCropSelector; `selector` is the
    CropSelector handed to the pipeline.

    Signals:
        crop_changed(object): CropSpec after every pan/zoom/reset
        zoom_changed(float): Current zoom
    """

    crop_changed = Signal(object)
    zoom_changed = Signal(float)

    def __init__(self, config: Optional[RenderConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or RenderConfig()
        self._selector: Optional[ViewportCropSelector] = None
        self._pixmap: Optional[QPixmap] = None
        self._drag_origin: Optional[QPointF] = None
        # Centre and finger spread of the previous touch update
        self._touch_anchor: Optional[Tuple[QPointF, Optional[float]]] = None

        side = self._config.viewport_size + 2 * VIEWPORT_MARGIN
        self.setMinimumSize(side, side)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents)

    # ─────────────────────────────────────────────────────────────────────────
    # Binding
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def selector(self) -> Optional[ViewportCropSelector]:
        return self._selector

    def set_source(self, source: SourceImage) -> None:
        """Bind a new photo and start at the default zoom, centred."""
        self._selector = ViewportCropSelector(
            source.size,
            viewport_size=self._config.viewport_size,
            zoom=self._config.default_zoom,
            min_zoom=self._config.min_zoom,
            max_zoom=self._config.max_zoom,
        )
        self._touch_anchor = None
        self._pixmap = pil_to_qpixmap(source.bitmap)
        self._changed()

    def clear(self) -> None:
        self._selector = None
        self._pixmap = None
        self._drag_origin = None
        self._touch_anchor = None
        self.update()

    # ─────────────────────────────────────────────────────────────────────────
    # Crop selection
    # ─────────────────────────────────────────────────────────────────────────

    def current_crop(self) -> CropSpec:
        if self._selector is None:
            raise RuntimeError("No photo bound to the crop view")
        return self._selector.current_crop()

    def reset(self) -> None:
        if self._selector is None:
            return
        self._selector.reset()
        self._changed()

    # ─────────────────────────────────────────────────────────────────────────
    # Zoom actions (buttons / slider)
    # ─────────────────────────────────────────────────────────────────────────

    def zoom_in(self) -> None:
        if self._selector is not None:
            self._selector.zoom_in(self._config.zoom_step)
            self._changed()

    def zoom_out(self) -> None:
        if self._selector is not None:
            self._selector.zoom_out(self._config.zoom_step)
            self._changed()

    def set_zoom(self, zoom: float) -> None:
        if self._selector is not None and abs(zoom - self._selector.zoom) > 1e-6:
            self._selector.set_zoom(zoom)
            self._changed()

    def _changed(self) -> None:
        self.update()
        if self._selector is not None:
            self.zoom_changed.emit(self._selector.zoom)
            self.crop_changed.emit(self._selector.current_crop())

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def viewport_rect(self) -> QRectF:
        """Viewport square in widget coordinates, centred in the widget."""
        side = self._config.viewport_size
        return QRectF((self.width() - side) / 2, (self.height() - side) / 2, side, side)

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self._selector is not None:
            self._drag_origin = event.position()
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._drag_origin is not None and self._selector is not None:
            delta = event.position() - self._drag_origin
            self._drag_origin = event.position()
            self._selector.pan_by(delta.x(), delta.y())
            self._changed()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self._drag_origin is not None:
            self._drag_origin = None
            self.unsetCursor()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event):
        if self._selector is None:
            super().wheelEvent(event)
            return
        steps = event.angleDelta().y() / 120
        if steps:
            self._selector.scale_zoom(WHEEL_ZOOM_FACTOR ** steps)
            self._changed()
        event.accept()

    def event(self, event):
        # Trackpad pinch arrives as a native zoom gesture on macOS
        if event.type() == QEvent.Type.NativeGesture and self._selector is not None:
            if event.gestureType() == Qt.NativeGestureType.ZoomNativeGesture:
                factor = 1.0 + event.value()
                if factor > 0:
                    self._selector.scale_zoom(factor)
                    self._changed()
                return True
        if event.type() in _TOUCH_EVENTS and self._selector is not None:
            if event.type() in (QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
                self._touch_anchor = None
            else:
                self.apply_touch([
                    point.position() for point in event.points()
                    if point.state() != QEventPoint.State.Released
                ])
            event.accept()
            return True
        return super().event(event)

    def apply_touch(self, positions: List[QPointF]) -> None:
        """
        Follow touch points: one finger pans, two fingers pinch-zoom and pan.

        Movement is measured against the previous call; a change in the
        number of fingers starts a new gesture without moving the crop.
        """
        if self._selector is None or not positions:
            self._touch_anchor = None
            return
        if len(positions) >= 2:
            first, second = positions[0], positions[1]
            center = (first + second) / 2
            spread: Optional[float] = math.hypot(first.x() - second.x(), first.y() - second.y())
        else:
            center = positions[0]
            spread = None

        previous = self._touch_anchor
        self._touch_anchor = (center, spread)
        if previous is None:
            return
        last_center, last_spread = previous
        if (spread is None) != (last_spread is None):
            return

        delta = center - last_center
        self._selector.pan_by(delta.x(), delta.y())
        if spread and last_spread:
            self._selector.scale_zoom(spread / last_spread)
        self._changed()

    def keyPressEvent(self, event):
        key = event.key()
        if key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.zoom_in()
        elif key == Qt.Key.Key_Minus:
            self.zoom_out()
        elif key == Qt.Key.Key_0:
            self.reset()
        else:
            super().keyPressEvent(event)

    def paintEvent(self, event):
        C = get_colors()
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(C.CROP_BACKDROP))

        viewport = self.viewport_rect()
        if self._selector is not None and self._pixmap is not None:
            ox, oy = self._selector.image_offset()
            zoom = self._selector.zoom
            width, height = self._selector.image_size
            target = QRectF(viewport.left() + ox, viewport.top() + oy, width * zoom, height * zoom)
            painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))

        # Dim everything outside the crop circle
        shade = QPainterPath()
        shade.addRect(QRectF(self.rect()))
        circle = QPainterPath()
        circle.addEllipse(viewport)
        painter.fillPath(shade.subtracted(circle), QColor(C.CROP_SHADE))

        pen = QPen(QColor(C.CROP_GUIDE))
        pen.setWidthF(2.0)
        painter.setPen(pen)
        painter.drawEllipse(viewport)
        painter.end()

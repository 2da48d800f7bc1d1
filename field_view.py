"""Field canvas: draws the background diagram and the arrows on top of it."""

from __future__ import annotations

from typing import Callable, TYPE_CHECKING

from PySide6.QtCore import Qt, QPointF, QRectF, QTimer, QElapsedTimer
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import (
  QWidget, QHBoxLayout, QVBoxLayout, QPushButton, QLabel,
)

from arrow_path import build_arrow_path
from log import get_logger
from session import DrawingSession, FADE_MS

if TYPE_CHECKING:
  from PySide6.QtGui import QPaintEvent, QMouseEvent

log = get_logger("field")

DEFAULT_LINE_COLOR = QColor(255, 0, 0)
DEFAULT_LINE_WIDTH = 4
FADE_TICK_MS = 16

# Procedural field colors
_FIELD_GRASS = QColor(46, 125, 50)
_FIELD_STRIPE = QColor(56, 142, 60)
_FIELD_LINE = QColor(255, 255, 255)
_FIELD_MARGIN = 20
_FIELD_STRIPES = 10


def paint_default_field(painter: QPainter, rect: QRectF) -> None:
  """Paint a plain pitch: striped grass, boundary, halfway line and circle."""
  painter.fillRect(rect, _FIELD_GRASS)
  stripe_w = rect.width() / _FIELD_STRIPES
  for i in range(0, _FIELD_STRIPES, 2):
    painter.fillRect(
      QRectF(rect.x() + i * stripe_w, rect.y(), stripe_w, rect.height()),
      _FIELD_STRIPE,
    )

  pen = QPen(_FIELD_LINE, 2)
  painter.setPen(pen)
  painter.setBrush(Qt.BrushStyle.NoBrush)
  inner = rect.adjusted(_FIELD_MARGIN, _FIELD_MARGIN, -_FIELD_MARGIN, -_FIELD_MARGIN)
  if inner.width() <= 0 or inner.height() <= 0:
    return
  painter.drawRect(inner)
  cx = inner.center().x()
  painter.drawLine(QPointF(cx, inner.top()), QPointF(cx, inner.bottom()))
  radius = min(inner.width(), inner.height()) * 0.15
  painter.drawEllipse(inner.center(), radius, radius)


class FieldView(QWidget):
  """Canvas forwarding drags to a DrawingSession and painting its arrows."""

  def __init__(self, session: DrawingSession, field_image: str = "",
               line_color: QColor = DEFAULT_LINE_COLOR,
               line_width: int = DEFAULT_LINE_WIDTH,
               parent: QWidget | None = None):
    super().__init__(parent)
    self._session = session
    self._line_color = QColor(line_color)
    self._line_width = line_width
    self._field_pixmap = self._load_field(field_image)

    # Finished live line kept around while it fades out
    self._fading_points: list[QPointF] = []
    self._fading_index: int | None = None
    self._fade_clock = QElapsedTimer()
    self._fade_timer = QTimer(self)
    self._fade_timer.setInterval(FADE_TICK_MS)
    self._fade_timer.timeout.connect(self._fade_step)

    self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
    self.setMinimumSize(320, 240)

  @staticmethod
  def _load_field(path: str) -> QPixmap | None:
    if not path:
      return None
    pixmap = QPixmap(path)
    if pixmap.isNull():
      log.warning("Cannot load field image '%s', using default field", path)
      return None
    return pixmap

  def fade_opacity(self) -> float:
    """Opacity of the fading line, 0.0 once the fade is over."""
    if not self._fading_points or not self._fade_clock.isValid():
      return 0.0
    elapsed = self._fade_clock.elapsed()
    if elapsed >= FADE_MS:
      return 0.0
    # Ease-out
    t = elapsed / FADE_MS
    return 1.0 - t * t

  def _fade_step(self) -> None:
    if self.fade_opacity() <= 0.0:
      self._fade_timer.stop()
      self._fading_points = []
      self._fading_index = None
    self.update()

  def _faded_line_index(self) -> int | None:
    """Index in the session of the committed line that is fading out."""
    i = self._fading_index
    if i is None:
      return None
    lines = self._session.lines
    # The file may have been switched or cleared mid-fade
    if i >= len(lines) or lines[i] != self._fading_points:
      return None
    return i

  # -- Paint ------------------------------------------------------------------

  def paintEvent(self, event: QPaintEvent) -> None:
    painter = QPainter(self)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    rect = QRectF(self.rect())

    if self._field_pixmap is not None:
      painter.drawPixmap(rect.toRect(), self._field_pixmap)
    else:
      paint_default_field(painter, rect)

    pen = QPen(self._line_color, self._line_width, Qt.PenStyle.SolidLine,
               Qt.PenCapStyle.RoundCap, Qt.PenJoinStyle.RoundJoin)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    opacity = self.fade_opacity()
    skip = self._faded_line_index() if opacity > 0.0 else None
    for arrow in self._session.arrow_paths(skip):
      painter.drawPath(arrow.to_painter_path())

    if skip is not None:
      painter.setOpacity(opacity)
      painter.drawPath(build_arrow_path(self._fading_points).to_painter_path())

    painter.end()

  # -- Mouse events -----------------------------------------------------------

  def mousePressEvent(self, event: QMouseEvent) -> None:
    if event.button() != Qt.MouseButton.LeftButton:
      return
    self._fade_timer.stop()
    self._fading_points = []
    self._fading_index = None
    self._session.on_gesture_start(event.position())
    self.update()

  def mouseMoveEvent(self, event: QMouseEvent) -> None:
    if not self._session.is_drawing:
      return
    self._session.on_gesture_move(event.position())
    self.update()

  def mouseReleaseEvent(self, event: QMouseEvent) -> None:
    if event.button() != Qt.MouseButton.LeftButton:
      return
    if not self._session.is_drawing:
      return
    self._fading_points = list(self._session.line_points)
    committed = len(self._session.lines)
    self._session.on_gesture_end()
    if len(self._session.lines) > committed:
      self._fading_index = len(self._session.lines) - 1
    self._fade_clock.start()
    self._fade_timer.start()
    self.update()


class DrawingScreen(QWidget):
  """Field canvas with a small bar holding Back and Clear."""

  def __init__(self, session: DrawingSession, field_image: str = "",
               line_color: QColor = DEFAULT_LINE_COLOR,
               line_width: int = DEFAULT_LINE_WIDTH,
               on_back: Callable[[], None] | None = None,
               parent: QWidget | None = None):
    super().__init__(parent)
    self._session = session
    self._on_back = on_back

    layout = QVBoxLayout(self)
    layout.setContentsMargins(0, 0, 0, 0)
    layout.setSpacing(0)

    bar = QHBoxLayout()
    bar.setContentsMargins(8, 4, 8, 4)
    self._back_btn = QPushButton("Back")
    self._back_btn.clicked.connect(self._back)
    bar.addWidget(self._back_btn)
    self.title_label = QLabel("")
    self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
    bar.addWidget(self.title_label, 1)
    self._clear_btn = QPushButton("Clear")
    self._clear_btn.setToolTip("Erase every line in this file")
    self._clear_btn.clicked.connect(self._clear)
    bar.addWidget(self._clear_btn)
    layout.addLayout(bar)

    self.field = FieldView(session, field_image, line_color, line_width, self)
    layout.addWidget(self.field, 1)

  def refresh(self) -> None:
    self.title_label.setText(self._session.file_name or "")
    self.field.update()

  def _clear(self) -> None:
    if self._session.file_name:
      self._session.on_clear(self._session.file_name)
    else:
      self._session.lines = []
    self.refresh()

  def _back(self) -> None:
    if self._on_back:
      self._on_back()

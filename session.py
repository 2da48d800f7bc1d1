"""Drawing session: turns gesture events into committed point sequences."""

from __future__ import annotations

import enum
from typing import Callable

from PySide6.QtCore import QPointF

from arrow_path import ArrowPath, build_arrow_path
from line_store import LineStore
from log import get_logger

log = get_logger("session")

FADE_MS = 250


class SessionState(enum.Enum):
  IDLE = "idle"
  DRAWING = "drawing"


class DrawingSession:
  """Owns the in-progress line and the committed lines of the open file."""

  def __init__(self, store: LineStore, file_name: str | None = None,
               on_change: Callable[[], None] | None = None):
    self.store = store
    self.on_change = on_change
    self.state = SessionState.IDLE
    self.line_points: list[QPointF] = []
    self.lines: list[list[QPointF]] = []
    self.file_name: str | None = None
    if file_name:
      self.on_select_file(file_name)

  @property
  def is_drawing(self) -> bool:
    return self.state is SessionState.DRAWING

  def _changed(self) -> None:
    if self.on_change:
      self.on_change()

  # -- Gestures ---------------------------------------------------------------

  def on_gesture_start(self, point: QPointF) -> None:
    if self.is_drawing:
      self.line_points.append(QPointF(point))
    else:
      self.state = SessionState.DRAWING
      self.line_points = [QPointF(point)]
    self._changed()

  def on_gesture_move(self, point: QPointF) -> None:
    # A move with no preceding start begins a new line
    if not self.is_drawing:
      self.on_gesture_start(point)
      return
    self.line_points.append(QPointF(point))
    self._changed()

  def on_gesture_end(self) -> None:
    if not self.is_drawing:
      return
    self.state = SessionState.IDLE
    points, self.line_points = self.line_points, []
    if points:
      if self.file_name:
        self.lines = self.store.append(self.file_name, points)
      else:
        log.debug("No file open, keeping line in memory only")
        self.lines.append(points)
      log.debug("Committed line with %d points", len(points))
    self._changed()

  # -- Files ------------------------------------------------------------------

  def on_select_file(self, name: str) -> None:
    if self.is_drawing:
      self.on_gesture_end()
    self.file_name = name
    self.lines = self.store.load(name)
    log.info("Opened '%s' (%d lines)", name, len(self.lines))
    self._changed()

  def on_create_file(self, name: str) -> bool:
    return self.store.register_file(name)

  def on_rename_file(self, old: str, new: str) -> bool:
    ok = self.store.rename_file(old, new)
    if ok and self.file_name == old:
      self.file_name = new.strip()
      self._changed()
    return ok

  def on_clear(self, name: str) -> None:
    self.store.clear(name)
    if name == self.file_name:
      self.lines = []
      self._changed()

  def on_delete_file(self, name: str) -> bool:
    ok = self.store.delete_file(name)
    if ok and name == self.file_name:
      self.file_name = None
      self.lines = []
      self._changed()
    return ok

  # -- Rendering --------------------------------------------------------------

  def arrow_paths(self, skip: int | None = None) -> list[ArrowPath]:
    """Arrows for every committed line, then the live one while drawing.

    The committed line at index ``skip`` is left out.
    """
    paths = [build_arrow_path(line) for i, line in enumerate(self.lines) if i != skip]
    if self.is_drawing:
      paths.append(build_arrow_path(self.line_points))
    return [p for p in paths if not p.is_empty()]

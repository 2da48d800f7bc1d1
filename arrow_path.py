"""Arrow geometry for drawn sequences: a polyline with an open arrowhead."""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

from PySide6.QtCore import QPointF
from PySide6.QtGui import QPainterPath

ARROW_LENGTH = 20.0
ARROW_HALF_ANGLE = math.pi / 6  # 30 degrees either side of the shaft


@dataclasses.dataclass
class ArrowPath:
  polyline: list  # list[QPointF], the drawn points in order
  head: list  # two (tip, wing) QPointF pairs

  def is_empty(self) -> bool:
    return not self.polyline

  def to_painter_path(self) -> QPainterPath:
    """Build a QPainterPath: polyline plus two disconnected head strokes."""
    path = QPainterPath()
    if self.is_empty():
      return path
    path.moveTo(self.polyline[0])
    for pt in self.polyline[1:]:
      path.lineTo(pt)
    for tip, wing in self.head:
      path.moveTo(tip)
      path.lineTo(wing)
    return path


def arrow_wings(end: QPointF, prev: QPointF) -> tuple[QPointF, QPointF]:
  """Return the (left, right) wing points of an arrowhead at ``end``.

  The head points along the segment prev -> end; each wing trails back from
  the tip by ARROW_LENGTH at ARROW_HALF_ANGLE off the reversed shaft.
  """
  angle = math.atan2(end.y() - prev.y(), end.x() - prev.x())
  left = QPointF(
    end.x() - ARROW_LENGTH * math.cos(angle - ARROW_HALF_ANGLE),
    end.y() - ARROW_LENGTH * math.sin(angle - ARROW_HALF_ANGLE),
  )
  right = QPointF(
    end.x() - ARROW_LENGTH * math.cos(angle + ARROW_HALF_ANGLE),
    end.y() - ARROW_LENGTH * math.sin(angle + ARROW_HALF_ANGLE),
  )
  return left, right


def build_arrow_path(points: Sequence[QPointF]) -> ArrowPath:
  """Build the renderable arrow for a point sequence.

  Fewer than two points is a tap, not a line, and yields an empty path.
  """
  if len(points) < 2:
    return ArrowPath(polyline=[], head=[])

  end = QPointF(points[-1])
  prev = QPointF(points[-2])
  left, right = arrow_wings(end, prev)
  return ArrowPath(
    polyline=[QPointF(p) for p in points],
    head=[(QPointF(end), left), (QPointF(end), right)],
  )

"""Tests for arrow geometry."""

import math

import pytest
from PySide6.QtCore import QPointF
from PySide6.QtGui import QPainterPath

from arrow_path import (
  ArrowPath, ARROW_LENGTH, ARROW_HALF_ANGLE, arrow_wings, build_arrow_path,
)

TOL = 1e-6


def pts(*coords):
  return [QPointF(x, y) for x, y in coords]


def _angle_between(v1, v2):
  """Unsigned angle between two vectors, in radians."""
  dot = v1[0] * v2[0] + v1[1] * v2[1]
  n = math.hypot(*v1) * math.hypot(*v2)
  return math.acos(max(-1.0, min(1.0, dot / n)))


# -- Degenerate input ---------------------------------------------------------

class TestDegenerate:
  def test_empty_sequence(self):
    path = build_arrow_path([])
    assert path.is_empty()
    assert path.polyline == []
    assert path.head == []

  def test_single_point(self):
    path = build_arrow_path(pts((5, 5)))
    assert path.is_empty()
    assert path.head == []

  def test_empty_painter_path(self):
    assert build_arrow_path([]).to_painter_path().isEmpty()


# -- Polyline and head --------------------------------------------------------

class TestArrowPath:
  def test_polyline_matches_input(self):
    points = pts((0, 0), (3, 4), (10, -2), (11, 7))
    path = build_arrow_path(points)
    assert path.polyline == points

  def test_two_head_segments_from_last_point(self):
    points = pts((0, 0), (3, 4), (10, -2))
    path = build_arrow_path(points)
    assert len(path.head) == 2
    for tip, _wing in path.head:
      assert tip == points[-1]

  def test_does_not_alias_input(self):
    points = pts((0, 0), (10, 0))
    path = build_arrow_path(points)
    points[0].setX(99)
    assert path.polyline[0].x() == 0

  def test_horizontal_example(self):
    path = build_arrow_path(pts((0, 0), (10, 0), (20, 0)))
    (_, left), (_, right) = path.head
    expected_x = 20 - 20 * math.cos(math.radians(30))
    assert left.x() == pytest.approx(expected_x, abs=TOL)
    assert left.y() == pytest.approx(10.0, abs=TOL)
    assert right.x() == pytest.approx(expected_x, abs=TOL)
    assert right.y() == pytest.approx(-10.0, abs=TOL)
    assert expected_x == pytest.approx(2.679, abs=1e-3)

  @pytest.mark.parametrize("theta_deg", [0, 30, 90, 135, 180, -45, -120])
  def test_wing_length_and_angle(self, theta_deg):
    theta = math.radians(theta_deg)
    prev = QPointF(50, 50)
    end = QPointF(50 + 40 * math.cos(theta), 50 + 40 * math.sin(theta))
    path = build_arrow_path([prev, end])
    reverse = (-math.cos(theta), -math.sin(theta))
    for tip, wing in path.head:
      vec = (wing.x() - tip.x(), wing.y() - tip.y())
      assert math.hypot(*vec) == pytest.approx(ARROW_LENGTH, abs=TOL)
      assert _angle_between(vec, reverse) == pytest.approx(ARROW_HALF_ANGLE, abs=TOL)

  def test_wings_on_opposite_sides(self):
    (_, left), (_, right) = build_arrow_path(pts((0, 0), (0, 30))).head
    # Shaft points straight down the y axis; wings straddle x = 0
    assert left.x() * right.x() < 0

  def test_only_last_segment_sets_direction(self):
    a = build_arrow_path(pts((0, 0), (100, 100), (200, 100), (210, 100)))
    b = build_arrow_path(pts((500, -3), (200, 100), (210, 100)))
    assert a.head == b.head

  def test_deterministic(self):
    points = pts((1.5, 2.5), (7.25, -3.0), (9.0, 4.0))
    assert build_arrow_path(points) == build_arrow_path(list(points))

  def test_arrow_wings_matches_builder(self):
    end, prev = QPointF(20, 0), QPointF(10, 0)
    left, right = arrow_wings(end, prev)
    path = build_arrow_path([prev, end])
    assert path.head == [(end, left), (end, right)]


# -- Painter path -------------------------------------------------------------

class TestPainterPath:
  def test_element_count(self):
    path = build_arrow_path(pts((0, 0), (10, 0), (20, 0))).to_painter_path()
    assert isinstance(path, QPainterPath)
    # 3 polyline vertices + 2 x (moveTo, lineTo) for the head
    assert path.elementCount() == 7

  def test_head_strokes_are_disconnected(self):
    path = build_arrow_path(pts((0, 0), (20, 0))).to_painter_path()
    assert path.elementAt(2).isMoveTo()
    assert path.elementAt(4).isMoveTo()
    assert path.elementAt(3).isLineTo()
    assert path.elementAt(5).isLineTo()

  def test_manual_arrow_path(self):
    arrow = ArrowPath(polyline=pts((0, 0), (1, 1)), head=[])
    assert not arrow.is_empty()
    assert arrow.to_painter_path().elementCount() == 2

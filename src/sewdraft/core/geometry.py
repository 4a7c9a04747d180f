"""Geometric helpers available to parts while drafting.

This module provides the line and beam utilities parts use to derive points:
- Beam (infinite line) intersections with other beams and with x/y levels
- Line segment intersection
- Point-on-line and point-on-beam tests
- Signed area (shoelace formula)
- Degree/radian conversion and length formatting for annotations

A beam is the infinite line through two points; a line is the finite
segment between them. Functions return None instead of raising when the
inputs are parallel or degenerate, since that happens naturally at extreme
measurement combinations.
"""

import math

from sewdraft.domain import Point
from sewdraft.domain.point import signed_area

# Control point distance, as a fraction of the radius, for a quarter circle
# drawn with one cubic Bezier
CIRCLE_KAPPA = 0.5522847498307936

MM_PER_INCH = 25.4


def deg2rad(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * math.pi / 180.0


def rad2deg(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * 180.0 / math.pi


def beam_intersects_x(from_: Point, to: Point, x: float) -> Point | None:
    """Find where the beam through two points crosses a vertical line.

    Returns:
        Intersection point, or None for a vertical beam
    """
    dx = to.x - from_.x
    if abs(dx) < 1e-10:
        return None
    t = (x - from_.x) / dx
    return Point(x, from_.y + t * (to.y - from_.y))


def beam_intersects_y(from_: Point, to: Point, y: float) -> Point | None:
    """Find where the beam through two points crosses a horizontal line.

    Returns:
        Intersection point, or None for a horizontal beam
    """
    dy = to.y - from_.y
    if abs(dy) < 1e-10:
        return None
    t = (y - from_.y) / dy
    return Point(from_.x + t * (to.x - from_.x), y)


def beams_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> Point | None:
    """Find the intersection of two infinite lines.

    Returns:
        Intersection point, or None when the beams are parallel
    """
    denom = (a1.x - a2.x) * (b1.y - b2.y) - (a1.y - a2.y) * (b1.x - b2.x)
    if abs(denom) < 1e-10:
        return None
    t = ((a1.x - b1.x) * (b1.y - b2.y) - (a1.y - b1.y) * (b1.x - b2.x)) / denom
    return Point(a1.x + t * (a2.x - a1.x), a1.y + t * (a2.y - a1.y))


def lines_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Find intersection point of two line segments.

    Uses parametric line equations to find intersection. Returns None if lines
    are parallel or if intersection is outside both segments.

    Args:
        p1: First endpoint of segment 1
        p2: Second endpoint of segment 1
        p3: First endpoint of segment 2
        p4: Second endpoint of segment 2

    Returns:
        Point at intersection if segments intersect, None otherwise
    """
    x1, y1 = p1.x, p1.y
    x2, y2 = p2.x, p2.y
    x3, y3 = p3.x, p3.y
    x4, y4 = p4.x, p4.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)

    # Lines are parallel or coincident
    if abs(denom) < 1e-10:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0 <= t <= 1 and 0 <= u <= 1:
        return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))

    return None


def point_on_beam(from_: Point, to: Point, check: Point, precision: float = 0.01) -> bool:
    """Check whether a point lies on the infinite line through two points."""
    length = from_.dist(to)
    if length < 1e-10:
        return from_.sits_on(check, precision)
    cross = (to.x - from_.x) * (check.y - from_.y) - (to.y - from_.y) * (check.x - from_.x)
    return abs(cross) / length <= precision


def point_on_line(from_: Point, to: Point, check: Point, precision: float = 0.01) -> bool:
    """Check whether a point lies on the segment between two points."""
    if not point_on_beam(from_, to, check, precision):
        return False
    return abs(from_.dist(check) + check.dist(to) - from_.dist(to)) <= precision


def format_length(value: float, units: str = "metric") -> str:
    """Format a length in millimetres for a dimension label.

    Args:
        value: Length in millimetres
        units: "metric" for centimetres, "imperial" for inches

    Returns:
        Label such as "12.3cm" or "4.84\""
    """
    if units == "imperial":
        return f'{value / MM_PER_INCH:.2f}"'
    return f"{value / 10:.1f}cm"

"""Tests for internal cubic Bezier helpers."""

import pytest

from sewdraft.domain import Point
from sewdraft.domain._bezier import (
    cubic_extrema,
    cubic_length,
    cubic_point,
    cubic_section,
    cubic_t_at_length,
    flatten_cubic,
    offset_cubic,
    right_normal,
    split_cubic,
)

CURVE = (Point(0, 0), Point(30, -60), Point(90, -60), Point(120, 0))


class TestEvaluation:
    """Tests for point evaluation and splitting."""

    def test_endpoints(self) -> None:
        """Test that t=0 and t=1 hit the end points."""
        assert cubic_point(CURVE, 0.0) == Point(0, 0)
        assert cubic_point(CURVE, 1.0) == Point(120, 0)

    def test_split_meets_at_curve_point(self) -> None:
        """Test that both halves share the point at the split parameter."""
        left, right = split_cubic(CURVE, 0.3)
        on_curve = cubic_point(CURVE, 0.3)
        assert left[3].dist(on_curve) < 1e-9
        assert right[0].dist(on_curve) < 1e-9

    def test_split_lengths_add_up(self) -> None:
        """Test that splitting preserves total length."""
        left, right = split_cubic(CURVE, 0.4)
        assert cubic_length(left) + cubic_length(right) == pytest.approx(cubic_length(CURVE))

    def test_section(self) -> None:
        """Test that a section traces the original between its parameters."""
        section = cubic_section(CURVE, 0.25, 0.75)
        assert section[0].dist(cubic_point(CURVE, 0.25)) < 1e-9
        assert section[3].dist(cubic_point(CURVE, 0.75)) < 1e-9
        assert cubic_point(section, 0.5).dist(cubic_point(CURVE, 0.5)) < 1e-9


class TestLength:
    """Tests for arc length helpers."""

    def test_length_against_flattening(self) -> None:
        """Test integrated length against a dense polyline."""
        points = flatten_cubic(CURVE, 0.0005)
        polyline = sum(a.dist(b) for a, b in zip(points, points[1:]))
        assert cubic_length(CURVE) == pytest.approx(polyline, rel=1e-5)

    def test_t_at_length_midpoint(self) -> None:
        """Test that a symmetric curve is halved at t=0.5."""
        half = cubic_length(CURVE) / 2
        assert cubic_t_at_length(CURVE, half) == pytest.approx(0.5, abs=1e-4)

    def test_t_at_length_bounds(self) -> None:
        """Test clamping at both ends."""
        assert cubic_t_at_length(CURVE, -1) == 0.0
        assert cubic_t_at_length(CURVE, 1e6) == 1.0


class TestExtrema:
    """Tests for cubic_extrema."""

    def test_symmetric_arch(self) -> None:
        """Test that a symmetric arch peaks at t=0.5."""
        assert cubic_extrema(CURVE) == pytest.approx([0.5])

    def test_straight_curve_has_none(self) -> None:
        """Test that a straight monotonic curve has no interior extrema."""
        straight = (Point(0, 0), Point(1, 1), Point(2, 2), Point(3, 3))
        assert cubic_extrema(straight) == []


class TestOffset:
    """Tests for normals and cubic offsetting."""

    def test_right_normal(self) -> None:
        """Test the right-of-travel normal with y down the page."""
        assert right_normal(1, 0) == (0.0, 1.0)
        assert right_normal(0, 2) == (-1.0, 0.0)
        assert right_normal(0, 0) == (0.0, 0.0)

    def test_offset_end_points(self) -> None:
        """Test that offset end points sit a distance away along the end normals."""
        q0, _, _, q3 = offset_cubic(CURVE, 10)
        assert q0.dist(CURVE[0]) == pytest.approx(10)
        assert q3.dist(CURVE[3]) == pytest.approx(10)

    def test_offset_straight_curve(self) -> None:
        """Test that a straight cubic offsets to a parallel straight cubic."""
        straight = (Point(0, 0), Point(10, 0), Point(20, 0), Point(30, 0))
        for p in offset_cubic(straight, 5):
            assert p.y == pytest.approx(5.0)

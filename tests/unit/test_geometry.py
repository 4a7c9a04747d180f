"""Tests for geometry helper functions."""

import math

import pytest

from sewdraft.core.geometry import (
    beam_intersects_x,
    beam_intersects_y,
    beams_intersect,
    deg2rad,
    format_length,
    lines_intersect,
    point_on_beam,
    point_on_line,
    rad2deg,
    signed_area,
)
from sewdraft.domain import Path, Point
from sewdraft.domain import point as point_module


class TestSignedArea:
    """Tests for signed_area function."""

    def test_counterclockwise_on_page_is_negative(self) -> None:
        """Test a square drawn counter-clockwise on the page (y down)."""
        square = [Point(0, 0), Point(0, 1), Point(1, 1), Point(1, 0)]
        assert signed_area(square) == pytest.approx(-1.0)

    def test_clockwise_on_page_is_positive(self) -> None:
        """Test a square drawn clockwise on the page."""
        square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]
        assert signed_area(square) == pytest.approx(1.0)

    def test_degenerate(self) -> None:
        """Test that fewer than three points have no area."""
        assert signed_area([Point(0, 0), Point(1, 1)]) == 0.0

    def test_shared_with_path(self) -> None:
        """Test that paths and parts compute area with the same function."""
        assert signed_area is point_module.signed_area
        outline = (
            Path()
            .move(Point(0, 0))
            .curve(Point(30, -20), Point(70, -20), Point(100, 0))
            .line(Point(100, 50))
            .line(Point(0, 50))
            .close()
        )
        assert outline.signed_area() == signed_area(outline.flatten())


class TestBeams:
    """Tests for beam and line intersections."""

    def test_beam_intersects_y(self) -> None:
        """Test extending a beam to a horizontal line."""
        p = beam_intersects_y(Point(0, 0), Point(10, 10), 25)
        assert p == Point(25, 25)

    def test_beam_intersects_y_parallel(self) -> None:
        """Test that a horizontal beam never crosses another horizontal line."""
        assert beam_intersects_y(Point(0, 0), Point(10, 0), 5) is None

    def test_beam_intersects_x(self) -> None:
        """Test extending a beam to a vertical line."""
        p = beam_intersects_x(Point(0, 0), Point(10, 5), -10)
        assert p == Point(-10, -5)

    def test_beam_intersects_x_parallel(self) -> None:
        """Test that a vertical beam never crosses another vertical line."""
        assert beam_intersects_x(Point(3, 0), Point(3, 10), 5) is None

    def test_beams_intersect_outside_segments(self) -> None:
        """Test that beams intersect beyond their defining points."""
        p = beams_intersect(Point(0, 0), Point(1, 0), Point(5, 5), Point(5, 4))
        assert p is not None
        assert p.x == pytest.approx(5)
        assert p.y == pytest.approx(0)

    def test_beams_parallel(self) -> None:
        """Test parallel beams."""
        assert beams_intersect(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)) is None

    def test_lines_intersect(self) -> None:
        """Test crossing segments."""
        p = lines_intersect(Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0))
        assert p is not None
        assert p.x == pytest.approx(5)
        assert p.y == pytest.approx(5)

    def test_lines_do_not_reach(self) -> None:
        """Test segments whose beams cross outside them."""
        assert lines_intersect(Point(0, 0), Point(1, 0), Point(5, 5), Point(5, 4)) is None

    def test_point_on_beam_and_line(self) -> None:
        """Test collinearity checks."""
        assert point_on_beam(Point(0, 0), Point(10, 0), Point(50, 0))
        assert not point_on_line(Point(0, 0), Point(10, 0), Point(50, 0))
        assert point_on_line(Point(0, 0), Point(10, 0), Point(5, 0.001))


class TestConversions:
    """Tests for unit conversions and labels."""

    def test_angles(self) -> None:
        """Test degree/radian conversions."""
        assert deg2rad(180) == pytest.approx(math.pi)
        assert rad2deg(math.pi / 2) == pytest.approx(90)

    def test_format_metric(self) -> None:
        """Test centimetre labels."""
        assert format_length(123.4) == "12.3cm"

    def test_format_imperial(self) -> None:
        """Test inch labels."""
        assert format_length(25.4, "imperial") == '1.00"'

"""Point type for pattern drafting.

Coordinates follow the paper convention: x grows to the right, y grows down
the page, units are millimetres.

Angles are in degrees. 0 points along +x and 90 points up the page (toward
-y), so ``shift(angle, d)`` moves to ``(x + d*cos(a), y - d*sin(a))``. Read in
the raw numeric frame, angles increase clockwise. Every operation that takes
or returns an angle uses this convention.
"""

import math
from dataclasses import dataclass
from typing import Any, Union

# Distance below which two points are treated as coincident
EPSILON = 1e-9


@dataclass(frozen=True, slots=True)
class Point:
    """An immutable 2D point.

    Every transform returns a new Point. Parts update their drawings by
    reassigning a named slot, never by mutating a point.

    Attributes:
        x: X coordinate in millimetres
        y: Y coordinate in millimetres (down the page)
        attributes: Name/value pairs such as ``data-text`` for labels
    """

    x: float
    y: float
    attributes: tuple[tuple[str, str], ...] = ()

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def dist(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def dx(self, other: "Point") -> float:
        """Horizontal delta from this point to another."""
        return other.x - self.x

    def dy(self, other: "Point") -> float:
        """Vertical delta from this point to another."""
        return other.y - self.y

    def angle(self, other: "Point") -> float:
        """Angle of the ray from this point to another, in [0, 360).

        Coincident points have no direction; 0.0 is returned so that drafting
        math at extreme measurements keeps going.
        """
        dx = other.x - self.x
        dy = other.y - self.y
        if math.hypot(dx, dy) < EPSILON:
            return 0.0
        return math.degrees(math.atan2(-dy, dx)) % 360.0

    def shift(self, angle: float, distance: float) -> "Point":
        """Translate by a polar offset.

        Args:
            angle: Direction in degrees (0 = +x, 90 = up the page)
            distance: Distance to move, negative moves the opposite way

        Returns:
            New shifted point
        """
        rad = math.radians(angle)
        return Point(
            self.x + distance * math.cos(rad),
            self.y - distance * math.sin(rad),
        )

    def shift_towards(self, other: "Point", distance: float) -> "Point":
        """Move a fixed distance along the ray toward another point.

        Returns a copy of this point when both points coincide.
        """
        if self.dist(other) < EPSILON:
            return self.copy()
        return self.shift(self.angle(other), distance)

    def shift_fraction_towards(self, other: "Point", fraction: float) -> "Point":
        """Linear interpolation toward another point.

        The fraction is not clamped: values below 0 or above 1 extrapolate
        along the same line.
        """
        return Point(
            self.x + (other.x - self.x) * fraction,
            self.y + (other.y - self.y) * fraction,
        )

    def shift_outwards(self, other: "Point", distance: float) -> "Point":
        """Continue past another point by a distance, along the ray from self."""
        if self.dist(other) < EPSILON:
            return other.copy()
        return other.shift(self.angle(other), distance)

    def rotate(self, angle: float, around: "Point") -> "Point":
        """Rotate around a centre point by an angle in degrees."""
        radius = around.dist(self)
        if radius < EPSILON:
            return self.copy()
        return around.shift(around.angle(self) + angle, radius)

    def flip_x(self, around: Union["Point", float] = 0.0) -> "Point":
        """Mirror across the vertical line through ``around``."""
        axis = around.x if isinstance(around, Point) else float(around)
        return Point(2 * axis - self.x, self.y, self.attributes)

    def flip_y(self, around: Union["Point", float] = 0.0) -> "Point":
        """Mirror across the horizontal line through ``around``."""
        axis = around.y if isinstance(around, Point) else float(around)
        return Point(self.x, 2 * axis - self.y, self.attributes)

    def translate(self, dx: float, dy: float) -> "Point":
        """Translate by a cartesian offset."""
        return Point(self.x + dx, self.y + dy, self.attributes)

    def copy(self) -> "Point":
        """Return a point at the same location without attributes."""
        return Point(self.x, self.y)

    def sits_on(self, other: "Point", tolerance: float = 0.01) -> bool:
        """Check whether two points coincide within a tolerance."""
        return self.dist(other) <= tolerance

    def sits_roughly_on(self, other: "Point") -> bool:
        """Check whether two points coincide when rounded to whole millimetres."""
        return round(self.x) == round(other.x) and round(self.y) == round(other.y)

    def attr(self, name: str, value: Any, append: bool = False) -> "Point":
        """Return a copy with an attribute set.

        Args:
            name: Attribute name
            value: Attribute value, stored as a string
            append: Join onto an existing value with a space instead of replacing

        Returns:
            New point with the attribute applied
        """
        current = dict(self.attributes)
        text = str(value)
        if append and name in current:
            text = f"{current[name]} {text}"
        current[name] = text
        return Point(self.x, self.y, tuple(current.items()))

    def get_attribute(self, name: str) -> str | None:
        """Look up an attribute value, None when absent."""
        for key, value in self.attributes:
            if key == name:
                return value
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x, y and attribute fields
        """
        data: dict[str, Any] = {"x": self.x, "y": self.y}
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x, y and optional attributes

        Returns:
            Point instance
        """
        attributes = tuple(data.get("attributes", {}).items())
        return cls(x=float(data["x"]), y=float(data["y"]), attributes=attributes)


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    With y growing down the page, outlines drawn counter-clockwise on the
    page have a negative area and clockwise outlines a positive area.

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square millimetres. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0, 0), Point(0, 1), Point(1, 1), Point(1, 0)]
        >>> signed_area(square)  # counter-clockwise on the page
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0

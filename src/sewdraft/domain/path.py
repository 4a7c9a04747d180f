"""Path type: an immutable, fluently built sequence of drawing operations.

A path is built by chaining calls, each returning a new Path::

    seam = (
        Path()
        .move(points["cb_hem"])
        .line(points["hem"])
        .curve(points["hem_cp"], points["waist_cp"], points["waist"])
        .close()
    )

Rules enforced at construction time:
- the first operation is ``move`` and there is exactly one
- ``close`` is the last operation if present
- every segment endpoint and control point is a Point

Curves are stored as full cubics. ``curve_single`` (one control point for the
start tangent) places the second control point on the end point, and
``curve_single_end`` places the first control point on the current point, so
length, offset and bounding box math only ever handle one segment form.

Offsets use the same sign everywhere: positive distances move outward for
closed paths and to the right of the direction of travel (as seen on the
page) for open paths.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sewdraft.domain import _bezier
from sewdraft.domain.point import EPSILON, Point, signed_area
from sewdraft.exceptions import GeometryError


class SegmentType(str, Enum):
    """Kind of drawing operation."""

    MOVE = "move"
    LINE = "line"
    CURVE = "curve"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class Segment:
    """A single drawing operation.

    Attributes:
        type: Operation kind
        to: End point (None for close)
        cp1: First control point (curves only)
        cp2: Second control point (curves only)
    """

    type: SegmentType
    to: Point | None = None
    cp1: Point | None = None
    cp2: Point | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {"type": self.type.value}
        if self.to is not None:
            data["to"] = self.to.to_dict()
        if self.cp1 is not None:
            data["cp1"] = self.cp1.to_dict()
        if self.cp2 is not None:
            data["cp2"] = self.cp2.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary."""
        return cls(
            type=SegmentType(data["type"]),
            to=Point.from_dict(data["to"]) if "to" in data else None,
            cp1=Point.from_dict(data["cp1"]) if "cp1" in data else None,
            cp2=Point.from_dict(data["cp2"]) if "cp2" in data else None,
        )


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounds of a path."""

    top_left: Point
    bottom_right: Point

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y


# A drawable piece: start, end, and the cubic control points for curves
_Piece = tuple[Point, Point, "_bezier.Cubic | None"]


def _require_point(value: Any, operation: str, role: str) -> Point:
    if not isinstance(value, Point):
        raise GeometryError(
            operation, f"{role} must be a Point, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True, slots=True)
class Path:
    """An ordered, immutable sequence of drawing operations.

    Attributes:
        ops: Segments in drawing order
        attributes: Name/value pairs such as ``class`` for renderers
    """

    ops: tuple[Segment, ...] = ()
    attributes: tuple[tuple[str, str], ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _append(self, segment: Segment, operation: str) -> "Path":
        if not self.ops:
            raise GeometryError(operation, "path must start with move()")
        if self.ops[-1].type == SegmentType.CLOSE:
            raise GeometryError(operation, "cannot add segments after close()")
        return Path(self.ops + (segment,), self.attributes)

    def move(self, to: Point) -> "Path":
        """Start the path at a point."""
        to = _require_point(to, "move", "target")
        if self.ops:
            raise GeometryError("move", "a path has exactly one move() and it comes first")
        return Path((Segment(SegmentType.MOVE, to),), self.attributes)

    def line(self, to: Point) -> "Path":
        """Straight segment from the current point."""
        to = _require_point(to, "line", "target")
        return self._append(Segment(SegmentType.LINE, to), "line")

    def curve(self, cp1: Point, cp2: Point, to: Point) -> "Path":
        """Cubic Bezier segment with both control points."""
        cp1 = _require_point(cp1, "curve", "cp1")
        cp2 = _require_point(cp2, "curve", "cp2")
        to = _require_point(to, "curve", "target")
        return self._append(Segment(SegmentType.CURVE, to, cp1, cp2), "curve")

    def curve_single(self, cp: Point, to: Point) -> "Path":
        """Cubic segment controlled only at its start; cp2 sits on the end point."""
        cp = _require_point(cp, "curve_single", "cp")
        to = _require_point(to, "curve_single", "target")
        return self._append(Segment(SegmentType.CURVE, to, cp, to), "curve_single")

    def curve_single_end(self, cp: Point, to: Point) -> "Path":
        """Cubic segment controlled only at its end; cp1 sits on the current point."""
        cp = _require_point(cp, "curve_single_end", "cp")
        to = _require_point(to, "curve_single_end", "target")
        if not self.ops:
            raise GeometryError("curve_single_end", "path must start with move()")
        current = self.end()
        return self._append(
            Segment(SegmentType.CURVE, to, current, cp), "curve_single_end"
        )

    def close(self) -> "Path":
        """Draw a straight segment back to the start point."""
        if not self.ops:
            raise GeometryError("close", "cannot close an empty path")
        return self._append(Segment(SegmentType.CLOSE), "close")

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def attr(self, name: str, value: Any, append: bool = False) -> "Path":
        """Return a copy with an attribute set (or appended to)."""
        current = dict(self.attributes)
        text = str(value)
        if append and name in current:
            text = f"{current[name]} {text}"
        current[name] = text
        return Path(self.ops, tuple(current.items()))

    def get_attribute(self, name: str) -> str | None:
        """Look up an attribute value, None when absent."""
        for key, value in self.attributes:
            if key == name:
                return value
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_closed(self) -> bool:
        return bool(self.ops) and self.ops[-1].type == SegmentType.CLOSE

    def start(self) -> Point:
        """First point of the path."""
        if not self.ops:
            raise GeometryError("start", "path is empty")
        start = self.ops[0].to
        assert start is not None
        return start

    def end(self) -> Point:
        """Last point of the path (the start point for closed paths)."""
        if not self.ops:
            raise GeometryError("end", "path is empty")
        last = self.ops[-1]
        if last.type == SegmentType.CLOSE:
            return self.start()
        assert last.to is not None
        return last.to

    def _pieces(self) -> list[_Piece]:
        """Drawable pieces with explicit start points, close as a line."""
        pieces: list[_Piece] = []
        if not self.ops:
            return pieces
        start = self.start()
        current = start
        for op in self.ops[1:]:
            if op.type == SegmentType.LINE:
                assert op.to is not None
                pieces.append((current, op.to, None))
                current = op.to
            elif op.type == SegmentType.CURVE:
                assert op.to is not None and op.cp1 is not None and op.cp2 is not None
                pieces.append((current, op.to, (current, op.cp1, op.cp2, op.to)))
                current = op.to
            elif op.type == SegmentType.CLOSE:
                pieces.append((current, start, None))
                current = start
        return pieces

    def length(self, tolerance: float = 1e-5) -> float:
        """Total arc length.

        Args:
            tolerance: Relative error bound for curve integration

        Returns:
            Length in millimetres, 0.0 for empty paths
        """
        total = 0.0
        for start, end, cubic in self._pieces():
            if cubic is None:
                total += start.dist(end)
            else:
                total += _bezier.cubic_length(cubic, tolerance)
        return total

    def bounding_box(self) -> BoundingBox:
        """Exact axis-aligned bounds including curve extrema."""
        if not self.ops:
            raise GeometryError("bounding_box", "path is empty")
        xs = [self.start().x]
        ys = [self.start().y]
        for _, end, cubic in self._pieces():
            xs.append(end.x)
            ys.append(end.y)
            if cubic is not None:
                for t in _bezier.cubic_extrema(cubic):
                    p = _bezier.cubic_point(cubic, t)
                    xs.append(p.x)
                    ys.append(p.y)
        return BoundingBox(Point(min(xs), min(ys)), Point(max(xs), max(ys)))

    def flatten(self, tolerance: float = 0.1) -> list[Point]:
        """Approximate the path with a polyline.

        Args:
            tolerance: Maximum distance from the true curve

        Returns:
            Polyline vertices, starting with the start point
        """
        if not self.ops:
            return []
        vertices = [self.start()]
        for _, end, cubic in self._pieces():
            if cubic is None:
                vertices.append(end)
            else:
                vertices.extend(_bezier.flatten_cubic(cubic, tolerance)[1:])
        return vertices

    def signed_area(self) -> float:
        """Signed area of the flattened outline.

        Outlines that run counter-clockwise on the page (with y down) have a
        negative area; clockwise outlines have a positive area.
        """
        return signed_area(self.flatten())

    def shift_along(self, distance: float, tolerance: float = 1e-5) -> Point:
        """Point at a given arc length from the start."""
        if not self.ops:
            raise GeometryError("shift_along", "path is empty")
        if distance < 0:
            raise GeometryError("shift_along", f"negative distance {distance}")

        walked = 0.0
        for start, end, cubic in self._pieces():
            if cubic is None:
                piece_length = start.dist(end)
            else:
                piece_length = _bezier.cubic_length(cubic, tolerance)
            if walked + piece_length >= distance - tolerance:
                remaining = max(0.0, distance - walked)
                if cubic is None:
                    return start.shift_towards(end, remaining)
                t = _bezier.cubic_t_at_length(cubic, remaining, tolerance)
                return _bezier.cubic_point(cubic, t)
            walked += piece_length

        if distance <= walked + tolerance:
            return self.end()
        raise GeometryError(
            "shift_along",
            f"distance {distance:.2f} exceeds path length {walked:.2f}",
        )

    def shift_fraction_along(self, fraction: float) -> Point:
        """Point at a fraction of the total arc length."""
        return self.shift_along(fraction * self.length())

    def divide(self) -> list["Path"]:
        """Split into one path per drawable segment."""
        parts: list[Path] = []
        for start, end, cubic in self._pieces():
            path = Path(attributes=self.attributes).move(start)
            if cubic is None:
                path = path.line(end)
            else:
                path = path.curve(cubic[1], cubic[2], end)
            parts.append(path)
        return parts

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def translate(self, dx: float, dy: float) -> "Path":
        """Copy of the path moved by a cartesian offset."""
        ops = tuple(
            Segment(
                op.type,
                op.to.translate(dx, dy) if op.to is not None else None,
                op.cp1.translate(dx, dy) if op.cp1 is not None else None,
                op.cp2.translate(dx, dy) if op.cp2 is not None else None,
            )
            for op in self.ops
        )
        return Path(ops, self.attributes)

    def reverse(self) -> "Path":
        """Same geometry traced in the opposite direction.

        Control points swap roles so every curve keeps its shape. Closed
        paths stay closed and keep their start point: the closing segment is
        traced first, and a final straight segment back to the start is
        left to ``close()``.
        """
        if not self.ops:
            return Path(attributes=self.attributes)

        pieces = self._pieces()
        start_point = self.end()
        if self.is_closed and pieces[-1][0].dist(pieces[-1][1]) < EPSILON:
            pieces = pieces[:-1]
        segments: list[Segment] = []
        for start, _, cubic in reversed(pieces):
            if cubic is None:
                segments.append(Segment(SegmentType.LINE, start))
            else:
                segments.append(Segment(SegmentType.CURVE, start, cubic[2], cubic[1]))

        if self.is_closed:
            if (
                segments
                and segments[-1].type == SegmentType.LINE
                and segments[-1].to is not None
                and segments[-1].to.dist(start_point) < EPSILON
            ):
                segments.pop()
            segments.append(Segment(SegmentType.CLOSE))

        return Path((Segment(SegmentType.MOVE, start_point),) + tuple(segments), self.attributes)

    def join(self, other: "Path", tolerance: float = 0.01) -> "Path":
        """Concatenate another path that starts where this one ends.

        Raises:
            GeometryError: If either path is closed or the paths are not
                contiguous
        """
        if not self.ops:
            return Path(other.ops, self.attributes or other.attributes)
        if not other.ops:
            return self
        if self.is_closed:
            raise GeometryError("join", "cannot join onto a closed path")
        if other.is_closed:
            raise GeometryError("join", "cannot join a closed path onto another path")

        end = self.end()
        start = other.start()
        if not end.sits_on(start, tolerance):
            raise GeometryError(
                "join",
                f"paths are not contiguous: end ({end.x:.2f}, {end.y:.2f}) "
                f"!= start ({start.x:.2f}, {start.y:.2f})",
            )
        return Path(self.ops + other.ops[1:], self.attributes)

    def offset(
        self,
        distance: float,
        subdivisions: int = 8,
        miter_limit: float = 4.0,
    ) -> "Path":
        """Parallel path at a constant normal distance.

        Used for seam allowances. Curves are split into ``subdivisions``
        pieces that are offset one by one. Where neighbouring offset segments
        leave a gap (outside corners) they are joined with a mitre, or with a
        bevel when the mitre would reach further than ``miter_limit`` times
        the distance. Inside corners overlap and the resulting
        self-intersections are left for a renderer to clean up.

        Args:
            distance: Positive is outward for closed paths, right of travel
                for open paths
            subdivisions: Pieces per curve segment
            miter_limit: Longest mitre as a multiple of the distance

        Returns:
            New path with the same attributes
        """
        if distance == 0 or len(self.ops) < 2:
            return Path(self.ops, self.attributes)

        signed = distance
        if self.is_closed and self.signed_area() > 0:
            signed = -distance

        offset_pieces: list[_bezier.Cubic | tuple[Point, Point]] = []
        for start, end, cubic in self._pieces():
            if start.dist(end) < EPSILON and cubic is None:
                continue
            if cubic is None:
                nx, ny = _bezier.right_normal(end.x - start.x, end.y - start.y)
                offset_pieces.append(
                    (
                        start.translate(nx * signed, ny * signed),
                        end.translate(nx * signed, ny * signed),
                    )
                )
                continue
            n = max(1, subdivisions)
            for i in range(n):
                section = _bezier.cubic_section(cubic, i / n, (i + 1) / n)
                offset_pieces.append(_bezier.offset_cubic(section, signed))

        if not offset_pieces:
            return Path(self.ops, self.attributes)

        result = Path(attributes=self.attributes).move(offset_pieces[0][0])
        limit = abs(distance) * miter_limit
        previous = None
        for piece in offset_pieces:
            if previous is not None:
                result = _connect(result, previous, piece, limit)
            if len(piece) == 2:
                result = result.line(piece[1])
            else:
                result = result.curve(piece[1], piece[2], piece[3])
            previous = piece

        if self.is_closed:
            result = _connect(result, offset_pieces[-1], offset_pieces[0], limit)
            result = result.close()
        return result

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {"ops": [op.to_dict() for op in self.ops]}
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Path":
        """Deserialize from dictionary."""
        ops = tuple(Segment.from_dict(op) for op in data["ops"])
        attributes = tuple(data.get("attributes", {}).items())
        return cls(ops=ops, attributes=attributes)


def _piece_tangents(
    piece: "_bezier.Cubic | tuple[Point, Point]",
) -> tuple[tuple[float, float], tuple[float, float]]:
    if len(piece) == 2:
        direction = (piece[1].x - piece[0].x, piece[1].y - piece[0].y)
        return direction, direction
    return _bezier.start_tangent(piece), _bezier.end_tangent(piece)


def _connect(
    path: Path,
    previous: "_bezier.Cubic | tuple[Point, Point]",
    following: "_bezier.Cubic | tuple[Point, Point]",
    limit: float,
) -> Path:
    """Bridge the gap between two offset pieces with a mitre or bevel."""
    end = previous[-1]
    start = following[0]
    if end.dist(start) < 1e-6:
        return path

    _, out_dir = _piece_tangents(previous)
    in_dir, _ = _piece_tangents(following)
    denom = out_dir[0] * in_dir[1] - out_dir[1] * in_dir[0]
    if abs(denom) > 1e-10:
        t = ((start.x - end.x) * in_dir[1] - (start.y - end.y) * in_dir[0]) / denom
        miter = Point(end.x + t * out_dir[0], end.y + t * out_dir[1])
        ahead = (miter.x - end.x) * out_dir[0] + (miter.y - end.y) * out_dir[1]
        behind = (start.x - miter.x) * in_dir[0] + (start.y - miter.y) * in_dir[1]
        if ahead > 0 and behind > 0 and max(miter.dist(end), miter.dist(start)) <= limit:
            path = path.line(miter)
    return path.line(start)

"""Internal cubic Bezier algorithms.

This is an internal module containing helper functions for Path.
Not intended for public use. Every function takes the four control points
of a cubic as ``(p0, p1, p2, p3)``.
"""

import math

from sewdraft.domain.point import EPSILON, Point

Cubic = tuple[Point, Point, Point, Point]

# Equal-width panels integrated before adaptive refinement starts
_LENGTH_PANELS = 8
_MAX_DEPTH = 18


def cubic_point(curve: Cubic, t: float) -> Point:
    """Evaluate the curve at parameter t using the Bernstein form."""
    p0, p1, p2, p3 = curve
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def cubic_derivative(curve: Cubic, t: float) -> tuple[float, float]:
    """First derivative of the curve at parameter t."""
    p0, p1, p2, p3 = curve
    mt = 1.0 - t
    a = 3 * mt * mt
    b = 6 * mt * t
    c = 3 * t * t
    return (
        a * (p1.x - p0.x) + b * (p2.x - p1.x) + c * (p3.x - p2.x),
        a * (p1.y - p0.y) + b * (p2.y - p1.y) + c * (p3.y - p2.y),
    )


def split_cubic(curve: Cubic, t: float) -> tuple[Cubic, Cubic]:
    """Split a curve at parameter t using De Casteljau's algorithm.

    Returns:
        Tuple of (left, right) curves that together trace the original
    """
    p0, p1, p2, p3 = curve

    # First level
    q0 = p0.shift_fraction_towards(p1, t)
    q1 = p1.shift_fraction_towards(p2, t)
    q2 = p2.shift_fraction_towards(p3, t)

    # Second level
    r0 = q0.shift_fraction_towards(q1, t)
    r1 = q1.shift_fraction_towards(q2, t)

    # Third level (point on curve)
    mid = r0.shift_fraction_towards(r1, t)

    return (p0, q0, r0, mid), (mid, r1, q2, p3)


def cubic_section(curve: Cubic, t0: float, t1: float) -> Cubic:
    """Extract the part of a curve between two parameters."""
    if t1 >= 1.0:
        section = curve
    else:
        section, _ = split_cubic(curve, t1)
    if t0 <= 0.0:
        return section
    _, section = split_cubic(section, t0 / t1)
    return section


def _speed(curve: Cubic, t: float) -> float:
    dx, dy = cubic_derivative(curve, t)
    return math.hypot(dx, dy)


def _adaptive_simpson(
    curve: Cubic,
    a: float,
    b: float,
    fa: float,
    fm: float,
    fb: float,
    whole: float,
    eps: float,
    depth: int,
) -> float:
    m = (a + b) / 2
    lm = (a + m) / 2
    rm = (m + b) / 2
    flm = _speed(curve, lm)
    frm = _speed(curve, rm)
    left = (m - a) / 6 * (fa + 4 * flm + fm)
    right = (b - m) / 6 * (fm + 4 * frm + fb)
    delta = left + right - whole
    if depth <= 0 or abs(delta) <= 15 * eps:
        return left + right + delta / 15
    return _adaptive_simpson(
        curve, a, m, fa, flm, fm, left, eps / 2, depth - 1
    ) + _adaptive_simpson(curve, m, b, fm, frm, fb, right, eps / 2, depth - 1)


def cubic_length(curve: Cubic, tolerance: float = 1e-5) -> float:
    """Arc length of a cubic by adaptive Simpson integration of |B'(t)|.

    Args:
        curve: Control points
        tolerance: Relative error bound, scaled by the control polygon length

    Returns:
        Arc length in millimetres
    """
    p0, p1, p2, p3 = curve
    polygon = p0.dist(p1) + p1.dist(p2) + p2.dist(p3)
    chord = p0.dist(p3)

    # Straight or degenerate curve
    if polygon - chord < EPSILON:
        return chord

    eps = tolerance * polygon / _LENGTH_PANELS
    total = 0.0
    step = 1.0 / _LENGTH_PANELS
    for i in range(_LENGTH_PANELS):
        a = i * step
        b = a + step
        fa = _speed(curve, a)
        fm = _speed(curve, (a + b) / 2)
        fb = _speed(curve, b)
        whole = (b - a) / 6 * (fa + 4 * fm + fb)
        total += _adaptive_simpson(curve, a, b, fa, fm, fb, whole, eps, _MAX_DEPTH)
    return total


def cubic_t_at_length(curve: Cubic, distance: float, tolerance: float = 1e-5) -> float:
    """Find the parameter at which the arc length from the start reaches distance.

    Uses bisection on the length of the left split.
    """
    total = cubic_length(curve, tolerance)
    if distance <= 0 or total < EPSILON:
        return 0.0
    if distance >= total:
        return 1.0

    lo, hi = 0.0, 1.0
    for _ in range(40):
        mid = (lo + hi) / 2
        left, _ = split_cubic(curve, mid)
        if cubic_length(left, tolerance) < distance:
            lo = mid
        else:
            hi = mid
        if hi - lo < 1e-9:
            break
    return (lo + hi) / 2


def _quadratic_roots(a: float, b: float, c: float) -> list[float]:
    """Real roots of a*t^2 + b*t + c inside the open interval (0, 1)."""
    roots: list[float] = []
    if abs(a) < 1e-12:
        if abs(b) > 1e-12:
            roots.append(-c / b)
    else:
        disc = b * b - 4 * a * c
        if disc >= 0:
            sq = math.sqrt(disc)
            roots.extend([(-b + sq) / (2 * a), (-b - sq) / (2 * a)])
    return [t for t in roots if 0.0 < t < 1.0]


def cubic_extrema(curve: Cubic) -> list[float]:
    """Parameters where the curve's x or y derivative is zero."""
    p0, p1, p2, p3 = curve
    ts: list[float] = []
    for c0, c1, c2, c3 in (
        (p0.x, p1.x, p2.x, p3.x),
        (p0.y, p1.y, p2.y, p3.y),
    ):
        a = c1 - c0
        b = c2 - c1
        c = c3 - c2
        ts.extend(_quadratic_roots(a - 2 * b + c, 2 * (b - a), a))
    return sorted(ts)


def flatten_cubic(curve: Cubic, tolerance: float) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Args:
        curve: Control points
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve
    """
    p0, p1, p2, p3 = curve

    # Calculate curve midpoint (at t=0.5)
    curve_mid_x = 0.125 * (p0.x + 3 * p1.x + 3 * p2.x + p3.x)
    curve_mid_y = 0.125 * (p0.y + 3 * p1.y + 3 * p2.y + p3.y)

    # Approximate with line segment midpoint
    line_mid_x = (p0.x + p3.x) / 2
    line_mid_y = (p0.y + p3.y) / 2

    distance = math.hypot(curve_mid_x - line_mid_x, curve_mid_y - line_mid_y)
    control_spread = max(
        _distance_to_chord(p1, p0, p3), _distance_to_chord(p2, p0, p3)
    )

    if distance <= tolerance and control_spread <= tolerance:
        return [p0, p3]

    left, right = split_cubic(curve, 0.5)
    return flatten_cubic(left, tolerance)[:-1] + flatten_cubic(right, tolerance)


def _distance_to_chord(point: Point, start: Point, end: Point) -> float:
    length = start.dist(end)
    if length < EPSILON:
        return start.dist(point)
    cross = (end.x - start.x) * (point.y - start.y) - (end.y - start.y) * (point.x - start.x)
    return abs(cross) / length


def right_normal(dx: float, dy: float) -> tuple[float, float]:
    """Unit normal to the right of travel on the page.

    With y growing downward, the right-hand side of a direction (dx, dy) is
    (-dy, dx). A zero vector yields (0.0, 0.0).
    """
    length = math.hypot(dx, dy)
    if length < EPSILON:
        return 0.0, 0.0
    return -dy / length, dx / length


def _direction(*candidates: tuple[Point, Point]) -> tuple[float, float]:
    """First non-degenerate direction among (from, to) candidates."""
    for start, end in candidates:
        dx = end.x - start.x
        dy = end.y - start.y
        if math.hypot(dx, dy) > EPSILON:
            return dx, dy
    return 0.0, 0.0


def _offset_line_intersection(
    a: Point, da: tuple[float, float], b: Point, db: tuple[float, float]
) -> Point | None:
    """Intersection of two infinite lines given as point + direction."""
    denom = da[0] * db[1] - da[1] * db[0]
    if abs(denom) < 1e-10:
        return None
    t = ((b.x - a.x) * db[1] - (b.y - a.y) * db[0]) / denom
    return Point(a.x + t * da[0], a.y + t * da[1])


def start_tangent(curve: Cubic) -> tuple[float, float]:
    """Direction of travel where the curve starts."""
    p0, p1, p2, p3 = curve
    return _direction((p0, p1), (p0, p2), (p0, p3))


def end_tangent(curve: Cubic) -> tuple[float, float]:
    """Direction of travel where the curve ends."""
    p0, p1, p2, p3 = curve
    return _direction((p2, p3), (p1, p3), (p0, p3))


def offset_cubic(curve: Cubic, distance: float) -> Cubic:
    """Offset a cubic by Tiller-Hanson control polygon offsetting.

    Each leg of the control polygon is moved sideways by ``distance`` (to the
    right of travel for positive values) and the new inner control points sit
    where consecutive moved legs intersect. Accurate for curves that turn less
    than roughly 30 degrees, so callers subdivide first.

    Args:
        curve: Control points
        distance: Signed normal distance

    Returns:
        Control points of the offset curve
    """
    p0, p1, p2, p3 = curve
    t_start = start_tangent(curve)
    t_end = end_tangent(curve)
    t_mid = _direction((p1, p2), (p0, p3))

    n_start = right_normal(*t_start)
    n_end = right_normal(*t_end)
    n_mid = right_normal(*t_mid)

    q0 = p0.translate(n_start[0] * distance, n_start[1] * distance)
    q3 = p3.translate(n_end[0] * distance, n_end[1] * distance)
    mid_anchor = p1.translate(n_mid[0] * distance, n_mid[1] * distance)

    naive1 = p1.translate(n_start[0] * distance, n_start[1] * distance)
    naive2 = p2.translate(n_end[0] * distance, n_end[1] * distance)
    limit = 4 * (abs(distance) + p0.dist(p3))

    q1 = _offset_line_intersection(q0, t_start, mid_anchor, t_mid)
    if q1 is None or q1.dist(naive1) > limit:
        q1 = naive1
    q2 = _offset_line_intersection(mid_anchor, t_mid, q3, t_end)
    if q2 is None or q2.dist(naive2) > limit:
        q2 = naive2

    return q0, q1, q2, q3

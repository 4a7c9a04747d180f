"""Basic t-shirt: back, front and sleeve.

The back and front are drafted on the same body block and differ only in
their neckline and armhole shaping. Both are cut on the fold along the
centre line at x = 0. The back records its armhole length in the store; the
front does the same, and the sleeve sizes its cap to fit both.

Coordinates are millimetres with y growing downward. The high point of the
shoulder sits at y = 0.
"""

import math

from sewdraft.core.design import Design, ListOption, NumberOption, PctOption
from sewdraft.core.geometry import beam_intersects_y
from sewdraft.core.part import Part, PartContext
from sewdraft.domain import Path, Point
from sewdraft.exceptions import GeometryError

VERSION = "0.1.0"

MEASUREMENTS = (
    "neck",
    "chest",
    "hips",
    "shoulder_to_shoulder",
    "hps_to_waist_back",
    "waist_to_hips",
    "biceps",
    "shoulder_to_wrist",
)

OPTIONS = {
    "collar_factor": PctOption(default=0.19, min=0.15, max=0.25),
    "back_neck_cutout": PctOption(default=0.05, min=0.0, max=0.3),
    "front_neck_cutout": PctOption(default=0.2, min=0.05, max=0.4),
    "chest_ease": PctOption(default=0.08, min=0.0, max=0.3),
    "hips_ease": PctOption(default=0.08, min=0.0, max=0.3),
    "length_bonus": PctOption(default=0.05, min=-0.2, max=0.5),
    "shoulder_slope": NumberOption(default=13.0, min=0.0, max=30.0, unit="deg"),
    "armhole_depth_factor": PctOption(default=0.55, min=0.4, max=0.7),
    "biceps_ease": PctOption(default=0.15, min=0.0, max=0.5),
    "sleeve_length": PctOption(default=0.2, min=0.1, max=1.0),
    "units": ListOption(default="metric", choices=("metric", "imperial")),
}

MACROS = ("cutonfold", "grainline", "title", "scalebox", "hd", "vd", "pd")

# Cap height search
_CAP_ITERATIONS = 60
_CAP_PRECISION = 0.1


def draft_block(ctx: PartContext) -> None:
    """Fill the shared body block points for a back or front."""
    m = ctx.measurements
    o = ctx.options
    points = ctx.points

    quarter_chest = m["chest"] * (1 + o["chest_ease"]) / 4
    quarter_hips = m["hips"] * (1 + o["hips_ease"]) / 4
    hem_y = (m["hps_to_waist_back"] + m["waist_to_hips"]) * (1 + o["length_bonus"])

    points["neck"] = Point(m["neck"] * o["collar_factor"], 0)
    shoulder_x = m["shoulder_to_shoulder"] / 2
    points["shoulder"] = Point(
        shoulder_x,
        math.tan(math.radians(o["shoulder_slope"])) * (shoulder_x - points["neck"].x),
    )
    points["armhole"] = Point(quarter_chest, m["hps_to_waist_back"] * o["armhole_depth_factor"])
    points["waist"] = Point(quarter_chest, m["hps_to_waist_back"])
    points["hem"] = Point(quarter_hips, hem_y)
    points["cf_hem"] = Point(0, hem_y)
    points["cf_neck"] = Point(0, o["front_neck_cutout"] * m["neck"])

    # Side seam leaves the waist straight up
    points["waist_cp2"] = points["waist"].shift(
        90, (points["waist"].y - points["armhole"].y) / 3
    )

    # Armhole
    points["armhole_pitch"] = Point(
        points["shoulder"].x * 0.95,
        points["shoulder"].y + (points["armhole"].y - points["shoulder"].y) / 2,
    )
    points["armhole_hollow"] = Point(
        points["armhole_pitch"].x + 0.35 * (points["armhole"].x - points["armhole_pitch"].x),
        points["armhole"].y - 0.4 * (points["armhole"].y - points["armhole_pitch"].y),
    )
    points["armhole_cp2"] = points["armhole"].shift(
        180, (points["armhole"].x - points["armhole_hollow"].x) / 2
    )
    points["armhole_hollow_cp1"] = points["armhole_hollow"].shift(
        -50, points["armhole_hollow"].dist(points["armhole"]) / 3
    )
    points["armhole_hollow_cp2"] = points["armhole_hollow"].shift(
        130, points["armhole_hollow"].dist(points["shoulder"]) / 3
    )
    shoulder_angle = points["shoulder"].angle(points["neck"])
    points["shoulder_cp1"] = points["shoulder"].shift(
        shoulder_angle + 90, points["shoulder"].dist(points["armhole_pitch"]) / 2
    )

    # Neckline leaves the shoulder at a right angle
    points["neck_cp2"] = points["neck"].shift(
        points["neck"].angle(points["shoulder"]) - 90, points["cf_neck"].y / 2
    )
    points["cf_neck_cp1"] = points["cf_neck"].shift(0, points["neck"].x * 0.6)

    points["title"] = Point(
        quarter_chest * 0.45,
        points["armhole"].y + (hem_y - points["armhole"].y) * 0.6,
    )


def _armhole(points) -> Path:
    return (
        Path()
        .move(points["armhole"])
        .curve(points["armhole_cp2"], points["armhole_hollow_cp1"], points["armhole_hollow"])
        .curve(points["armhole_hollow_cp2"], points["shoulder_cp1"], points["shoulder"])
    )


def _bodice_seam(points, centre_neck: str) -> Path:
    return (
        Path()
        .move(points["cf_hem"])
        .line(points["hem"])
        .line(points["waist"])
        .curve_single(points["waist_cp2"], points["armhole"])
        .curve(points["armhole_cp2"], points["armhole_hollow_cp1"], points["armhole_hollow"])
        .curve(points["armhole_hollow_cp2"], points["shoulder_cp1"], points["shoulder"])
        .line(points["neck"])
        .curve(points["neck_cp2"], points[f"{centre_neck}_cp1"], points[centre_neck])
        .line(points["cf_hem"])
        .close()
        .attr("class", "fabric")
    )


def _bodice_seam_allowance(ctx: PartContext, centre_neck: str) -> Path:
    """Seam allowance for every edge except the fold.

    The hem and neckline meet the fold at right angles, so the offset starts
    and ends on the fold line.
    """
    points = ctx.points
    base = (
        Path()
        .move(points["cf_hem"])
        .line(points["hem"])
        .line(points["waist"])
        .curve_single(points["waist_cp2"], points["armhole"])
        .join(_armhole(points), ctx.geometry.coincidence_tolerance)
        .line(points["neck"])
        .curve(points["neck_cp2"], points[f"{centre_neck}_cp1"], points[centre_neck])
    )
    return ctx.seam_allowance(base)


def _bodice_dimensions(ctx: PartContext, centre_neck: str) -> None:
    points = ctx.points
    sa = ctx.sa
    ctx.macro(
        "vd",
        {
            "from": points["cf_hem"],
            "to": points[centre_neck],
            "x": points["cf_hem"].x - sa - 15,
            "id": "dim_centre_length",
        },
    )
    ctx.macro(
        "vd",
        {
            "from": points["hem"],
            "to": points["armhole"],
            "x": points["hem"].x + sa + 15,
            "id": "dim_side_length",
        },
    )
    ctx.macro(
        "hd",
        {
            "from": points["cf_hem"],
            "to": points["hem"],
            "y": points["hem"].y + sa + 15,
            "id": "dim_hem_width",
        },
    )
    ctx.macro(
        "hd",
        {
            "from": points[centre_neck],
            "to": points["shoulder"],
            "y": points["neck"].y - sa - 15,
            "id": "dim_shoulder_width",
        },
    )
    ctx.macro("pd", {"path": _armhole(points), "d": sa + 15, "id": "dim_armhole"})


def draft_back(ctx: PartContext) -> None:
    """Back: shallow neckline, armhole length for the sleeve."""
    draft_block(ctx)
    m = ctx.measurements
    o = ctx.options
    points = ctx.points
    paths = ctx.paths

    # Adjust neckline
    points["cb_neck"] = Point(0, points["neck"].y + o["back_neck_cutout"] * m["neck"])
    points["cb_neck_cp1"] = points["cb_neck"].shift(0, points["neck"].x / 2)
    neck_cp2 = beam_intersects_y(points["neck"], points["neck_cp2"], points["cb_neck"].y)
    if neck_cp2 is not None:
        points["neck_cp2"] = neck_cp2

    # Adjust armhole
    points["shoulder_cp1"] = points["shoulder_cp1"].shift_fraction_towards(points["shoulder"], 0.25)

    paths["seam"] = _bodice_seam(points, "cb_neck")

    # Values the sleeve is drafted from
    ctx.store.set("sleevecap_ease", 0, export=True)
    ctx.store.set("back_armhole_length", ctx.measure(_armhole(points)), export=True)
    ctx.store.push("cutlist", {"part": "back", "cut": 1, "on_fold": True}, export=True)

    if ctx.complete:
        ctx.macro(
            "cutonfold",
            {"from": points["cb_neck"], "to": points["cf_hem"], "grainline": True},
        )
        ctx.macro("title", {"at": points["title"], "nr": 2, "title": "back"})
        points["scalebox"] = points["title"].shift(90, 100)
        ctx.macro("scalebox", {"at": points["scalebox"]})

        if ctx.sa:
            paths["sa"] = _bodice_seam_allowance(ctx, "cb_neck")

    if ctx.paperless:
        _bodice_dimensions(ctx, "cb_neck")


def draft_front(ctx: PartContext) -> None:
    """Front: deeper neckline, armhole length for the sleeve."""
    draft_block(ctx)
    points = ctx.points
    paths = ctx.paths

    neck_cp2 = beam_intersects_y(points["neck"], points["neck_cp2"], points["cf_neck"].y)
    if neck_cp2 is not None:
        points["neck_cp2"] = neck_cp2

    paths["seam"] = _bodice_seam(points, "cf_neck")

    ctx.store.set("front_armhole_length", ctx.measure(_armhole(points)), export=True)
    ctx.store.push("cutlist", {"part": "front", "cut": 1, "on_fold": True}, export=True)

    if ctx.complete:
        ctx.macro(
            "cutonfold",
            {"from": points["cf_neck"], "to": points["cf_hem"], "grainline": True},
        )
        ctx.macro("title", {"at": points["title"], "nr": 1, "title": "front"})

        if ctx.sa:
            paths["sa"] = _bodice_seam_allowance(ctx, "cf_neck")

    if ctx.paperless:
        _bodice_dimensions(ctx, "cf_neck")


def _sleevecap(half_width: float, height: float) -> Path:
    left = Point(-half_width, height)
    right = Point(half_width, height)
    top = Point(0, 0)
    return (
        Path()
        .move(left)
        .curve(Point(-half_width * 0.5, height), Point(-half_width * 0.5, 0), top)
        .curve(Point(half_width * 0.5, 0), Point(half_width * 0.5, height), right)
    )


def _fit_sleevecap(ctx: PartContext, half_width: float, target: float) -> float:
    """Find the cap height whose cap length matches the armhole.

    Cap length grows with height, from the sleeve width at height 0 to more
    than twice the height, so bisection on [0, target] converges.

    Raises:
        GeometryError: If the armhole is too short for the sleeve width
    """
    if target <= 2 * half_width:
        raise GeometryError(
            "sleevecap",
            f"armhole length {target:.1f} mm is shorter than the sleeve width "
            f"{2 * half_width:.1f} mm",
        )
    low, high = 0.0, target
    height = high
    for iteration in range(_CAP_ITERATIONS):
        height = (low + high) / 2
        delta = ctx.measure(_sleevecap(half_width, height)) - target
        if abs(delta) < _CAP_PRECISION:
            ctx.log.debug("Sleevecap fitted", iterations=iteration + 1, height=round(height, 2))
            break
        if delta > 0:
            high = height
        else:
            low = height
    return height


def draft_sleeve(ctx: PartContext) -> None:
    """Sleeve: cap sized to the back and front armholes."""
    m = ctx.measurements
    o = ctx.options
    points = ctx.points
    paths = ctx.paths

    armhole = 0.0
    for key in ("back_armhole_length", "front_armhole_length"):
        length = ctx.store.get(key)
        if length is None:
            length = m["hps_to_waist_back"] * o["armhole_depth_factor"]
            ctx.log.warning("Store value missing, estimating", key=key, estimate=round(length, 1))
        armhole += length
    ease = ctx.store.get("sleevecap_ease") or 0
    target = armhole * (1 + ease)

    half_width = m["biceps"] * (1 + o["biceps_ease"]) / 2
    cap_height = _fit_sleevecap(ctx, half_width, target)
    hem_y = max(m["shoulder_to_wrist"] * o["sleeve_length"], cap_height + 20)

    points["top"] = Point(0, 0)
    points["biceps_left"] = Point(-half_width, cap_height)
    points["biceps_right"] = Point(half_width, cap_height)
    points["hem_left"] = Point(-half_width * 0.9, hem_y)
    points["hem_right"] = Point(half_width * 0.9, hem_y)
    points["hem_centre"] = Point(0, hem_y)
    points["title"] = Point(0, cap_height + (hem_y - cap_height) / 2)

    cap = _sleevecap(half_width, cap_height)
    paths["seam"] = (
        Path()
        .move(points["hem_left"])
        .line(points["biceps_left"])
        .join(cap, ctx.geometry.coincidence_tolerance)
        .line(points["hem_right"])
        .close()
        .attr("class", "fabric")
    )

    ctx.store.set("sleevecap_length", ctx.measure(cap), export=True)
    ctx.store.push("cutlist", {"part": "sleeve", "cut": 2, "on_fold": False}, export=True)

    if ctx.complete:
        ctx.macro(
            "grainline",
            {"from": points["top"].shift(-90, 20), "to": points["hem_centre"].shift(90, 20)},
        )
        ctx.macro("title", {"at": points["title"], "nr": 3, "title": "sleeve"})

        if ctx.sa:
            paths["sa"] = ctx.seam_allowance(paths["seam"])

    if ctx.paperless:
        sa = ctx.sa
        ctx.macro(
            "hd",
            {
                "from": points["hem_left"],
                "to": points["hem_right"],
                "y": hem_y + sa + 15,
                "id": "dim_hem_width",
            },
        )
        ctx.macro(
            "hd",
            {
                "from": points["biceps_left"],
                "to": points["biceps_right"],
                "y": cap_height,
                "id": "dim_biceps_width",
            },
        )
        ctx.macro(
            "vd",
            {
                "from": points["hem_right"],
                "to": points["top"],
                "x": half_width + sa + 15,
                "id": "dim_sleeve_length",
            },
        )
        ctx.macro("pd", {"path": cap, "d": -(sa + 15), "id": "dim_sleevecap"})


DESIGN = Design(
    name="tee",
    version=VERSION,
    parts=(
        Part("back", draft_back, writes=("sleevecap_ease", "back_armhole_length", "cutlist")),
        Part("front", draft_front, writes=("front_armhole_length", "cutlist")),
        Part(
            "sleeve",
            draft_sleeve,
            reads=("back_armhole_length", "front_armhole_length", "sleevecap_ease"),
            writes=("sleevecap_length", "cutlist"),
        ),
    ),
    measurements=MEASUREMENTS,
    options=OPTIONS,
    macros=MACROS,
)

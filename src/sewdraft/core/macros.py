"""Macro registry and built-in drafting macros.

A macro is a reusable drafting convention (fold marker, title block, scale
box, dimension line) that a part applies to its own points and paths. Macros
form a closed set: each is a Macro subclass registered once at start-up, and
a draft resolves the macro names its design declares before any part runs.

Macros get the invoking part's live point and path maps, its options and a
parameter mapping. They never see the store, so the only cross-part
dependency stays part -> store -> later part.

Key classes:
- Macro: Base class with parameter validation
- MacroRegistry: Name -> macro table
- CutOnFold, Grainline, Title, Scalebox: finishing macros
- HorizontalDimension, VerticalDimension, LinearDimension, PathDimension:
  paperless dimension macros
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, ClassVar

from sewdraft.core.geometry import MM_PER_INCH, format_length
from sewdraft.domain import Path, Point
from sewdraft.exceptions import MacroError

PointMap = MutableMapping[str, Point]
PathMap = MutableMapping[str, Path]


class Macro(ABC):
    """A named drafting convention.

    Subclasses declare their parameter keys; ``validate`` rejects missing
    required keys, unknown keys and non-Point values for point parameters
    before ``apply`` runs.
    """

    name: ClassVar[str] = ""
    required: ClassVar[tuple[str, ...]] = ()
    optional: ClassVar[tuple[str, ...]] = ()
    point_params: ClassVar[tuple[str, ...]] = ()

    def validate(self, params: Mapping[str, Any]) -> None:
        """Check parameters against the macro's declared keys.

        Raises:
            MacroError: On a missing, unknown or mistyped parameter
        """
        for key in self.required:
            if params.get(key) is None:
                raise MacroError(self.name, f"missing required parameter '{key}'")
        allowed = set(self.required) | set(self.optional)
        for key in params:
            if key not in allowed:
                raise MacroError(self.name, f"unknown parameter '{key}'")
        for key in self.point_params:
            value = params.get(key)
            if value is not None and not isinstance(value, Point):
                raise MacroError(
                    self.name,
                    f"parameter '{key}' must be a Point, got {type(value).__name__}",
                )

    def number(self, params: Mapping[str, Any], key: str, default: float | None = None) -> float:
        """Read a numeric parameter."""
        value = params.get(key, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MacroError(self.name, f"parameter '{key}' must be a number, got {value!r}")
        return float(value)

    def run(
        self,
        params: Mapping[str, Any],
        points: PointMap,
        paths: PathMap,
        options: Mapping[str, Any],
    ) -> None:
        """Validate parameters, then apply."""
        self.validate(params)
        self.apply(params, points, paths, options)

    @abstractmethod
    def apply(
        self,
        params: Mapping[str, Any],
        points: PointMap,
        paths: PathMap,
        options: Mapping[str, Any],
    ) -> None:
        """Add or replace entries in the part's points and paths."""


class MacroRegistry:
    """Table of macros by name.

    Example:
        registry = default_registry()
        registry.resolve(["cutonfold", "title"])
        registry.apply("title", {"at": anchor, "nr": 1, "title": "front"},
                       points, paths, options)
    """

    def __init__(self, macros: Iterable[Macro] = ()) -> None:
        self._macros: dict[str, Macro] = {}
        for macro in macros:
            self.register(macro)

    def register(self, macro: Macro) -> None:
        """Add a macro to the table.

        Raises:
            MacroError: If the object is not a Macro, has no name, or its name
                is already taken
        """
        if not isinstance(macro, Macro):
            raise MacroError(
                str(getattr(macro, "name", macro)),
                f"cannot register {type(macro).__name__}; expected a Macro",
            )
        if not macro.name:
            raise MacroError(type(macro).__name__, "macro has no name")
        if macro.name in self._macros:
            raise MacroError(macro.name, "a macro with this name is already registered")
        self._macros[macro.name] = macro

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def names(self) -> list[str]:
        """Registered macro names in registration order."""
        return list(self._macros)

    def get(self, name: str) -> Macro:
        """Look up a macro.

        Raises:
            MacroError: If no macro has this name
        """
        try:
            return self._macros[name]
        except KeyError:
            raise MacroError(name, "no macro with this name is registered") from None

    def resolve(self, names: Iterable[str]) -> list[Macro]:
        """Look up every name up front, failing on the first unknown one."""
        return [self.get(name) for name in names]

    def apply(
        self,
        name: str,
        params: Mapping[str, Any],
        points: PointMap,
        paths: PathMap,
        options: Mapping[str, Any],
    ) -> None:
        """Run a macro against a part's maps."""
        self.get(name).run(params, points, paths, options)


def _distinct(macro: Macro, start: Point, end: Point) -> None:
    if start.sits_on(end, 1e-6):
        raise MacroError(macro.name, "'from' and 'to' points coincide")


def _unused_id(paths: PathMap, base: str) -> str:
    n = 1
    while f"{base}_{n}" in paths:
        n += 1
    return f"{base}_{n}"


class CutOnFold(Macro):
    """Bracket marking an edge that is cut on the fold."""

    name = "cutonfold"
    required = ("from", "to")
    optional = ("grainline", "offset", "margin", "prefix")
    point_params = ("from", "to")

    def apply(self, params, points, paths, options) -> None:
        start: Point = params["from"]
        end: Point = params["to"]
        _distinct(self, start, end)
        offset = self.number(params, "offset", 15.0)
        margin = self.number(params, "margin", 5.0)
        if not 0 <= margin < 50:
            raise MacroError(self.name, f"margin must be a percentage in [0, 50), got {margin}")
        prefix = params.get("prefix", "")
        grainline = bool(params.get("grainline", False))

        # Markers sit to the left of the from -> to direction
        side = start.angle(end) + 90
        fold_from = start.shift_fraction_towards(end, margin / 100)
        fold_to = end.shift_fraction_towards(start, margin / 100)
        via1 = fold_from.shift(side, offset)
        via2 = fold_to.shift(side, offset)

        points[f"{prefix}cutonfold_from"] = fold_from
        points[f"{prefix}cutonfold_via1"] = via1
        points[f"{prefix}cutonfold_via2"] = via2
        points[f"{prefix}cutonfold_to"] = fold_to

        text = "Cut on fold and grainline" if grainline else "Cut on fold"
        paths[f"{prefix}cutonfold"] = (
            Path()
            .move(fold_from)
            .line(via1)
            .line(via2)
            .line(fold_to)
            .attr("class", "note")
            .attr("marker-start", "url(#cutonfoldFrom)")
            .attr("marker-end", "url(#cutonfoldTo)")
            .attr("data-text", text)
        )

        if grainline:
            grain_from = via1.shift(side, offset)
            grain_to = via2.shift(side, offset)
            points[f"{prefix}cutonfold_grainline_from"] = grain_from
            points[f"{prefix}cutonfold_grainline_to"] = grain_to
            paths[f"{prefix}cutonfold_grainline"] = (
                Path()
                .move(grain_from)
                .line(grain_to)
                .attr("class", "grainline")
                .attr("marker-start", "url(#grainlineFrom)")
                .attr("marker-end", "url(#grainlineTo)")
            )


class Grainline(Macro):
    """Double-headed arrow showing the fabric grain."""

    name = "grainline"
    required = ("from", "to")
    optional = ("prefix",)
    point_params = ("from", "to")

    def apply(self, params, points, paths, options) -> None:
        start: Point = params["from"]
        end: Point = params["to"]
        _distinct(self, start, end)
        prefix = params.get("prefix", "")

        points[f"{prefix}grainline_from"] = start.copy()
        points[f"{prefix}grainline_to"] = end.copy()
        paths[f"{prefix}grainline"] = (
            Path()
            .move(start.copy())
            .line(end.copy())
            .attr("class", "grainline")
            .attr("marker-start", "url(#grainlineFrom)")
            .attr("marker-end", "url(#grainlineTo)")
            .attr("data-text", "Grainline")
        )


class Title(Macro):
    """Title block: part number, part title and optional pattern name."""

    name = "title"
    required = ("at", "nr", "title")
    optional = ("prefix", "pattern", "line_height")
    point_params = ("at",)

    def apply(self, params, points, paths, options) -> None:
        at: Point = params["at"]
        prefix = params.get("prefix", "")
        title = str(params["title"])
        if not title:
            raise MacroError(self.name, "title must not be empty")
        line_height = self.number(params, "line_height", 12.0)

        points[f"{prefix}title_nr"] = (
            at.copy().attr("data-text", params["nr"]).attr("class", "title-nr")
        )
        points[f"{prefix}title_name"] = (
            at.shift(-90, line_height * 1.5)
            .attr("data-text", title)
            .attr("class", "title-name")
        )
        if params.get("pattern"):
            points[f"{prefix}title_pattern"] = (
                at.shift(-90, line_height * 2.5)
                .attr("data-text", params["pattern"])
                .attr("class", "title-pattern")
            )


class Scalebox(Macro):
    """Reference boxes for checking a print was not scaled.

    An imperial 4" x 2" box with a metric 10cm x 5cm box inside, both centred
    on the anchor.
    """

    name = "scalebox"
    required = ("at",)
    optional = ("prefix", "text")
    point_params = ("at",)

    IMPERIAL = (4 * MM_PER_INCH, 2 * MM_PER_INCH)
    METRIC = (100.0, 50.0)

    def _box(
        self, at: Point, size: tuple[float, float], key: str, points: PointMap
    ) -> Path:
        half_w, half_h = size[0] / 2, size[1] / 2
        corners = {
            "top_left": at.translate(-half_w, -half_h),
            "top_right": at.translate(half_w, -half_h),
            "bottom_right": at.translate(half_w, half_h),
            "bottom_left": at.translate(-half_w, half_h),
        }
        for corner, point in corners.items():
            points[f"{key}_{corner}"] = point
        return (
            Path()
            .move(corners["top_left"])
            .line(corners["bottom_left"])
            .line(corners["bottom_right"])
            .line(corners["top_right"])
            .close()
        )

    def apply(self, params, points, paths, options) -> None:
        at: Point = params["at"]
        prefix = params.get("prefix", "")
        imperial_key = f"{prefix}scalebox_imperial"
        metric_key = f"{prefix}scalebox_metric"

        paths[imperial_key] = self._box(at, self.IMPERIAL, imperial_key, points).attr(
            "class", "scalebox imperial"
        )
        paths[metric_key] = self._box(at, self.METRIC, metric_key, points).attr(
            "class", "scalebox metric"
        )
        text = params.get("text", "sewdraft")
        points[f"{prefix}scalebox_label"] = (
            at.copy().attr("data-text", text).attr("class", "scalebox-label")
        )
        points[f"{prefix}scalebox_legend"] = (
            at.shift(-90, 10).attr("data-text", '10cm x 5cm / 4" x 2"').attr("class", "scalebox-legend")
        )


class _Dimension(Macro):
    """Shared drawing for dimension macros."""

    def draw(
        self,
        params: Mapping[str, Any],
        paths: PathMap,
        options: Mapping[str, Any],
        anchors: tuple[Point, Point],
        line: tuple[Point, Point],
        value: float,
    ) -> str:
        key = params.get("id") or _unused_id(paths, self.name)
        units = params.get("units") or options.get("units", "metric")
        text = params.get("text") or format_length(value, units)

        paths[key] = (
            Path()
            .move(line[0])
            .line(line[1])
            .attr("class", "dimension")
            .attr("marker-start", "url(#dimensionFrom)")
            .attr("marker-end", "url(#dimensionTo)")
            .attr("data-text", text)
        )
        paths[f"{key}_leader_from"] = (
            Path().move(anchors[0]).line(line[0]).attr("class", "dimension-leader")
        )
        paths[f"{key}_leader_to"] = (
            Path().move(anchors[1]).line(line[1]).attr("class", "dimension-leader")
        )
        return key


class HorizontalDimension(_Dimension):
    """Horizontal distance between two points, drawn at height ``y``."""

    name = "hd"
    required = ("from", "to", "y")
    optional = ("id", "text", "units")
    point_params = ("from", "to")

    def apply(self, params, points, paths, options) -> None:
        start: Point = params["from"]
        end: Point = params["to"]
        y = self.number(params, "y")
        self.draw(
            params,
            paths,
            options,
            (start, end),
            (Point(start.x, y), Point(end.x, y)),
            abs(end.x - start.x),
        )


class VerticalDimension(_Dimension):
    """Vertical distance between two points, drawn at ``x``."""

    name = "vd"
    required = ("from", "to", "x")
    optional = ("id", "text", "units")
    point_params = ("from", "to")

    def apply(self, params, points, paths, options) -> None:
        start: Point = params["from"]
        end: Point = params["to"]
        x = self.number(params, "x")
        self.draw(
            params,
            paths,
            options,
            (start, end),
            (Point(x, start.y), Point(x, end.y)),
            abs(end.y - start.y),
        )


class LinearDimension(_Dimension):
    """Straight distance between two points, offset sideways by ``d``."""

    name = "ld"
    required = ("from", "to")
    optional = ("d", "id", "text", "units")
    point_params = ("from", "to")

    def apply(self, params, points, paths, options) -> None:
        start: Point = params["from"]
        end: Point = params["to"]
        _distinct(self, start, end)
        d = self.number(params, "d", 0.0)
        side = start.angle(end) + 90
        self.draw(
            params,
            paths,
            options,
            (start, end),
            (start.shift(side, d), end.shift(side, d)),
            start.dist(end),
        )


class PathDimension(_Dimension):
    """Length along a path, drawn as a copy offset by ``d``."""

    name = "pd"
    required = ("path",)
    optional = ("d", "id", "text", "units")

    def apply(self, params, points, paths, options) -> None:
        path = params["path"]
        if not isinstance(path, Path) or not path.ops:
            raise MacroError(self.name, "parameter 'path' must be a non-empty Path")
        d = self.number(params, "d", 0.0)
        key = params.get("id") or _unused_id(paths, self.name)
        units = params.get("units") or options.get("units", "metric")
        text = params.get("text") or format_length(path.length(), units)

        drawn = path.offset(d)
        paths[key] = (
            Path(drawn.ops)
            .attr("class", "dimension")
            .attr("marker-start", "url(#dimensionFrom)")
            .attr("marker-end", "url(#dimensionTo)")
            .attr("data-text", text)
        )
        paths[f"{key}_leader_from"] = (
            Path().move(path.start()).line(drawn.start()).attr("class", "dimension-leader")
        )
        paths[f"{key}_leader_to"] = (
            Path().move(path.end()).line(drawn.end()).attr("class", "dimension-leader")
        )


def default_registry() -> MacroRegistry:
    """Registry with every built-in macro."""
    return MacroRegistry(
        [
            CutOnFold(),
            Grainline(),
            Title(),
            Scalebox(),
            HorizontalDimension(),
            VerticalDimension(),
            LinearDimension(),
            PathDimension(),
        ]
    )

"""Parts: the unit of drafting.

A part is a named draft function. It is called with a PartContext and works
in three phases, each finished before the next starts:

1. Point derivation: fill ``ctx.points`` from measurements and options.
2. Path construction: build ``ctx.paths`` strictly from those points.
3. Finishing: when ``ctx.complete`` is set, apply finishing macros and write
   values later parts need into ``ctx.store``; when ``ctx.paperless`` is set,
   apply dimension macros.

The point and path maps belong to one part run. After the run they are
copied into a PartResult for the pattern document; no other part sees them.
"""

from collections import UserDict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from sewdraft.config import GeometryConfig
from sewdraft.core.macros import MacroRegistry
from sewdraft.core.store import Store
from sewdraft.domain import Path, PartResult, Point
from sewdraft.exceptions import GeometryError, MacroError


class _DraftedMap(UserDict):
    """Name map for one part run.

    Indexing a name that has not been drafted yet raises GeometryError
    instead of KeyError, naming the entry and the part. ``get``, ``pop`` and
    ``in`` keep their usual mapping behaviour for absent names.
    """

    kind = "entry"
    value_type: type = object

    def __init__(self, part: str) -> None:
        self.part = part
        super().__init__()

    def __missing__(self, key: str) -> Any:
        raise GeometryError(
            f"{self.kind}s", f"{self.kind} '{key}' is used before it was drafted"
        ).with_part(self.part)

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(value, self.value_type):
            raise GeometryError(
                f"{self.kind}s",
                f"'{key}' must be a {self.value_type.__name__}, got {type(value).__name__}",
            ).with_part(self.part)
        super().__setitem__(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def pop(self, key: str, *default: Any) -> Any:
        return self.data.pop(key, *default)


class PartPoints(_DraftedMap):
    """Point map for one part run. Only Points may be stored."""

    kind = "point"
    value_type = Point


class PartPaths(_DraftedMap):
    """Path map for one part run. Only Paths may be stored."""

    kind = "path"
    value_type = Path


@dataclass
class PartContext:
    """Everything a draft function may use.

    Attributes:
        part: Name of the part being drafted
        measurements: Read-only body measurements in millimetres
        options: Read-only resolved design options
        store: Store shared by every part of this draft
        complete: Apply finishing annotations
        paperless: Apply dimension annotations
        sa: Seam allowance in millimetres (0 = none)
        geometry: Tolerances for derived geometry
        registry: Macro table
        allowed_macros: Names the design declared; None allows any registered macro
        on_macro: Callback run after each successful macro call
        points: Named points drafted so far
        paths: Named paths drafted so far
    """

    part: str
    measurements: Mapping[str, float]
    options: Mapping[str, Any]
    store: Store
    complete: bool = True
    paperless: bool = False
    sa: float = 0.0
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    registry: MacroRegistry | None = None
    allowed_macros: frozenset[str] | None = None
    on_macro: Callable[[str, str], None] | None = None
    points: PartPoints = field(init=False)
    paths: PartPaths = field(init=False)
    log: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.points = PartPoints(self.part)
        self.paths = PartPaths(self.part)
        self.log = structlog.get_logger("sewdraft").bind(part=self.part)

    def macro(self, name: str, params: Mapping[str, Any]) -> None:
        """Apply a macro to this part's points and paths.

        Raises:
            MacroError: If the macro is not declared by the design, not
                registered, or rejects its parameters
        """
        if self.registry is None:
            raise MacroError(name, "no macro registry is available").with_part(self.part)
        if self.allowed_macros is not None and name not in self.allowed_macros:
            raise MacroError(name, "macro is not declared by the design").with_part(self.part)
        self.registry.apply(name, params, self.points, self.paths, self.options)
        if self.on_macro is not None:
            self.on_macro(self.part, name)

    def measure(self, path: Path) -> float:
        """Length of a path using the configured tolerance."""
        return path.length(self.geometry.length_tolerance)

    def seam_allowance(self, path: Path, distance: float | None = None) -> Path:
        """Offset a seam line by the seam allowance.

        Args:
            path: Seam line
            distance: Override for ``sa``

        Returns:
            Offset path tagged with the ``sa`` class
        """
        return path.offset(
            self.sa if distance is None else distance,
            subdivisions=self.geometry.offset_subdivisions,
            miter_limit=self.geometry.miter_limit,
        ).attr("class", "fabric sa")


DraftFunction = Callable[[PartContext], None]


@dataclass(frozen=True)
class Part:
    """A named draft function.

    Attributes:
        name: Part name (e.g., "back")
        draft: Function that fills the context's points and paths
        reads: Store keys the part consumes
        writes: Store keys the part produces
    """

    name: str
    draft: DraftFunction
    reads: tuple[str, ...] = ()
    writes: tuple[str, ...] = ()

    def run(self, context: PartContext) -> PartResult:
        """Draft the part and collect its geometry.

        Args:
            context: Fresh context for this part

        Returns:
            PartResult holding copies of the point and path maps
        """
        self.draft(context)
        return PartResult(
            name=self.name,
            points=dict(context.points),
            paths=dict(context.paths),
        )

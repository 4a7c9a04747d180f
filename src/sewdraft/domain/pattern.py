"""Pattern document: the aggregated output of one draft.

A pattern document maps each part name to the points and paths that part
produced, plus the store entries parts tagged for export (seam lengths, cut
list). It is what a renderer or publisher consumes.
"""

from dataclasses import dataclass, field
from typing import Any

from sewdraft.domain.path import Path
from sewdraft.domain.point import Point


@dataclass
class PartResult:
    """Points and paths produced by one part.

    Attributes:
        name: Part name (e.g., "back", "sleeve")
        points: Named points in insertion order
        paths: Named paths in insertion order
    """

    name: str
    points: dict[str, Point] = field(default_factory=dict)
    paths: dict[str, Path] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with points and paths keyed by name
        """
        return {
            "points": {name: p.to_dict() for name, p in self.points.items()},
            "paths": {name: p.to_dict() for name, p in self.paths.items()},
        }

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "PartResult":
        """Deserialize from dictionary.

        Args:
            name: Part name
            data: Dictionary representation of a part

        Returns:
            PartResult instance
        """
        return cls(
            name=name,
            points={k: Point.from_dict(v) for k, v in data.get("points", {}).items()},
            paths={k: Path.from_dict(v) for k, v in data.get("paths", {}).items()},
        )


@dataclass
class PatternDocument:
    """Finished pattern for one design.

    Attributes:
        design: Design name
        version: Design version
        parts: Part results in drafting order
        store: Store entries tagged for export
    """

    design: str
    version: str
    parts: dict[str, PartResult] = field(default_factory=dict)
    store: dict[str, Any] = field(default_factory=dict)

    def part(self, name: str) -> PartResult:
        """Get a part result by name.

        Raises:
            KeyError: If the design has no such part
        """
        return self.parts[name]

    @property
    def point_count(self) -> int:
        return sum(len(p.points) for p in self.parts.values())

    @property
    def path_count(self) -> int:
        return sum(len(p.paths) for p in self.parts.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Store values that are paths or points are serialized like part
        geometry; everything else is written as-is.
        """
        return {
            "design": self.design,
            "version": self.version,
            "parts": {name: part.to_dict() for name, part in self.parts.items()},
            "store": {key: _store_value_to_dict(v) for key, v in self.store.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PatternDocument":
        """Deserialize from dictionary.

        Store values are returned as plain data.
        """
        return cls(
            design=data["design"],
            version=data["version"],
            parts={
                name: PartResult.from_dict(name, part)
                for name, part in data.get("parts", {}).items()
            },
            store=dict(data.get("store", {})),
        )


def _store_value_to_dict(value: Any) -> Any:
    if isinstance(value, (Point, Path)):
        return value.to_dict()
    if isinstance(value, list):
        return [_store_value_to_dict(v) for v in value]
    if isinstance(value, dict):
        return {k: _store_value_to_dict(v) for k, v in value.items()}
    return value

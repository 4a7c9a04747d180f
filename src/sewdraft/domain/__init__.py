"""Domain models for sewdraft.

This module contains the value types a draft works with. All geometry is:

- Immutable (frozen dataclasses); transforms return new objects
- Serializable to plain dictionaries for export
- Free of back references to the part that created it

Key classes:
- Point: A 2D point with transform operations
- Path: An ordered sequence of move/line/curve/close operations
- Segment: A single drawing operation
- BoundingBox: Axis-aligned bounds of a path
- PartResult: Points and paths produced by one part
- PatternDocument: The aggregated result of a draft
"""

from sewdraft.domain.path import BoundingBox, Path, Segment, SegmentType
from sewdraft.domain.pattern import PartResult, PatternDocument
from sewdraft.domain.point import Point

__all__: list[str] = [
    # Enums
    "SegmentType",
    # Core types
    "Point",
    "Segment",
    "Path",
    "BoundingBox",
    "PartResult",
    "PatternDocument",
]

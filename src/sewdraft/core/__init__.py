"""Core drafting engine for sewdraft.

This module contains:

- Geometry helpers (intersections, angle conversion, length formatting)
- The per-draft store through which parts pass values forward
- The macro registry and built-in drafting macros
- Part and design declarations
- The draft orchestrator

Drafting is sequential within one design and shares nothing across drafts,
so independent drafts are safe to run in worker processes.

Key functions:
- beam_intersects_x / beam_intersects_y: Where a line crosses an axis value
- beams_intersect: Intersection of two infinite lines
- lines_intersect: Intersection of two line segments
- format_length: Human-readable length for dimension labels
- draft_request: Top-level picklable draft function
- draft_batch: Draft independent requests in parallel

Key classes:
- Store: Per-draft key/value state
- Macro / MacroRegistry: Drafting conventions by name
- Part / PartContext: A draft function and what it may use
- Design: Parts, measurements, options and macros of one garment
- Draft: Runs a design's parts and aggregates a pattern document
"""

from sewdraft.core.design import (
    BoolOption,
    Design,
    ListOption,
    NumberOption,
    OptionSpec,
    PctOption,
)
from sewdraft.core.draft import BatchResult, Draft, draft_batch, draft_request
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
from sewdraft.core.macros import Macro, MacroRegistry, default_registry
from sewdraft.core.part import Part, PartContext
from sewdraft.core.store import Store

__all__ = [
    # Draft classes
    "BatchResult",
    # Design classes
    "BoolOption",
    "Design",
    "Draft",
    "ListOption",
    # Macro classes
    "Macro",
    "MacroRegistry",
    "NumberOption",
    "OptionSpec",
    # Part classes
    "Part",
    "PartContext",
    "PctOption",
    # Store
    "Store",
    # Geometry functions
    "beam_intersects_x",
    "beam_intersects_y",
    "beams_intersect",
    "default_registry",
    "deg2rad",
    "draft_batch",
    "draft_request",
    "format_length",
    "lines_intersect",
    "point_on_beam",
    "point_on_line",
    "rad2deg",
    "signed_area",
]

"""Sewdraft - Parametric sewing pattern drafting.

Sewdraft turns body measurements and design options into labeled 2D paths
(seam lines, fold markers, grainlines, dimensions) by running a design's
parts in order. Parts exchange derived values, such as an armhole length,
through a store that lives for one draft.

Example:
    $ sewdraft tee -i alice.json

This will create alice-tee.json with the back, front and sleeve of a tee.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

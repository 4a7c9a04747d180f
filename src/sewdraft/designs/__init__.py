"""Bundled designs.

Designs are looked up by name. Each module defines one ``DESIGN``.
"""

from sewdraft.core.design import Design
from sewdraft.designs import tee
from sewdraft.exceptions import ConfigurationError

DESIGNS: dict[str, Design] = {
    tee.DESIGN.name: tee.DESIGN,
}


def get_design(name: str) -> Design:
    """Look up a bundled design by name.

    Raises:
        ConfigurationError: If no design has this name
    """
    try:
        return DESIGNS[name]
    except KeyError:
        available = ", ".join(sorted(DESIGNS))
        raise ConfigurationError(name, f"unknown design (available: {available})") from None


def list_designs() -> list[Design]:
    """Bundled designs sorted by name."""
    return [DESIGNS[name] for name in sorted(DESIGNS)]


__all__ = ["DESIGNS", "get_design", "list_designs"]

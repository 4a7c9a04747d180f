"""Design declarations: parts, measurements, options and macros.

A design is everything needed to draft one garment: its parts in dependency
order, the measurements it requires, the options it accepts (with defaults
and bounds) and the macros its parts apply. Drafting validates inputs
against the design before any part runs.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from sewdraft.core.part import Part
from sewdraft.exceptions import ConfigurationError, DependencyOrderError


class OptionSpec(BaseModel, ABC):
    """Base class for option declarations."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def resolve(self, key: str, value: Any) -> Any:
        """Validate a supplied value, returning the value to draft with."""


class NumberOption(OptionSpec):
    """Numeric option with inclusive bounds.

    Attributes:
        default: Value used when the option is not supplied
        min: Lowest accepted value
        max: Highest accepted value
        unit: Unit label for documentation ("mm", "deg", "ratio")
    """

    default: float
    min: float
    max: float
    unit: str = "mm"

    @model_validator(mode="after")
    def _check_bounds(self) -> "NumberOption":
        if not self.min <= self.default <= self.max:
            raise ValueError(
                f"default {self.default} outside [{self.min}, {self.max}]"
            )
        return self

    def resolve(self, key: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(key, f"expected a number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigurationError(key, f"expected a finite number, got {value!r}")
        if not self.min <= value <= self.max:
            raise ConfigurationError(
                key, f"{value} is outside the range [{self.min}, {self.max}]"
            )
        return float(value)


class PctOption(NumberOption):
    """Ratio option, e.g. 0.2 for 20%."""

    unit: str = "ratio"


class BoolOption(OptionSpec):
    """On/off option."""

    default: bool

    def resolve(self, key: str, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ConfigurationError(key, f"expected true or false, got {value!r}")
        return value


class ListOption(OptionSpec):
    """Option restricted to a list of string choices."""

    default: str
    choices: tuple[str, ...]

    @model_validator(mode="after")
    def _check_default(self) -> "ListOption":
        if self.default not in self.choices:
            raise ValueError(f"default {self.default!r} is not one of {self.choices}")
        return self

    def resolve(self, key: str, value: Any) -> str:
        if value not in self.choices:
            raise ConfigurationError(
                key, f"{value!r} is not one of {', '.join(self.choices)}"
            )
        return value


@dataclass(frozen=True)
class Design:
    """A draftable garment.

    Attributes:
        name: Design name (e.g., "tee")
        version: Design version string
        parts: Parts in dependency order; a part reading a store key runs
            after the part that writes it
        measurements: Required measurement names
        options: Option declarations by name
        macros: Macro names the parts apply
    """

    name: str
    version: str
    parts: tuple[Part, ...]
    measurements: tuple[str, ...] = ()
    options: Mapping[str, OptionSpec] = field(default_factory=dict)
    macros: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for part in self.parts:
            if part.name in seen:
                raise ConfigurationError(part.name, f"duplicate part in design '{self.name}'")
            seen.add(part.name)

    @property
    def part_names(self) -> list[str]:
        return [part.name for part in self.parts]

    def validate_measurements(self, supplied: Mapping[str, Any]) -> dict[str, float]:
        """Check that every required measurement is a positive finite number.

        Measurements the design does not declare are passed through unchanged.

        Raises:
            ConfigurationError: Naming the first missing or invalid measurement
        """
        resolved: dict[str, Any] = dict(supplied)
        for key in self.measurements:
            if key not in supplied:
                raise ConfigurationError(key, f"measurement required by '{self.name}' is missing")
            value = supplied[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(key, f"expected a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(key, f"expected a positive length, got {value!r}")
            resolved[key] = float(value)
        return resolved

    def resolve_options(self, supplied: Mapping[str, Any]) -> dict[str, Any]:
        """Merge supplied options over defaults and validate them.

        Raises:
            ConfigurationError: For unknown options or invalid values
        """
        for key in supplied:
            if key not in self.options:
                raise ConfigurationError(key, f"unknown option for design '{self.name}'")
        resolved: dict[str, Any] = {}
        for key, spec in self.options.items():
            if key in supplied:
                resolved[key] = spec.resolve(key, supplied[key])
            else:
                resolved[key] = spec.default
        return resolved

    def check_order(self) -> None:
        """Verify each declared store read is written by an earlier part.

        Raises:
            DependencyOrderError: For the first read with no earlier writer
        """
        written: set[str] = set()
        for part in self.parts:
            for key in part.reads:
                if key not in written:
                    raise DependencyOrderError(
                        key, part.name, "declared read is not written by an earlier part"
                    )
            written.update(part.writes)

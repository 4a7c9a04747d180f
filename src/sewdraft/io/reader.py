"""Reader for draft input files.

An input file is JSON with the measurements and options for one draft::

    {
        "design": "tee",
        "measurements": {"neck": 380, "chest": 1000},
        "options": {"back_neck_cutout": 0.2}
    }

``design`` is optional. When present it must name the design being drafted;
the CLI takes the design from its arguments.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sewdraft.exceptions import ConfigurationError, InputLoadError


class DraftInput(BaseModel):
    """Measurements and options for one draft."""

    model_config = ConfigDict(extra="forbid")

    design: str | None = Field(default=None, description="Design name")
    measurements: dict[str, Any] = Field(
        default_factory=dict,
        description="Body measurements in millimetres",
    )
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Design options; missing options take their defaults",
    )

    def check_design(self, design: str) -> None:
        """Reject an input file written for a different design.

        Raises:
            ConfigurationError: If the file names a design other than ``design``
        """
        if self.design is not None and self.design != design:
            raise ConfigurationError(
                "design", f"input is for design '{self.design}', not '{design}'"
            )

    def to_request(self, design: str) -> dict[str, Any]:
        """Request dictionary for batch drafting."""
        self.check_design(design)
        return {
            "design": design,
            "measurements": self.measurements,
            "options": self.options,
        }


def load_draft_input(path: Path) -> DraftInput:
    """Load a draft input file.

    Args:
        path: Path to a JSON input file

    Returns:
        Parsed DraftInput

    Raises:
        InputLoadError: If the file is missing, not JSON, or not shaped like
            a draft input
    """
    if not path.exists():
        raise InputLoadError(str(path), "file not found")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise InputLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise InputLoadError(str(path), f"invalid JSON at line {e.lineno}: {e.msg}") from e

    if not isinstance(data, dict):
        raise InputLoadError(str(path), "expected a JSON object")

    try:
        return DraftInput.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InputLoadError(str(path), f"{location}: {first['msg']}") from e

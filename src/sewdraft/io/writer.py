"""Pattern writer for saving pattern documents.

This module provides the PatternWriter class for writing a drafted pattern
as JSON with the output naming convention.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from sewdraft import __version__
from sewdraft.domain import PatternDocument
from sewdraft.exceptions import OutputSaveError


class PatternWriter:
    """Writes pattern documents as JSON.

    Example:
        writer = PatternWriter(document, Path("measurements-tee.json"))
        writer.save()
    """

    def __init__(self, document: PatternDocument, output_path: Path) -> None:
        """Initialize the pattern writer.

        Args:
            document: Drafted pattern
            output_path: Path where the pattern will be saved
        """
        self._document = document
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def payload(self) -> dict[str, Any]:
        """Document dictionary with generator metadata."""
        data = self._document.to_dict()
        data["generator"] = {
            "name": "sewdraft",
            "version": __version__,
            "drafted_at": datetime.now().strftime("%Y-%m-%dT%H:%M:%S"),
        }
        return data

    def save(self) -> None:
        """Save the pattern to the output path.

        Raises:
            OutputSaveError: If the file cannot be written
        """
        try:
            self._output_path.write_text(
                json.dumps(self.payload(), indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise OutputSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_pattern_path(input_path: Path, design: str) -> Path:
        """Generate output path from the input file name.

        Converts: alice.json -> alice-tee.json

        Args:
            input_path: Measurements input file path
            design: Design name

        Returns:
            Path with the design name before the extension
        """
        return input_path.parent / f"{input_path.stem}-{design}.json"

"""Input/output layer for sewdraft.

This module reads draft inputs and writes pattern documents as JSON.

Key responsibilities:
- Load measurements and options from input files
- Validate input file shape
- Write pattern documents with the output naming convention

Key classes:
- DraftInput: Parsed input file
- PatternWriter: Save pattern documents
"""

from sewdraft.io.reader import DraftInput, load_draft_input
from sewdraft.io.writer import PatternWriter

__all__ = [
    "DraftInput",
    "PatternWriter",
    "load_draft_input",
]

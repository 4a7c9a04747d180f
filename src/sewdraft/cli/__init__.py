"""Command-line interface for sewdraft.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Per-part summary table
- Progress bars for batch drafting
- Verbose/quiet output modes
- Dry-run validation of inputs
"""

from sewdraft.cli.app import cli, main

__all__ = ["cli", "main"]

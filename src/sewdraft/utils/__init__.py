"""Utility functions for sewdraft.

This module provides utility functions including:

- Logging setup and configuration
- Draft progress and statistics tracking
"""

from sewdraft.utils.logging import (
    DraftLogger,
    DraftStats,
    configure_logging,
)

__all__ = [
    "DraftLogger",
    "DraftStats",
    "configure_logging",
]

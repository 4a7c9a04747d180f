"""Configuration management for sewdraft.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- DraftConfig: Draft mode settings (complete, paperless, seam allowance, strict store)
- GeometryConfig: Tolerances for derived geometry
- LoggingConfig: Logging settings
- SewdraftSettings: Main application settings
"""

from sewdraft.config.settings import (
    DraftConfig,
    GeometryConfig,
    LoggingConfig,
    SewdraftSettings,
    get_default_settings,
)

__all__ = [
    "DraftConfig",
    "GeometryConfig",
    "LoggingConfig",
    "SewdraftSettings",
    "get_default_settings",
]

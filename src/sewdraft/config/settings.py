"""Configuration settings for sewdraft."""

from pathlib import Path

from pydantic import BaseModel, Field


class DraftConfig(BaseModel):
    """Configuration for a draft run."""

    complete: bool = Field(
        default=True,
        description="Add finishing annotations (titles, fold lines, grainlines, scale box)",
    )
    paperless: bool = Field(
        default=False,
        description="Add dimension annotations so the pattern can be used unprinted",
    )
    sa: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Seam allowance in millimetres (0 = none)",
    )
    strict_store: bool = Field(
        default=False,
        description="Raise on store reads of keys no earlier part wrote",
    )


class GeometryConfig(BaseModel):
    """Configuration for derived geometry.

    These values are used when the draft builds derived paths such as seam
    allowances, and are handed to parts through their context.
    """

    length_tolerance: float = Field(
        default=1e-5,
        gt=0.0,
        le=1e-3,
        description="Relative error bound for curve length integration",
    )
    offset_subdivisions: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Pieces each curve is split into before offsetting",
    )
    miter_limit: float = Field(
        default=4.0,
        ge=1.0,
        le=20.0,
        description="Longest offset corner mitre as a multiple of the offset distance",
    )
    coincidence_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Distance in millimetres below which points coincide",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SewdraftSettings(BaseModel):
    """Main application settings."""

    draft: DraftConfig = Field(default_factory=DraftConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> SewdraftSettings:
    """Get default application settings."""
    return SewdraftSettings()

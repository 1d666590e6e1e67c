"""Configuration settings for curvedgeom."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_QUADRANT_SEGMENTS = 12
DEFAULT_ADJACENCY_TOLERANCE = 5e-7

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class FlattenConfig(BaseModel):
    """Configuration for converting curves into line work.

    The factory carries one instance and hands it to every curve it builds.
    """

    model_config = {"frozen": True}

    arc_segment_length: float = Field(
        default=0.0,
        ge=0.0,
        description="Maximum chord length when flattening arcs (0 = derive from quadrant segments)",
    )
    default_quadrant_segments: int = Field(
        default=DEFAULT_QUADRANT_SEGMENTS,
        ge=1,
        description="Number of segments per quarter circle when no segment length is given",
    )
    adjacency_tolerance: float = Field(
        default=DEFAULT_ADJACENCY_TOLERANCE,
        gt=0.0,
        description="Maximum gap between consecutive compound curve segments",
    )


class PrecisionConfig(BaseModel):
    """Precision model configuration."""

    model_config = {"frozen": True}

    grid_size: float = Field(
        default=0.0,
        ge=0.0,
        description="Snapping grid for computed vertices (0 = floating precision)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True}

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: LogLevel = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class CurvedGeometrySettings(BaseModel):
    """Main application settings."""

    flatten: FlattenConfig = Field(default_factory=FlattenConfig)
    precision: PrecisionConfig = Field(default_factory=PrecisionConfig)
    srid: int = Field(default=0, ge=0, description="Spatial reference id of new geometries")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> CurvedGeometrySettings:
    """Get default application settings."""
    return CurvedGeometrySettings()

"""Configuration management for curvedgeom.

This module provides configuration management using Pydantic models.
Configuration is carried by the geometry factory; there are no
process-wide defaults to mutate.

Key classes:
- FlattenConfig: Arc segment length, quadrant segments, adjacency tolerance
- PrecisionConfig: Snapping grid for computed vertices
- LoggingConfig: Logging settings
- CurvedGeometrySettings: Main application settings
"""

from curvedgeom.config.settings import (
    DEFAULT_ADJACENCY_TOLERANCE,
    DEFAULT_QUADRANT_SEGMENTS,
    CurvedGeometrySettings,
    FlattenConfig,
    LoggingConfig,
    PrecisionConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_ADJACENCY_TOLERANCE",
    "DEFAULT_QUADRANT_SEGMENTS",
    "CurvedGeometrySettings",
    "FlattenConfig",
    "LoggingConfig",
    "PrecisionConfig",
    "get_default_settings",
]

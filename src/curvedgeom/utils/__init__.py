"""Utility functions for curvedgeom.

This module provides logging setup and run statistics for the CLI.
"""

from curvedgeom.utils.logging import (
    LinearizationLogger,
    LinearizationStats,
    configure_logging,
)

__all__ = [
    "LinearizationLogger",
    "LinearizationStats",
    "configure_logging",
]

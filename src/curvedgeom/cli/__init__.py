"""Command-line interface for curvedgeom.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Linearize WKT or hex WKB input to WKT or hex WKB
- Geometry summaries as Rich tables
- Optional file logging
"""

from curvedgeom.cli.app import cli, main

__all__ = ["cli", "main"]

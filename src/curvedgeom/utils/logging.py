"""Logging utilities for curvedgeom.

The library modules log through the standard ``logging`` module. The
CLI calls ``configure_logging`` once to route those records to the
console and an optional file, and uses structlog for its own events.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# handlers installed by configure_logging, replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


@dataclass
class LinearizationStats:
    """Statistics from a linearization run."""

    processed_count: int = 0
    error_count: int = 0
    control_points: int = 0
    vertices: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("curvedgeom")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class LinearizationLogger:
    """Logger for tracking linearization progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = LinearizationStats()

    def log_geometry_start(self, index: int, geom_type: str) -> None:
        """Log start of geometry processing."""
        self._logger.debug("Processing geometry", index=index, geom_type=geom_type)

    def log_geometry_linearized(
        self,
        index: int,
        geom_type: str,
        control_points: int,
        vertices: int,
        duration_ms: float,
    ) -> None:
        """Log a successfully linearized geometry."""
        self._logger.info(
            "Geometry linearized",
            index=index,
            geom_type=geom_type,
            control_points=control_points,
            vertices=vertices,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.control_points += control_points
        self._stats.vertices += vertices

    def log_geometry_error(self, index: int, error: Exception) -> None:
        """Log a geometry that could not be read or linearized."""
        self._logger.error(
            "Geometry processing failed",
            index=index,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.error_count += 1
        self._stats.errors.append((index, str(error)))

    @property
    def stats(self) -> LinearizationStats:
        """Get current processing statistics."""
        return self._stats

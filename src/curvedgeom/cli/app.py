"""CLI application entry point for curvedgeom.

This module provides the main CLI interface using Typer.
"""

import math
import re
import time
from pathlib import Path
from typing import Annotated, Any

import shapely
import structlog
import typer
from pydantic import ValidationError

from curvedgeom import __version__
from curvedgeom.cli.output import (
    console,
    print_error,
    print_geometry_info,
    print_step,
    print_success,
)
from curvedgeom.config import (
    CurvedGeometrySettings,
    FlattenConfig,
    LoggingConfig,
    PrecisionConfig,
    get_default_settings,
)
from curvedgeom.core import CurvedGeometry, CurvedGeometryFactory, as_plain
from curvedgeom.core.converter import dimensions_of, envelope_of, srid_of
from curvedgeom.exceptions import CurvedGeometryError
from curvedgeom.io import WKBReader, WKBWriter, WKTReader, WKTWriter
from curvedgeom.utils import LinearizationLogger, configure_logging

_HEX = re.compile(r"(?:[0-9A-Fa-f]{2})+")

# Create the Typer app
app = typer.Typer(
    name="curvedgeom",
    help="Inspect and linearize curved geometries given as WKT or hex WKB.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]curvedgeom[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Read OGC/SQL-MM curved geometries and convert them to line work."""
    try:
        config = LoggingConfig(log_file=log_file, log_level=log_level.upper())
    except ValidationError:
        print_error(f"Invalid log level: {log_level}")
        raise typer.Exit(code=1)
    configure_logging(
        log_file=config.log_file,
        console_level=config.log_level,
        file_level=config.file_log_level,
    )


def _is_file(source: str) -> bool:
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        # not a usable path, e.g. a long WKT string
        return False


def read_records(source: str) -> list[str]:
    """Split the input into one geometry per record.

    ``source`` is either a path to a file holding one WKT or hex WKB
    geometry per line, or a single geometry given inline. Blank lines
    and lines starting with ``#`` are skipped.
    """
    text = Path(source).read_text(encoding="utf-8") if _is_file(source) else source
    records = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            records.append(line)
    return records


def parse_record(record: str, factory: CurvedGeometryFactory) -> Any:
    """Parse hex WKB or WKT, whichever the record holds."""
    if _HEX.fullmatch(record):
        return WKBReader(factory).read(record)
    return WKTReader(factory).read(record)


def count_control_points(geom: Any) -> int:
    """Number of defining points: control points for curves, vertices otherwise."""
    if not isinstance(geom, CurvedGeometry):
        return int(shapely.get_num_coordinates(geom))
    kind = geom.geom_type
    if kind == "CircularString":
        return len(geom.control_points)
    if kind == "CompoundCurve":
        return sum(count_control_points(s) for s in geom.segments)
    if kind == "CurvePolygon":
        return sum(count_control_points(r) for r in geom.rings)
    return sum(count_control_points(m) for m in geom.geoms)


def _dimension_label(geom: Any) -> str:
    has_z, has_m = dimensions_of(geom)
    return "XY" + ("Z" if has_z else "") + ("M" if has_m else "")


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "-"
    return f"{value:.6g}"


@app.command()
def linearize(
    source: Annotated[
        str,
        typer.Argument(
            help="WKT or hex WKB geometry, or a file with one geometry per line",
            show_default=False,
        ),
    ],
    segment_length: Annotated[
        float,
        typer.Option(
            "--segment-length",
            "-s",
            help="Maximum chord length of flattened arcs (0 = use quadrant segments)",
            min=0.0,
        ),
    ] = 0.0,
    quadrant_segments: Annotated[
        int,
        typer.Option(
            "--quadrant-segments",
            "-q",
            help="Segments per quarter circle when no segment length is given",
            min=1,
        ),
    ] = 12,
    grid_size: Annotated[
        float,
        typer.Option(
            "--grid-size",
            help="Snap computed vertices to this grid (0 = floating precision)",
            min=0.0,
        ),
    ] = 0.0,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write results to this file instead of standard output",
        ),
    ] = None,
    wkb: Annotated[
        bool,
        typer.Option(
            "--wkb",
            help="Write hex WKB instead of WKT",
        ),
    ] = False,
) -> None:
    """Convert curved geometries into plain linear geometries.

    Example:
        curvedgeom linearize "CIRCULARSTRING (0 0, 1 1, 2 0)" -s 0.1
    """
    try:
        settings = CurvedGeometrySettings(
            flatten=FlattenConfig(
                arc_segment_length=segment_length,
                default_quadrant_segments=quadrant_segments,
            ),
            precision=PrecisionConfig(grid_size=grid_size),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)

    try:
        records = read_records(source)
    except OSError as e:
        print_error(f"Could not read input: {e}")
        raise typer.Exit(code=1)

    if not records:
        print_error("No geometry found in input")
        raise typer.Exit(code=1)

    factory = CurvedGeometryFactory.from_settings(settings)
    run_log = LinearizationLogger(structlog.get_logger("curvedgeom.cli"))
    stats = run_log.stats
    stats.start_time = time.perf_counter()

    results: list[str] = []
    for index, record in enumerate(records):
        try:
            geom = parse_record(record, factory)
            run_log.log_geometry_start(index, geom.geom_type)
            started = time.perf_counter()
            line_work = as_plain(geom)
            results.append(WKBWriter().write_hex(line_work) if wkb else WKTWriter().write(line_work))
            run_log.log_geometry_linearized(
                index,
                geom.geom_type,
                control_points=count_control_points(geom),
                vertices=int(shapely.get_num_coordinates(line_work)),
                duration_ms=(time.perf_counter() - started) * 1000,
            )
        except CurvedGeometryError as e:
            run_log.log_geometry_error(index, e)
            print_error(f"Geometry {index + 1}: {e}")

    stats.end_time = time.perf_counter()

    if output is None:
        for line in results:
            typer.echo(line)
    else:
        print_step(f"Writing {len(results)} geometries")
        try:
            output.write_text("".join(f"{line}\n" for line in results), encoding="utf-8")
        except OSError as e:
            print_error(f"Could not write output: {e}")
            raise typer.Exit(code=1)
        print_success(
            output_path=str(output),
            total_time_s=stats.duration_seconds,
            processed=stats.processed_count,
            vertices=stats.vertices,
            errors=stats.error_count,
        )

    if stats.error_count:
        raise typer.Exit(code=1)


@app.command()
def info(
    source: Annotated[
        str,
        typer.Argument(
            help="WKT or hex WKB geometry, or a file with one geometry per line",
            show_default=False,
        ),
    ],
) -> None:
    """Show type, size and extent of each input geometry.

    Example:
        curvedgeom info "CURVEPOLYGON (CIRCULARSTRING (0 0, 2 0, 0 0))"
    """
    try:
        records = read_records(source)
    except OSError as e:
        print_error(f"Could not read input: {e}")
        raise typer.Exit(code=1)

    factory = CurvedGeometryFactory.from_settings(get_default_settings())
    for index, record in enumerate(records):
        try:
            geom = parse_record(record, factory)
        except CurvedGeometryError as e:
            print_error(f"Geometry {index + 1}: {e}")
            raise typer.Exit(code=1)

        line_work = as_plain(geom)
        envelope = envelope_of(geom)
        rows = [
            ("Curved", "yes" if isinstance(geom, CurvedGeometry) else "no"),
            ("Dimensions", _dimension_label(geom)),
            ("SRID", str(srid_of(geom))),
            ("Empty", "yes" if geom.is_empty else "no"),
            ("Control points", str(count_control_points(geom))),
            ("Linearized vertices", str(int(shapely.get_num_coordinates(line_work)))),
            ("Length", _format_value(geom.length)),
            ("Area", _format_value(geom.area)),
            ("Envelope", ", ".join(_format_value(v) for v in envelope.to_tuple())),
        ]
        print_geometry_info(f"{index + 1}. {geom.geom_type}", rows)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()

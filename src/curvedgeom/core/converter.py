"""Conversion between curvedgeom coordinates and Shapely geometries.

This module is the seam to the base geometry engine: curve objects keep
their control data as tuples of Coordinate, and every linear result is
handed over as a Shapely geometry.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

import numpy as np
import shapely
from shapely.geometry import LinearRing, LineString
from shapely.geometry.base import BaseGeometry

from curvedgeom.domain import Coordinate, Envelope

CoordinateLike = Coordinate | Sequence[float]


def to_coordinate(value: CoordinateLike) -> Coordinate:
    """Accept a Coordinate or an (x, y[, z[, m]]) sequence."""
    if isinstance(value, Coordinate):
        return value
    return Coordinate.from_sequence(value)


def to_coordinates(values: Iterable[CoordinateLike] | None) -> tuple[Coordinate, ...]:
    """Convert an iterable of coordinate-like values into a tuple of Coordinates."""
    if values is None:
        return ()
    return tuple(to_coordinate(v) for v in values)


def coordinates_of(geom: BaseGeometry) -> tuple[Coordinate, ...]:
    """Read the coordinates of a Shapely point or line as Coordinates."""
    return tuple(Coordinate.from_sequence(c) for c in geom.coords)


def line_from_coordinates(coordinates: Sequence[Coordinate]) -> LineString:
    """Build a Shapely LineString, 3D when every coordinate carries Z."""
    if not coordinates:
        return LineString()
    if all(c.has_z for c in coordinates):
        return LineString([(c.x, c.y, c.z) for c in coordinates])
    return LineString([(c.x, c.y) for c in coordinates])


def ring_from_line(line: LineString) -> LinearRing:
    """Build a LinearRing over the coordinates of a closed line."""
    if isinstance(line, LinearRing):
        return line
    if line.is_empty:
        return LinearRing()
    return LinearRing(line.coords)


def first_coordinate(geom: Any) -> Coordinate:
    """First control point of a non-empty straight or curved segment."""
    if isinstance(geom, BaseGeometry):
        return Coordinate.from_sequence(geom.coords[0])
    return geom.first_coordinate


def last_coordinate(geom: Any) -> Coordinate:
    """Last control point of a non-empty straight or curved segment."""
    if isinstance(geom, BaseGeometry):
        return Coordinate.from_sequence(geom.coords[-1])
    return geom.last_coordinate


def envelope_of(geom: Any) -> Envelope:
    """Envelope of a Shapely or curved geometry."""
    if isinstance(geom, BaseGeometry):
        return Envelope.from_bounds(geom.bounds)
    return geom.envelope


def transform_plain(geom: BaseGeometry, transform: Callable[[Coordinate], Coordinate]) -> BaseGeometry:
    """Apply a coordinate transformation to every vertex of a Shapely geometry.

    Args:
        geom: Any Shapely geometry
        transform: Function mapping one Coordinate to another

    Returns:
        A new geometry of the same type
    """
    include_z = bool(geom.has_z)

    def _apply(coords: np.ndarray) -> np.ndarray:
        rows = [transform(Coordinate.from_sequence(row)) for row in coords]
        if include_z:
            return np.array([(c.x, c.y, c.z) for c in rows], dtype=float).reshape(-1, 3)
        return np.array([(c.x, c.y) for c in rows], dtype=float).reshape(-1, 2)

    return shapely.transform(geom, _apply, include_z=include_z)


def dimensions_of(geom: Any) -> tuple[bool, bool]:
    """(has_z, has_m) of a Shapely or curved geometry.

    Shapely geometries never report M here; their measures are not kept.
    """
    if isinstance(geom, BaseGeometry):
        return (not geom.is_empty and bool(geom.has_z)), False
    return geom.has_z, geom.has_m


def srid_of(geom: Any) -> int:
    """Spatial reference id of a Shapely or curved geometry (0 if unset)."""
    if isinstance(geom, BaseGeometry):
        return int(shapely.get_srid(geom))
    return geom.srid

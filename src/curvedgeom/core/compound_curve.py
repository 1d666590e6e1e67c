"""CompoundCurve: a connected chain of straight and circular segments."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Union

from shapely.geometry import LineString, Point

from curvedgeom.core.base import CoordinateTransform, CurvedGeometry, equals_exact
from curvedgeom.core.circular_string import CircularString
from curvedgeom.core.converter import (
    coordinates_of,
    envelope_of,
    first_coordinate,
    last_coordinate,
    line_from_coordinates,
    transform_plain,
)
from curvedgeom.domain import Coordinate, Envelope

if TYPE_CHECKING:
    from curvedgeom.core.factory import CurvedGeometryFactory

logger = logging.getLogger(__name__)

Segment = Union[LineString, CircularString]


class CompoundCurve(CurvedGeometry):
    """Sequence of LineString and CircularString segments sharing end points.

    Consecutive segments meet within the factory's adjacency tolerance;
    ``CurvedGeometryFactory.create_compound_curve`` enforces this.
    """

    geom_type = "CompoundCurve"
    wkb_type = 9

    def __init__(self, segments: tuple[Segment, ...], factory: CurvedGeometryFactory) -> None:
        super().__init__(factory)
        self._segments = segments
        self._mark_checked()

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def num_segments(self) -> int:
        return len(self._segments)

    def _components(self) -> Iterable[Any]:
        return self._segments

    def _check_components(self) -> None:
        self._factory.validate_segments(self._segments)

    @property
    def is_empty(self) -> bool:
        return len(self._segments) == 0

    @property
    def has_z(self) -> bool:
        return bool(self._segments) and all(s.has_z for s in self._segments)

    @property
    def has_m(self) -> bool:
        return bool(self._segments) and all(
            isinstance(s, CircularString) and s.has_m for s in self._segments
        )

    @property
    def first_coordinate(self) -> Coordinate:
        return first_coordinate(self._segments[0])

    @property
    def last_coordinate(self) -> Coordinate:
        return last_coordinate(self._segments[-1])

    @property
    def start_point(self) -> Point | None:
        if self.is_empty:
            return None
        return self._factory.create_point(self.first_coordinate)

    @property
    def end_point(self) -> Point | None:
        if self.is_empty:
            return None
        return self._factory.create_point(self.last_coordinate)

    @property
    def is_closed(self) -> bool:
        """First and last linearized vertex coincide."""
        if self.is_empty:
            return False
        return self.linearize().is_closed

    @property
    def is_ring(self) -> bool:
        """Closed and simple; simplicity is decided on the linearized line."""
        if self.is_empty:
            return False
        return self.linearize().is_ring

    @property
    def length(self) -> float:
        self._ensure_checked()
        return sum(s.length for s in self._segments)

    @property
    def envelope(self) -> Envelope:
        self._ensure_checked()
        env = Envelope()
        for segment in self._segments:
            env.expand_to_include_envelope(envelope_of(segment))
        return env

    def flatten_coordinates(self, arc_segment_length: float) -> tuple[Coordinate, ...]:
        """Flattened vertices of all segments, stitched into one chain.

        A segment's first vertex is dropped when it coincides with the
        previous segment's last vertex within the adjacency tolerance.
        """
        self._ensure_checked()
        tolerance = self._factory.config.adjacency_tolerance
        points: list[Coordinate] = []
        for segment in self._segments:
            if isinstance(segment, CircularString):
                part = segment.flatten_coordinates(arc_segment_length)
            else:
                part = coordinates_of(segment)
            if points and part and points[-1].distance(part[0]) <= tolerance:
                part = part[1:]
            points.extend(part)
        return tuple(points)

    def _compute_linearized(self, arc_segment_length: float) -> LineString:
        if self.is_empty:
            return self._factory.create_line_string()
        line = line_from_coordinates(self.flatten_coordinates(arc_segment_length))
        logger.debug(
            "Linearized CompoundCurve with %d segments into %d vertices",
            len(self._segments),
            len(line.coords),
        )
        return self._factory.apply_srid(line)

    def rewrite_control_points(self, transform: CoordinateTransform) -> None:
        rewritten: list[Segment] = []
        for segment in self._segments:
            if isinstance(segment, CircularString):
                part = segment.copy()
                part.rewrite_control_points(transform)
                rewritten.append(part)
            else:
                rewritten.append(transform_plain(segment, transform))
        self._segments = self._factory.validate_segments(rewritten)
        self._invalidate()
        self._mark_checked()

    def reverse(self) -> CompoundCurve:
        """Return the same curve traversed from end to start."""
        reversed_segments = tuple(
            s.reverse() for s in reversed(self._segments)
        )
        return CompoundCurve(reversed_segments, self._factory)

    def copy(self) -> CompoundCurve:
        return CompoundCurve(
            tuple(s.copy() if isinstance(s, CircularString) else s for s in self._segments),
            self._factory,
        )

    def equals_exact(self, other: Any, tolerance: float = 0.0) -> bool:
        """Compare segment by segment with another CompoundCurve."""
        if isinstance(other, CompoundCurve):
            if len(self._segments) != len(other.segments):
                return False
            return all(
                equals_exact(a, b, tolerance) for a, b in zip(self._segments, other.segments)
            )
        return super().equals_exact(other, tolerance)

    def __repr__(self) -> str:
        return f"CompoundCurve({len(self._segments)} segments)"

"""CircularString: a chain of circular arcs.

The control points p0, p1, ..., p2n define n arcs; arc i is the view on
points 2i, 2i+1, 2i+2, so consecutive arcs share an end point.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from shapely.geometry import LineString, Point

from curvedgeom.core.arc import CircularArc
from curvedgeom.core.base import CoordinateTransform, CurvedGeometry
from curvedgeom.core.converter import line_from_coordinates
from curvedgeom.domain import Coordinate, Envelope
from curvedgeom.exceptions import ArcIndexError, ControlPointCountError

if TYPE_CHECKING:
    from curvedgeom.core.factory import CurvedGeometryFactory

logger = logging.getLogger(__name__)


class CircularString(CurvedGeometry):
    """A curve made of one or more circular arcs.

    Instances are created through ``CurvedGeometryFactory.create_circular_string``,
    which checks that the number of control points is 0, or odd and at least 3.

    Example:
        cs = factory.create_circular_string([(0, 0), (1, 1), (2, 0), (3, -1), (4, 0)])
        cs.num_arcs      # 2
        cs.arc(1).radius # 1.0
    """

    geom_type = "CircularString"
    wkb_type = 8

    def __init__(self, control_points: tuple[Coordinate, ...], factory: CurvedGeometryFactory) -> None:
        super().__init__(factory)
        self._control_points = control_points
        self._arcs: tuple[CircularArc, ...] | None = None

    @property
    def control_points(self) -> tuple[Coordinate, ...]:
        """The defining points, in order."""
        return self._control_points

    @property
    def num_arcs(self) -> int:
        n = len(self._control_points)
        return 0 if n == 0 else (n - 1) // 2

    def _get_arcs(self) -> tuple[CircularArc, ...]:
        arcs = self._arcs
        if arcs is None:
            quadrant_segments = self._factory.config.default_quadrant_segments
            points = self._control_points
            arcs = tuple(
                CircularArc(points, 2 * i, quadrant_segments) for i in range(self.num_arcs)
            )
            self._arcs = arcs
        return arcs

    def arc(self, index: int) -> CircularArc:
        """Return the arc at ``index``.

        Raises:
            ArcIndexError: If ``index`` is not in [0, num_arcs)
        """
        if index < 0 or index >= self.num_arcs:
            raise ArcIndexError(index, self.num_arcs)
        return self._get_arcs()[index]

    def iter_arcs(self) -> Iterator[CircularArc]:
        return iter(self._get_arcs())

    @property
    def is_empty(self) -> bool:
        return len(self._control_points) == 0

    @property
    def has_z(self) -> bool:
        return bool(self._control_points) and all(c.has_z for c in self._control_points)

    @property
    def has_m(self) -> bool:
        return bool(self._control_points) and all(c.has_m for c in self._control_points)

    @property
    def first_coordinate(self) -> Coordinate:
        return self._control_points[0]

    @property
    def last_coordinate(self) -> Coordinate:
        return self._control_points[-1]

    @property
    def is_closed(self) -> bool:
        if self.is_empty:
            return False
        return self._control_points[0].equals_2d(self._control_points[-1])

    @property
    def is_ring(self) -> bool:
        """Closed and simple."""
        return self.is_closed and self.linearize().is_simple

    @property
    def start_point(self) -> Point | None:
        if self.is_empty:
            return None
        return self._factory.create_point(self._control_points[0])

    @property
    def end_point(self) -> Point | None:
        if self.is_empty:
            return None
        return self._factory.create_point(self._control_points[-1])

    @property
    def interior_point(self) -> Point:
        """The middle control point, which always lies on the curve."""
        if self.is_empty:
            return self._factory.create_point()
        return self._factory.create_point(self._control_points[len(self._control_points) // 2])

    @property
    def length(self) -> float:
        return sum(arc.length for arc in self._get_arcs())

    @property
    def envelope(self) -> Envelope:
        env = Envelope()
        for arc in self._get_arcs():
            env.expand_to_include_envelope(arc.envelope)
        return env

    def flatten_coordinates(self, arc_segment_length: float) -> tuple[Coordinate, ...]:
        """Flattened vertices, keeping Z and M of the control points.

        Each arc contributes its flattened points except the first, which
        is the previous arc's last point.
        """
        arcs = self._get_arcs()
        if not arcs:
            return ()
        pm = self._factory.precision_model
        points = list(arcs[0].flatten(arc_segment_length, pm))
        for arc in arcs[1:]:
            points.extend(arc.flatten(arc_segment_length, pm)[1:])
        return tuple(points)

    def _compute_linearized(self, arc_segment_length: float) -> LineString:
        if self.is_empty:
            return self._factory.create_line_string()
        line = line_from_coordinates(self.flatten_coordinates(arc_segment_length))
        logger.debug(
            "Linearized CircularString with %d arcs into %d vertices",
            self.num_arcs,
            len(line.coords),
        )
        return self._factory.apply_srid(line)

    def rewrite_control_points(self, transform: CoordinateTransform) -> None:
        rewritten = tuple(transform(c) for c in self._control_points)
        if len(rewritten) != len(self._control_points):
            raise ControlPointCountError(len(rewritten))
        self._control_points = rewritten
        self._arcs = None
        self._invalidate()

    def reverse(self) -> CircularString:
        """Return the same curve traversed from end to start."""
        return CircularString(tuple(reversed(self._control_points)), self._factory)

    def copy(self) -> CircularString:
        return CircularString(tuple(self._control_points), self._factory)

    def equals_exact(self, other: Any, tolerance: float = 0.0) -> bool:
        """Compare control points with another CircularString, or linearized forms otherwise."""
        if isinstance(other, CircularString):
            if len(self._control_points) != len(other.control_points):
                return False
            return all(
                a.equals_2d(b, tolerance)
                for a, b in zip(self._control_points, other.control_points)
            )
        return super().equals_exact(other, tolerance)

    def _structure(self) -> tuple[Coordinate, ...]:
        return tuple(self._control_points)

    def __repr__(self) -> str:
        return f"CircularString({len(self._control_points)} control points)"

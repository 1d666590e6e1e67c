"""CurvePolygon: a surface bounded by curved rings."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Union

from shapely.geometry import LinearRing, LineString, Polygon

from curvedgeom.core.base import CoordinateTransform, CurvedGeometry, equals_exact
from curvedgeom.core.circular_string import CircularString
from curvedgeom.core.compound_curve import CompoundCurve
from curvedgeom.core.converter import envelope_of, ring_from_line, transform_plain
from curvedgeom.domain import Envelope

if TYPE_CHECKING:
    from curvedgeom.core.factory import CurvedGeometryFactory

logger = logging.getLogger(__name__)

Ring = Union[LineString, CircularString, CompoundCurve]


def _rewrite_ring(ring: Ring, transform: CoordinateTransform) -> Ring:
    if isinstance(ring, CurvedGeometry):
        part = ring.copy()
        part.rewrite_control_points(transform)
        return part
    return transform_plain(ring, transform)


class CurvePolygon(CurvedGeometry):
    """A polygon whose rings may contain circular arcs.

    Each ring is a closed, simple curve: a LineString, a CircularString or
    a CompoundCurve. Built through ``CurvedGeometryFactory.create_curve_polygon``,
    which checks ring closure, simplicity and hole placement.
    """

    geom_type = "CurvePolygon"
    wkb_type = 10

    def __init__(
        self,
        exterior_ring: Ring,
        interior_rings: tuple[Ring, ...],
        factory: CurvedGeometryFactory,
    ) -> None:
        super().__init__(factory)
        self._exterior_ring = exterior_ring
        self._interior_rings = interior_rings
        self._mark_checked()

    @property
    def exterior_ring(self) -> Ring:
        return self._exterior_ring

    @property
    def interior_rings(self) -> tuple[Ring, ...]:
        return self._interior_rings

    @property
    def num_interior_rings(self) -> int:
        return len(self._interior_rings)

    def interior_ring(self, index: int) -> Ring:
        return self._interior_rings[index]

    @property
    def rings(self) -> tuple[Ring, ...]:
        """Exterior ring followed by the interior rings; empty for an empty polygon."""
        if self.is_empty:
            return ()
        return (self._exterior_ring, *self._interior_rings)

    def _components(self) -> Iterable[Any]:
        return (self._exterior_ring, *self._interior_rings)

    def _check_components(self) -> None:
        self._factory.validate_rings(self._exterior_ring, self._interior_rings)

    @property
    def is_empty(self) -> bool:
        return self._exterior_ring.is_empty

    @property
    def has_z(self) -> bool:
        return not self.is_empty and all(r.has_z for r in self.rings)

    @property
    def has_m(self) -> bool:
        return not self.is_empty and all(
            isinstance(r, CurvedGeometry) and r.has_m for r in self.rings
        )

    @property
    def length(self) -> float:
        """Perimeter: the summed lengths of all rings."""
        self._ensure_checked()
        return sum(r.length for r in self.rings)

    @property
    def envelope(self) -> Envelope:
        self._ensure_checked()
        return envelope_of(self._exterior_ring)

    def _linear_ring(self, ring: Ring, arc_segment_length: float) -> LinearRing:
        if isinstance(ring, CurvedGeometry):
            return ring_from_line(ring.linearize(arc_segment_length))
        return ring_from_line(ring)

    def _compute_linearized(self, arc_segment_length: float) -> Polygon:
        if self.is_empty:
            return self._factory.create_polygon()
        shell = self._linear_ring(self._exterior_ring, arc_segment_length)
        holes = [self._linear_ring(r, arc_segment_length) for r in self._interior_rings]
        logger.debug("Linearized CurvePolygon with %d holes", len(holes))
        return self._factory.create_polygon(shell, holes)

    def rewrite_control_points(self, transform: CoordinateTransform) -> None:
        exterior = _rewrite_ring(self._exterior_ring, transform)
        interiors = tuple(_rewrite_ring(r, transform) for r in self._interior_rings)
        self._factory.validate_rings(exterior, interiors)
        self._exterior_ring = exterior
        self._interior_rings = interiors
        self._invalidate()
        self._mark_checked()

    def copy(self) -> CurvePolygon:
        def _copy(ring: Ring) -> Ring:
            return ring.copy() if isinstance(ring, CurvedGeometry) else ring

        return CurvePolygon(
            _copy(self._exterior_ring),
            tuple(_copy(r) for r in self._interior_rings),
            self._factory,
        )

    def equals_exact(self, other: Any, tolerance: float = 0.0) -> bool:
        """Compare ring by ring with another CurvePolygon."""
        if isinstance(other, CurvePolygon):
            if not equals_exact(self._exterior_ring, other.exterior_ring, tolerance):
                return False
            if len(self._interior_rings) != len(other.interior_rings):
                return False
            return all(
                equals_exact(a, b, tolerance)
                for a, b in zip(self._interior_rings, other.interior_rings)
            )
        return super().equals_exact(other, tolerance)

    def __repr__(self) -> str:
        return f"CurvePolygon(holes={len(self._interior_rings)})"

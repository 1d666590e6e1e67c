"""Shared capability of every curved geometry.

Each curved type owns its control data and one flatten cache. Whatever
the base geometry engine can answer (predicates, validity, centroid,
area, ...) is answered by the linearized Shapely geometry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar

import shapely
from shapely.geometry.base import BaseGeometry

from curvedgeom.core.cache import FlattenCache
from curvedgeom.domain import Coordinate, Envelope
from curvedgeom.exceptions import ToleranceError

if TYPE_CHECKING:
    from curvedgeom.core.factory import CurvedGeometryFactory

logger = logging.getLogger(__name__)

CoordinateTransform = Callable[[Coordinate], Coordinate]


def as_plain(geom: Any, arc_segment_length: float | None = None) -> BaseGeometry:
    """Return a Shapely geometry, linearizing curved input."""
    if isinstance(geom, CurvedGeometry):
        return geom.linearize(arc_segment_length)
    return geom


def equals_exact(a: Any, b: Any, tolerance: float = 0.0) -> bool:
    """Exact equality of two geometries, either of which may be curved."""
    if isinstance(a, CurvedGeometry):
        return a.equals_exact(b, tolerance)
    if isinstance(b, CurvedGeometry):
        return b.equals_exact(a, tolerance)
    return a.equals_exact(b, tolerance)


class CurvedGeometry(ABC):
    """Base of the curved geometry variants.

    Subclasses provide their control data, analytic measures and
    ``_compute_linearized``; this class supplies caching and delegation
    to the base geometry engine.

    Attributes:
        geom_type: OGC type name, matching Shapely's ``geom_type`` naming
        wkb_type: ISO WKB geometry type code
    """

    geom_type: ClassVar[str]
    wkb_type: ClassVar[int]

    def __init__(self, factory: CurvedGeometryFactory) -> None:
        self._factory = factory
        self._own_revision = 0
        self._checked_revision = 0
        self._linearized: FlattenCache[BaseGeometry] = FlattenCache()

    @property
    def factory(self) -> CurvedGeometryFactory:
        """The factory that built this geometry and holds its configuration."""
        return self._factory

    @property
    def srid(self) -> int:
        return self._factory.srid

    @property
    def arc_segment_length(self) -> float:
        """Default maximum chord length used by ``linearize()``."""
        return self._factory.config.arc_segment_length

    def _components(self) -> Iterable[Any]:
        """Owned sub-geometries whose changes must invalidate this geometry."""
        return ()

    @property
    def revision(self) -> int:
        """Counter that grows whenever this geometry or a part of it is rewritten."""
        return self._own_revision + sum(
            c.revision for c in self._components() if isinstance(c, CurvedGeometry)
        )

    def _structure(self) -> tuple[Any, ...]:
        """Values compared by ``==``; the components unless overridden."""
        return tuple(self._components())

    def __eq__(self, other: object) -> bool:
        """Structural equality: same type and equal control data, Z and M included."""
        if not isinstance(other, CurvedGeometry) or type(other) is not type(self):
            return NotImplemented
        return self._structure() == other._structure()

    # mutable, so not hashable
    __hash__ = None  # type: ignore[assignment]

    def _invalidate(self) -> None:
        self._own_revision += 1
        self._linearized.invalidate()
        logger.debug("%s invalidated (revision %d)", self.geom_type, self._own_revision)

    def _check_components(self) -> None:
        """Re-check invariants that span several components.

        Raises:
            GeometryConstructionError: If a component was rewritten into
                a state its owner does not allow
        """

    def _mark_checked(self) -> None:
        self._checked_revision = self.revision

    def _ensure_checked(self) -> None:
        # components can be rewritten through references held by callers
        revision = self.revision
        if revision != self._checked_revision:
            self._check_components()
            self._checked_revision = revision

    def linearize(self, arc_segment_length: float | None = None) -> BaseGeometry:
        """Convert this geometry into a plain Shapely geometry.

        The result is cached for the segment length it was computed
        with and recomputed when the segment length changes or the
        control data is rewritten.

        Args:
            arc_segment_length: Maximum chord length; None uses the
                factory's configured value, 0 derives it from the
                quadrant segment count

        Returns:
            The linearized Shapely geometry

        Raises:
            ToleranceError: If the segment length is negative
            GeometryConstructionError: If a component was rewritten so that
                this geometry no longer holds together
        """
        if arc_segment_length is None:
            arc_segment_length = self.arc_segment_length
        if arc_segment_length < 0.0:
            raise ToleranceError("arc_segment_length", arc_segment_length)
        self._ensure_checked()
        key = (arc_segment_length, self.revision)
        return self._linearized.get_or_compute(
            key, lambda: self._compute_linearized(arc_segment_length)
        )

    @abstractmethod
    def _compute_linearized(self, arc_segment_length: float) -> BaseGeometry:
        """Build the linearized geometry, bypassing the cache."""

    @property
    @abstractmethod
    def is_empty(self) -> bool:
        """True if the geometry has no control data."""

    @property
    @abstractmethod
    def envelope(self) -> Envelope:
        """Analytic bounding box."""

    @property
    @abstractmethod
    def length(self) -> float:
        """Analytic length (perimeter for surfaces)."""

    @property
    @abstractmethod
    def has_z(self) -> bool:
        """True if the control data carries Z."""

    @property
    @abstractmethod
    def has_m(self) -> bool:
        """True if the control data carries M."""

    @abstractmethod
    def rewrite_control_points(self, transform: CoordinateTransform) -> None:
        """Apply ``transform`` to every control point and drop all derived state.

        Every cached value (arc centers, envelopes, linearized geometry)
        is invalidated before this method returns.
        """

    @abstractmethod
    def copy(self) -> CurvedGeometry:
        """Deep copy of the control data with a fresh cache."""

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the analytic envelope."""
        return self.envelope.to_tuple()

    # Delegation to the linearized geometry

    @property
    def area(self) -> float:
        return self.linearize().area

    @property
    def centroid(self) -> BaseGeometry:
        return self.linearize().centroid

    @property
    def convex_hull(self) -> BaseGeometry:
        return self.linearize().convex_hull

    @property
    def is_valid(self) -> bool:
        return self.linearize().is_valid

    @property
    def is_simple(self) -> bool:
        return self.linearize().is_simple

    @property
    def coordinates(self) -> list[tuple[float, ...]]:
        """Vertices of the linearized geometry."""
        return [tuple(c) for c in shapely.get_coordinates(self.linearize(), include_z=self.has_z)]

    @property
    def num_points(self) -> int:
        return len(self.coordinates)

    def contains(self, other: Any) -> bool:
        return self.linearize().contains(as_plain(other))

    def covers(self, other: Any) -> bool:
        return self.linearize().covers(as_plain(other))

    def intersects(self, other: Any) -> bool:
        return self.linearize().intersects(as_plain(other))

    def crosses(self, other: Any) -> bool:
        return self.linearize().crosses(as_plain(other))

    def distance(self, other: Any) -> float:
        return self.linearize().distance(as_plain(other))

    def within(self, other: Any) -> bool:
        return self.linearize().within(as_plain(other))

    def touches(self, other: Any) -> bool:
        return self.linearize().touches(as_plain(other))

    def overlaps(self, other: Any) -> bool:
        return self.linearize().overlaps(as_plain(other))

    def disjoint(self, other: Any) -> bool:
        return self.linearize().disjoint(as_plain(other))

    def relate(self, other: Any) -> str:
        return self.linearize().relate(as_plain(other))

    # Overlay results are plain geometries; arcs are not reconstructed

    def intersection(self, other: Any) -> BaseGeometry:
        return self.linearize().intersection(as_plain(other))

    def union(self, other: Any) -> BaseGeometry:
        return self.linearize().union(as_plain(other))

    def difference(self, other: Any) -> BaseGeometry:
        return self.linearize().difference(as_plain(other))

    def symmetric_difference(self, other: Any) -> BaseGeometry:
        return self.linearize().symmetric_difference(as_plain(other))

    @property
    def boundary(self) -> BaseGeometry:
        return self.linearize().boundary

    def buffer(self, distance: float, **kwargs: Any) -> BaseGeometry:
        """Buffer the linearized geometry.

        Args:
            distance: Buffer distance; negative values erode surfaces
            **kwargs: Passed to Shapely's ``buffer`` (``quad_segs``,
                ``cap_style``, ``join_style`` and so on)
        """
        return self.linearize().buffer(distance, **kwargs)

    def equals_topo(self, other: Any) -> bool:
        """Topological equality of the linearized geometries."""
        return self.linearize().equals(as_plain(other))

    def equals_exact(self, other: Any, tolerance: float = 0.0) -> bool:
        """Vertex-wise equality of the linearized geometries.

        Curve types override this to compare control data directly when
        ``other`` is of the same type.
        """
        return self.linearize().equals_exact(as_plain(other), tolerance)

    @property
    def wkt(self) -> str:
        from curvedgeom.io.wkt import WKTWriter

        return WKTWriter().write(self)

    def __str__(self) -> str:
        return self.wkt

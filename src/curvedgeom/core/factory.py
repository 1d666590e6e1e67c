"""Geometry factory for plain and curved geometries.

The factory is the only place curved geometries are built. It checks
every structural invariant before an object exists, so a construction
either succeeds completely or raises:

- CircularString: 0 control points, or an odd count of at least 3
- CompoundCurve: non-empty LineString/CircularString segments whose
  adjoining end points lie within the adjacency tolerance
- CurvePolygon: rings are closed and simple, holes lie within the
  exterior's envelope, an empty exterior has no holes
- MultiCurve/MultiSurface: members are curve-like/surface-like and not
  collections themselves

It also carries the flattening configuration and precision model that
every geometry it creates uses.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import shapely
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry, BaseMultipartGeometry

from curvedgeom.config import CurvedGeometrySettings, FlattenConfig
from curvedgeom.core.base import CurvedGeometry
from curvedgeom.core.circular_string import CircularString
from curvedgeom.core.collections import (
    CurvedGeometryCollection,
    MultiCurve,
    MultiSurface,
    _CurvedCollection,
)
from curvedgeom.core.compound_curve import CompoundCurve, Segment
from curvedgeom.core.converter import (
    CoordinateLike,
    envelope_of,
    first_coordinate,
    last_coordinate,
    to_coordinate,
    to_coordinates,
)
from curvedgeom.core.curve_polygon import CurvePolygon, Ring
from curvedgeom.domain import Coordinate, PrecisionModel
from curvedgeom.exceptions import (
    ControlPointCountError,
    InvalidSegmentError,
    MemberTypeError,
    RingError,
    SegmentAdjacencyError,
)

logger = logging.getLogger(__name__)


def geometry_type(geom: Any) -> str:
    """OGC type name of a plain or curved geometry."""
    return geom.geom_type


def is_collection(geom: Any) -> bool:
    """True for any multi-part geometry, plain or curved."""
    return isinstance(geom, (BaseMultipartGeometry, _CurvedCollection))


def is_curve(geom: Any) -> bool:
    """True for single-part curve-like geometries (LineString, LinearRing, CircularString, CompoundCurve)."""
    return isinstance(geom, (LineString, CircularString, CompoundCurve))


def is_surface(geom: Any) -> bool:
    """True for single-part surface-like geometries (Polygon, CurvePolygon)."""
    return isinstance(geom, (Polygon, CurvePolygon))


def _is_ring(ring: Any) -> bool:
    if isinstance(ring, CurvedGeometry):
        return ring.is_ring
    return not ring.is_empty and ring.is_ring


# Concrete shape keys used by build_geometry
_POINT = "Point"
_LINE = "LineString"
_POLYGON = "Polygon"


def _shape_key(geom: Any) -> str:
    if isinstance(geom, LineString):
        # LinearRing collapses into the line kind
        return _LINE
    return geom.geom_type


class CurvedGeometryFactory:
    """Creates plain Shapely geometries and validated curved geometries.

    Example:
        factory = CurvedGeometryFactory(config=FlattenConfig(arc_segment_length=0.5))
        arc = factory.create_circular_string([(0, 0), (1, 1), (2, 0)])
        line = arc.linearize()
    """

    def __init__(
        self,
        precision_model: PrecisionModel | None = None,
        srid: int = 0,
        config: FlattenConfig | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            precision_model: Snapping for computed vertices (default floating)
            srid: Spatial reference id stamped on created geometries
            config: Flattening configuration (default FlattenConfig())
        """
        self._precision_model = precision_model if precision_model is not None else PrecisionModel()
        self._srid = srid
        self._config = config if config is not None else FlattenConfig()

    @classmethod
    def from_settings(cls, settings: CurvedGeometrySettings) -> "CurvedGeometryFactory":
        """Create a factory from application settings."""
        return cls(
            precision_model=PrecisionModel(settings.precision.grid_size),
            srid=settings.srid,
            config=settings.flatten,
        )

    @property
    def precision_model(self) -> PrecisionModel:
        return self._precision_model

    @property
    def srid(self) -> int:
        return self._srid

    @property
    def config(self) -> FlattenConfig:
        return self._config

    @property
    def arc_segment_length(self) -> float:
        return self._config.arc_segment_length

    def with_srid(self, srid: int) -> "CurvedGeometryFactory":
        """Return a factory with the same configuration and a different SRID."""
        if srid == self._srid:
            return self
        return CurvedGeometryFactory(self._precision_model, srid, self._config)

    def apply_srid(self, geom: BaseGeometry) -> BaseGeometry:
        """Stamp the factory's SRID on a Shapely geometry."""
        if self._srid:
            return shapely.set_srid(geom, self._srid)
        return geom

    # Plain geometries

    def create_point(self, coordinate: CoordinateLike | None = None) -> Point:
        if coordinate is None:
            return self.apply_srid(Point())
        return self.apply_srid(Point(to_coordinate(coordinate).to_tuple()))

    def create_line_string(self, coordinates: Iterable[CoordinateLike] | None = None) -> LineString:
        coords = to_coordinates(coordinates)
        if not coords:
            return self.apply_srid(LineString())
        return self.apply_srid(LineString([c.to_tuple() for c in coords]))

    def create_linear_ring(self, coordinates: Iterable[CoordinateLike] | None = None) -> LinearRing:
        coords = to_coordinates(coordinates)
        if not coords:
            return self.apply_srid(LinearRing())
        return self.apply_srid(LinearRing([c.to_tuple() for c in coords]))

    def create_polygon(
        self,
        shell: LinearRing | Iterable[CoordinateLike] | None = None,
        holes: Sequence[LinearRing | Iterable[CoordinateLike]] | None = None,
    ) -> Polygon:
        if shell is None:
            return self.apply_srid(Polygon())
        if not isinstance(shell, BaseGeometry):
            shell = [c.to_tuple() for c in to_coordinates(shell)]
        hole_list = [
            h if isinstance(h, BaseGeometry) else [c.to_tuple() for c in to_coordinates(h)]
            for h in (holes or [])
        ]
        return self.apply_srid(Polygon(shell, hole_list))

    def create_multi_point(self, points: Sequence[Point] | None = None) -> MultiPoint:
        if not points:
            return self.apply_srid(MultiPoint())
        return self.apply_srid(shapely.multipoints(list(points)))

    def create_multi_line_string(self, lines: Sequence[LineString] | None = None) -> MultiLineString:
        if not lines:
            return self.apply_srid(MultiLineString())
        return self.apply_srid(shapely.multilinestrings(list(lines)))

    def create_multi_polygon(self, polygons: Sequence[Polygon] | None = None) -> MultiPolygon:
        if not polygons:
            return self.apply_srid(MultiPolygon())
        return self.apply_srid(shapely.multipolygons(list(polygons)))

    def create_geometry_collection(
        self, geometries: Sequence[Any] | None = None
    ) -> GeometryCollection | CurvedGeometryCollection:
        """Create an untyped collection.

        Returns a Shapely GeometryCollection when every member is plain,
        and a CurvedGeometryCollection when any member is curved.
        """
        members = tuple(geometries or ())
        if any(isinstance(m, CurvedGeometry) for m in members):
            return CurvedGeometryCollection(members, self)
        return self.apply_srid(GeometryCollection(list(members)))

    # Curved geometries

    def create_circular_string(
        self, coordinates: Iterable[CoordinateLike] | None = None
    ) -> CircularString:
        """Create a CircularString.

        Args:
            coordinates: Control points; None or empty for an empty curve

        Raises:
            ControlPointCountError: If the count is not 0, or odd and >= 3
        """
        points = to_coordinates(coordinates)
        n = len(points)
        if n > 0 and (n < 3 or n % 2 == 0):
            logger.debug("Rejected CircularString with %d control points", n)
            raise ControlPointCountError(n)
        return CircularString(points, self)

    def validate_segments(self, segments: Iterable[Any] | None) -> tuple[Segment, ...]:
        """Check compound curve segments and return them as a tuple.

        Raises:
            InvalidSegmentError: For a missing, empty or unsupported segment
            SegmentAdjacencyError: If a segment does not start where the previous one ends
        """
        result = tuple(segments or ())
        tolerance = self._config.adjacency_tolerance
        last: Coordinate | None = None
        for i, segment in enumerate(result):
            if segment is None:
                raise InvalidSegmentError(i, "segment is missing")
            if not isinstance(segment, (LineString, CircularString)):
                raise InvalidSegmentError(i, f"unsupported type {geometry_type(segment)}")
            if segment.is_empty:
                raise InvalidSegmentError(i, "segment is empty")

            if last is not None:
                gap = last.distance(first_coordinate(segment))
                if gap > tolerance:
                    logger.debug("Segment %d is %g away from its predecessor", i, gap)
                    raise SegmentAdjacencyError(i, gap)
            last = last_coordinate(segment)
        return result

    def create_compound_curve(self, segments: Iterable[Segment] | None = None) -> CompoundCurve:
        """Create a CompoundCurve from LineString and CircularString segments.

        Raises:
            InvalidSegmentError: For a missing, empty or unsupported segment
            SegmentAdjacencyError: If consecutive segments are not connected
        """
        return CompoundCurve(self.validate_segments(segments), self)

    def validate_rings(self, exterior: Ring, interiors: Sequence[Ring]) -> None:
        """Check the rings of a curve polygon.

        Raises:
            MemberTypeError: If a ring is not a curve
            RingError: If a ring is not closed and simple, a hole is not
                within the exterior, or an empty exterior has holes
        """
        for ring in (exterior, *interiors):
            if not is_curve(ring):
                raise MemberTypeError("CurvePolygon", geometry_type(ring))

        if exterior.is_empty:
            if any(not r.is_empty for r in interiors):
                raise RingError("An empty exterior ring cannot have interior rings")
            return

        if not _is_ring(exterior):
            raise RingError("Exterior ring is not closed and simple")

        shell_envelope = envelope_of(exterior)
        for i, ring in enumerate(interiors):
            if not _is_ring(ring):
                raise RingError(f"Interior ring {i} is not closed and simple")
            if not shell_envelope.contains(envelope_of(ring)):
                raise RingError(f"Interior ring {i} is not within the exterior ring")

    def create_curve_polygon(
        self,
        exterior: Ring | None = None,
        interiors: Sequence[Ring] | None = None,
    ) -> CurvePolygon:
        """Create a CurvePolygon.

        Args:
            exterior: Shell; None for an empty polygon
            interiors: Holes

        Raises:
            MemberTypeError: If a ring is not a curve
            RingError: If the ring invariants do not hold
        """
        if exterior is None:
            exterior = self.create_compound_curve()
        holes = tuple(interiors or ())
        self.validate_rings(exterior, holes)
        return CurvePolygon(exterior, holes, self)

    def create_multi_curve(self, members: Iterable[Any] | None = None) -> MultiCurve:
        """Create a MultiCurve.

        Raises:
            MemberTypeError: If a member is not a single curve
        """
        result = tuple(members or ())
        for member in result:
            if is_collection(member) or not is_curve(member):
                raise MemberTypeError("MultiCurve", geometry_type(member))
        return MultiCurve(result, self)

    def create_multi_surface(self, members: Iterable[Any] | None = None) -> MultiSurface:
        """Create a MultiSurface.

        Raises:
            MemberTypeError: If a member is not a single surface
        """
        result = tuple(members or ())
        for member in result:
            if is_collection(member) or not is_surface(member):
                raise MemberTypeError("MultiSurface", geometry_type(member))
        return MultiSurface(result, self)

    def build_geometry(self, geometries: Iterable[Any]) -> Any:
        """Build the most specific geometry holding all of ``geometries``.

        - an empty list gives an empty GeometryCollection
        - a single element is returned as it is
        - any collection member, or a mix that is neither all curves nor
          all surfaces, gives a GeometryCollection
        - one plain shape gives MultiPoint, MultiLineString or MultiPolygon
        - curves (with or without plain lines) give a MultiCurve
        - surfaces (with or without plain polygons) give a MultiSurface

        Args:
            geometries: Plain or curved geometries

        Returns:
            The assembled geometry
        """
        geoms = list(geometries)
        if not geoms:
            return self.create_geometry_collection()
        if len(geoms) == 1:
            return geoms[0]

        first_key = _shape_key(geoms[0])
        is_heterogeneous = False
        has_collection = False
        for geom in geoms:
            if _shape_key(geom) != first_key:
                is_heterogeneous = True
            if is_collection(geom):
                has_collection = True

        if has_collection:
            return self.create_geometry_collection(geoms)

        if is_heterogeneous:
            # curve-only or surface-only mixes still have a typed container
            if all(is_curve(g) for g in geoms) or all(is_surface(g) for g in geoms):
                is_heterogeneous = False
            else:
                logger.debug("build_geometry: heterogeneous input, using GeometryCollection")
                return self.create_geometry_collection(geoms)

        if all(is_curve(g) for g in geoms):
            if first_key == _LINE and not is_heterogeneous and not any(
                isinstance(g, CurvedGeometry) for g in geoms
            ):
                return self.create_multi_line_string(geoms)
            return self.create_multi_curve(geoms)
        if all(is_surface(g) for g in geoms):
            if first_key == _POLYGON and not any(isinstance(g, CurvedGeometry) for g in geoms):
                return self.create_multi_polygon(geoms)
            return self.create_multi_surface(geoms)
        if first_key == _POINT:
            return self.create_multi_point(geoms)
        return self.create_geometry_collection(geoms)

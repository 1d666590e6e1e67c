"""Collections of curved and plain geometries.

MultiCurve and MultiSurface hold members of one capability (curve-like
or surface-like) and linearize into MultiLineString and MultiPolygon.
CurvedGeometryCollection is the untyped fallback used when a mix of
members still contains curves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

import shapely
from shapely.geometry import GeometryCollection, LineString, MultiLineString, MultiPolygon
from shapely.geometry.base import BaseGeometry

from curvedgeom.core.base import CoordinateTransform, CurvedGeometry, as_plain, equals_exact
from curvedgeom.core.converter import envelope_of, transform_plain
from curvedgeom.domain import Envelope

if TYPE_CHECKING:
    from curvedgeom.core.factory import CurvedGeometryFactory

logger = logging.getLogger(__name__)


def _rewrite_member(member: Any, transform: CoordinateTransform) -> Any:
    if isinstance(member, CurvedGeometry):
        part = member.copy()
        part.rewrite_control_points(transform)
        return part
    return transform_plain(member, transform)


def _as_line_string(geom: BaseGeometry) -> LineString:
    # multilinestring parts must be LineStrings, not LinearRings
    if geom.geom_type == "LinearRing":
        return LineString(geom.coords)
    return geom


class _CurvedCollection(CurvedGeometry):
    """Shared member handling of the collection types."""

    def __init__(self, members: tuple[Any, ...], factory: CurvedGeometryFactory) -> None:
        super().__init__(factory)
        self._members = members

    @property
    def geoms(self) -> tuple[Any, ...]:
        """Members, in order (named like Shapely's multi-part accessor)."""
        return self._members

    @property
    def num_geometries(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def _components(self) -> Iterable[Any]:
        return self._members

    @property
    def is_empty(self) -> bool:
        return all(m.is_empty for m in self._members)

    @property
    def has_z(self) -> bool:
        return bool(self._members) and all(m.has_z for m in self._members)

    @property
    def has_m(self) -> bool:
        return bool(self._members) and all(
            isinstance(m, CurvedGeometry) and m.has_m for m in self._members
        )

    @property
    def envelope(self) -> Envelope:
        env = Envelope()
        for member in self._members:
            env.expand_to_include_envelope(envelope_of(member))
        return env

    @property
    def length(self) -> float:
        return sum(m.length for m in self._members)

    def _rewritten_members(self, transform: CoordinateTransform) -> tuple[Any, ...]:
        return tuple(_rewrite_member(m, transform) for m in self._members)

    def rewrite_control_points(self, transform: CoordinateTransform) -> None:
        self._members = self._rewritten_members(transform)
        self._invalidate()

    def _copied_members(self) -> tuple[Any, ...]:
        return tuple(m.copy() if isinstance(m, CurvedGeometry) else m for m in self._members)

    def equals_exact(self, other: Any, tolerance: float = 0.0) -> bool:
        """Compare member by member with a collection of the same type."""
        if type(other) is type(self):
            if len(self._members) != len(other.geoms):
                return False
            return all(
                equals_exact(a, b, tolerance) for a, b in zip(self._members, other.geoms)
            )
        return super().equals_exact(other, tolerance)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._members)} members)"


class MultiCurve(_CurvedCollection):
    """A collection of LineString, CircularString and CompoundCurve members."""

    geom_type = "MultiCurve"
    wkb_type = 11

    @property
    def is_closed(self) -> bool:
        """True if the collection is non-empty and every member is closed."""
        if not self._members:
            return False
        return all(m.is_closed for m in self._members)

    def _compute_linearized(self, arc_segment_length: float) -> MultiLineString:
        if not self._members:
            return self._factory.create_multi_line_string()
        lines = [_as_line_string(as_plain(m, arc_segment_length)) for m in self._members]
        logger.debug("Linearized MultiCurve with %d members", len(lines))
        return self._factory.apply_srid(shapely.multilinestrings(lines))

    def copy(self) -> MultiCurve:
        return MultiCurve(self._copied_members(), self._factory)


class MultiSurface(_CurvedCollection):
    """A collection of Polygon and CurvePolygon members."""

    geom_type = "MultiSurface"
    wkb_type = 12

    def _compute_linearized(self, arc_segment_length: float) -> MultiPolygon:
        if not self._members:
            return self._factory.create_multi_polygon()
        polygons = [as_plain(m, arc_segment_length) for m in self._members]
        logger.debug("Linearized MultiSurface with %d members", len(polygons))
        return self._factory.apply_srid(shapely.multipolygons(polygons))

    def copy(self) -> MultiSurface:
        return MultiSurface(self._copied_members(), self._factory)


class CurvedGeometryCollection(_CurvedCollection):
    """An untyped collection whose members include at least one curved geometry."""

    geom_type = "GeometryCollection"
    wkb_type = 7

    def _compute_linearized(self, arc_segment_length: float) -> GeometryCollection:
        parts = [as_plain(m, arc_segment_length) for m in self._members]
        return self._factory.apply_srid(GeometryCollection(parts))

    def copy(self) -> CurvedGeometryCollection:
        return CurvedGeometryCollection(self._copied_members(), self._factory)

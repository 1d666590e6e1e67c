"""Core curve geometry for curvedgeom.

This module contains the curved geometry types and the factory that
builds them.

Key classes:
- CircularArc: Three-point arc view with center, radius, angle and flattening
- CircularString: Chain of circular arcs
- CompoundCurve: Connected chain of straight and circular segments
- CurvePolygon: Surface bounded by curved rings
- MultiCurve / MultiSurface / CurvedGeometryCollection: Collections
- CurvedGeometryFactory: Validating constructor for all of the above
- FlattenCache: Single-entry memo cell for linearized results
"""

from curvedgeom.core.algorithm import (
    Orientation,
    angle,
    angle_between_oriented,
    normalize_positive,
    orientation_index,
)
from curvedgeom.core.arc import CircularArc, compute_center
from curvedgeom.core.base import CurvedGeometry, as_plain, equals_exact
from curvedgeom.core.cache import FlattenCache
from curvedgeom.core.circular_string import CircularString
from curvedgeom.core.collections import CurvedGeometryCollection, MultiCurve, MultiSurface
from curvedgeom.core.compound_curve import CompoundCurve
from curvedgeom.core.curve_polygon import CurvePolygon
from curvedgeom.core.factory import CurvedGeometryFactory

__all__ = [
    "CircularArc",
    "CircularString",
    "CompoundCurve",
    "CurvePolygon",
    "CurvedGeometry",
    "CurvedGeometryCollection",
    "CurvedGeometryFactory",
    "FlattenCache",
    "MultiCurve",
    "MultiSurface",
    "Orientation",
    "angle",
    "angle_between_oriented",
    "as_plain",
    "compute_center",
    "equals_exact",
    "normalize_positive",
    "orientation_index",
]

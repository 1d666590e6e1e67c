"""curvedgeom - Circular-arc geometries on top of Shapely.

curvedgeom adds the OGC/SQL-MM curved primitives (CircularString,
CompoundCurve, CurvePolygon, MultiCurve and MultiSurface) to a planar
geometry model. Curves are measured analytically and converted to plain
Shapely geometries on demand.

Example:
    >>> from curvedgeom import CurvedGeometryFactory
    >>> factory = CurvedGeometryFactory()
    >>> arc = factory.create_circular_string([(0, 10), (7.0710678, 7.0710678), (10, 0)])
    >>> line = arc.linearize()
"""

from curvedgeom.core import (
    CircularArc,
    CircularString,
    CompoundCurve,
    CurvedGeometry,
    CurvedGeometryCollection,
    CurvedGeometryFactory,
    CurvePolygon,
    MultiCurve,
    MultiSurface,
)
from curvedgeom.domain import Coordinate, Envelope, PrecisionModel

__version__ = "0.1.0"

__all__ = [
    "CircularArc",
    "CircularString",
    "CompoundCurve",
    "Coordinate",
    "CurvePolygon",
    "CurvedGeometry",
    "CurvedGeometryCollection",
    "CurvedGeometryFactory",
    "Envelope",
    "MultiCurve",
    "MultiSurface",
    "PrecisionModel",
    "__version__",
]

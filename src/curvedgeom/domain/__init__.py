"""Domain value types for curvedgeom.

Small, self-contained value types the arc math works with. Everything
else (lines, polygons, collections) is a Shapely geometry.

Key classes:
- Coordinate: X/Y with optional Z and M
- Envelope: Mutable axis-aligned bounding box
- PrecisionModel: Snapping grid for computed vertices
"""

from curvedgeom.domain.coordinate import Coordinate
from curvedgeom.domain.envelope import Envelope
from curvedgeom.domain.precision import FLOATING, PrecisionModel

__all__: list[str] = [
    "FLOATING",
    "Coordinate",
    "Envelope",
    "PrecisionModel",
]

"""WKT and WKB I/O layer for curvedgeom.

This module reads and writes the text and binary interchange formats
for both the plain Shapely geometries and the curved types.

Key responsibilities:
- Parse WKT and EWKT (``SRID=n;`` prefix) into geometries
- Decode ISO WKB and EWKB, from bytes or hex
- Encode geometries back to WKT and WKB
- Wrap every decoding failure in ParseError

Key classes:
- WKTReader / WKTWriter: Well-known text
- WKBReader / WKBWriter: Well-known binary
"""

from curvedgeom.io.wkb import ByteOrder, WKBReader, WKBWriter
from curvedgeom.io.wkt import WKTReader, WKTWriter

__all__ = [
    "ByteOrder",
    "WKBReader",
    "WKBWriter",
    "WKTReader",
    "WKTWriter",
]

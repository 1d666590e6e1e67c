"""Well-known binary reading and writing.

Geometry type codes follow ISO SQL/MM: 1-7 for the plain OGC types and

    8  CircularString
    9  CompoundCurve
    10 CurvePolygon
    11 MultiCurve
    12 MultiSurface

Dimensions are encoded either the ISO way (+1000 Z, +2000 M, +3000 ZM)
or the extended (EWKB) way with high bits, which also carries an SRID.
The reader accepts both; the writer emits ISO codes unless asked for
EWKB or for an SRID.
"""

import logging
import math
import struct
from enum import IntEnum
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from curvedgeom.core.base import CurvedGeometry
from curvedgeom.core.converter import dimensions_of, srid_of
from curvedgeom.core.factory import CurvedGeometryFactory
from curvedgeom.domain import Coordinate
from curvedgeom.exceptions import GeometryConstructionError, ParseError

logger = logging.getLogger(__name__)

EWKB_Z_FLAG = 0x80000000
EWKB_M_FLAG = 0x40000000
EWKB_SRID_FLAG = 0x20000000
_EWKB_FLAGS = EWKB_Z_FLAG | EWKB_M_FLAG | EWKB_SRID_FLAG

POINT = 1
LINE_STRING = 2
POLYGON = 3
MULTI_POINT = 4
MULTI_LINE_STRING = 5
MULTI_POLYGON = 6
GEOMETRY_COLLECTION = 7
CIRCULAR_STRING = 8
COMPOUND_CURVE = 9
CURVE_POLYGON = 10
MULTI_CURVE = 11
MULTI_SURFACE = 12

_PLAIN_TYPE_CODES = {
    "Point": POINT,
    "LineString": LINE_STRING,
    "LinearRing": LINE_STRING,
    "Polygon": POLYGON,
    "MultiPoint": MULTI_POINT,
    "MultiLineString": MULTI_LINE_STRING,
    "MultiPolygon": MULTI_POLYGON,
    "GeometryCollection": GEOMETRY_COLLECTION,
}

HEADER_SIZE = 5  # byte order + type
SRID_SIZE = 4
COUNT_SIZE = 4
ORDINATE_SIZE = 8


class ByteOrder(IntEnum):
    """WKB byte order marker."""

    BIG_ENDIAN = 0
    LITTLE_ENDIAN = 1

    @property
    def struct_prefix(self) -> str:
        return ">" if self is ByteOrder.BIG_ENDIAN else "<"


def type_code(geom: Any) -> int:
    """ISO base type code (1-12) of a plain or curved geometry."""
    if isinstance(geom, CurvedGeometry):
        return geom.wkb_type
    try:
        return _PLAIN_TYPE_CODES[geom.geom_type]
    except KeyError:
        raise TypeError(f"Cannot encode geometry type {geom.geom_type}") from None


class WKBWriter:
    """Encodes plain Shapely and curved geometries as WKB.

    Z and M are written when the geometry carries them.

    Example:
        writer = WKBWriter(ByteOrder.BIG_ENDIAN, include_srid=True)
        data = writer.write(arc)
    """

    def __init__(
        self,
        byte_order: ByteOrder = ByteOrder.LITTLE_ENDIAN,
        include_srid: bool = False,
        extended: bool = False,
    ) -> None:
        """Initialize the writer.

        Args:
            byte_order: Endianness of the output
            include_srid: Write the SRID; implies extended dimension flags
            extended: Use EWKB dimension flags instead of ISO type offsets
        """
        self._byte_order = ByteOrder(byte_order)
        self._include_srid = include_srid
        self._extended = extended or include_srid
        self._prefix = self._byte_order.struct_prefix

    @property
    def byte_order(self) -> ByteOrder:
        return self._byte_order

    @property
    def include_srid(self) -> bool:
        return self._include_srid

    def write(self, geom: Any) -> bytes:
        """Encode a geometry.

        Args:
            geom: Shapely or curved geometry

        Returns:
            The WKB bytes
        """
        has_z, has_m = dimensions_of(geom)
        out = bytearray()
        srid = srid_of(geom) if self._include_srid else None
        self._write_geometry(out, geom, has_z, has_m, srid)
        return bytes(out)

    def write_hex(self, geom: Any) -> str:
        """Encode a geometry as upper case hexadecimal WKB."""
        return self.write(geom).hex().upper()

    def estimate_size(self, geom: Any) -> int:
        """Number of bytes ``write`` produces for ``geom``."""
        has_z, has_m = dimensions_of(geom)
        coordinate_size = ORDINATE_SIZE * (2 + int(has_z) + int(has_m))
        size = self._size(geom, coordinate_size)
        if self._include_srid:
            size += SRID_SIZE
        return size

    def _size(self, geom: Any, coordinate_size: int) -> int:
        code = type_code(geom)
        if code == POINT:
            return HEADER_SIZE + coordinate_size
        if code == LINE_STRING:
            return HEADER_SIZE + COUNT_SIZE + len(geom.coords) * coordinate_size
        if code == CIRCULAR_STRING:
            return HEADER_SIZE + COUNT_SIZE + len(geom.control_points) * coordinate_size
        if code == POLYGON:
            return HEADER_SIZE + COUNT_SIZE + sum(
                COUNT_SIZE + len(ring.coords) * coordinate_size
                for ring in _polygon_rings(geom)
            )
        return HEADER_SIZE + COUNT_SIZE + sum(
            self._size(part, coordinate_size) for part in _parts(geom)
        )

    def _write_header(
        self, out: bytearray, geom: Any, has_z: bool, has_m: bool, srid: int | None
    ) -> None:
        code = type_code(geom)
        if self._extended:
            if has_z:
                code |= EWKB_Z_FLAG
            if has_m:
                code |= EWKB_M_FLAG
            if srid is not None:
                code |= EWKB_SRID_FLAG
        else:
            code += 1000 * int(has_z) + 2000 * int(has_m)
        out.append(self._byte_order)
        out += struct.pack(self._prefix + "I", code)
        if srid is not None:
            out += struct.pack(self._prefix + "i", srid)

    def _write_count(self, out: bytearray, count: int) -> None:
        out += struct.pack(self._prefix + "I", count)

    def _write_coordinates(
        self, out: bytearray, coords: Any, has_z: bool, has_m: bool
    ) -> None:
        for c in coords:
            if not isinstance(c, Coordinate):
                c = Coordinate.from_sequence(c)
            values = [c.x, c.y]
            if has_z:
                values.append(c.z)
            if has_m:
                values.append(c.m)
            out += struct.pack(f"{self._prefix}{len(values)}d", *values)

    def _write_geometry(
        self, out: bytearray, geom: Any, has_z: bool, has_m: bool, srid: int | None = None
    ) -> None:
        self._write_header(out, geom, has_z, has_m, srid)
        code = type_code(geom)

        if code == POINT:
            # ISO encodes an empty point as NaN ordinates
            coords = [Coordinate(math.nan, math.nan)] if geom.is_empty else geom.coords
            self._write_coordinates(out, coords, has_z, has_m)
        elif code == LINE_STRING:
            self._write_count(out, len(geom.coords))
            self._write_coordinates(out, geom.coords, has_z, has_m)
        elif code == CIRCULAR_STRING:
            self._write_count(out, len(geom.control_points))
            self._write_coordinates(out, geom.control_points, has_z, has_m)
        elif code == POLYGON:
            rings = _polygon_rings(geom)
            self._write_count(out, len(rings))
            for ring in rings:
                self._write_count(out, len(ring.coords))
                self._write_coordinates(out, ring.coords, has_z, has_m)
        else:
            parts = _parts(geom)
            self._write_count(out, len(parts))
            for part in parts:
                self._write_geometry(out, part, has_z, has_m)


def _polygon_rings(polygon: BaseGeometry) -> list[BaseGeometry]:
    if polygon.is_empty:
        return []
    return [polygon.exterior, *polygon.interiors]


def _parts(geom: Any) -> list[Any]:
    """Sub-geometries written after the count of a composite geometry."""
    kind = geom.geom_type
    if kind == "CompoundCurve":
        return list(geom.segments)
    if kind == "CurvePolygon":
        return list(geom.rings)
    return list(geom.geoms)


class _ByteStream:
    """Read cursor over WKB bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def unpack(self, fmt: str) -> tuple[Any, ...]:
        size = struct.calcsize(fmt)
        if size > self.remaining:
            raise ParseError(f"Unexpected end of data at offset {self._pos}")
        values = struct.unpack_from(fmt, self._data, self._pos)
        self._pos += size
        return values

    def read_byte(self) -> int:
        if self.remaining < 1:
            raise ParseError(f"Unexpected end of data at offset {self._pos}")
        value = self._data[self._pos]
        self._pos += 1
        return value


class WKBReader:
    """Decodes ISO WKB and EWKB into plain Shapely and curved geometries.

    Example:
        reader = WKBReader(CurvedGeometryFactory())
        geom = reader.read(bytes.fromhex("0108000000..."))
    """

    def __init__(self, factory: CurvedGeometryFactory | None = None) -> None:
        """Initialize the reader.

        Args:
            factory: Factory used to build geometries; a default factory if None
        """
        self._factory = factory if factory is not None else CurvedGeometryFactory()

    @property
    def factory(self) -> CurvedGeometryFactory:
        return self._factory

    def read(self, data: bytes | str) -> Any:
        """Decode one geometry.

        Args:
            data: WKB bytes, or the same as a hexadecimal string

        Returns:
            A Shapely geometry, or a curved geometry for curve type codes

        Raises:
            ParseError: If the data is malformed or describes an invalid geometry
        """
        if isinstance(data, str):
            try:
                data = bytes.fromhex(data.strip())
            except ValueError as err:
                raise ParseError("Invalid hexadecimal WKB", err) from err

        stream = _ByteStream(bytes(data))
        try:
            geom = self._read_geometry(stream, self._factory)
        except GeometryConstructionError as err:
            logger.debug("WKB describes an invalid geometry: %s", err)
            raise ParseError("Invalid geometry", err) from err
        except (ValueError, GEOSException) as err:
            raise ParseError("Invalid geometry", err) from err

        if stream.remaining:
            logger.debug("Ignoring %d trailing bytes after WKB geometry", stream.remaining)
        return geom

    def _read_geometry(self, stream: _ByteStream, factory: CurvedGeometryFactory) -> Any:
        marker = stream.read_byte()
        if marker not in (ByteOrder.BIG_ENDIAN, ByteOrder.LITTLE_ENDIAN):
            raise ParseError(f"Invalid byte order marker {marker}")
        order = ByteOrder(marker).struct_prefix

        (type_word,) = stream.unpack(order + "I")
        has_z = bool(type_word & EWKB_Z_FLAG)
        has_m = bool(type_word & EWKB_M_FLAG)
        iso_dims, code = divmod(type_word & ~_EWKB_FLAGS, 1000)
        if iso_dims not in (0, 1, 2, 3):
            raise ParseError(f"Unknown geometry type code {type_word & ~_EWKB_FLAGS}")
        has_z = has_z or iso_dims in (1, 3)
        has_m = has_m or iso_dims in (2, 3)

        if type_word & EWKB_SRID_FLAG:
            (srid,) = stream.unpack(order + "i")
            factory = factory.with_srid(srid)

        reader = _Decoder(stream, order, has_z, has_m)

        if code == POINT:
            c = reader.coordinates(1)[0]
            if math.isnan(c.x) and math.isnan(c.y):
                return factory.create_point()
            return factory.create_point(c)
        if code == LINE_STRING:
            return factory.create_line_string(reader.coordinates(reader.count("numPoints")))
        if code == CIRCULAR_STRING:
            return factory.create_circular_string(reader.coordinates(reader.count("numPoints")))
        if code == POLYGON:
            num_rings = reader.count("numRings", COUNT_SIZE)
            rings = [reader.coordinates(reader.count("numPoints")) for _ in range(num_rings)]
            if not rings:
                return factory.create_polygon()
            return factory.create_polygon(rings[0], rings[1:])

        if code not in (
            MULTI_POINT,
            MULTI_LINE_STRING,
            MULTI_POLYGON,
            GEOMETRY_COLLECTION,
            COMPOUND_CURVE,
            CURVE_POLYGON,
            MULTI_CURVE,
            MULTI_SURFACE,
        ):
            raise ParseError(f"Unknown geometry type code {code}")

        num_parts = reader.count("numGeometries", HEADER_SIZE)
        parts = [self._read_geometry(stream, factory) for _ in range(num_parts)]

        if code == MULTI_POINT:
            _expect_members(parts, ("Point",), "MultiPoint")
            return factory.create_multi_point(parts)
        if code == MULTI_LINE_STRING:
            _expect_members(parts, ("LineString",), "MultiLineString")
            return factory.create_multi_line_string(parts)
        if code == MULTI_POLYGON:
            _expect_members(parts, ("Polygon",), "MultiPolygon")
            return factory.create_multi_polygon(parts)
        if code == GEOMETRY_COLLECTION:
            return factory.create_geometry_collection(parts)
        if code == COMPOUND_CURVE:
            return factory.create_compound_curve(parts)
        if code == CURVE_POLYGON:
            if not parts:
                return factory.create_curve_polygon()
            return factory.create_curve_polygon(parts[0], parts[1:])
        if code == MULTI_CURVE:
            return factory.create_multi_curve(parts)
        return factory.create_multi_surface(parts)


class _Decoder:
    """Reads counts and coordinates of one geometry's body."""

    def __init__(self, stream: _ByteStream, order: str, has_z: bool, has_m: bool) -> None:
        self._stream = stream
        self._order = order
        self._has_z = has_z
        self._has_m = has_m
        self._dimension = 2 + int(has_z) + int(has_m)

    def count(self, name: str, min_item_size: int | None = None) -> int:
        """Read an element count, rejecting counts the remaining data cannot hold."""
        (n,) = self._stream.unpack(self._order + "I")
        item_size = min_item_size if min_item_size is not None else ORDINATE_SIZE * self._dimension
        if n * item_size > self._stream.remaining:
            raise ParseError(f"{name} = {n} exceeds the remaining {self._stream.remaining} bytes")
        return n

    def coordinates(self, n: int) -> list[Coordinate]:
        if n == 0:
            return []
        dim = self._dimension
        values = self._stream.unpack(f"{self._order}{n * dim}d")
        coords = []
        for i in range(0, len(values), dim):
            x, y = values[i], values[i + 1]
            z = values[i + 2] if self._has_z else math.nan
            m = values[i + 2 + int(self._has_z)] if self._has_m else math.nan
            coords.append(Coordinate(x, y, z, m))
        return coords


def _expect_members(parts: list[Any], kinds: tuple[str, ...], container: str) -> None:
    for part in parts:
        if part.geom_type not in kinds:
            raise ParseError(f"{container} cannot contain a {part.geom_type}")

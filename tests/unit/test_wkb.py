"""Unit tests for WKB reading and writing."""

import math
import struct

import pytest
import shapely
from shapely.geometry import Point, Polygon

from curvedgeom.core import CurvedGeometryFactory, MultiSurface
from curvedgeom.exceptions import ControlPointCountError, ParseError
from curvedgeom.io import ByteOrder, WKBReader, WKBWriter, WKTReader, WKTWriter


@pytest.fixture
def factory():
    return CurvedGeometryFactory()


@pytest.fixture
def arc(factory):
    return factory.create_circular_string([(0, 0), (1, 1), (2, 0)])


def wkt_round_trip(text: str, writer: WKBWriter | None = None) -> str:
    """Read WKT, encode and decode it as WKB, and write WKT again."""
    geom = WKTReader().read(text)
    data = (writer or WKBWriter()).write(geom)
    return WKTWriter().write(WKBReader().read(data))


class TestWKBWriter:
    """Tests for the byte layout WKBWriter produces."""

    def test_circular_string_header(self, arc):
        """Test the ISO type code and point count."""
        assert WKBWriter().write_hex(arc).startswith("010800000003000000")

    def test_iso_z_type_code(self, factory):
        """Test that Z adds 1000 to the type code."""
        arc = factory.create_circular_string([(0, 0, 1), (1, 1, 1), (2, 0, 1)])
        assert WKBWriter().write_hex(arc).startswith("01F0030000")

    def test_ewkb_srid(self, factory):
        """Test the SRID flag and value."""
        arc = factory.with_srid(4326).create_circular_string([(0, 0), (1, 1), (2, 0)])
        assert WKBWriter(include_srid=True).write_hex(arc).startswith("0108000020E6100000")

    def test_big_endian(self, arc):
        """Test the big endian byte order marker and type code."""
        assert WKBWriter(ByteOrder.BIG_ENDIAN).write_hex(arc).startswith("0000000008")

    def test_hex_is_upper_case(self, arc):
        """Test the hexadecimal form."""
        text = WKBWriter().write_hex(arc)
        assert text == text.upper()
        assert bytes.fromhex(text) == WKBWriter().write(arc)

    def test_estimate_size(self, factory, arc):
        """Test that the size estimate matches the output."""
        reader = WKTReader(factory)
        geoms = [
            arc,
            reader.read("COMPOUNDCURVE ((2 2, 0 0), CIRCULARSTRING (0 0, 1 1, 2 0))"),
            reader.read("CURVEPOLYGON (CIRCULARSTRING (0 4, 4 0, 8 4, 4 8, 0 4), (3 3, 5 3, 4 5, 3 3))"),
            reader.read("MULTISURFACE (((0 0, 1 0, 1 1, 0 0)), CURVEPOLYGON (CIRCULARSTRING (0 0, 2 0, 0 0)))"),
            reader.read("CIRCULARSTRING ZM (0 0 1 5, 1 1 2 6, 2 0 3 7)"),
            Point(),
        ]
        for writer in (WKBWriter(), WKBWriter(include_srid=True)):
            for geom in geoms:
                assert writer.estimate_size(geom) == len(writer.write(geom))

    def test_matches_shapely_for_plain_geometries(self):
        """Test that plain geometries encode like Shapely does."""
        poly = Polygon([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)], [[(1, 1), (1, 2), (2, 1), (1, 1)]])
        assert WKBWriter().write_hex(poly) == shapely.to_wkb(poly, hex=True, byte_order=1)

    def test_empty_point_uses_nan(self):
        """Test the ISO encoding of an empty point."""
        data = WKBWriter().write(Point())
        x, y = struct.unpack_from("<2d", data, 5)
        assert math.isnan(x)
        assert math.isnan(y)


class TestWKBReader:
    """Tests for decoding WKB."""

    @pytest.mark.parametrize(
        "text",
        [
            "CIRCULARSTRING EMPTY",
            "CIRCULARSTRING (0 0, 1 2.1082, 3 6.3246, 0 7, -3 6.3246, -1 2.1082, 0 0)",
            "COMPOUNDCURVE (CIRCULARSTRING (1 0, 0 1, -1 0), (-1 0, 2 0))",
            "CURVEPOLYGON (CIRCULARSTRING (0 5, 5 0, 0 -5, -5 0, 0 5), (-2 2, 2 2, 2 -2, -2 -2, -2 2))",
            "MULTICURVE ((2 0, 1 1, 0 0), CIRCULARSTRING (0 0, 1 1, 2 0))",
            "MULTISURFACE (((0 0, 10 0, 10 10, 0 10, 0 0)), CURVEPOLYGON (CIRCULARSTRING (2 4, 4 2, 6 4, 4 6, 2 4)))",
            "GEOMETRYCOLLECTION (POINT (1 2), CIRCULARSTRING (0 0, 1 1, 2 0))",
            "CIRCULARSTRING Z (0 0 1, 1 1 2, 2 0 3)",
            "CIRCULARSTRING M (0 0 1, 1 1 2, 2 0 3)",
            "CIRCULARSTRING ZM (0 0 1 5, 1 1 2 6, 2 0 3 7)",
            "POINT (1 2)",
            "POLYGON ((0 0, 10 0, 10 10, 0 10, 0 0))",
        ],
    )
    def test_round_trip(self, text):
        """Test that WKB preserves the geometry."""
        assert wkt_round_trip(text) == text

    def test_big_endian_round_trip(self):
        """Test decoding big endian data."""
        text = "COMPOUNDCURVE (CIRCULARSTRING (1 0, 0 1, -1 0), (-1 0, 2 0))"
        assert wkt_round_trip(text, WKBWriter(ByteOrder.BIG_ENDIAN)) == text

    def test_ewkb_z_and_srid(self, factory):
        """Test decoding EWKB flags and the SRID."""
        arc = factory.with_srid(3857).create_circular_string([(0, 0, 1), (1, 1, 2), (2, 0, 3)])
        geom = WKBReader().read(WKBWriter(include_srid=True).write(arc))
        assert geom.srid == 3857
        assert geom.has_z
        assert geom.equals_exact(arc)

    def test_reads_hex(self, arc):
        """Test that hexadecimal input is accepted in either case."""
        text = WKBWriter().write_hex(arc)
        assert WKBReader().read(text).equals_exact(arc)
        assert WKBReader().read(text.lower()).equals_exact(arc)

    def test_reads_shapely_ewkb(self):
        """Test decoding a Shapely Z point."""
        geom = WKBReader().read(shapely.to_wkb(Point(1, 2, 3), byte_order=1))
        assert geom.has_z
        assert geom.coords[0] == (1.0, 2.0, 3.0)

    def test_empty_point(self):
        """Test that NaN ordinates decode to an empty point."""
        assert WKBReader().read(WKBWriter().write(Point())).is_empty

    def test_empty_multi_surface(self, factory):
        """Test that an empty multisurface keeps its type."""
        geom = WKBReader().read(WKBWriter().write(factory.create_multi_surface()))
        assert isinstance(geom, MultiSurface)
        assert geom.is_empty


class TestWKBReaderErrors:
    """Tests for malformed WKB."""

    def test_truncated_header(self, arc):
        """Test data that ends inside the type code."""
        data = WKBWriter().write(arc)
        with pytest.raises(ParseError, match="end of data"):
            WKBReader().read(data[:3])

    def test_truncated_count(self, arc):
        """Test data that ends inside the point count."""
        data = WKBWriter().write(arc)
        with pytest.raises(ParseError, match="end of data"):
            WKBReader().read(data[:7])

    def test_truncated_coordinates(self, arc):
        """Test that missing coordinate bytes are caught by the count check."""
        data = WKBWriter().write(arc)
        with pytest.raises(ParseError, match="numPoints = 3 exceeds"):
            WKBReader().read(data[:-3])

    def test_empty_data(self):
        """Test that no bytes at all is an error."""
        with pytest.raises(ParseError, match="end of data"):
            WKBReader().read(b"")

    def test_unknown_type(self):
        """Test an unknown type code."""
        with pytest.raises(ParseError, match="Unknown geometry type"):
            WKBReader().read(struct.pack("<BI", 1, 99))

    def test_bad_hex(self):
        """Test text that is not hexadecimal."""
        with pytest.raises(ParseError, match="hexadecimal"):
            WKBReader().read("01ZZ")

    def test_bad_byte_order(self):
        """Test an invalid byte order marker."""
        with pytest.raises(ParseError, match="byte order"):
            WKBReader().read(struct.pack("<BI", 5, 1))

    def test_count_exceeds_data(self):
        """Test a point count larger than the remaining data."""
        with pytest.raises(ParseError, match="numPoints"):
            WKBReader().read(struct.pack("<BII", 1, 8, 1000))

    def test_invalid_control_point_count(self):
        """Test that construction errors are wrapped."""
        data = struct.pack("<BII4d", 1, 8, 2, 0, 0, 1, 1)
        with pytest.raises(ParseError) as exc_info:
            WKBReader().read(data)
        assert isinstance(exc_info.value.cause, ControlPointCountError)

"""Unit tests for MultiCurve, MultiSurface and curved geometry collections."""

import math

import pytest
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
)

from curvedgeom.core import (
    CurvedGeometryCollection,
    CurvedGeometryFactory,
    MultiCurve,
    MultiSurface,
)
from curvedgeom.exceptions import MemberTypeError

SQUARE = [(10, 10), (11, 10), (11, 11), (10, 11), (10, 10)]


@pytest.fixture
def factory():
    return CurvedGeometryFactory()


def disc(factory):
    """Curve polygon of radius 1 around (1, 0)."""
    return factory.create_curve_polygon(factory.create_circular_string([(0, 0), (2, 0), (0, 0)]))


class TestMultiCurve:
    """Tests for MultiCurve class."""

    def test_mixed_members(self, factory):
        """Test a line and a circular string."""
        line = factory.create_line_string([(0, 0), (1, 0)])
        arc = factory.create_circular_string([(2, 0), (3, 1), (4, 0)])
        mc = factory.create_multi_curve([line, arc])
        assert isinstance(mc, MultiCurve)
        assert mc.geom_type == "MultiCurve"
        assert mc.num_geometries == 2
        assert len(mc) == 2
        assert mc.length == pytest.approx(1 + math.pi)
        assert mc.envelope.to_tuple() == pytest.approx((0, 0, 4, 1))
        assert not mc.is_closed

    def test_linearize(self, factory):
        """Test that a multicurve linearizes into a MultiLineString."""
        line = factory.create_line_string([(0, 0), (1, 0)])
        arc = factory.create_circular_string([(2, 0), (3, 1), (4, 0)])
        flat = factory.create_multi_curve([line, arc]).linearize()
        assert isinstance(flat, MultiLineString)
        assert len(flat.geoms) == 2
        assert flat.geoms[0].equals(line)

    def test_closed_members(self, factory):
        """Test closure of a multicurve made of rings."""
        circle = factory.create_circular_string([(0, 0), (2, 0), (0, 0)])
        ring = factory.create_linear_ring([(5, 5), (6, 5), (6, 6), (5, 5)])
        mc = factory.create_multi_curve([circle, ring])
        assert mc.is_closed
        assert len(mc.linearize().geoms) == 2

    def test_polygon_member_rejected(self, factory):
        """Test that surfaces cannot be curve members."""
        with pytest.raises(MemberTypeError, match="MultiCurve cannot contain a Polygon"):
            factory.create_multi_curve([Polygon(SQUARE)])

    def test_collection_member_rejected(self, factory):
        """Test that nested collections are rejected."""
        nested = MultiLineString([[(0, 0), (1, 1)]])
        with pytest.raises(MemberTypeError):
            factory.create_multi_curve([nested])

    def test_empty(self, factory):
        """Test an empty multicurve."""
        mc = factory.create_multi_curve()
        assert mc.is_empty
        assert not mc.is_closed
        assert mc.linearize().is_empty
        assert mc.wkt == "MULTICURVE EMPTY"

    def test_member_rewrite_invalidates_collection(self, factory):
        """Test that mutating a member refreshes the collection."""
        arc = factory.create_circular_string([(2, 0), (3, 1), (4, 0)])
        mc = factory.create_multi_curve([arc])
        before = mc.linearize()
        arc.rewrite_control_points(lambda c: c.with_xy(c.x, c.y + 3))
        after = mc.linearize()
        assert after is not before
        assert after.bounds[1] == pytest.approx(3.0)

    def test_copy_and_equals_exact(self, factory):
        """Test member-wise equality of a copy."""
        line = factory.create_line_string([(0, 0), (1, 0)])
        arc = factory.create_circular_string([(2, 0), (3, 1), (4, 0)])
        mc = factory.create_multi_curve([line, arc])
        dup = mc.copy()
        assert dup.equals_exact(mc)
        dup.rewrite_control_points(lambda c: c.with_xy(c.x * 2, c.y))
        assert not dup.equals_exact(mc)
        assert mc.envelope.max_x == pytest.approx(4)

    def test_structural_equality(self, factory):
        """Test that == compares members and the collection type."""
        line = factory.create_line_string([(0, 0), (1, 0)])
        arc = factory.create_circular_string([(2, 0), (3, 1), (4, 0)])
        mc = factory.create_multi_curve([line, arc])
        assert mc.copy() == mc
        assert mc != factory.create_multi_curve([line])
        assert mc != factory.create_geometry_collection([line, arc])
        with pytest.raises(TypeError):
            hash(mc)


class TestMultiSurface:
    """Tests for MultiSurface class."""

    def test_mixed_members(self, factory):
        """Test a polygon and a curve polygon."""
        ms = factory.create_multi_surface([Polygon(SQUARE), disc(factory)])
        assert isinstance(ms, MultiSurface)
        assert ms.geom_type == "MultiSurface"
        assert ms.area == pytest.approx(1 + math.pi, rel=0.01)
        assert ms.envelope.to_tuple() == pytest.approx((0, -1, 11, 11), abs=1e-9)

    def test_linearize(self, factory):
        """Test that a multisurface linearizes into a MultiPolygon."""
        flat = factory.create_multi_surface([Polygon(SQUARE), disc(factory)]).linearize()
        assert isinstance(flat, MultiPolygon)
        assert len(flat.geoms) == 2

    def test_curve_member_rejected(self, factory):
        """Test that curves cannot be surface members."""
        arc = factory.create_circular_string([(0, 0), (1, 1), (2, 0)])
        with pytest.raises(MemberTypeError, match="MultiSurface cannot contain a CircularString"):
            factory.create_multi_surface([arc])

    def test_empty(self, factory):
        """Test an empty multisurface."""
        ms = factory.create_multi_surface()
        assert ms.is_empty
        assert ms.linearize().is_empty
        assert ms.area == 0.0
        assert ms.wkt == "MULTISURFACE EMPTY"


class TestCurvedGeometryCollection:
    """Tests for untyped collections with curved members."""

    def test_curved_member_gives_curved_collection(self, factory):
        """Test that a curved member keeps the collection curved."""
        arc = factory.create_circular_string([(0, 0), (1, 1), (2, 0)])
        gc = factory.create_geometry_collection([Point(5, 5), arc])
        assert isinstance(gc, CurvedGeometryCollection)
        assert gc.geom_type == "GeometryCollection"
        flat = gc.linearize()
        assert isinstance(flat, GeometryCollection)
        assert flat.geoms[1].geom_type == "LineString"

    def test_plain_members_give_shapely_collection(self, factory):
        """Test that plain members give a Shapely collection."""
        gc = factory.create_geometry_collection([Point(5, 5), LineString([(0, 0), (1, 1)])])
        assert isinstance(gc, GeometryCollection)

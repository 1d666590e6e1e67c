"""Unit tests for the circular arc primitive."""

import math

import pytest

from curvedgeom.core.arc import CircularArc, compute_center
from curvedgeom.core.algorithm import Orientation
from curvedgeom.domain import Coordinate, PrecisionModel
from curvedgeom.exceptions import ToleranceError


def make_arc(*points: tuple[float, ...]) -> CircularArc:
    """Build an arc from three (x, y[, z[, m]]) tuples."""
    return CircularArc.from_points(*(Coordinate(*p) for p in points))


def unit_points(*degrees: float) -> list[tuple[float, float]]:
    """Points on the unit circle at the given angles."""
    return [(math.cos(math.radians(d)), math.sin(math.radians(d))) for d in degrees]


class TestComputeCenter:
    """Tests for compute_center()."""

    def test_half_circle(self):
        """Test the center of a half circle."""
        center, radius = compute_center(Coordinate(0, 10), Coordinate(10, 0), Coordinate(0, -10))
        assert center.x == pytest.approx(0.0, abs=1e-12)
        assert center.y == pytest.approx(0.0, abs=1e-12)
        assert radius == pytest.approx(10.0)

    def test_full_circle(self):
        """Test that equal start and end points describe a full circle."""
        center, radius = compute_center(Coordinate(0, 0), Coordinate(2, 0), Coordinate(0, 0))
        assert center == Coordinate(1, 0)
        assert radius == 1.0

    def test_collinear(self):
        """Test that collinear points give an infinite radius."""
        center, radius = compute_center(Coordinate(0, 0), Coordinate(1, 1), Coordinate(2, 2))
        assert center == Coordinate(1, 1)
        assert math.isinf(radius)


class TestCircularArcGeometry:
    """Tests for center, radius, angle and length."""

    def test_quarter_circle_example(self):
        """Test a clockwise quarter circle of radius 10."""
        arc = make_arc((0, 10), (7.0710678, 7.0710678), (10, 0))
        assert arc.center.x == pytest.approx(0.0, abs=1e-7)
        assert arc.center.y == pytest.approx(0.0, abs=1e-7)
        assert arc.radius == pytest.approx(10.0, abs=1e-7)
        assert arc.angle == pytest.approx(-math.pi / 2, abs=1e-7)
        assert arc.length == pytest.approx(5 * math.pi, abs=1e-7)
        assert arc.is_clockwise

    def test_clockwise_semicircle(self):
        """Test a clockwise half circle over the top."""
        arc = make_arc((-10, 0), (0, 10), (10, 0))
        assert arc.orientation == Orientation.CLOCKWISE
        assert arc.angle == pytest.approx(-math.pi)
        assert arc.length == pytest.approx(10 * math.pi)

    def test_counter_clockwise_semicircle(self):
        """Test a counter-clockwise half circle over the top."""
        arc = make_arc((10, 0), (0, 10), (-10, 0))
        assert arc.orientation == Orientation.COUNTER_CLOCKWISE
        assert arc.angle == pytest.approx(math.pi)
        assert arc.envelope.to_tuple() == pytest.approx((-10, 0, 10, 10))

    def test_full_circle(self):
        """Test an arc returning to its start point."""
        arc = make_arc((0, 0), (2, 0), (0, 0))
        assert arc.center == Coordinate(1, 0)
        assert arc.radius == 1.0
        assert arc.angle == pytest.approx(2 * math.pi)
        assert arc.length == pytest.approx(2 * math.pi)
        assert arc.envelope.to_tuple() == pytest.approx((0, -1, 2, 1), abs=1e-9)

    def test_collinear_arc_is_degenerate(self):
        """Test that collinear control points behave as a straight segment."""
        arc = make_arc((0, 0), (1, 1), (2, 2))
        assert arc.is_degenerate
        assert math.isinf(arc.radius)
        assert math.isnan(arc.angle)
        assert arc.length == pytest.approx(math.sqrt(8))
        assert arc.flatten() == (Coordinate(0, 0), Coordinate(1, 1), Coordinate(2, 2))

    def test_coincident_start_and_mid_is_degenerate(self):
        """Test that a repeated control point does not raise."""
        arc = make_arc((0, 0), (0, 0), (2, 0))
        assert arc.is_degenerate
        assert arc.length == pytest.approx(2.0)

    def test_long_first_half(self):
        """Test a counter-clockwise arc whose first half turns more than pi."""
        arc = make_arc(*unit_points(0, 200, 270))
        assert arc.angle == pytest.approx(3 * math.pi / 2)
        assert arc.length == pytest.approx(3 * math.pi / 2)

    def test_long_first_half_clockwise(self):
        """Test the same arc traversed clockwise."""
        arc = make_arc(*unit_points(270, 200, 0))
        assert arc.is_clockwise
        assert arc.angle == pytest.approx(-3 * math.pi / 2)

    def test_long_second_half(self):
        """Test a counter-clockwise arc whose second half turns more than pi."""
        arc = make_arc(*unit_points(0, 70, 300))
        assert arc.angle == pytest.approx(math.radians(300))

    @pytest.mark.parametrize(
        "degrees",
        [(0, 200, 270), (270, 200, 0), (10, 30, 350), (350, 30, 10), (45, 250, 300), (300, 250, 45)],
    )
    def test_angle_in_range_and_matches_flattening(self, degrees):
        """Test the sweep range and the polyline length for wide arcs."""
        arc = make_arc(*unit_points(*degrees))
        assert -2 * math.pi < arc.angle <= 2 * math.pi
        points = arc.flatten(0.01)
        flat_length = sum(a.distance(b) for a, b in zip(points, points[1:]))
        assert flat_length == pytest.approx(arc.length, rel=0.02)

    def test_control_points_equidistant_from_center(self):
        """Test that all control points lie on the computed circle."""
        arc = make_arc((1.5, -2.25), (3.75, 0.5), (0.125, 4.0))
        c = arc.center
        for p in (arc.p0, arc.p1, arc.p2):
            assert p.distance(c) == pytest.approx(arc.radius, rel=1e-12)

    def test_view_on_sequence(self):
        """Test that the arc reads its points at the offset."""
        points = [Coordinate(i, i % 2) for i in range(5)]
        arc = CircularArc(points, 2)
        assert arc.p0 == Coordinate(2, 0)
        assert arc.p2 == Coordinate(4, 0)

    def test_offset_out_of_range(self):
        """Test that an arc needs three points after the offset."""
        with pytest.raises(IndexError):
            CircularArc([Coordinate(0, 0), Coordinate(1, 1), Coordinate(2, 0)], 1)

    def test_invalid_quadrant_segments(self):
        """Test that the quadrant segment count must be positive."""
        with pytest.raises(ValueError):
            CircularArc([Coordinate(0, 0), Coordinate(1, 1), Coordinate(2, 0)], 0, 0)


class TestCircularArcEnvelope:
    """Tests for the analytic bounding box."""

    def test_envelope_includes_crossed_extremes(self):
        """Test an arc sweeping over the right, top and left of its circle."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        assert arc.envelope.to_tuple() == pytest.approx((-5, -3, 5, 5), abs=1e-12)

    def test_envelope_matches_fine_flattening(self):
        """Test the envelope against the extent of a dense polyline."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        points = arc.flatten(0.001)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        expected = (min(xs), min(ys), max(xs), max(ys))
        assert arc.envelope.to_tuple() == pytest.approx(expected, abs=1e-6)

    def test_envelope_is_a_copy(self):
        """Test that mutating the returned envelope does not affect the arc."""
        arc = make_arc((10, 0), (0, 10), (-10, 0))
        env = arc.envelope
        env.expand_to_include(100, 100)
        assert arc.envelope.max_x == pytest.approx(10)


class TestCircularArcFlatten:
    """Tests for flatten()."""

    def test_contains_control_points(self):
        """Test that the polyline starts at p0, passes p1 and ends at p2."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        points = arc.flatten(0.5)
        assert points[0] == arc.p0
        assert points[-1] == arc.p2
        assert arc.p1 in points

    def test_clockwise_arc_keeps_direction(self):
        """Test that a clockwise arc is flattened from p0 to p2."""
        arc = make_arc((-10, 0), (0, 10), (10, 0))
        points = arc.flatten(1.0)
        assert points[0] == Coordinate(-10, 0)
        assert points[-1] == Coordinate(10, 0)
        assert Coordinate(0, 10) in points

    def test_spacing_bounded_by_step(self):
        """Test that no two consecutive vertices are further apart than the step."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        step = 0.3
        points = arc.flatten(step)
        for a, b in zip(points, points[1:]):
            assert a.distance(b) <= step + 1e-9

    def test_samples_lie_on_circle(self):
        """Test that interior vertices are on the circle."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        for p in arc.flatten(0.2):
            assert p.distance(arc.center) == pytest.approx(5.0, abs=1e-9)

    def test_default_step_length_is_close(self):
        """Test that the polyline length approximates the arc length."""
        arc = make_arc((0, 10), (7.0710678, 7.0710678), (10, 0))
        points = arc.flatten()
        flat_length = sum(a.distance(b) for a, b in zip(points, points[1:]))
        assert flat_length == pytest.approx(arc.length, rel=0.02)
        # 12 segments per quadrant
        assert len(points) == 13

    def test_no_duplicate_vertices(self):
        """Test that consecutive vertices are distinct."""
        arc = make_arc((0, 4), (4, 0), (8, 4))
        points = arc.flatten()
        for a, b in zip(points, points[1:]):
            assert a.distance(b) > 1e-6

    def test_z_is_interpolated(self):
        """Test that Z runs from the start to the end value."""
        arc = make_arc((0, 0, 0), (1, 1, 5), (2, 0, 10))
        points = arc.flatten(0.1)
        zs = [p.z for p in points]
        assert zs[0] == 0
        assert zs[-1] == 10
        assert 5.0 in zs
        assert zs == sorted(zs)

    def test_precision_model_snaps_samples(self):
        """Test that computed vertices are snapped to the grid."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        for p in arc.flatten(0.5, PrecisionModel(0.01)):
            assert p.x * 100 == pytest.approx(round(p.x * 100), abs=1e-6)
            assert p.y * 100 == pytest.approx(round(p.y * 100), abs=1e-6)

    def test_result_is_cached_per_step(self):
        """Test that repeated calls with the same step reuse the result."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        first = arc.flatten(0.5)
        assert arc.flatten(0.5) is first
        assert arc.flatten(0.25) is not first
        assert len(arc.flatten(0.25)) > len(first)

    def test_negative_step_rejected(self):
        """Test that a negative step raises ToleranceError."""
        arc = make_arc((4, -3), (-3, 4), (-4, -3))
        with pytest.raises(ToleranceError):
            arc.flatten(-1.0)

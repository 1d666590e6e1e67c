"""Circular arc primitive.

A CircularArc is a read-only view over three consecutive control points
(start, mid, end) of a coordinate sequence. From those it derives the
circle's center and radius, the signed sweep angle, the analytic length
and bounding box, and a polyline approximation.

Collinear control points do not raise: such an arc reports an infinite
radius and a NaN angle and behaves as a straight segment.
"""

import logging
import math
from collections.abc import Sequence

from curvedgeom.config import DEFAULT_QUADRANT_SEGMENTS
from curvedgeom.core._dd import DD
from curvedgeom.core.algorithm import (
    PI_OVER_2,
    PI_TIMES_2,
    Orientation,
    angle,
    orientation_index,
)
from curvedgeom.core.cache import FlattenCache
from curvedgeom.domain import FLOATING, Coordinate, Envelope, PrecisionModel
from curvedgeom.exceptions import ToleranceError

logger = logging.getLogger(__name__)

COLLINEAR_RADIUS = math.inf
COLLINEAR_ANGLE = math.nan

# samples closer than this fraction of a step to a control point are dropped
SAMPLE_MARGIN = 1e-6


def compute_center(p0: Coordinate, p1: Coordinate, p2: Coordinate) -> tuple[Coordinate, float]:
    """Compute the circle through three points.

    Handles the degenerate cases first:
    - p0 equal to p2 (2D): a full circle, centered halfway between p0 and p1
    - collinear points: the midpoint of p0-p2 with an infinite radius

    Otherwise the circumcenter is solved from the perpendicular bisectors.
    The division by twice the signed area loses most of its significant
    digits for nearly collinear points, so the system is evaluated in
    double-double arithmetic.

    Args:
        p0: Start point
        p1: Mid point
        p2: End point

    Returns:
        Tuple of (center, radius)

    Examples:
        >>> c, r = compute_center(Coordinate(0, 10), Coordinate(10, 0), Coordinate(0, -10))
        >>> round(c.x, 9), round(c.y, 9), r
        (0.0, 0.0, 10.0)
    """
    if p0.equals_2d(p2):
        center = Coordinate(p0.x + (p1.x - p0.x) * 0.5, p0.y + (p1.y - p0.y) * 0.5)
        return center, center.distance(p0)

    if orientation_index(p0, p1, p2) == Orientation.COLLINEAR:
        center = Coordinate(p0.x + (p2.x - p0.x) * 0.5, p0.y + (p2.y - p0.y) * 0.5)
        return center, COLLINEAR_RADIUS

    x0, y0 = DD(p0.x), DD(p0.y)
    x1, y1 = DD(p1.x), DD(p1.y)
    x2, y2 = DD(p2.x), DD(p2.y)

    tmp = x1 * x1 + y1 * y1
    inv_det = DD(1.0) / ((x0 - x1) * (y1 - y2) - (x1 - x2) * (y0 - y1))
    bc = (x0 * x0 + y0 * y0 - tmp) / 2.0
    cd = (tmp - x2 * x2 - y2 * y2) / 2.0

    cx = ((bc * (y1 - y2) - cd * (y0 - y1)) * inv_det).to_float()
    cy = (((x0 - x1) * cd - (x1 - x2) * bc) * inv_det).to_float()
    center = Coordinate(cx, cy)
    return center, p0.distance(center)


def _interpolate(
    x: float,
    y: float,
    start: Coordinate,
    end: Coordinate,
    fraction: float,
) -> Coordinate:
    # NaN ordinates stay NaN
    return Coordinate(
        x,
        y,
        start.z + fraction * (end.z - start.z),
        start.m + fraction * (end.m - start.m),
    )


def _clear_of(theta: float, low: float, high: float, margin: float) -> bool:
    return theta - low > margin and high - theta > margin


def _append(points: list[Coordinate], c: Coordinate, allow_repeated: bool) -> None:
    if not allow_repeated and points and points[-1].equals_2d(c):
        return
    points.append(c)


def _append_control_point(points: list[Coordinate], c: Coordinate, allow_repeated: bool) -> None:
    # a sample landing on a control point is replaced by the exact control point
    if not allow_repeated and len(points) > 1 and points[-1].equals_2d(c):
        points[-1] = c
        return
    _append(points, c, allow_repeated)


class CircularArc:
    """A segment of a circle defined by start, mid and end point.

    The arc does not copy its points: it reads them from the owning
    sequence at ``start_offset``. Derived values are computed on first
    access and kept for the lifetime of the view.

    Example:
        arc = CircularArc.from_points(Coordinate(0, 10), Coordinate(7.0710678, 7.0710678), Coordinate(10, 0))
        arc.radius  # 10.0
        arc.angle   # -pi/2, clockwise
    """

    COLLINEAR_RADIUS = COLLINEAR_RADIUS
    COLLINEAR_ANGLE = COLLINEAR_ANGLE

    __slots__ = ("_sequence", "_start_offset", "_quadrant_segments", "_circle", "_envelope", "_flattened")

    def __init__(
        self,
        sequence: Sequence[Coordinate],
        start_offset: int = 0,
        quadrant_segments: int = DEFAULT_QUADRANT_SEGMENTS,
    ) -> None:
        """Create a view on a control point sequence.

        Args:
            sequence: Sequence holding at least three coordinates from ``start_offset``
            start_offset: Index of the arc's start point
            quadrant_segments: Segments per quarter circle used when flattening
                without an explicit step length

        Raises:
            IndexError: If fewer than three points follow ``start_offset``
            ValueError: If ``quadrant_segments`` is less than 1
        """
        if start_offset < 0 or start_offset > len(sequence) - 3:
            raise IndexError(
                f"start_offset {start_offset} out of range for {len(sequence)} control points"
            )
        if quadrant_segments < 1:
            raise ValueError(f"quadrant_segments must be positive, got {quadrant_segments}")

        self._sequence = sequence
        self._start_offset = start_offset
        self._quadrant_segments = quadrant_segments
        self._circle: tuple[Coordinate, float] | None = None
        self._envelope: Envelope | None = None
        self._flattened: FlattenCache[tuple[Coordinate, ...]] = FlattenCache()

    @classmethod
    def from_points(
        cls,
        p0: Coordinate,
        p1: Coordinate,
        p2: Coordinate,
        quadrant_segments: int = DEFAULT_QUADRANT_SEGMENTS,
    ) -> "CircularArc":
        """Create an arc over its own three point sequence."""
        return cls((p0, p1, p2), 0, quadrant_segments)

    @property
    def p0(self) -> Coordinate:
        """Start point."""
        return self._sequence[self._start_offset]

    @property
    def p1(self) -> Coordinate:
        """Mid point, defining the arc's direction."""
        return self._sequence[self._start_offset + 1]

    @property
    def p2(self) -> Coordinate:
        """End point."""
        return self._sequence[self._start_offset + 2]

    def _get_circle(self) -> tuple[Coordinate, float]:
        circle = self._circle
        if circle is None:
            circle = compute_center(self.p0, self.p1, self.p2)
            self._circle = circle
        return circle

    @property
    def center(self) -> Coordinate:
        """Center of the circle this arc is part of."""
        return self._get_circle()[0]

    @property
    def radius(self) -> float:
        """Radius of the circle; infinite for collinear control points."""
        return self._get_circle()[1]

    @property
    def is_degenerate(self) -> bool:
        """True if the control points are collinear and the arc is a straight segment."""
        return math.isinf(self.radius)

    @property
    def orientation(self) -> Orientation:
        """Turn direction of start, mid and end point."""
        return orientation_index(self.p0, self.p1, self.p2)

    @property
    def is_clockwise(self) -> bool:
        return self.orientation == Orientation.CLOCKWISE

    @property
    def angle(self) -> float:
        """Signed sweep angle from start through mid to end point.

        Positive sweeps run counter-clockwise. The value lies in
        (-2*pi, 2*pi]; collinear arcs report NaN.
        """
        if self.is_degenerate:
            return COLLINEAR_ANGLE

        _, _, angle_p0, _, angle_p2, clockwise = self._ccw_parametrization()
        sweep = angle_p2 - angle_p0
        return -sweep if clockwise else sweep

    @property
    def length(self) -> float:
        """Arc length; the chord length for collinear arcs."""
        if self.is_degenerate:
            return self.p0.distance(self.p2)
        return abs(self.angle * self.radius)

    def _ccw_parametrization(self) -> tuple[Coordinate, Coordinate, float, float, float, bool]:
        """Reorient the arc counter-clockwise with ascending angles.

        Returns:
            Tuple of (start, end, start_angle, mid_angle, end_angle, was_clockwise)
            where start_angle <= mid_angle <= end_angle.
        """
        p0, p1, p2 = self.p0, self.p1, self.p2
        c = self.center
        angle_p0 = angle(c, p0)
        angle_p1 = angle(c, p1)
        angle_p2 = angle(c, p2)

        clockwise = orientation_index(p0, p1, p2) == Orientation.CLOCKWISE
        if clockwise:
            p0, p2 = p2, p0
            angle_p0, angle_p2 = angle_p2, angle_p0

        if angle_p1 < angle_p0:
            angle_p1 += PI_TIMES_2
            angle_p2 += PI_TIMES_2
        elif angle_p2 <= angle_p0:
            # also unwraps a full circle, where start and end angle coincide
            angle_p2 += PI_TIMES_2

        return p0, p2, angle_p0, angle_p1, angle_p2, clockwise

    @property
    def envelope(self) -> Envelope:
        """Bounding box of the arc.

        Starts from the box of the end points and adds the circle's
        extreme point at every multiple of pi/2 the arc sweeps over.
        """
        if self._envelope is None:
            self._envelope = self._compute_envelope()
        return self._envelope.copy()

    def _compute_envelope(self) -> Envelope:
        env = Envelope.from_coordinates(self.p0, self.p2)
        if self.is_degenerate:
            return env

        c, r = self._get_circle()
        _, _, angle_p0, _, angle_p2, _ = self._ccw_parametrization()

        quadrant = (math.floor(angle_p0 / PI_OVER_2) + 1) * PI_OVER_2
        while quadrant < angle_p2:
            env.expand_to_include(c.x + r * math.cos(quadrant), c.y + r * math.sin(quadrant))
            quadrant += PI_OVER_2
        return env

    def flatten(
        self,
        step_length: float = 0.0,
        precision_model: PrecisionModel | None = None,
    ) -> tuple[Coordinate, ...]:
        """Approximate the arc by a sequence of points.

        The result always starts with p0, passes through p1 and ends with
        p2. Intermediate points lie on the circle at multiples of the
        angular step, so no two consecutive points are further apart
        than ``step_length``. Z and M are interpolated linearly between
        the bracketing control points.

        Args:
            step_length: Maximum chord length; 0 derives it from the
                quadrant segment count
            precision_model: Snapping applied to computed points

        Returns:
            Tuple of coordinates from p0 to p2

        Raises:
            ToleranceError: If ``step_length`` is negative
        """
        if step_length < 0.0:
            raise ToleranceError("step_length", step_length)
        pm = precision_model if precision_model is not None else FLOATING
        return self._flattened.get_or_compute(
            (step_length, pm), lambda: self._compute_flatten(step_length, pm)
        )

    def _compute_flatten(self, step_length: float, pm: PrecisionModel) -> tuple[Coordinate, ...]:
        p1 = self.p1
        c, r = self._get_circle()
        if math.isinf(r) or r == 0.0:
            return (self.p0, p1, self.p2)

        p0, p2, angle_p0, angle_p1, angle_p2, clockwise = self._ccw_parametrization()

        if step_length == 0.0:
            step_length = PI_OVER_2 * r / self._quadrant_segments
        angle_step = step_length / r
        margin = angle_step * SAMPLE_MARGIN

        points = [p0]
        k = math.ceil(angle_p0 / angle_step)
        theta = k * angle_step

        delta = angle_p1 - angle_p0
        while theta < angle_p1:
            if _clear_of(theta, angle_p0, angle_p1, margin):
                x = pm.make_precise(c.x + r * math.cos(theta))
                y = pm.make_precise(c.y + r * math.sin(theta))
                _append(points, _interpolate(x, y, p0, p1, (theta - angle_p0) / delta), False)
            k += 1
            theta = k * angle_step

        _append_control_point(points, p1, len(points) == 1)

        delta = angle_p2 - angle_p1
        while theta < angle_p2:
            if _clear_of(theta, angle_p1, angle_p2, margin):
                x = pm.make_precise(c.x + r * math.cos(theta))
                y = pm.make_precise(c.y + r * math.sin(theta))
                _append(points, _interpolate(x, y, p1, p2, (theta - angle_p1) / delta), False)
            k += 1
            theta = k * angle_step

        _append_control_point(points, p2, len(points) == 2)

        if clockwise:
            points.reverse()

        logger.debug("Flattened arc into %d points (step %g)", len(points), step_length)
        return tuple(points)

    def __repr__(self) -> str:
        return f"CircularArc[{self.p0}, {self.p1}, {self.p2}]"

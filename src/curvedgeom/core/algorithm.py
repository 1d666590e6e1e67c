"""Planar orientation and angle utilities.

The orientation test is evaluated in double-double arithmetic so that
nearly collinear triples are classified consistently with the
circumcenter computation that depends on it.

All functions are pure and stateless.
"""

import math
from enum import IntEnum

from curvedgeom.core._dd import DD
from curvedgeom.domain import Coordinate

PI_TIMES_2 = 2.0 * math.pi
PI_OVER_2 = 0.5 * math.pi


class Orientation(IntEnum):
    """Turn direction of an ordered point triple."""

    CLOCKWISE = -1
    COLLINEAR = 0
    COUNTER_CLOCKWISE = 1


def orientation_index(p1: Coordinate, p2: Coordinate, q: Coordinate) -> Orientation:
    """Classify the turn p1 -> p2 -> q.

    Args:
        p1: First point
        p2: Second point
        q: Point whose side of the directed line p1-p2 is tested

    Returns:
        COUNTER_CLOCKWISE if q is left of p1-p2, CLOCKWISE if right,
        COLLINEAR otherwise

    Examples:
        >>> orientation_index(Coordinate(0, 0), Coordinate(1, 0), Coordinate(1, 1))
        <Orientation.COUNTER_CLOCKWISE: 1>
    """
    dx1 = DD(p2.x) - p1.x
    dy1 = DD(p2.y) - p1.y
    dx2 = DD(q.x) - p2.x
    dy2 = DD(q.y) - p2.y
    det = dx1 * dy2 - dy1 * dx2
    return Orientation(det.signum())


def angle(p0: Coordinate, p1: Coordinate) -> float:
    """Angle of the vector p0 -> p1 relative to the positive X axis, in (-pi, pi]."""
    return math.atan2(p1.y - p0.y, p1.x - p0.x)


def angle_between_oriented(tip1: Coordinate, tail: Coordinate, tip2: Coordinate) -> float:
    """Signed angle turning from tail->tip1 to tail->tip2.

    Args:
        tip1: End of the first vector
        tail: Common origin
        tip2: End of the second vector

    Returns:
        Angle in (-pi, pi]; positive means counter-clockwise
    """
    delta = angle(tail, tip2) - angle(tail, tip1)
    if delta <= -math.pi:
        return delta + PI_TIMES_2
    if delta > math.pi:
        return delta - PI_TIMES_2
    return delta


def normalize_positive(value: float) -> float:
    """Normalize an angle into [0, 2*pi)."""
    value = math.fmod(value, PI_TIMES_2)
    if value < 0.0:
        value += PI_TIMES_2
    if value >= PI_TIMES_2:
        value = 0.0
    return value


def sign(value: float) -> int:
    """Sign of a float as -1, 0 or 1."""
    if value > 0.0:
        return 1
    if value < 0.0:
        return -1
    return 0

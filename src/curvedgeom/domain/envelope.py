"""Axis-aligned bounding box."""

import math
from dataclasses import dataclass

from curvedgeom.domain.coordinate import Coordinate


@dataclass
class Envelope:
    """A mutable axis-aligned rectangle.

    A freshly created envelope is null: it covers nothing until it is
    expanded to include a point.

    Attributes:
        min_x: Smallest X covered
        min_y: Smallest Y covered
        max_x: Largest X covered
        max_y: Largest Y covered
    """

    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf

    @classmethod
    def from_coordinates(cls, *coordinates: Coordinate) -> "Envelope":
        """Create the smallest envelope covering the given coordinates."""
        env = cls()
        for c in coordinates:
            env.expand_to_include(c.x, c.y)
        return env

    @classmethod
    def from_bounds(cls, bounds: tuple[float, float, float, float]) -> "Envelope":
        """Create an envelope from a Shapely ``bounds`` tuple.

        Empty Shapely geometries report NaN bounds; those give a null envelope.
        """
        min_x, min_y, max_x, max_y = bounds
        if any(math.isnan(v) for v in bounds):
            return cls()
        return cls(min_x, min_y, max_x, max_y)

    @property
    def is_null(self) -> bool:
        return self.min_x > self.max_x

    @property
    def width(self) -> float:
        return 0.0 if self.is_null else self.max_x - self.min_x

    @property
    def height(self) -> float:
        return 0.0 if self.is_null else self.max_y - self.min_y

    def expand_to_include(self, x: float, y: float) -> None:
        """Grow the envelope to cover the point (x, y)."""
        if x < self.min_x:
            self.min_x = x
        if x > self.max_x:
            self.max_x = x
        if y < self.min_y:
            self.min_y = y
        if y > self.max_y:
            self.max_y = y

    def expand_to_include_envelope(self, other: "Envelope") -> None:
        """Grow the envelope to cover another envelope."""
        if other.is_null:
            return
        self.expand_to_include(other.min_x, other.min_y)
        self.expand_to_include(other.max_x, other.max_y)

    def contains(self, other: "Envelope") -> bool:
        """Check whether another envelope lies within this one (boundary inclusive)."""
        if self.is_null or other.is_null:
            return False
        return (
            other.min_x >= self.min_x
            and other.max_x <= self.max_x
            and other.min_y >= self.min_y
            and other.max_y <= self.max_y
        )

    def union(self, other: "Envelope") -> "Envelope":
        """Return a new envelope covering both envelopes."""
        res = self.copy()
        res.expand_to_include_envelope(other)
        return res

    def copy(self) -> "Envelope":
        return Envelope(self.min_x, self.min_y, self.max_x, self.max_y)

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (min_x, min_y, max_x, max_y).

        A null envelope converts to four NaN values, matching Shapely's
        ``bounds`` of an empty geometry.
        """
        if self.is_null:
            return (math.nan, math.nan, math.nan, math.nan)
        return (self.min_x, self.min_y, self.max_x, self.max_y)

"""Coordinate value type.

A Coordinate carries X and Y plus optional Z and M ordinates. An absent
ordinate is stored as NaN, the way the base geometry engine reports it.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


def _same_ordinate(a: float, b: float) -> bool:
    if math.isnan(a):
        return math.isnan(b)
    return a == b


@dataclass(frozen=True, slots=True, eq=False)
class Coordinate:
    """A point in the plane with optional elevation and measure.

    Immutable and hashable. Equality treats two absent (NaN) ordinates
    as equal so that 2D coordinates compare the way users expect.

    Attributes:
        x: X ordinate
        y: Y ordinate
        z: Z ordinate, NaN when absent
        m: M ordinate, NaN when absent
    """

    x: float
    y: float
    z: float = math.nan
    m: float = math.nan

    @classmethod
    def from_sequence(cls, values: Sequence[float], has_m: bool = False) -> "Coordinate":
        """Build a coordinate from an ordinate sequence.

        A three element sequence is read as XYZ unless ``has_m`` is set,
        in which case it is read as XYM.

        Args:
            values: 2 to 4 ordinates
            has_m: Interpret a third ordinate as a measure

        Returns:
            Coordinate instance

        Raises:
            ValueError: If the sequence does not hold 2 to 4 values
        """
        n = len(values)
        if n == 2:
            return cls(float(values[0]), float(values[1]))
        if n == 3:
            if has_m:
                return cls(float(values[0]), float(values[1]), m=float(values[2]))
            return cls(float(values[0]), float(values[1]), float(values[2]))
        if n == 4:
            return cls(float(values[0]), float(values[1]), float(values[2]), float(values[3]))
        raise ValueError(f"A coordinate needs 2 to 4 ordinates, got {n}")

    @property
    def has_z(self) -> bool:
        return not math.isnan(self.z)

    @property
    def has_m(self) -> bool:
        return not math.isnan(self.m)

    @property
    def dimension(self) -> int:
        """Number of ordinates carried (2, 3 or 4)."""
        return 2 + int(self.has_z) + int(self.has_m)

    @property
    def measures(self) -> int:
        """Number of measure ordinates (0 or 1)."""
        return int(self.has_m)

    def equals_2d(self, other: "Coordinate", tolerance: float = 0.0) -> bool:
        """Compare X and Y only.

        Args:
            other: Coordinate to compare with
            tolerance: Allowed difference per ordinate

        Returns:
            True if both X and Y agree within tolerance
        """
        if tolerance == 0.0:
            return self.x == other.x and self.y == other.y
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance

    def distance(self, other: "Coordinate") -> float:
        """Planar distance to another coordinate."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def with_xy(self, x: float, y: float) -> "Coordinate":
        """Return a copy with new X and Y, keeping Z and M."""
        return Coordinate(x, y, self.z, self.m)

    def to_tuple(self) -> tuple[float, ...]:
        """Convert to an (x, y[, z]) tuple as accepted by Shapely.

        The measure is not part of the tuple because Shapely constructors
        read a third value as Z.
        """
        if self.has_z:
            return (self.x, self.y, self.z)
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x, y and the ordinates that are present
        """
        data: dict[str, Any] = {"x": self.x, "y": self.y}
        if self.has_z:
            data["z"] = self.z
        if self.has_m:
            data["m"] = self.m
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coordinate):
            return NotImplemented
        return (
            self.x == other.x
            and self.y == other.y
            and _same_ordinate(self.z, other.z)
            and _same_ordinate(self.m, other.m)
        )

    def __hash__(self) -> int:
        return hash((
            self.x,
            self.y,
            None if math.isnan(self.z) else self.z,
            None if math.isnan(self.m) else self.m,
        ))

    def __repr__(self) -> str:
        parts = [repr(self.x), repr(self.y)]
        if self.has_z:
            parts.append(f"z={self.z!r}")
        if self.has_m:
            parts.append(f"m={self.m!r}")
        return f"Coordinate({', '.join(parts)})"

"""Precision model used to snap computed vertices."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PrecisionModel:
    """Snapping grid for computed ordinates.

    Mirrors Shapely's ``grid_size`` notion: a grid size of 0 means full
    floating precision and values pass through unchanged.

    Attributes:
        grid_size: Grid spacing, 0 for floating precision
    """

    grid_size: float = 0.0

    def __post_init__(self) -> None:
        if self.grid_size < 0.0:
            raise ValueError(f"grid_size must not be negative, got {self.grid_size!r}")

    @property
    def is_floating(self) -> bool:
        return self.grid_size == 0.0

    def make_precise(self, value: float) -> float:
        """Round a value to the grid.

        Args:
            value: Ordinate value

        Returns:
            The nearest grid value, or the value itself for floating precision
        """
        if self.grid_size == 0.0:
            return value
        return round(value / self.grid_size) * self.grid_size


FLOATING = PrecisionModel()

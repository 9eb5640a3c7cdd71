"""Configuration for a single sort run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from .algorithms import ConfigurationError, SortingAlgorithm


class Direction(StrEnum):
    """Which way the sorted values should run."""

    ASCENDING = auto()
    DESCENDING = auto()
    LEFT_TO_RIGHT = auto()
    RIGHT_TO_LEFT = auto()
    TOP_TO_BOTTOM = auto()
    BOTTOM_TO_TOP = auto()

    @property
    def reverse(self) -> bool:
        """Return True if values should decrease along the sequence."""
        return self in {
            Direction.DESCENDING,
            Direction.RIGHT_TO_LEFT,
            Direction.BOTTOM_TO_TOP,
        }

    @property
    def is_vertical(self) -> bool:
        """Return True if a canvas should be traversed column by column."""
        return self in {Direction.TOP_TO_BOTTOM, Direction.BOTTOM_TO_TOP}


@dataclass(frozen=True, kw_only=True, slots=True)
class RunConfiguration:
    """The algorithm and direction for one sort run. Immutable for the run's duration."""

    algorithm: SortingAlgorithm
    direction: Direction = Direction.ASCENDING

    key_range: int | None = None
    """Exclusive upper bound of the keys; required by distribution sorts."""

    seed: int | None = None
    """Seed for randomised algorithms. The shared RNG is used when unset."""

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if not isinstance(self.algorithm, SortingAlgorithm):
            raise ConfigurationError(f"Unknown algorithm: {self.algorithm!r}")

        if not isinstance(self.direction, Direction):
            raise ConfigurationError(f"Unknown direction: {self.direction!r}")

        if self.algorithm.is_distribution and (self.key_range is None or self.key_range < 1):
            raise ConfigurationError(
                f"{self.algorithm} requires a positive key range, got {self.key_range!r}",
            )


__all__ = ["Direction", "RunConfiguration"]

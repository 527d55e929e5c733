"""Shared price series models consumed by the indicator and rating engine.

Prices are plain floats and volumes plain ints.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class PricePoint:
    """A single validated daily sample: closing price and traded volume."""

    date: date
    price: float  # > 0 after validation
    volume: int  # >= 0


@dataclass(frozen=True)
class PriceSeries:
    """Validated, chronologically ordered sequence of price points.

    May be empty: every consumer degrades to neutral values instead of failing.
    """

    points: tuple[PricePoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    @property
    def prices(self) -> list[float]:
        """Closing prices, oldest first."""
        return [p.price for p in self.points]

    @property
    def volumes(self) -> list[int]:
        """Volumes aligned by index with ``prices``."""
        return [p.volume for p in self.points]

    @property
    def latest(self) -> PricePoint | None:
        """Most recent point, or None for an empty series."""
        return self.points[-1] if self.points else None

    def tail(self, count: int) -> "PriceSeries":
        """Return a new series holding the trailing ``count`` points."""
        if count <= 0:
            return PriceSeries()
        return PriceSeries(points=self.points[-count:])

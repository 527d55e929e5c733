"""Shared test fixtures for the stock analysis service."""

from collections.abc import Callable, Sequence
from datetime import date, timedelta

import pytest

from stockscope.config import AnalysisSettings, AppSettings, IndicatorSettings
from stockscope.models import PricePoint, PriceSeries


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (debug logging, seeded fallback)."""
    return AppSettings(
        log_level="DEBUG",
        indicators=IndicatorSettings(),
        analysis=AnalysisSettings(fallback_seed=42),
    )


@pytest.fixture
def fixed_rng() -> Callable[[], float]:
    """Random source pinned at 0.5: no prediction perturbation."""
    return lambda: 0.5


@pytest.fixture
def make_series() -> Callable[..., PriceSeries]:
    """Factory building a PriceSeries from prices (and optional volumes)."""

    def _make(
        prices: Sequence[float],
        volumes: Sequence[int] | None = None,
        start: date = date(2024, 1, 1),
    ) -> PriceSeries:
        if volumes is None:
            volumes = [1_000_000] * len(prices)
        return PriceSeries(
            points=tuple(
                PricePoint(date=start + timedelta(days=i), price=float(p), volume=v)
                for i, (p, v) in enumerate(zip(prices, volumes))
            )
        )

    return _make

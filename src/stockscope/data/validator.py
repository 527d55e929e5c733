"""Price series validation and normalization.

Turns raw provider samples into a PriceSeries the indicator library can
trust. Filtering is index-aligned: a sample is kept or dropped as a whole,
so prices and volumes never drift apart. Chronological order is preserved;
samples that do not advance the date are discarded.

No error is raised for an empty result. Downstream consumers handle series
of length 0 or 1 with their neutral fallbacks.
"""

import math
from collections.abc import Iterable

from stockscope.data.models import RawSample
from stockscope.logging import get_logger
from stockscope.models import PricePoint, PriceSeries

logger = get_logger(__name__)


def _is_positive(value: float | None) -> bool:
    """True when value is a finite number strictly greater than zero."""
    if value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


def normalize_series(
    samples: Iterable[RawSample],
    require_volume: bool = True,
) -> PriceSeries:
    """Build a validated PriceSeries from raw samples.

    Args:
        samples: Raw samples ordered oldest-first.
        require_volume: When True, samples without a positive finite volume
            are dropped together with their price. When False, such volumes
            are recorded as 0 and the price is kept.

    Returns:
        PriceSeries with all prices > 0 and strictly increasing dates.
        Possibly empty.
    """
    points: list[PricePoint] = []
    dropped_price = 0
    dropped_volume = 0
    dropped_order = 0

    for sample in samples:
        if not _is_positive(sample.price):
            dropped_price += 1
            continue

        if _is_positive(sample.volume):
            volume = int(float(sample.volume))
        elif require_volume:
            dropped_volume += 1
            continue
        else:
            volume = 0

        if points and sample.date <= points[-1].date:
            dropped_order += 1
            continue

        points.append(
            PricePoint(date=sample.date, price=float(sample.price), volume=volume)
        )

    if dropped_price or dropped_volume or dropped_order:
        logger.debug(
            "series_samples_dropped",
            kept=len(points),
            invalid_price=dropped_price,
            invalid_volume=dropped_volume,
            out_of_order=dropped_order,
        )

    return PriceSeries(points=tuple(points))

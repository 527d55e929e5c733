"""Data models for quotes delivered by quote providers.

Provider output is untrusted: history samples may carry missing or
non-positive prices and volumes. They only become a PriceSeries after
passing through ``stockscope.data.validator.normalize_series``.
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class RawSample:
    """A single unvalidated history sample as reported by a provider."""

    date: date
    price: float | None
    volume: float | None


@dataclass
class StockQuote:
    """Latest quote plus daily history for a single symbol.

    ``is_fallback`` marks synthetic data generated when no live provider
    could answer. Providers that know the 52-week range or the reported
    change percent set them explicitly; otherwise they are derived.
    """

    symbol: str
    company_name: str
    current_price: float
    previous_close: float
    market_cap: float = 0.0
    volume: float = 0.0  # latest session volume reported with the quote
    history: list[RawSample] = field(default_factory=list)
    is_fallback: bool = False
    high_52_week: float | None = None
    low_52_week: float | None = None
    reported_change_percent: float | None = None

    @property
    def change(self) -> float:
        """Absolute change against the previous close."""
        return self.current_price - self.previous_close

    @property
    def change_percent(self) -> float:
        """Day-over-day change in percent; 0 when there is no previous close."""
        if self.reported_change_percent is not None:
            return self.reported_change_percent
        if not self.previous_close:
            return 0.0
        return self.change / self.previous_close * 100

"""Stock analyzer orchestrating validation, indicators, rating and prediction.

The StockAnalyzer is the top-level coordinator that:
1. Fetches a quote with daily history from the primary provider
2. Falls back to synthetic data when the provider fails
3. Validates the history into a PriceSeries
4. Derives 52-week range and computes the indicator snapshot
5. Scores the rating and prediction
6. Logs the analysis breakdown at INFO level
7. Returns a StockAnalysis ready for the dashboard

Graceful degradation: short or empty history never fails the analysis;
the indicator library and rating engine fall back to neutral values.
"""

from __future__ import annotations

import random
import re
from typing import TYPE_CHECKING

import structlog

from stockscope.config import AnalysisSettings, IndicatorSettings
from stockscope.data.validator import normalize_series
from stockscope.exceptions import InvalidSymbolError, QuoteFetchError
from stockscope.logging import get_logger
from stockscope.signals.indicators import compute_indicators
from stockscope.signals.models import StockAnalysis
from stockscope.signals.rating import RandomSource, compute_prediction, compute_rating

if TYPE_CHECKING:
    from stockscope.data.models import StockQuote
    from stockscope.data.provider import QuoteProvider
    from stockscope.models import PriceSeries

logger = get_logger(__name__)

_SYMBOL_PATTERN = re.compile(r"^\^?[A-Z0-9][A-Z0-9.\-=]{0,14}$")

#: 52-week bounds used when no valid history exists, relative to current price.
_EMPTY_RANGE_HIGH = 1.2
_EMPTY_RANGE_LOW = 0.8


def normalize_symbol(symbol: str) -> str:
    """Upper-case and validate a ticker symbol.

    Raises:
        InvalidSymbolError: Empty or containing unsupported characters.
    """
    cleaned = symbol.strip().upper()
    if not _SYMBOL_PATTERN.match(cleaned):
        raise InvalidSymbolError(f"Invalid ticker symbol: {symbol!r}")
    return cleaned


def compute_52_week_range(
    series: PriceSeries, current_price: float, window: int = 252
) -> tuple[float, float]:
    """Return (low, high) over the trailing ``window`` closing prices.

    Without history, a synthetic +/-20% range around the current price.
    """
    prices = series.prices[-window:]
    if not prices:
        return current_price * _EMPTY_RANGE_LOW, current_price * _EMPTY_RANGE_HIGH
    return min(prices), max(prices)


class StockAnalyzer:
    """Produces complete stock analyses from a quote provider.

    Args:
        settings: Validation, range and display configuration.
        indicator_settings: Indicator lookback periods.
        provider: Primary quote source. None = fallback data only.
        fallback: Provider used when the primary one fails or is absent.
        rng: Random source for score noise and prediction perturbation.
    """

    def __init__(
        self,
        settings: AnalysisSettings,
        indicator_settings: IndicatorSettings,
        fallback: QuoteProvider,
        provider: QuoteProvider | None = None,
        rng: RandomSource = random.random,
    ) -> None:
        self._settings = settings
        self._indicator_settings = indicator_settings
        self._provider = provider
        self._fallback = fallback
        self._rng = rng

    async def analyze(self, symbol: str) -> StockAnalysis:
        """Fetch and analyse ``symbol``.

        Raises:
            InvalidSymbolError: The symbol is empty or malformed.
        """
        symbol = normalize_symbol(symbol)
        structlog.contextvars.bind_contextvars(symbol=symbol)
        try:
            quote = await self._fetch(symbol)
            return self.build_analysis(quote)
        finally:
            structlog.contextvars.unbind_contextvars("symbol")

    async def _fetch(self, symbol: str) -> StockQuote:
        if self._provider is not None:
            try:
                return await self._provider.fetch_quote(symbol)
            except QuoteFetchError as e:
                logger.warning("quote_fetch_failed_using_fallback", error=str(e))
        return await self._fallback.fetch_quote(symbol)

    def build_analysis(self, quote: StockQuote) -> StockAnalysis:
        """Run the indicator and rating pipeline over an already fetched quote."""
        series = normalize_series(
            quote.history, require_volume=self._settings.require_volume
        )
        if quote.low_52_week is not None and quote.high_52_week is not None:
            low_52, high_52 = quote.low_52_week, quote.high_52_week
        else:
            low_52, high_52 = compute_52_week_range(
                series, quote.current_price, window=self._settings.range_window
            )

        snapshot = compute_indicators(
            series, volume=quote.volume, settings=self._indicator_settings
        )
        rating = compute_rating(
            current_price=quote.current_price,
            change_percent=quote.change_percent,
            snapshot=snapshot,
            low_52=low_52,
            high_52=high_52,
            volume=quote.volume,
            rng=self._rng,
        )
        prediction = compute_prediction(
            quote.current_price, snapshot, rating, rng=self._rng
        )

        logger.info(
            "stock_analysis",
            symbol=quote.symbol,
            samples=len(series),
            rsi=round(snapshot.rsi, 2),
            technical_score=rating.technical_score,
            rating=rating.overall_rating.value,
            risk=rating.risk_level.value,
            trend=prediction.trend.value,
            is_fallback=quote.is_fallback,
        )

        return StockAnalysis(
            symbol=quote.symbol,
            company_name=quote.company_name,
            current_price=quote.current_price,
            change=quote.change,
            change_percent=quote.change_percent,
            market_cap=quote.market_cap,
            volume=quote.volume,
            high_52_week=high_52,
            low_52_week=low_52,
            historical_data=series.tail(self._settings.display_days).points,
            indicators=snapshot,
            rating=rating,
            prediction=prediction,
            is_fallback=quote.is_fallback,
        )

"""Tests for the StockAnalyzer orchestrator.

Tests verify:
- Symbol normalization and rejection of malformed symbols
- Primary provider used when it answers
- Fallback provider used when the primary fails or is absent
- 52-week range, display window and validation policy
- Graceful degradation with empty history
"""

import random
from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from stockscope.config import AnalysisSettings, IndicatorSettings
from stockscope.data.fallback import FallbackQuoteProvider
from stockscope.data.models import RawSample, StockQuote
from stockscope.exceptions import InvalidSymbolError, QuoteFetchError, SymbolNotFoundError
from stockscope.models import PriceSeries
from stockscope.signals.engine import (
    StockAnalyzer,
    compute_52_week_range,
    normalize_symbol,
)
from stockscope.signals.models import OverallRating, TrendDirection


def _make_quote(
    symbol: str = "AAPL",
    prices: list[float | None] | None = None,
    volumes: list[float | None] | None = None,
    current_price: float = 150.0,
    previous_close: float = 148.0,
) -> StockQuote:
    """Create a test StockQuote with daily history ending 2024-06-28."""
    if prices is None:
        prices = [100.0 + i * 0.5 for i in range(60)]
    if volumes is None:
        volumes = [2_000_000.0] * len(prices)
    end = date(2024, 6, 28)
    history = [
        RawSample(date=end - timedelta(days=len(prices) - 1 - i), price=p, volume=v)
        for i, (p, v) in enumerate(zip(prices, volumes))
    ]
    return StockQuote(
        symbol=symbol,
        company_name=f"{symbol} Inc.",
        current_price=current_price,
        previous_close=previous_close,
        market_cap=2.5e12,
        volume=3_000_000.0,
        history=history,
    )


def _make_analyzer(
    provider=None,
    settings: AnalysisSettings | None = None,
) -> StockAnalyzer:
    return StockAnalyzer(
        settings=settings or AnalysisSettings(),
        indicator_settings=IndicatorSettings(),
        fallback=FallbackQuoteProvider(rng=random.Random(7), today=date(2024, 6, 28)),
        provider=provider,
        rng=lambda: 0.5,
    )


class TestNormalizeSymbol:
    """Tests for ticker symbol validation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("aapl", "AAPL"), (" msft ", "MSFT"), ("brk.b", "BRK.B"), ("^gspc", "^GSPC")],
    )
    def test_valid_symbols(self, raw: str, expected: str) -> None:
        assert normalize_symbol(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "AA PL", "AAPL;DROP", "A" * 20, "^"])
    def test_invalid_symbols(self, raw: str) -> None:
        with pytest.raises(InvalidSymbolError):
            normalize_symbol(raw)


class TestCompute52WeekRange:
    """Tests for 52-week range derivation."""

    def test_empty_series_uses_synthetic_range(self) -> None:
        low, high = compute_52_week_range(PriceSeries(), current_price=100.0)
        assert low == pytest.approx(80.0)
        assert high == pytest.approx(120.0)

    def test_trailing_window_only(self, make_series) -> None:
        series = make_series([500.0] + [10.0, 20.0, 15.0])
        assert compute_52_week_range(series, 15.0, window=3) == (10.0, 20.0)


class TestAnalyze:
    """Tests for provider selection and the assembled analysis."""

    @pytest.mark.asyncio
    async def test_uses_primary_provider(self) -> None:
        provider = AsyncMock()
        provider.fetch_quote.return_value = _make_quote()
        analyzer = _make_analyzer(provider=provider)

        analysis = await analyzer.analyze("aapl")

        provider.fetch_quote.assert_awaited_once_with("AAPL")
        assert analysis.symbol == "AAPL"
        assert analysis.company_name == "AAPL Inc."
        assert analysis.is_fallback is False
        assert analysis.change == pytest.approx(2.0)
        assert analysis.change_percent == pytest.approx(2.0 / 148.0 * 100)

    @pytest.mark.asyncio
    async def test_falls_back_on_fetch_error(self) -> None:
        provider = AsyncMock()
        provider.fetch_quote.side_effect = QuoteFetchError("upstream 503")
        analyzer = _make_analyzer(provider=provider)

        analysis = await analyzer.analyze("TSLA")

        assert analysis.is_fallback is True
        assert analysis.company_name == "TSLA Corporation"
        assert len(analysis.historical_data) == 30

    @pytest.mark.asyncio
    async def test_falls_back_on_unknown_symbol(self) -> None:
        provider = AsyncMock()
        provider.fetch_quote.side_effect = SymbolNotFoundError("ZZZZ")
        analysis = await _make_analyzer(provider=provider).analyze("ZZZZ")
        assert analysis.is_fallback is True

    @pytest.mark.asyncio
    async def test_no_provider_uses_fallback(self) -> None:
        analysis = await _make_analyzer().analyze("NVDA")
        assert analysis.is_fallback is True
        assert analysis.symbol == "NVDA"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self) -> None:
        provider = AsyncMock()
        provider.fetch_quote.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError):
            await _make_analyzer(provider=provider).analyze("AAPL")

    @pytest.mark.asyncio
    async def test_invalid_symbol_raises(self) -> None:
        provider = AsyncMock()
        with pytest.raises(InvalidSymbolError):
            await _make_analyzer(provider=provider).analyze("bad symbol")
        provider.fetch_quote.assert_not_awaited()


class TestBuildAnalysis:
    """Tests for the synchronous pipeline over a fetched quote."""

    def test_display_window_and_range(self) -> None:
        quote = _make_quote()
        analysis = _make_analyzer().build_analysis(quote)

        assert len(analysis.historical_data) == 30
        assert analysis.historical_data[-1].date == date(2024, 6, 28)
        assert analysis.low_52_week == 100.0
        assert analysis.high_52_week == pytest.approx(129.5)
        assert analysis.indicators.volume == 3_000_000.0
        assert analysis.indicators.avg_volume == 2_000_000.0

    def test_invalid_samples_dropped_jointly(self) -> None:
        prices = [10.0, None, 12.0, -1.0, 14.0, 15.0]
        volumes = [100.0, 100.0, 0.0, 100.0, 100.0, 100.0]
        analysis = _make_analyzer().build_analysis(
            _make_quote(prices=prices, volumes=volumes, current_price=15.0)
        )
        assert [p.price for p in analysis.historical_data] == [10.0, 14.0, 15.0]

    def test_zero_volume_kept_when_not_required(self) -> None:
        prices = [10.0, 11.0, 12.0]
        volumes = [100.0, 0.0, None]
        analyzer = _make_analyzer(settings=AnalysisSettings(require_volume=False))
        analysis = analyzer.build_analysis(
            _make_quote(prices=prices, volumes=volumes, current_price=12.0)
        )
        assert [p.volume for p in analysis.historical_data] == [100, 0, 0]

    def test_empty_history_degrades(self) -> None:
        quote = _make_quote(prices=[], current_price=50.0, previous_close=50.0)
        analysis = _make_analyzer().build_analysis(quote)

        assert analysis.historical_data == ()
        assert analysis.indicators.rsi == 50.0
        assert analysis.low_52_week == pytest.approx(40.0)
        assert analysis.high_52_week == pytest.approx(60.0)
        # SMAs are 0, so price > sma20 but the chain is flat: no alignment
        assert analysis.rating.overall_rating == OverallRating.HOLD
        assert analysis.prediction.trend == TrendDirection.NEUTRAL
        # Without volume history the session volume is its own average
        assert analysis.indicators.avg_volume == 3_000_000.0
        assert (
            "Volume analysis suggests decreased institutional interest"
            in analysis.rating.key_factors
        )

    def test_quote_range_preferred_over_history(self) -> None:
        quote = _make_quote()
        quote.low_52_week = 90.0
        quote.high_52_week = 210.0
        analysis = _make_analyzer().build_analysis(quote)

        assert analysis.low_52_week == 90.0
        assert analysis.high_52_week == 210.0
        assert (
            "52-week range positioning indicates 50.0% of range"
            in analysis.rating.key_factors
        )

    @pytest.mark.parametrize("seed", range(200))
    def test_fallback_quote_sits_inside_its_range(self, seed: int) -> None:
        fallback = FallbackQuoteProvider(
            rng=random.Random(seed), today=date(2024, 6, 28)
        )
        analysis = _make_analyzer().build_analysis(fallback.generate("TSLA"))

        low, high = analysis.low_52_week, analysis.high_52_week
        position = (analysis.current_price - low) / (high - low) * 100
        assert 0.0 <= position <= 100.0
        assert analysis.rating.key_factors[4].startswith(
            "52-week range positioning indicates 50."
        )

    def test_uptrend_quote_is_deterministic(self) -> None:
        prices = [100.0 + 3 * i for i in range(300)]
        quote = _make_quote(prices=prices, current_price=prices[-1] + 3.0)
        analyzer = _make_analyzer(settings=AnalysisSettings(range_window=252))

        first = analyzer.build_analysis(quote)
        second = analyzer.build_analysis(quote)

        assert first == second
        assert first.rating.technical_score == 55
        assert first.low_52_week == prices[-252]

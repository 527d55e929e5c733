"""Technical indicator library: SMA, EMA, RSI, MACD and Bollinger Bands.

All functions are pure and operate on closing prices ordered oldest-first.
None of them raises for short input: each degrades to a defined neutral or
synthetic value so a complete snapshot can always be displayed, even for a
newly listed instrument with a handful of sessions.

A non-positive ``period`` is a programming error and raises ValueError.
"""

import math
from collections.abc import Sequence

from stockscope.config import IndicatorSettings
from stockscope.models import PriceSeries
from stockscope.signals.models import BollingerBands, IndicatorSnapshot, MACDResult

#: Minimum history for MACD (the slow EMA period).
MACD_MIN_LENGTH = 26

_MACD_FAST = 12
_MACD_SLOW = 26

#: MACD signal line approximation: a fixed fraction of the MACD line.
_MACD_SIGNAL_FACTOR = 0.9

#: Half-width of the synthetic band used when history is shorter than the period.
_SHORT_BAND_WIDTH = 0.02

#: Average volume assumed when neither history nor a session volume exists.
DEFAULT_AVG_VOLUME = 1_000_000.0


def _check_period(period: int) -> None:
    if period <= 0:
        raise ValueError("period must be > 0")


def _last_or_zero(prices: Sequence[float]) -> float:
    return float(prices[-1]) if prices else 0.0


def calculate_sma(prices: Sequence[float], period: int) -> float:
    """Compute the Simple Moving Average of the last ``period`` prices.

    Args:
        prices: Closing prices, oldest first.
        period: Window length (> 0).

    Returns:
        Mean of the trailing window. With fewer than ``period`` prices, the
        last observed price (0.0 for empty input).
    """
    _check_period(period)
    if len(prices) < period:
        return _last_or_zero(prices)

    window = prices[-period:]
    return sum(float(p) for p in window) / period


def calculate_ema(prices: Sequence[float], period: int) -> float:
    """Compute the Exponential Moving Average over the whole sequence.

    Uses the recursive formula:
        alpha = 2 / (period + 1)
        EMA_t = alpha * price_t + (1 - alpha) * EMA_{t-1}

    Seeded with the first price of the sequence (not a window SMA) and
    propagated across every sample.

    Args:
        prices: Closing prices, oldest first.
        period: Smoothing period (> 0).

    Returns:
        Final EMA value. With fewer than ``period`` prices, the last observed
        price (0.0 for empty input).
    """
    _check_period(period)
    if len(prices) < period:
        return _last_or_zero(prices)

    alpha = 2.0 / (period + 1)
    ema = float(prices[0])
    for price in prices[1:]:
        ema = float(price) * alpha + ema * (1.0 - alpha)
    return ema


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """Compute the Relative Strength Index using Wilder's smoothing.

    1) Seed average gain and loss from the first ``period`` deltas.
    2) For each later delta:
         avg_gain = (avg_gain * (period - 1) + gain) / period
         avg_loss = (avg_loss * (period - 1) + loss) / period
    3) RS = avg_gain / avg_loss, with avg_loss == 0 treated as a divisor of 1.
       A zero average gain is not special-cased.

    Args:
        prices: Closing prices, oldest first.
        period: Lookback period (> 0).

    Returns:
        RSI in [0, 100]; 50.0 when fewer than ``period + 1`` prices exist.
    """
    _check_period(period)
    if len(prices) < period + 1:
        return 50.0

    closes = [float(p) for p in prices]
    deltas = [closes[i] - closes[i - 1] for i in range(1, len(closes))]

    avg_gain = sum(max(d, 0.0) for d in deltas[:period]) / period
    avg_loss = sum(max(-d, 0.0) for d in deltas[:period]) / period

    for delta in deltas[period:]:
        gain = max(delta, 0.0)
        loss = max(-delta, 0.0)
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    rs = avg_gain / (avg_loss or 1.0)
    return 100.0 - 100.0 / (1.0 + rs)


def calculate_macd(prices: Sequence[float]) -> MACDResult:
    """Compute MACD(12, 26) with a simplified signal line.

    The signal line is ``0.9 * macd`` rather than a 9-period EMA of the MACD
    history, so the histogram is always one tenth of the MACD line.

    Returns:
        MACDResult; all zeros when fewer than 26 prices exist.
    """
    if len(prices) < MACD_MIN_LENGTH:
        return MACDResult(value=0.0, signal=0.0, histogram=0.0)

    macd_line = calculate_ema(prices, _MACD_FAST) - calculate_ema(prices, _MACD_SLOW)
    signal = macd_line * _MACD_SIGNAL_FACTOR
    return MACDResult(value=macd_line, signal=signal, histogram=macd_line - signal)


def calculate_bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    multiplier: float = 2.0,
) -> BollingerBands:
    """Compute Bollinger Bands around the ``period`` SMA.

    Uses the population standard deviation of the trailing window.

    Args:
        prices: Closing prices, oldest first.
        period: SMA / standard deviation window (> 0).
        multiplier: Band width in standard deviations.

    Returns:
        BollingerBands. With fewer than ``period`` prices, a synthetic
        +/-2% band around the fallback SMA.
    """
    middle = calculate_sma(prices, period)
    if len(prices) < period:
        return BollingerBands(
            upper=middle * (1 + _SHORT_BAND_WIDTH),
            middle=middle,
            lower=middle * (1 - _SHORT_BAND_WIDTH),
        )

    window = [float(p) for p in prices[-period:]]
    variance = sum((p - middle) ** 2 for p in window) / period
    std_dev = math.sqrt(variance)
    return BollingerBands(
        upper=middle + std_dev * multiplier,
        middle=middle,
        lower=middle - std_dev * multiplier,
    )


def compute_indicators(
    series: PriceSeries,
    volume: float | None = None,
    settings: IndicatorSettings | None = None,
) -> IndicatorSnapshot:
    """Compute the full indicator snapshot for a validated series.

    Args:
        series: Validated price series (may be empty).
        volume: Latest session volume. Defaults to the volume of the last
            point in the series (0 for an empty series). Without volume
            history it also stands in for the average volume.
        settings: Indicator periods. Defaults to IndicatorSettings().

    Returns:
        IndicatorSnapshot recomputed from scratch.
    """
    if settings is None:
        settings = IndicatorSettings()

    prices = series.prices
    volumes = series.volumes

    if volume is None:
        volume = float(volumes[-1]) if volumes else 0.0

    if volumes:
        recent_volumes = volumes[-settings.avg_volume_window :]
        avg_volume = sum(recent_volumes) / len(recent_volumes)
    else:
        # No volume history: compare the session against itself
        avg_volume = volume or DEFAULT_AVG_VOLUME

    return IndicatorSnapshot(
        rsi=calculate_rsi(prices, settings.rsi_period),
        macd=calculate_macd(prices),
        bollinger=calculate_bollinger_bands(
            prices,
            period=settings.bollinger_period,
            multiplier=settings.bollinger_multiplier,
        ),
        sma20=calculate_sma(prices, settings.sma_short),
        sma50=calculate_sma(prices, settings.sma_medium),
        sma200=calculate_sma(prices, settings.sma_long),
        volume=float(volume),
        avg_volume=float(avg_volume),
    )

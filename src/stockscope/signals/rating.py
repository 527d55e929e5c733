"""Rule-based composite rating and short-horizon prediction.

Additive scoring from a neutral base of 50:
    RSI < 30                            -> +20 (oversold)
    RSI > 70                            -> -20 (overbought)
    price > sma20 > sma50 > sma200      -> +25 (confirmed uptrend)
    price < sma20 < sma50 < sma200      -> -25 (confirmed downtrend)

The resulting technical score drives the rating, confidence, price target
and sentiment. The rules are fixed and deterministic; the only randomness
(the fundamental/market score noise and the prediction perturbations) is
drawn from an injected RandomSource so tests can pin it.
"""

import math
import random
from collections.abc import Callable

from stockscope.signals.models import (
    IndicatorSnapshot,
    OverallRating,
    Prediction,
    RatingResult,
    RiskLevel,
    Sentiment,
    SentimentLabel,
    TrendDirection,
)

#: Zero-argument callable returning a float in [0, 1), like random.random.
RandomSource = Callable[[], float]

BASE_SCORE = 50
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0
RSI_WEIGHT = 20
TREND_WEIGHT = 25

CONFIDENCE_MIN = 20
CONFIDENCE_MAX = 95

#: Score thresholds, evaluated top-down; first lower bound reached wins.
_RATING_THRESHOLDS: tuple[tuple[int, OverallRating], ...] = (
    (80, OverallRating.STRONG_BUY),
    (65, OverallRating.BUY),
    (35, OverallRating.HOLD),
    (20, OverallRating.SELL),
)

_SENTIMENT_THRESHOLDS: tuple[tuple[int, SentimentLabel], ...] = (
    (80, SentimentLabel.VERY_POSITIVE),
    (60, SentimentLabel.POSITIVE),
    (40, SentimentLabel.NEUTRAL),
    (20, SentimentLabel.NEGATIVE),
)

_HIGH_RISK_CHANGE = 5.0
_MEDIUM_RISK_CHANGE = 2.0

_PREDICTION_BULLISH = 60
_PREDICTION_BEARISH = 40


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def check_trend_alignment(price: float, snapshot: IndicatorSnapshot) -> TrendDirection:
    """Classify moving-average alignment.

    BULLISH when price > sma20 > sma50 > sma200, BEARISH for the mirror
    ordering, NEUTRAL otherwise. Equal averages (e.g. the short-series
    fallback) never count as aligned.
    """
    if price > snapshot.sma20 > snapshot.sma50 > snapshot.sma200:
        return TrendDirection.BULLISH
    if price < snapshot.sma20 < snapshot.sma50 < snapshot.sma200:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def classify_rsi(rsi: float) -> TrendDirection:
    """Map RSI to the trend it implies: oversold is bullish, overbought bearish."""
    if rsi < RSI_OVERSOLD:
        return TrendDirection.BULLISH
    if rsi > RSI_OVERBOUGHT:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def compute_technical_score(rsi: float, alignment: TrendDirection) -> int:
    """Apply the RSI and trend-alignment rules to the base score.

    The result is not clamped; it spans [5, 95].
    """
    score = BASE_SCORE

    rsi_signal = classify_rsi(rsi)
    if rsi_signal is TrendDirection.BULLISH:
        score += RSI_WEIGHT
    elif rsi_signal is TrendDirection.BEARISH:
        score -= RSI_WEIGHT

    if alignment is TrendDirection.BULLISH:
        score += TREND_WEIGHT
    elif alignment is TrendDirection.BEARISH:
        score -= TREND_WEIGHT

    return score


def rating_for_score(score: float) -> OverallRating:
    """Map a technical score to its overall rating band."""
    for threshold, rating in _RATING_THRESHOLDS:
        if score >= threshold:
            return rating
    return OverallRating.STRONG_SELL


def sentiment_label_for_score(score: float) -> SentimentLabel:
    """Map a sentiment score to its label."""
    for threshold, label in _SENTIMENT_THRESHOLDS:
        if score >= threshold:
            return label
    return SentimentLabel.VERY_NEGATIVE


def risk_level_for_change(change_percent: float) -> RiskLevel:
    """Classify risk from the absolute day-over-day percent change."""
    magnitude = abs(change_percent)
    if magnitude > _HIGH_RISK_CHANGE:
        return RiskLevel.HIGH
    if magnitude > _MEDIUM_RISK_CHANGE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _range_position(price: float, low_52: float, high_52: float) -> float:
    """Position of price within the 52-week range, in percent.

    A zero-width range (flat or single-sample history) reports mid-range.
    """
    width = high_52 - low_52
    if width == 0:
        return 50.0
    return (price - low_52) / width * 100


def build_key_factors(
    current_price: float,
    snapshot: IndicatorSnapshot,
    trend: TrendDirection,
    low_52: float,
    high_52: float,
    volume: float,
) -> tuple[str, ...]:
    """Render the five explanatory factors, in fixed order."""
    rsi = snapshot.rsi
    if rsi < RSI_OVERSOLD:
        rsi_state = "oversold"
    elif rsi > RSI_OVERBOUGHT:
        rsi_state = "overbought"
    else:
        rsi_state = "neutral"

    side = "above" if current_price > snapshot.sma20 else "below"
    interest = "increased" if volume > snapshot.avg_volume else "decreased"
    position = _range_position(current_price, low_52, high_52)

    return (
        f"RSI at {rsi:.1f} indicates {rsi_state} conditions",
        f"Price is {side} 20-day moving average ({snapshot.sma20:.2f})",
        f"Current trend shows {trend.value} momentum based on technical analysis",
        f"Volume analysis suggests {interest} institutional interest",
        f"52-week range positioning indicates {position:.1f}% of range",
    )


def compute_rating(
    current_price: float,
    change_percent: float,
    snapshot: IndicatorSnapshot,
    low_52: float,
    high_52: float,
    volume: float,
    rng: RandomSource = random.random,
) -> RatingResult:
    """Derive the composite rating from price, change and indicators.

    Args:
        current_price: Latest price (> 0).
        change_percent: Day-over-day change in percent.
        snapshot: Indicators computed from the price history.
        low_52: 52-week low.
        high_52: 52-week high.
        volume: Latest session volume, compared against the average volume.
        rng: Random source for the fundamental/market score noise.
            Two draws, fundamental first.

    Returns:
        RatingResult with confidence clamped to [20, 95].
    """
    alignment = check_trend_alignment(current_price, snapshot)
    technical_score = compute_technical_score(snapshot.rsi, alignment)

    # Alignment overrides the RSI-implied trend for the explanatory text
    trend = classify_rsi(snapshot.rsi)
    if alignment is not TrendDirection.NEUTRAL:
        trend = alignment

    key_factors = build_key_factors(
        current_price, snapshot, trend, low_52, high_52, volume
    )

    # Synthetic perturbations of the technical score
    fundamental_score = round_half_up(technical_score * 0.9 + rng() * 20)
    market_score = round_half_up(technical_score * 1.1 + rng() * 15)

    return RatingResult(
        overall_rating=rating_for_score(technical_score),
        confidence=min(max(technical_score, CONFIDENCE_MIN), CONFIDENCE_MAX),
        risk_level=risk_level_for_change(change_percent),
        price_target=current_price * (1 + (technical_score - BASE_SCORE) / 200),
        key_factors=key_factors,
        sentiment=Sentiment(
            score=technical_score,
            label=sentiment_label_for_score(technical_score),
        ),
        technical_score=round_half_up(technical_score),
        fundamental_score=fundamental_score,
        market_score=market_score,
    )


def compute_prediction(
    current_price: float,
    snapshot: IndicatorSnapshot,
    rating: RatingResult,
    rng: RandomSource = random.random,
) -> Prediction:
    """Project next-day, next-week and next-month prices.

    Each horizon adds a uniform perturbation ``U = rng() - 0.5``; a source
    pinned at 0.5 removes it. Draw order: day, week, month.

        next_day   = price * (1 + U * 0.03)
        next_week  = price * (1 + (rsi - 50) / 1000 + U * 0.05)
        next_month = price * (1 + (rsi - 50) / 500 + U * 0.1)

    The trend follows the sentiment score alone and may disagree with the
    trend quoted in the key factors.
    """
    rsi = snapshot.rsi
    next_day = current_price * (1 + (rng() - 0.5) * 0.03)
    next_week = current_price * (1 + (rsi - 50) / 1000 + (rng() - 0.5) * 0.05)
    next_month = current_price * (1 + (rsi - 50) / 500 + (rng() - 0.5) * 0.1)

    score = rating.sentiment.score
    if score >= _PREDICTION_BULLISH:
        trend = TrendDirection.BULLISH
    elif score <= _PREDICTION_BEARISH:
        trend = TrendDirection.BEARISH
    else:
        trend = TrendDirection.NEUTRAL

    return Prediction(
        next_day=next_day,
        next_week=next_week,
        next_month=next_month,
        confidence=rating.confidence,
        trend=trend,
    )

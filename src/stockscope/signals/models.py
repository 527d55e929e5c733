"""Indicator, rating and prediction data models.

Every label is a closed ``str`` enumeration whose value is the text shown on
the dashboard. All records are frozen: each evaluation produces fresh values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from stockscope.models import PricePoint


class OverallRating(str, Enum):
    """Composite buy/sell recommendation derived from the technical score."""

    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


class RiskLevel(str, Enum):
    """Risk classification from the day-over-day percent change."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SentimentLabel(str, Enum):
    """Five ordinal sentiment levels derived from the technical score."""

    VERY_POSITIVE = "Very Positive"
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    VERY_NEGATIVE = "Very Negative"


class TrendDirection(str, Enum):
    """Price trend classification."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram."""

    value: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    """Volatility bands; upper >= middle >= lower for positive prices."""

    upper: float
    middle: float
    lower: float


@dataclass(frozen=True)
class IndicatorSnapshot:
    """All technical indicators computed from one price series."""

    rsi: float  # [0, 100]
    macd: MACDResult
    bollinger: BollingerBands
    sma20: float
    sma50: float
    sma200: float
    volume: float  # latest session volume
    avg_volume: float


@dataclass(frozen=True)
class Sentiment:
    """Sentiment score (equal to the technical score) and its label."""

    score: int
    label: SentimentLabel


@dataclass(frozen=True)
class RatingResult:
    """Rule-based composite rating for a single stock.

    ``fundamental_score`` and ``market_score`` are synthetic perturbations of
    the technical score, not independent fundamental or breadth analysis.
    """

    overall_rating: OverallRating
    confidence: int  # [20, 95]
    risk_level: RiskLevel
    price_target: float
    key_factors: tuple[str, ...]
    sentiment: Sentiment
    technical_score: int
    fundamental_score: int
    market_score: int


@dataclass(frozen=True)
class Prediction:
    """Short multi-horizon price projection."""

    next_day: float
    next_week: float
    next_month: float
    confidence: int
    trend: TrendDirection


@dataclass(frozen=True)
class StockAnalysis:
    """Complete analysis record served to the dashboard."""

    symbol: str
    company_name: str
    current_price: float
    change: float
    change_percent: float
    market_cap: float
    volume: float
    high_52_week: float
    low_52_week: float
    historical_data: tuple[PricePoint, ...]
    indicators: IndicatorSnapshot
    rating: RatingResult
    prediction: Prediction
    is_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the dashboard's camelCase JSON layout."""
        ind = self.indicators
        rating = self.rating
        pred = self.prediction
        return {
            "symbol": self.symbol,
            "companyName": self.company_name,
            "currentPrice": self.current_price,
            "change": self.change,
            "changePercent": self.change_percent,
            "marketCap": self.market_cap,
            "volume": self.volume,
            "high52Week": self.high_52_week,
            "low52Week": self.low_52_week,
            "isFallback": self.is_fallback,
            "historicalData": [
                {"date": p.date.isoformat(), "price": p.price, "volume": p.volume}
                for p in self.historical_data
            ],
            "technicalIndicators": {
                "rsi": ind.rsi,
                "macd": {
                    "value": ind.macd.value,
                    "signal": ind.macd.signal,
                    "histogram": ind.macd.histogram,
                },
                "bollinger": {
                    "upper": ind.bollinger.upper,
                    "middle": ind.bollinger.middle,
                    "lower": ind.bollinger.lower,
                },
                "sma20": ind.sma20,
                "sma50": ind.sma50,
                "sma200": ind.sma200,
                "volume": ind.volume,
                "avgVolume": ind.avg_volume,
            },
            "aiAnalysis": {
                "overallRating": rating.overall_rating.value,
                "confidence": rating.confidence,
                "riskLevel": rating.risk_level.value,
                "priceTarget": rating.price_target,
                "keyFactors": list(rating.key_factors),
                "sentiment": {
                    "score": rating.sentiment.score,
                    "label": rating.sentiment.label.value,
                },
                "technicalScore": rating.technical_score,
                "fundamentalScore": rating.fundamental_score,
                "marketScore": rating.market_score,
            },
            "prediction": {
                "nextDay": pred.next_day,
                "nextWeek": pred.next_week,
                "nextMonth": pred.next_month,
                "confidence": pred.confidence,
                "trend": pred.trend.value,
            },
        }

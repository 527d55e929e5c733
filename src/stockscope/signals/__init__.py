"""Technical indicator and composite rating engine.

Provides the indicator library (SMA, EMA, RSI, MACD, Bollinger Bands), the
rule-based rating and prediction functions, their data models, and the
StockAnalyzer that runs the whole pipeline for one symbol.
"""

from stockscope.signals.engine import StockAnalyzer
from stockscope.signals.indicators import (
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_sma,
    compute_indicators,
)
from stockscope.signals.models import (
    IndicatorSnapshot,
    OverallRating,
    Prediction,
    RatingResult,
    RiskLevel,
    SentimentLabel,
    StockAnalysis,
    TrendDirection,
)
from stockscope.signals.rating import (
    RandomSource,
    check_trend_alignment,
    compute_prediction,
    compute_rating,
)

__all__ = [
    "IndicatorSnapshot",
    "OverallRating",
    "Prediction",
    "RandomSource",
    "RatingResult",
    "RiskLevel",
    "SentimentLabel",
    "StockAnalysis",
    "StockAnalyzer",
    "TrendDirection",
    "calculate_bollinger_bands",
    "calculate_ema",
    "calculate_macd",
    "calculate_rsi",
    "calculate_sma",
    "check_trend_alignment",
    "compute_indicators",
    "compute_prediction",
    "compute_rating",
]

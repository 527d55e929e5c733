"""Quote data layer.

Provides raw quote models, the abstract quote provider interface, the
synthetic fallback provider, and series validation.
"""

from stockscope.data.fallback import FallbackQuoteProvider
from stockscope.data.models import RawSample, StockQuote
from stockscope.data.provider import QuoteProvider
from stockscope.data.validator import normalize_series

__all__ = [
    "FallbackQuoteProvider",
    "QuoteProvider",
    "RawSample",
    "StockQuote",
    "normalize_series",
]

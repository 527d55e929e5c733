"""Custom exceptions for the stock analysis service.

The indicator and rating engine never raises for data reasons; these
exceptions belong to the quote-provider and request layers around it.
"""


class StockScopeError(Exception):
    """Base exception for all service errors."""


class InvalidSymbolError(StockScopeError):
    """Raised when a requested ticker symbol is empty or malformed."""


class QuoteFetchError(StockScopeError):
    """Raised when a quote provider cannot deliver a quote or price history."""


class SymbolNotFoundError(QuoteFetchError):
    """Raised when the upstream provider does not know the requested symbol."""

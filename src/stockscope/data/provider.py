"""Abstract quote provider interface.

Defines the contract for all sources of quotes and daily history.
The analyzer depends only on this interface, keeping any upstream API
details isolated in concrete implementations.
"""

from abc import ABC, abstractmethod

from stockscope.data.models import StockQuote


class QuoteProvider(ABC):
    """Abstract base class for quote and price-history sources."""

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> StockQuote:
        """Fetch the latest quote and daily history for ``symbol``.

        Raises:
            SymbolNotFoundError: The provider does not know the symbol.
            QuoteFetchError: The provider could not be reached or returned
                unusable data.
        """
        ...

"""Synthetic quote generation used when no live provider can answer.

Produces a plausible quote: a random base price, a random daily change and
a short random-walk history with cent-rounded prices. The random generator
is injected so a seeded instance yields reproducible demo data.
"""

import random
from datetime import date, timedelta

from stockscope.data.models import RawSample, StockQuote
from stockscope.data.provider import QuoteProvider
from stockscope.logging import get_logger

logger = get_logger(__name__)

#: Maximum daily move of the random walk, as a fraction of price.
_DAILY_MOVE = 0.03

#: 52-week bounds reported with a synthetic quote, relative to the base price.
_RANGE_HIGH = 1.3
_RANGE_LOW = 0.7


class FallbackQuoteProvider(QuoteProvider):
    """Generates synthetic quotes for any symbol.

    Args:
        rng: Random generator; pass ``random.Random(seed)`` for reproducible
            output. Defaults to a fresh unseeded generator.
        history_days: Number of daily samples to generate (ending today).
        today: Last history date. Defaults to ``date.today()`` at call time.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        history_days: int = 30,
        today: date | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._history_days = history_days
        self._today = today

    async def fetch_quote(self, symbol: str) -> StockQuote:
        return self.generate(symbol)

    def generate(self, symbol: str) -> StockQuote:
        """Build a synthetic quote for ``symbol`` (already upper-cased)."""
        rng = self._rng
        end = self._today or date.today()

        base_price = 100 + rng.random() * 400
        change = (rng.random() - 0.5) * 10

        history: list[RawSample] = []
        price = base_price
        for offset in range(self._history_days - 1, -1, -1):
            price += (rng.random() - 0.5) * price * _DAILY_MOVE
            history.append(
                RawSample(
                    date=end - timedelta(days=offset),
                    price=round(price, 2),
                    volume=float(int(rng.random() * 10_000_000) + 1_000_000),
                )
            )

        current_price = round(base_price, 2)
        quote = StockQuote(
            symbol=symbol,
            company_name=f"{symbol} Corporation",
            current_price=current_price,
            previous_close=round(base_price - change, 2),
            market_cap=float(int(rng.random() * 500_000_000_000) + 10_000_000_000),
            volume=float(int(rng.random() * 50_000_000) + 1_000_000),
            history=history,
            is_fallback=True,
            high_52_week=round(base_price * _RANGE_HIGH, 2),
            low_52_week=round(base_price * _RANGE_LOW, 2),
            reported_change_percent=round(change / base_price * 100, 2),
        )

        logger.debug(
            "fallback_quote_generated",
            symbol=symbol,
            price=current_price,
            samples=len(history),
        )
        return quote

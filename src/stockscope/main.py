"""Entry point for the StockScope dashboard API.

Wires all components together and serves the FastAPI app with uvicorn.

Component wiring order (in build_analyzer):
1. AppSettings (configuration)
2. Logging setup
3. FallbackQuoteProvider (synthetic quotes, optionally seeded)
4. StockAnalyzer (validation, indicators, rating, prediction)
"""

import asyncio
import random
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from stockscope.config import AppSettings
from stockscope.dashboard.app import create_dashboard_app
from stockscope.data.fallback import FallbackQuoteProvider
from stockscope.data.provider import QuoteProvider
from stockscope.logging import get_logger, setup_logging
from stockscope.signals.engine import StockAnalyzer


def build_analyzer(
    settings: AppSettings, provider: QuoteProvider | None = None
) -> StockAnalyzer:
    """Build the stock analyzer from settings.

    Args:
        settings: Application-wide settings.
        provider: Live quote provider. None = serve fallback data only.

    Returns:
        StockAnalyzer ready to serve requests.
    """
    seed = settings.analysis.fallback_seed
    fallback = FallbackQuoteProvider(
        rng=random.Random(seed),
        history_days=settings.analysis.fallback_history_days,
    )

    # A fixed seed pins the score noise and prediction perturbation too
    rng = random.Random(seed).random if seed is not None else random.random

    return StockAnalyzer(
        settings=settings.analysis,
        indicator_settings=settings.indicators,
        fallback=fallback,
        provider=provider,
        rng=rng,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log service startup and shutdown."""
    logger = get_logger("stockscope.main")
    logger.info("lifespan_started")
    yield
    logger.info("stockscope_stopped")


async def run() -> None:
    """Run the dashboard API server."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("stockscope.main")

    # 3-4. Build analyzer
    analyzer = build_analyzer(settings)
    app = create_dashboard_app(analyzer, lifespan=lifespan)

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        live_provider=False,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
        log_config=None,  # keep the structlog handlers from setup_logging
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()

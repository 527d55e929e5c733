"""FastAPI dashboard application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from stockscope.dashboard.routes import api
from stockscope.signals.engine import StockAnalyzer


def create_dashboard_app(analyzer: StockAnalyzer, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        analyzer: Stock analyzer serving the analysis endpoints.
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logging.

    Returns:
        Configured FastAPI application with the JSON API mounted under /api.
    """
    app = FastAPI(
        title="StockScope Dashboard",
        lifespan=lifespan,
    )

    # Route handlers reach the analyzer through app.state
    app.state.analyzer = analyzer

    app.include_router(api.router, prefix="/api")

    return app

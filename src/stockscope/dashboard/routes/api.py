"""JSON API endpoints serving stock analyses to the dashboard."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from stockscope.exceptions import InvalidSymbolError
from stockscope.signals.engine import StockAnalyzer

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def get_health() -> JSONResponse:
    """Liveness check."""
    return JSONResponse(content={"status": "ok"})


@router.get("/stocks/{symbol}")
async def get_stock_analysis(request: Request, symbol: str) -> JSONResponse:
    """Quote, history, indicators, rating and prediction for one symbol."""
    analyzer: StockAnalyzer = request.app.state.analyzer
    try:
        analysis = await analyzer.analyze(symbol)
    except InvalidSymbolError as e:
        log.info("invalid_symbol_requested", symbol=symbol)
        return JSONResponse(status_code=400, content={"error": str(e)})

    return JSONResponse(content=analysis.to_dict())

"""HTTP API for the arbitrage checker"""
import asyncio
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from config import FETCH_TIMEOUT_S
from engine import OpportunityDetector, evaluate_batch
from schemas import CheckArbitrageResponse, ErrorResponse, HealthResponse
from sources import PriceSource

logger = logging.getLogger(__name__)

app = FastAPI(title="DEX Arbitrage Checker", version="1.0.0")


class ArbitrageService:
    """Holds the price source and detector shared by all requests"""

    def __init__(self, fetch_timeout_s: float = FETCH_TIMEOUT_S):
        self.source: Optional[PriceSource] = None
        self.detector = OpportunityDetector()
        self.fetch_timeout_s = fetch_timeout_s

    def set_source(self, source: Optional[PriceSource]):
        self.source = source
        if source:
            logger.info(f"Price source set: {source.name}")

    def set_detector(self, detector: OpportunityDetector):
        self.detector = detector

    async def fetch_rows(self) -> list[list]:
        """Fetch the current rows, giving up after the configured timeout"""
        try:
            return await asyncio.wait_for(self.source.fetch(), timeout=self.fetch_timeout_s)
        except asyncio.TimeoutError:
            logger.error(f"[{self.source.name}] ❌ Fetching prices timed out after {self.fetch_timeout_s}s")
            return []


service = ArbitrageService()


@app.post(
    "/check-arbitrage",
    response_model=CheckArbitrageResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def check_arbitrage():
    """Fetch the latest prices and report any venue price gaps"""
    logger.info("📩 Received request to check arbitrage...")

    if not service.source:
        return JSONResponse(status_code=503, content={"error": "Price source not initialized"})

    rows = await service.fetch_rows()
    if not rows:
        return JSONResponse(status_code=500, content={"error": "No price data available."})

    result = evaluate_batch(rows, service.detector)
    rejections = [r.to_dict() for r in result.rejections]

    if result.has_opportunities:
        logger.info(f"Found {len(result.opportunities)} opportunities in {len(rows)} rows")
        return {
            "message": "Arbitrage opportunities found.",
            "opportunities": [o.to_dict() for o in result.opportunities],
            "rejections": rejections,
        }

    return {
        "message": "No arbitrage opportunities found.",
        "rejections": rejections,
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    return {
        "status": "ok",
        "source": service.source.name if service.source else None,
    }

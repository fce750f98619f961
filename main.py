"""
DEX Arbitrage Checker - Main Entry Point

Serves an HTTP endpoint that reads the latest token prices for two
decentralized exchanges and reports pairs quoted at different prices.

Modes:
- sheets: price rows come from a Google Sheet
- simulation: price rows are generated locally
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import WEB_HOST, WEB_PORT, MODE, LOG_LEVEL, VENUE_NAMES, MIN_PROFIT_THRESHOLD
from api import app, service
from sources import create_price_source

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

# Reduce noise from libraries
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the price source once and share it across requests"""
    source = create_price_source(MODE)
    service.set_source(source)

    logger.info("=" * 60)
    logger.info("🚀 DEX ARBITRAGE CHECKER STARTING")
    logger.info(f"Mode: {MODE} | Venues: {VENUE_NAMES['A']} vs {VENUE_NAMES['B']}")
    logger.info(f"Min profit threshold: {MIN_PROFIT_THRESHOLD}")
    logger.info(f"🚀 Server running on http://localhost:{WEB_PORT}")
    logger.info("=" * 60)

    yield

    await source.close()
    service.set_source(None)
    logger.info("Checker stopped")


# Update app lifespan
app.router.lifespan_context = lifespan


def main():
    """Main entry point"""
    uvicorn.run(
        app,
        host=WEB_HOST,
        port=WEB_PORT,
        log_level="warning"
    )


if __name__ == "__main__":
    main()

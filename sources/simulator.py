"""Simulated price rows for running without sheet credentials"""
import logging
import random
from datetime import datetime
from typing import Optional

from .base import PriceSource
from config import TRADING_PAIRS

logger = logging.getLogger(__name__)


# Realistic base prices for simulation
BASE_PRICES = {
    "BNB/USDT": 310.0,
    "CAKE/BNB": 0.0081,
    "ETH/USDT": 3250.0,
    "BTCB/USDT": 97500.0,
}


class SimulatedPriceSource(PriceSource):
    """
    Generates sheet-shaped rows with a random walk per pair.
    Each venue gets its own small offset so gaps show up in both directions.
    """

    def __init__(
        self,
        pairs: Optional[list[str]] = None,
        max_offset_percent: float = 0.3,
        seed: Optional[int] = None,
        name: str = "simulation",
    ):
        super().__init__(name)
        self.pairs = [p for p in (pairs or TRADING_PAIRS) if p in BASE_PRICES]
        self.max_offset = max_offset_percent / 100
        self.current_prices = {pair: BASE_PRICES[pair] for pair in self.pairs}
        self._random = random.Random(seed)
        logger.info(f"[{self.name}] 🎮 SIMULATION MODE - Generating mock prices for {len(self.pairs)} pairs")

    def _next_row(self, pair: str) -> list[str]:
        # Small random movement (-0.1% to +0.1%)
        price = self.current_prices[pair] * (1 + self._random.uniform(-0.001, 0.001))
        self.current_prices[pair] = price

        price_a = price * (1 + self._random.uniform(-self.max_offset, self.max_offset))
        price_b = price * (1 + self._random.uniform(-self.max_offset, self.max_offset))

        token_in, token_out = pair.split("/")
        return [
            datetime.now().isoformat(timespec="seconds"),
            token_in,
            token_out,
            f"{price_a:.8g}",
            f"{price_b:.8g}",
        ]

    async def _fetch_rows(self) -> list[list]:
        return [self._next_row(pair) for pair in self.pairs]

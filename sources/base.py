"""Base price row source"""
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class PriceSourceError(Exception):
    """Raised by a source when it cannot produce rows"""


class PriceSource(ABC):
    """Base class for anything that supplies raw price rows"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def _fetch_rows(self) -> list[list]:
        """Fetch the current batch of rows - source specific"""
        pass

    async def fetch(self) -> list[list]:
        """
        Fetch the current batch of rows.

        Failures are logged and reported as an empty batch; the caller
        decides what "no rows" means.
        """
        try:
            rows = await self._fetch_rows()
        except PriceSourceError as e:
            logger.error(f"[{self.name}] ❌ Error fetching prices: {e}")
            return []
        except Exception as e:
            logger.error(f"[{self.name}] ❌ Unexpected error fetching prices: {e}", exc_info=True)
            return []

        logger.debug(f"[{self.name}] Fetched {len(rows)} rows")
        return rows

    async def close(self):
        """Release any client held by the source"""
        pass

"""Source serving a fixed set of rows"""
from typing import Optional

from .base import PriceSource


class StaticPriceSource(PriceSource):
    """Returns the same rows on every fetch. Useful for tests and demos."""

    def __init__(self, rows: Optional[list[list]] = None, name: str = "static"):
        super().__init__(name)
        self.rows = list(rows or [])

    async def _fetch_rows(self) -> list[list]:
        return [list(row) if isinstance(row, (list, tuple)) else row for row in self.rows]

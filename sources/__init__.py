"""Price row sources"""
from .base import PriceSource, PriceSourceError
from .static import StaticPriceSource
from .simulator import SimulatedPriceSource


def create_price_source(mode: str) -> PriceSource:
    """Build the source for the configured operation mode"""
    if mode == "simulation":
        return SimulatedPriceSource()
    if mode == "sheets":
        # Google client is only imported for sheets mode
        from .sheets import SheetsPriceSource
        return SheetsPriceSource()
    raise ValueError(f"Unknown MODE: {mode!r} (expected 'sheets' or 'simulation')")


__all__ = [
    "PriceSource",
    "PriceSourceError",
    "StaticPriceSource",
    "SimulatedPriceSource",
    "create_price_source",
]

"""Arbitrage calculation engine"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from config import MIN_PROFIT_THRESHOLD
from quotes import PriceQuote, RowRejection, Venue, parse_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """Represents a price gap for one token pair between two venues"""
    token_in: str
    token_out: str
    higher_venue: Venue
    lower_venue: Venue
    higher_price: float
    lower_price: float
    potential_profit: float  # higher_price - lower_price, always > 0
    timestamp: Any = None

    @property
    def arbitrage(self) -> str:
        return f"{self.higher_venue.display_name} > {self.lower_venue.display_name}"

    def to_dict(self) -> dict:
        return {
            "tokenIn": self.token_in,
            "tokenOut": self.token_out,
            "timestamp": self.timestamp,
            "higherVenue": self.higher_venue.value,
            "lowerVenue": self.lower_venue.value,
            "higherPrice": self.higher_price,
            "lowerPrice": self.lower_price,
            "potentialProfit": self.potential_profit,
            "arbitrage": self.arbitrage,
        }


@dataclass(frozen=True)
class BatchResult:
    """Outcome of checking one batch of price rows"""
    opportunities: tuple[ArbitrageOpportunity, ...]
    rejections: tuple[RowRejection, ...]
    quote_count: int = 0

    @property
    def has_opportunities(self) -> bool:
        return len(self.opportunities) > 0

    def to_dict(self) -> dict:
        return {
            "opportunities": [o.to_dict() for o in self.opportunities],
            "rejections": [r.to_dict() for r in self.rejections],
            "hasOpportunities": self.has_opportunities,
            "quoteCount": self.quote_count,
        }


class OpportunityDetector:
    """
    Detects venue price gaps in a batch of quotes.

    An opportunity exists when one venue quotes a pair higher than another:
    buy on the lower venue, sell on the higher one.

    potential_profit = higher_price - lower_price

    The detector keeps no state between calls, so one instance can serve
    any number of concurrent requests.
    """

    def __init__(self, min_profit_threshold: float = MIN_PROFIT_THRESHOLD):
        # Gaps at or below this are not reported. 0.0 keeps every positive gap.
        self.min_profit_threshold = min_profit_threshold

    def detect(self, quotes: Iterable[PriceQuote]) -> list[ArbitrageOpportunity]:
        """Check every quote, keeping input order"""
        opportunities = []
        for quote in quotes:
            opp = self._calculate_opportunity(quote)
            if opp:
                opportunities.append(opp)
                logger.info(
                    f"🎯 ARBITRAGE: {quote.pair} | "
                    f"Buy@{opp.lower_venue.display_name} {opp.lower_price} → "
                    f"Sell@{opp.higher_venue.display_name} {opp.higher_price} | "
                    f"Profit: {opp.potential_profit:.6g}"
                )
        return opportunities

    def _calculate_opportunity(self, quote: PriceQuote) -> Optional[ArbitrageOpportunity]:
        """
        Compare every venue price on the quote and take the widest gap.

        With two venues this is the plain A/B comparison. Ties resolve to
        the venue listed first. Prices are compared exactly.
        """
        prices = quote.prices()
        higher_venue = max(prices, key=prices.get)
        lower_venue = min(prices, key=prices.get)

        higher_price = prices[higher_venue]
        lower_price = prices[lower_venue]
        potential_profit = higher_price - lower_price

        if higher_price <= lower_price or potential_profit <= self.min_profit_threshold:
            return None

        return ArbitrageOpportunity(
            token_in=quote.token_in,
            token_out=quote.token_out,
            higher_venue=higher_venue,
            lower_venue=lower_venue,
            higher_price=higher_price,
            lower_price=lower_price,
            potential_profit=potential_profit,
            timestamp=quote.timestamp,
        )


def rank_by_profit(opportunities: Iterable[ArbitrageOpportunity]) -> list[ArbitrageOpportunity]:
    """Return a new list, largest potential profit first"""
    return sorted(opportunities, key=lambda o: o.potential_profit, reverse=True)


_default_detector = OpportunityDetector()


def evaluate_batch(
    raw_rows: Optional[Sequence],
    detector: Optional[OpportunityDetector] = None,
) -> BatchResult:
    """Parse raw rows and detect opportunities in the valid ones"""
    detector = detector or _default_detector

    parsed = parse_rows(raw_rows)
    opportunities = detector.detect(parsed.quotes)

    return BatchResult(
        opportunities=tuple(opportunities),
        rejections=parsed.rejections,
        quote_count=len(parsed.quotes),
    )

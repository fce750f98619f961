"""Price quote rows: validation of raw sheet rows into typed quotes"""
import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from config import VENUE_NAMES

logger = logging.getLogger(__name__)

# [timestamp, tokenIn, tokenOut, priceVenueA, priceVenueB, ...]
ROW_WIDTH = 5

# Plain ASCII decimal or exponent notation, plus nan/inf spellings
_NUMBER_RE = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:nan|inf|infinity)",
    re.ASCII | re.IGNORECASE,
)


class Venue(str, Enum):
    A = "A"
    B = "B"

    @property
    def display_name(self) -> str:
        return VENUE_NAMES.get(self.value, self.value)


class RejectionReason(str, Enum):
    MISSING_FIELDS = "MissingFields"
    NON_NUMERIC_PRICE = "NonNumericPrice"
    NEGATIVE_PRICE = "NegativePrice"
    NON_FINITE_VALUE = "NonFiniteValue"
    MISSING_TOKEN = "MissingToken"


@dataclass(frozen=True)
class PriceQuote:
    """A validated price row for one token pair on both venues"""
    timestamp: Any  # Kept verbatim from the source row
    token_in: str
    token_out: str
    price_venue_a: float
    price_venue_b: float

    @property
    def pair(self) -> str:
        return f"{self.token_in}/{self.token_out}"

    def prices(self) -> dict[Venue, float]:
        """Venue prices in column order"""
        return {
            Venue.A: self.price_venue_a,
            Venue.B: self.price_venue_b,
        }


@dataclass(frozen=True)
class RowRejection:
    """A row that could not be turned into a PriceQuote"""
    index: int  # Position of the row in the input batch
    reason: RejectionReason
    detail: str
    row: Any

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "reason": self.reason.value,
            "detail": self.detail,
            "row": list(self.row) if isinstance(self.row, tuple) else self.row,
        }


@dataclass(frozen=True)
class ParseResult:
    quotes: tuple[PriceQuote, ...]
    rejections: tuple[RowRejection, ...]


class RowError(ValueError):
    """Raised internally when a single row fails validation"""

    def __init__(self, reason: RejectionReason, detail: str):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def _is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def _parse_token(cell: Any, column: str) -> str:
    token = "" if cell is None else str(cell).strip()
    if not token:
        raise RowError(RejectionReason.MISSING_TOKEN, f"{column} is empty")
    return token


def _parse_price(cell: Any, column: str) -> float:
    """
    Coerce a price cell to a finite, non-negative float.

    Sheet cells normally arrive as strings, but numeric cells are accepted
    as well. Booleans are not prices.
    """
    if _is_blank(cell):
        raise RowError(RejectionReason.MISSING_FIELDS, f"{column} is empty")

    if isinstance(cell, bool):
        raise RowError(RejectionReason.NON_NUMERIC_PRICE, f"{column} is not a number: {cell!r}")

    try:
        if isinstance(cell, (int, float, Decimal)):
            value = float(cell)
        elif isinstance(cell, str) and _NUMBER_RE.fullmatch(cell.strip()):
            value = float(cell.strip())
        else:
            raise ValueError(cell)
    except OverflowError:
        raise RowError(RejectionReason.NON_FINITE_VALUE, f"{column} is out of range: {cell!r}")
    except ValueError:
        raise RowError(RejectionReason.NON_NUMERIC_PRICE, f"{column} is not a number: {cell!r}")

    if not math.isfinite(value):
        raise RowError(RejectionReason.NON_FINITE_VALUE, f"{column} is not finite: {cell!r}")
    if value < 0:
        raise RowError(RejectionReason.NEGATIVE_PRICE, f"{column} is negative: {cell!r}")
    return value


def parse_row(row: Any) -> PriceQuote:
    """Validate a single raw row. Raises RowError on bad data."""
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise RowError(RejectionReason.MISSING_FIELDS, "row is not a list of cells")
    if len(row) < ROW_WIDTH:
        raise RowError(
            RejectionReason.MISSING_FIELDS,
            f"expected at least {ROW_WIDTH} cells, got {len(row)}",
        )

    timestamp, token_in, token_out, price_a, price_b = row[:ROW_WIDTH]

    if _is_blank(timestamp):
        raise RowError(RejectionReason.MISSING_FIELDS, "timestamp is empty")

    return PriceQuote(
        timestamp=timestamp,
        token_in=_parse_token(token_in, "tokenIn"),
        token_out=_parse_token(token_out, "tokenOut"),
        price_venue_a=_parse_price(price_a, f"price on {Venue.A.display_name}"),
        price_venue_b=_parse_price(price_b, f"price on {Venue.B.display_name}"),
    )


def _snapshot(row: Any) -> Any:
    """Copy a row so later mutation by the caller doesn't leak into diagnostics"""
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes)):
        return tuple(row)
    return row


def parse_rows(rows: Optional[Sequence]) -> ParseResult:
    """
    Split raw rows into validated quotes and rejections.

    Every row produces exactly one of the two; input order is kept in both.
    A bad row never stops the rest of the batch. None is an empty batch.
    """
    quotes: list[PriceQuote] = []
    rejections: list[RowRejection] = []

    for index, row in enumerate(() if rows is None else rows):
        try:
            quotes.append(parse_row(row))
        except RowError as e:
            rejections.append(RowRejection(index, e.reason, e.detail, _snapshot(row)))
        except Exception as e:
            # Anything unexpected is still a bad row, not a failed batch
            rejections.append(RowRejection(
                index, RejectionReason.MISSING_FIELDS, f"unreadable row: {e}", _snapshot(row)
            ))

    for rejection in rejections:
        logger.debug(f"Rejected row {rejection.index} ({rejection.reason.value}): {rejection.detail}")
    if rejections:
        logger.warning(f"Rejected {len(rejections)} of {len(quotes) + len(rejections)} price rows")

    return ParseResult(quotes=tuple(quotes), rejections=tuple(rejections))

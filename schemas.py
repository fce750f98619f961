"""
Response models for the HTTP API.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field


class OpportunityOut(BaseModel):
    """One detected price gap, in the wire shape callers already consume"""
    tokenIn: str
    tokenOut: str
    timestamp: Any = None
    higherVenue: str
    lowerVenue: str
    higherPrice: float
    lowerPrice: float
    potentialProfit: float = Field(..., gt=0)
    arbitrage: str


class RejectionOut(BaseModel):
    """A row that was skipped because its data was unusable"""
    index: int
    reason: str
    detail: str
    row: Any = None


class CheckArbitrageResponse(BaseModel):
    message: str
    opportunities: Optional[List[OpportunityOut]] = None
    rejections: List[RejectionOut] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    source: Optional[str] = None

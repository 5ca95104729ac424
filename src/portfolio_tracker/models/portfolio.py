"""
Portfolio, metrics and save-result models.
"""

from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from portfolio_tracker.models.transaction import Transaction


class Portfolio(BaseModel):
    """A named, ordered collection of transactions (newest first)."""

    model_config = {"populate_by_name": True}

    name: str = Field(min_length=1)
    transactions: List[Transaction] = Field(default_factory=list)


class PortfolioMetrics(BaseModel):
    """Aggregate figures derived from a transaction list."""

    model_config = {"frozen": True}

    total_investment: Decimal = Decimal("0")
    net_revenue: Decimal = Decimal("0")
    net_roi: Decimal = Decimal("0")


class SaveStatus(str, Enum):
    """Outcome of persisting a working copy."""

    SUCCESS = "success"
    PORTFOLIO_MISSING = "portfolio_missing"
    FAILED = "failed"


class SaveResult(BaseModel):
    """Result reported to the caller after a save attempt."""

    model_config = {"frozen": True}

    status: SaveStatus
    message: str
    deleted: int = 0
    upserted: int = 0
    refreshed: bool = False

    @property
    def ok(self) -> bool:
        return self.status is SaveStatus.SUCCESS

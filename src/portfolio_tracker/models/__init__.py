"""
Pydantic models for portfolio tracker data structures.
"""

from portfolio_tracker.models.portfolio import (
    Portfolio,
    PortfolioMetrics,
    SaveResult,
    SaveStatus,
)
from portfolio_tracker.models.transaction import Transaction, TransactionType

__all__ = [
    "Transaction",
    "TransactionType",
    "Portfolio",
    "PortfolioMetrics",
    "SaveResult",
    "SaveStatus",
]

"""
Core functionality for the portfolio tracker.
"""

from portfolio_tracker.core.exceptions import (
    PersistenceError,
    PortfolioExistsError,
    PortfolioNotFoundError,
    PortfolioTrackerError,
    ValidationError,
)
from portfolio_tracker.core.metrics import compute_metrics
from portfolio_tracker.core.reconciler import ChangeSet, PortfolioReconciler
from portfolio_tracker.core.store import PortfolioStore, StoreStatus, TransactionStore

__all__ = [
    "ChangeSet",
    "PortfolioReconciler",
    "PortfolioStore",
    "StoreStatus",
    "TransactionStore",
    "compute_metrics",
    "PortfolioTrackerError",
    "PersistenceError",
    "PortfolioExistsError",
    "PortfolioNotFoundError",
    "ValidationError",
]

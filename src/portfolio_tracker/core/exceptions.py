"""
Custom exceptions for the portfolio tracker.
"""

from typing import Dict, Optional


class PortfolioTrackerError(Exception):
    """Base exception for portfolio tracker errors."""
    pass


class ValidationError(PortfolioTrackerError, ValueError):
    """Raised when form values fail validation, before any mutation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(detail or "Invalid values")


class PersistenceError(PortfolioTrackerError):
    """Raised when the transaction store fails to read or write."""
    pass


class PortfolioNotFoundError(PortfolioTrackerError):
    """Raised when a portfolio does not exist (or was deleted elsewhere)."""

    def __init__(self, portfolio_name: str, message: Optional[str] = None):
        self.portfolio_name = portfolio_name
        super().__init__(message or f"Portfolio not found: {portfolio_name}")


class PortfolioExistsError(PortfolioTrackerError, ValueError):
    """Raised when creating a portfolio whose name is already taken."""

    def __init__(self, portfolio_name: str):
        self.portfolio_name = portfolio_name
        super().__init__(f"Portfolio already exists: {portfolio_name}")

"""
Utility functions for the portfolio tracker.
"""

from portfolio_tracker.utils.currency import currency_label, get_currency, list_currencies
from portfolio_tracker.utils.date_utils import (
    EARLIEST_TRANSACTION_DATE,
    parse_date,
)

__all__ = [
    "EARLIEST_TRANSACTION_DATE",
    "currency_label",
    "get_currency",
    "list_currencies",
    "parse_date",
]

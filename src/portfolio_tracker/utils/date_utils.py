"""
Date utilities for parsing transaction dates and checking them against today.
"""

from datetime import date, datetime
from typing import Union

# Earliest date a transaction may carry
EARLIEST_TRANSACTION_DATE = date(1900, 1, 1)


def today() -> date:
    """Current local date."""
    return datetime.now().date()


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a transaction date.

    Args:
        value: A date, datetime, or "YYYY-MM-DD" string

    Returns:
        The calendar date

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def is_future_date(value: date) -> bool:
    """Check whether a date lies after today."""
    return value > today()


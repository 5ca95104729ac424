"""
Pytest configuration and fixtures for portfolio tracker tests.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List

import pytest

from portfolio_tracker.core.store import PortfolioStore
from portfolio_tracker.models.transaction import Transaction, TransactionType


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    """Path to a fresh JSON data file for testing."""
    return tmp_path / "portfolios.json"


@pytest.fixture
def memory_store() -> PortfolioStore:
    """Store that keeps everything in memory."""
    return PortfolioStore()


@pytest.fixture
def debit_txn() -> Transaction:
    """A persisted investment."""
    return Transaction(
        id="txn_debit",
        type=TransactionType.DEBIT,
        transaction_name="Index fund",
        amount=Decimal("300.00"),
        transaction_date=date(2024, 3, 1),
        comments="Monthly buy",
    )


@pytest.fixture
def credit_txn() -> Transaction:
    """A persisted return."""
    return Transaction(
        id="txn_credit",
        type=TransactionType.CREDIT,
        transaction_name="Dividend",
        amount=Decimal("400.00"),
        transaction_date=date(2024, 6, 1),
    )


@pytest.fixture
def sample_transactions(debit_txn: Transaction, credit_txn: Transaction) -> List[Transaction]:
    """Remote state of a portfolio, newest first."""
    return [credit_txn, debit_txn]


@pytest.fixture
def form_values() -> dict:
    """Valid add-transaction form values."""
    return {
        "type": "Debit",
        "transaction_name": "New position",
        "amount": "150.25",
        "transaction_date": "2024-05-10",
        "comments": "Bought more, again!",
    }

"""
Transaction storage for portfolios.

``TransactionStore`` is the contract the reconciler persists through: one read
query and two mutations reporting a status discriminator. ``PortfolioStore``
implements it on top of a JSON document, together with portfolio creation and
deletion and the user's currency preference.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from portfolio_tracker.core.exceptions import (
    PersistenceError,
    PortfolioExistsError,
    PortfolioNotFoundError,
    ValidationError,
)
from portfolio_tracker.core.validation import validate_portfolio_name
from portfolio_tracker.models.portfolio import Portfolio
from portfolio_tracker.models.transaction import Transaction
from portfolio_tracker.utils.currency import DEFAULT_CURRENCY, get_currency

logger = logging.getLogger(__name__)


class StoreStatus(str, Enum):
    """Result discriminator for store mutations."""

    SUCCESS = "success"
    ERROR = "error"
    PORTFOLIO_NOT_FOUND = "portfolio_not_found"


class TransactionStore(Protocol):
    """Remote operations the reconciler depends on."""

    async def fetch_transactions(self, portfolio_name: str) -> List[Transaction]:
        ...

    async def delete_transactions(self, ids: Sequence[str]) -> StoreStatus:
        ...

    async def upsert_transactions(
        self, portfolio_name: str, transactions: Sequence[Transaction]
    ) -> StoreStatus:
        ...


class StoreDocument(BaseModel):
    """On-disk layout of the store."""

    currency: str = DEFAULT_CURRENCY
    portfolios: Dict[str, List[Transaction]] = Field(default_factory=dict)


class PortfolioStore:
    """
    File-backed portfolio and transaction store.

    The whole document is loaded lazily on first use and rewritten after every
    mutation. Mutations are applied to a copy and only swapped in once the
    write succeeds, so a failed write leaves the store unchanged.
    """

    def __init__(self, data_path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            data_path: Path to the JSON data file.
                      If None, data is kept in memory only.
        """
        self.data_path = data_path
        self._document: Optional[StoreDocument] = None
        self._lock = asyncio.Lock()

    def _load(self) -> StoreDocument:
        if self.data_path is None or not self.data_path.exists():
            return StoreDocument()
        try:
            return StoreDocument.model_validate_json(self.data_path.read_text("utf-8"))
        except (OSError, PydanticValidationError) as e:
            raise PersistenceError(f"Cannot read data file {self.data_path}: {e}") from e

    def _write(self, document: StoreDocument) -> None:
        if self.data_path is None:
            return
        try:
            self.data_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.data_path.with_suffix(self.data_path.suffix + ".tmp")
            tmp_path.write_text(
                document.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
            tmp_path.replace(self.data_path)
        except OSError as e:
            raise PersistenceError(f"Cannot write data file {self.data_path}: {e}") from e

    @property
    def document(self) -> StoreDocument:
        # Lazy load document
        if self._document is None:
            self._document = self._load()
        return self._document

    def _commit(self, document: StoreDocument) -> None:
        self._write(document)
        self._document = document

    async def list_portfolios(self) -> List[Portfolio]:
        """Get all portfolios with their transactions, sorted by name."""
        return [
            Portfolio(name=name, transactions=list(txns))
            for name, txns in sorted(self.document.portfolios.items())
        ]

    async def create_portfolio(self, name: str) -> Portfolio:
        """
        Create an empty portfolio.

        Raises:
            ValidationError: If the name is invalid
            PortfolioExistsError: If the name is taken
            PersistenceError: If the data file cannot be written
        """
        name = validate_portfolio_name(name)
        async with self._lock:
            if name in self.document.portfolios:
                raise PortfolioExistsError(name)
            document = self.document.model_copy(deep=True)
            document.portfolios[name] = []
            self._commit(document)
        logger.info("Created portfolio %r", name)
        return Portfolio(name=name)

    async def delete_portfolio(self, name: str) -> None:
        """
        Delete a portfolio and all of its transactions.

        Raises:
            PortfolioNotFoundError: If the portfolio does not exist
            PersistenceError: If the data file cannot be written
        """
        async with self._lock:
            if name not in self.document.portfolios:
                raise PortfolioNotFoundError(name)
            document = self.document.model_copy(deep=True)
            del document.portfolios[name]
            self._commit(document)
        logger.info("Deleted portfolio %r", name)

    async def fetch_transactions(self, portfolio_name: str) -> List[Transaction]:
        """
        Get all transactions of a portfolio in display order.

        Raises:
            PortfolioNotFoundError: If the portfolio does not exist
            PersistenceError: If the data file cannot be read
        """
        transactions = self.document.portfolios.get(portfolio_name)
        if transactions is None:
            raise PortfolioNotFoundError(portfolio_name)
        return list(transactions)

    async def delete_transactions(self, ids: Sequence[str]) -> StoreStatus:
        """
        Delete transactions by id across all portfolios.

        Unknown ids are ignored.
        """
        id_set = set(ids)
        try:
            async with self._lock:
                document = self.document.model_copy(deep=True)
                for name, txns in document.portfolios.items():
                    document.portfolios[name] = [t for t in txns if t.id not in id_set]
                self._commit(document)
        except PersistenceError:
            logger.exception("Failed to delete %d transaction(s)", len(id_set))
            return StoreStatus.ERROR
        logger.debug("Deleted transactions %s", sorted(id_set))
        return StoreStatus.SUCCESS

    async def upsert_transactions(
        self, portfolio_name: str, transactions: Sequence[Transaction]
    ) -> StoreStatus:
        """
        Insert or update transactions of a portfolio by id.

        Updated rows keep their position; new rows are placed first.
        """
        try:
            async with self._lock:
                if portfolio_name not in self.document.portfolios:
                    logger.warning("Upsert into missing portfolio %r", portfolio_name)
                    return StoreStatus.PORTFOLIO_NOT_FOUND
                document = self.document.model_copy(deep=True)
                existing = document.portfolios[portfolio_name]
                positions = {txn.id: i for i, txn in enumerate(existing)}
                inserted: List[Transaction] = []
                for txn in transactions:
                    if txn.id in positions:
                        existing[positions[txn.id]] = txn
                    else:
                        inserted.append(txn)
                document.portfolios[portfolio_name] = inserted + existing
                self._commit(document)
        except PersistenceError:
            logger.exception("Failed to upsert into portfolio %r", portfolio_name)
            return StoreStatus.ERROR
        logger.debug(
            "Upserted %d transaction(s) into %r", len(transactions), portfolio_name
        )
        return StoreStatus.SUCCESS

    async def get_currency(self) -> str:
        """Get the user's preferred currency code."""
        return self.document.currency

    async def update_currency(self, code: str) -> str:
        """
        Update the user's preferred currency.

        Raises:
            ValidationError: If the currency is not supported
            PersistenceError: If the data file cannot be written
        """
        entry = get_currency(code)
        if entry is None:
            raise ValidationError({"currency": f"Unsupported currency: {code}"})
        async with self._lock:
            document = self.document.model_copy(deep=True)
            document.currency = entry["currency"]
            self._commit(document)
        return entry["currency"]

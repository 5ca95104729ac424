"""
Portfolio reconciler: a local working copy of a portfolio's transactions.

The reconciler owns two lists. ``remote`` is the last state fetched from the
store and is only replaced by a refresh. ``local`` starts as a copy of it and
receives every add/edit/copy/delete. Saving diffs the two and sends only the
rows that changed: remote rows whose id vanished locally are deleted, local
rows with no identical remote row are upserted.
"""

import asyncio
import inspect
import logging
import uuid
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.core.metrics import compute_metrics
from portfolio_tracker.core.store import StoreStatus, TransactionStore
from portfolio_tracker.core.validation import (
    TRANSACTION_FIELDS,
    normalize_keys,
    parse_transaction_form,
)
from portfolio_tracker.models.portfolio import PortfolioMetrics, SaveResult, SaveStatus
from portfolio_tracker.models.transaction import Transaction

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[List[Transaction]], Any]

SAVE_SUCCESS_MESSAGE = "Successfully Updated"
PORTFOLIO_MISSING_MESSAGE = "Portfolio doesn't exist."
SAVE_FAILED_MESSAGE = "Uh oh! Something went wrong. Please try again."


def new_transaction_id() -> str:
    """Generate a collision-resistant id for a transaction created locally."""
    return uuid.uuid4().hex


class ChangeSet(BaseModel):
    """Rows a save must delete and upsert to make the store match local state."""

    model_config = {"frozen": True}

    to_delete: List[Transaction] = []
    to_upsert: List[Transaction] = []

    @property
    def is_empty(self) -> bool:
        return not self.to_delete and not self.to_upsert


class PortfolioReconciler:
    """
    Editable working copy of one portfolio, persisted by minimal diff.
    """

    def __init__(
        self,
        portfolio_name: str,
        store: TransactionStore,
        remote: Optional[Iterable[Transaction]] = None,
        on_refresh: Optional[RefreshCallback] = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        """
        Initialize the reconciler.

        Args:
            portfolio_name: Name of the portfolio being edited
            store: Store used to persist and refetch transactions
            remote: Transactions last fetched from the store
            on_refresh: Optional callback invoked with the new remote list
                        after each successful refresh
            id_factory: Generator for ids of locally created transactions
        """
        self.portfolio_name = portfolio_name
        self.store = store
        self.on_refresh = on_refresh
        self._new_id = id_factory
        self._remote: List[Transaction] = list(remote or [])
        self._local: List[Transaction] = list(self._remote)

    @classmethod
    async def load(
        cls,
        portfolio_name: str,
        store: TransactionStore,
        **kwargs: Any,
    ) -> "PortfolioReconciler":
        """
        Fetch a portfolio from the store and open a working copy of it.

        Raises:
            PortfolioNotFoundError: If the portfolio does not exist
            PersistenceError: If the store cannot be read
        """
        remote = await store.fetch_transactions(portfolio_name)
        return cls(portfolio_name, store, remote=remote, **kwargs)

    @property
    def transactions(self) -> List[Transaction]:
        """The working copy, in display order."""
        return list(self._local)

    @property
    def remote_transactions(self) -> List[Transaction]:
        """The last state fetched from the store."""
        return list(self._remote)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._local if t.id == transaction_id), None)

    def _index_of(self, transaction_id: str) -> Optional[int]:
        return next(
            (i for i, t in enumerate(self._local) if t.id == transaction_id), None
        )

    def add(self, values: Mapping[str, Any]) -> Transaction:
        """
        Add a transaction from form values to the top of the working copy.

        Raises:
            ValidationError: If the values are invalid (nothing is added)
        """
        fields = parse_transaction_form(values)
        transaction = Transaction(id=self._new_id(), **fields)
        self._local.insert(0, transaction)
        return transaction

    def edit(
        self, transaction_id: str, patch: Mapping[str, Any]
    ) -> Optional[Transaction]:
        """
        Merge new field values into a transaction of the working copy.

        The merged fields are validated as a whole. The id cannot be changed.

        Returns:
            The updated transaction, or None if the id is not present

        Raises:
            ValidationError: If the merged values are invalid (nothing changes)
        """
        index = self._index_of(transaction_id)
        if index is None:
            return None

        changes = normalize_keys(patch)
        changes.pop("id", None)
        unknown = sorted(set(changes) - set(TRANSACTION_FIELDS))
        if unknown:
            raise ValidationError({field: "Unknown field." for field in unknown})

        current = self._local[index]
        merged = {**current.model_dump(include=set(TRANSACTION_FIELDS)), **changes}
        fields = parse_transaction_form(merged)
        updated = Transaction(id=current.id, **fields)
        self._local[index] = updated
        return updated

    def copy(self, transaction_id: str) -> Optional[Transaction]:
        """
        Duplicate a transaction to the top of the working copy.

        The duplicate gets a new id and " copy" appended to its name.

        Returns:
            The duplicate, or None if the id is not present
        """
        original = self.get(transaction_id)
        if original is None:
            return None

        duplicate = original.model_copy(
            update={
                "id": self._new_id(),
                "transaction_name": f"{original.transaction_name} copy",
            }
        )
        self._local.insert(0, duplicate)
        return duplicate

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction from the working copy. Returns whether it was present."""
        index = self._index_of(transaction_id)
        if index is None:
            return False
        del self._local[index]
        return True

    def bulk_delete(self, transaction_ids: Iterable[str]) -> int:
        """Remove every transaction whose id is given. Returns how many were removed."""
        id_set = set(transaction_ids)
        before = len(self._local)
        self._local = [t for t in self._local if t.id not in id_set]
        return before - len(self._local)

    def compute_metrics(self) -> PortfolioMetrics:
        """Total investment, net revenue and ROI of the working copy."""
        return compute_metrics(self._local)

    def has_pending_changes(self) -> bool:
        """True when the working copy differs from the last fetched state."""
        return self._local != self._remote

    def pending_changes(self) -> ChangeSet:
        """
        Diff the working copy against the last fetched state.

        Deletes are matched by id; upserts by full value equality, so new and
        edited rows are sent and unchanged rows are not.
        """
        local_ids = {t.id for t in self._local}
        to_delete = [t for t in self._remote if t.id not in local_ids]
        to_upsert = [t for t in self._local if t not in self._remote]
        return ChangeSet(to_delete=to_delete, to_upsert=to_upsert)

    def discard_changes(self) -> None:
        """Drop all local edits."""
        self._local = list(self._remote)

    async def refresh(self) -> List[Transaction]:
        """
        Refetch the portfolio and reset the working copy to it.

        Raises:
            PortfolioNotFoundError: If the portfolio no longer exists
            PersistenceError: If the store cannot be read
        """
        remote = await self.store.fetch_transactions(self.portfolio_name)
        self._remote = list(remote)
        self._local = list(self._remote)
        if self.on_refresh is not None:
            result = self.on_refresh(self.remote_transactions)
            if inspect.isawaitable(result):
                await result
        return self.remote_transactions

    async def _call_store(
        self, operation: str, call: Callable[..., Awaitable[Any]], *args: Any
    ) -> StoreStatus:
        try:
            return StoreStatus(await call(*args))
        except Exception:
            logger.exception(
                "Store %s failed for portfolio %r", operation, self.portfolio_name
            )
            return StoreStatus.ERROR

    async def _skip(self) -> StoreStatus:
        return StoreStatus.SUCCESS

    async def save(self) -> SaveResult:
        """
        Persist the working copy with the minimal set of store calls.

        Delete and upsert run concurrently; an empty side is skipped. On
        success the portfolio is refetched. On failure the working copy is
        kept as is so the save can be retried. Never raises.
        """
        changes = self.pending_changes()
        delete_ids = [t.id for t in changes.to_delete]

        delete_call = (
            self._call_store("delete", self.store.delete_transactions, delete_ids)
            if delete_ids
            else self._skip()
        )
        upsert_call = (
            self._call_store(
                "upsert",
                self.store.upsert_transactions,
                self.portfolio_name,
                list(changes.to_upsert),
            )
            if changes.to_upsert
            else self._skip()
        )
        delete_status, upsert_status = await asyncio.gather(delete_call, upsert_call)

        if delete_status is StoreStatus.SUCCESS and upsert_status is StoreStatus.SUCCESS:
            logger.info(
                "Saved portfolio %r: %d deleted, %d upserted",
                self.portfolio_name,
                len(delete_ids),
                len(changes.to_upsert),
            )
            refreshed = True
            try:
                await self.refresh()
            except Exception:
                logger.exception("Refresh after save failed for %r", self.portfolio_name)
                refreshed = False
            return SaveResult(
                status=SaveStatus.SUCCESS,
                message=SAVE_SUCCESS_MESSAGE,
                deleted=len(delete_ids),
                upserted=len(changes.to_upsert),
                refreshed=refreshed,
            )

        if upsert_status is StoreStatus.PORTFOLIO_NOT_FOUND:
            logger.warning("Portfolio %r is missing from the store", self.portfolio_name)
            return SaveResult(
                status=SaveStatus.PORTFOLIO_MISSING, message=PORTFOLIO_MISSING_MESSAGE
            )

        logger.warning(
            "Save failed for %r (delete=%s, upsert=%s)",
            self.portfolio_name,
            delete_status.value,
            upsert_status.value,
        )
        return SaveResult(status=SaveStatus.FAILED, message=SAVE_FAILED_MESSAGE)

"""
MCP tool definitions for portfolio tracking.

Each portfolio is edited through a reconciler session that lives for the
lifetime of the server; edits stay local until ``save_portfolio``.
"""

from typing import Any, Dict, List, Optional

from portfolio_tracker.core.reconciler import PortfolioReconciler
from portfolio_tracker.core.store import PortfolioStore
from portfolio_tracker.core.validation import validate_portfolio_name
from portfolio_tracker.models.transaction import Transaction
from portfolio_tracker.utils.currency import currency_label, list_currencies


def _dump(transactions: List[Transaction]) -> List[Dict[str, Any]]:
    return [txn.model_dump(mode="json") for txn in transactions]


class PortfolioTools:
    """Collection of MCP tools for managing portfolios."""

    def __init__(self, store: PortfolioStore):
        """
        Initialize tools with a store.

        Args:
            store: PortfolioStore instance
        """
        self.store = store
        self._sessions: Dict[str, PortfolioReconciler] = {}

    async def session(self, portfolio_name: str) -> PortfolioReconciler:
        """
        Get the working copy of a portfolio, loading it on first use.

        Raises:
            PortfolioNotFoundError: If the portfolio does not exist
        """
        reconciler = self._sessions.get(portfolio_name)
        if reconciler is None:
            reconciler = await PortfolioReconciler.load(portfolio_name, self.store)
            self._sessions[portfolio_name] = reconciler
        return reconciler

    def _summary(self, reconciler: PortfolioReconciler) -> Dict[str, Any]:
        return {
            "portfolio_name": reconciler.portfolio_name,
            "metrics": reconciler.compute_metrics().model_dump(mode="json"),
            "has_pending_changes": reconciler.has_pending_changes(),
        }

    async def list_portfolios(self) -> Dict[str, Any]:
        """
        List all portfolios.

        Returns:
            Dict with portfolio count and name/transaction count per portfolio
        """
        portfolios = await self.store.list_portfolios()
        return {
            "count": len(portfolios),
            "portfolios": [
                {"name": p.name, "transaction_count": len(p.transactions)}
                for p in portfolios
            ],
        }

    async def create_portfolio(self, name: str) -> Dict[str, Any]:
        """
        Create a new, empty portfolio.

        Raises:
            ValidationError: If the name is invalid
            PortfolioExistsError: If the name is already taken
        """
        portfolio = await self.store.create_portfolio(name)
        return {"name": portfolio.name, "created": True}

    async def delete_portfolio(self, name: str) -> Dict[str, Any]:
        """
        Delete a portfolio and discard any unsaved edits to it.

        Raises:
            PortfolioNotFoundError: If the portfolio does not exist
        """
        await self.store.delete_portfolio(name)
        self._sessions.pop(name, None)
        return {"name": name, "deleted": True}

    async def get_portfolio(self, portfolio_name: str) -> Dict[str, Any]:
        """
        Get the working copy of a portfolio with its metrics.

        Returns:
            Dict with metrics, pending-change flag and transactions
        """
        reconciler = await self.session(portfolio_name)
        transactions = reconciler.transactions
        return {
            **self._summary(reconciler),
            "count": len(transactions),
            "transactions": _dump(transactions),
        }

    async def add_transaction(
        self,
        portfolio_name: str,
        type: str,
        transaction_name: str,
        amount: Any,
        transaction_date: str,
        comments: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Add a transaction to the working copy of a portfolio.

        Raises:
            ValidationError: If any field is invalid
        """
        reconciler = await self.session(portfolio_name)
        transaction = reconciler.add(
            {
                "type": type,
                "transaction_name": transaction_name,
                "amount": amount,
                "transaction_date": transaction_date,
                "comments": comments,
            }
        )
        return {**self._summary(reconciler), "transaction": transaction.model_dump(mode="json")}

    async def edit_transaction(
        self, portfolio_name: str, transaction_id: str, **changes: Any
    ) -> Dict[str, Any]:
        """
        Edit fields of a transaction in the working copy.

        Raises:
            ValueError: If the transaction is not in the working copy
            ValidationError: If the edited fields are invalid
        """
        reconciler = await self.session(portfolio_name)
        transaction = reconciler.edit(transaction_id, changes)
        if transaction is None:
            raise ValueError(f"Transaction not found: {transaction_id}")
        return {**self._summary(reconciler), "transaction": transaction.model_dump(mode="json")}

    async def copy_transaction(
        self, portfolio_name: str, transaction_id: str
    ) -> Dict[str, Any]:
        """
        Duplicate a transaction in the working copy.

        Raises:
            ValueError: If the transaction is not in the working copy
        """
        reconciler = await self.session(portfolio_name)
        transaction = reconciler.copy(transaction_id)
        if transaction is None:
            raise ValueError(f"Transaction not found: {transaction_id}")
        return {**self._summary(reconciler), "transaction": transaction.model_dump(mode="json")}

    async def delete_transactions(
        self, portfolio_name: str, transaction_ids: List[str]
    ) -> Dict[str, Any]:
        """Remove one or more transactions from the working copy."""
        reconciler = await self.session(portfolio_name)
        if len(transaction_ids) == 1:
            removed = int(reconciler.delete(transaction_ids[0]))
        else:
            removed = reconciler.bulk_delete(transaction_ids)
        return {**self._summary(reconciler), "removed": removed}

    async def save_portfolio(self, portfolio_name: str) -> Dict[str, Any]:
        """
        Persist the working copy of a portfolio.

        Returns:
            Dict with the save outcome and the refreshed metrics
        """
        reconciler = await self.session(portfolio_name)
        result = await reconciler.save()
        return {**self._summary(reconciler), **result.model_dump(mode="json")}

    async def discard_changes(self, portfolio_name: str) -> Dict[str, Any]:
        """Drop unsaved edits to a portfolio."""
        reconciler = await self.session(portfolio_name)
        reconciler.discard_changes()
        return self._summary(reconciler)

    async def list_currencies(self) -> Dict[str, Any]:
        """List supported currencies and the one currently selected."""
        currencies = list_currencies()
        return {
            "selected": await self.store.get_currency(),
            "count": len(currencies),
            "currencies": currencies,
        }

    async def set_currency(self, currency: str) -> Dict[str, Any]:
        """
        Set the preferred display currency.

        Raises:
            ValidationError: If the currency is not supported
        """
        code = await self.store.update_currency(currency)
        return {"currency": code, "label": currency_label(code)}


_PORTFOLIO_NAME = {
    "type": "string",
    "description": "Portfolio name",
}

_TRANSACTION_ID = {
    "type": "string",
    "description": "Transaction ID",
}

_TRANSACTION_FIELDS = {
    "type": {
        "type": "string",
        "enum": ["Debit", "Credit"],
        "description": "Debit (investment) or Credit (revenue)",
    },
    "transaction_name": {
        "type": "string",
        "description": "Name (a-z, A-Z, 0-9, space, -, _)",
    },
    "amount": {
        "type": ["number", "string"],
        "description": "Positive amount with at most two decimals",
    },
    "transaction_date": {
        "type": "string",
        "description": "Transaction date (YYYY-MM-DD), not in the future",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
    },
    "comments": {
        "type": "string",
        "description": "Optional comments",
    },
}


def create_tool_schemas() -> List[Dict[str, Any]]:
    """
    Create MCP tool schemas for all tools.

    Returns:
        List of tool schema definitions
    """
    return [
        {
            "name": "list_portfolios",
            "description": "List all portfolios with their transaction counts.",
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "create_portfolio",
            "description": "Create a new, empty portfolio.",
            "inputSchema": {
                "type": "object",
                "properties": {"name": _PORTFOLIO_NAME},
                "required": ["name"],
            },
        },
        {
            "name": "delete_portfolio",
            "description": "Delete a portfolio and all of its transactions.",
            "inputSchema": {
                "type": "object",
                "properties": {"name": _PORTFOLIO_NAME},
                "required": ["name"],
            },
        },
        {
            "name": "get_portfolio",
            "description": (
                "Get a portfolio's transactions (including unsaved edits) with "
                "total investment, net revenue and ROI."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"portfolio_name": _PORTFOLIO_NAME},
                "required": ["portfolio_name"],
            },
        },
        {
            "name": "add_transaction",
            "description": (
                "Add a debit or credit transaction to a portfolio. The change is "
                "kept locally until save_portfolio is called."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"portfolio_name": _PORTFOLIO_NAME, **_TRANSACTION_FIELDS},
                "required": [
                    "portfolio_name",
                    "type",
                    "transaction_name",
                    "amount",
                    "transaction_date",
                ],
            },
        },
        {
            "name": "edit_transaction",
            "description": "Change fields of a transaction. Kept locally until saved.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "portfolio_name": _PORTFOLIO_NAME,
                    "transaction_id": _TRANSACTION_ID,
                    **_TRANSACTION_FIELDS,
                },
                "required": ["portfolio_name", "transaction_id"],
            },
        },
        {
            "name": "copy_transaction",
            "description": "Duplicate a transaction. Kept locally until saved.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "portfolio_name": _PORTFOLIO_NAME,
                    "transaction_id": _TRANSACTION_ID,
                },
                "required": ["portfolio_name", "transaction_id"],
            },
        },
        {
            "name": "delete_transactions",
            "description": "Remove one or more transactions. Kept locally until saved.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "portfolio_name": _PORTFOLIO_NAME,
                    "transaction_ids": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "IDs of the transactions to remove",
                    },
                },
                "required": ["portfolio_name", "transaction_ids"],
            },
        },
        {
            "name": "save_portfolio",
            "description": (
                "Persist unsaved edits to a portfolio. Only changed transactions "
                "are written."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"portfolio_name": _PORTFOLIO_NAME},
                "required": ["portfolio_name"],
            },
        },
        {
            "name": "discard_changes",
            "description": "Drop unsaved edits to a portfolio.",
            "inputSchema": {
                "type": "object",
                "properties": {"portfolio_name": _PORTFOLIO_NAME},
                "required": ["portfolio_name"],
            },
        },
        {
            "name": "list_currencies",
            "description": "List supported display currencies and the selected one.",
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "set_currency",
            "description": "Set the preferred display currency (ISO code, e.g. USD).",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "currency": {"type": "string", "description": "ISO currency code"},
                },
                "required": ["currency"],
            },
        },
    ]

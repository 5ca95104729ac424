"""
Integration tests for PortfolioStore with a data file on disk.
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from portfolio_tracker.core.exceptions import (
    PersistenceError,
    PortfolioExistsError,
    PortfolioNotFoundError,
    ValidationError,
)
from portfolio_tracker.core.store import PortfolioStore, StoreStatus


@pytest.mark.integration
@pytest.mark.asyncio
async def test_new_store_is_empty(data_path):
    """Test that a missing data file means no portfolios."""
    store = PortfolioStore(data_path)
    assert await store.list_portfolios() == []
    assert await store.get_currency() == "USD"
    assert not data_path.exists()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_portfolio_persists(data_path):
    """Test that created portfolios survive a reload."""
    await PortfolioStore(data_path).create_portfolio(" Retirement ")

    reloaded = PortfolioStore(data_path)
    portfolios = await reloaded.list_portfolios()
    assert [p.name for p in portfolios] == ["Retirement"]
    assert await reloaded.fetch_transactions("Retirement") == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_portfolio_rejects_duplicates_and_bad_names(memory_store):
    """Test portfolio name checks on creation."""
    await memory_store.create_portfolio("Growth")
    with pytest.raises(PortfolioExistsError):
        await memory_store.create_portfolio("Growth")
    with pytest.raises(ValidationError):
        await memory_store.create_portfolio("Growth/2")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upsert_and_fetch_round_trip(data_path, sample_transactions):
    """Test that upserted transactions are stored in the persisted layout."""
    store = PortfolioStore(data_path)
    await store.create_portfolio("Growth")

    status = await store.upsert_transactions("Growth", sample_transactions)

    assert status is StoreStatus.SUCCESS
    raw = json.loads(data_path.read_text())
    stored = raw["portfolios"]["Growth"][0]
    assert stored["transactionName"] == "Dividend"
    assert stored["type"] == "CR"
    assert await PortfolioStore(data_path).fetch_transactions("Growth") == sample_transactions


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upsert_updates_in_place_and_prepends_new(
    memory_store, sample_transactions, debit_txn, credit_txn
):
    """Test insert-or-update semantics by id."""
    await memory_store.create_portfolio("Growth")
    await memory_store.upsert_transactions("Growth", sample_transactions)

    edited = debit_txn.model_copy(update={"amount": Decimal("310")})
    new = debit_txn.model_copy(update={"id": "txn_new", "transaction_date": date(2024, 7, 1)})
    await memory_store.upsert_transactions("Growth", [new, edited])

    assert await memory_store.fetch_transactions("Growth") == [new, credit_txn, edited]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upsert_into_missing_portfolio(memory_store, debit_txn):
    """Test that upserting into an unknown portfolio reports it."""
    status = await memory_store.upsert_transactions("Nope", [debit_txn])
    assert status is StoreStatus.PORTFOLIO_NOT_FOUND


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_transactions_by_id(memory_store, sample_transactions, credit_txn, debit_txn):
    """Test deleting by id, ignoring unknown ids."""
    await memory_store.create_portfolio("Growth")
    await memory_store.upsert_transactions("Growth", sample_transactions)

    status = await memory_store.delete_transactions([debit_txn.id, "unknown"])

    assert status is StoreStatus.SUCCESS
    assert await memory_store.fetch_transactions("Growth") == [credit_txn]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_missing_portfolio(memory_store):
    """Test that fetching an unknown portfolio raises."""
    with pytest.raises(PortfolioNotFoundError, match="Portfolio not found: Ghost"):
        await memory_store.fetch_transactions("Ghost")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_portfolio(memory_store):
    """Test deleting a portfolio."""
    await memory_store.create_portfolio("Growth")
    await memory_store.delete_portfolio("Growth")
    assert await memory_store.list_portfolios() == []
    with pytest.raises(PortfolioNotFoundError):
        await memory_store.delete_portfolio("Growth")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_currency_preference_persists(data_path):
    """Test updating and reloading the preferred currency."""
    assert await PortfolioStore(data_path).update_currency("eur") == "EUR"
    assert await PortfolioStore(data_path).get_currency() == "EUR"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unsupported_currency(memory_store):
    """Test that unknown currencies are rejected."""
    with pytest.raises(ValidationError):
        await memory_store.update_currency("XXX")
    assert await memory_store.get_currency() == "USD"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_corrupt_data_file(data_path):
    """Test that an unreadable data file raises PersistenceError."""
    data_path.write_text("{not json")
    store = PortfolioStore(data_path)
    with pytest.raises(PersistenceError):
        await store.list_portfolios()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_write_failure_leaves_store_unchanged(tmp_path, debit_txn):
    """Test that failed writes report errors and keep the previous state."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = PortfolioStore(blocker / "portfolios.json")

    with pytest.raises(PersistenceError):
        await store.create_portfolio("Growth")
    assert await store.list_portfolios() == []
    assert await store.delete_transactions([debit_txn.id]) is StoreStatus.ERROR

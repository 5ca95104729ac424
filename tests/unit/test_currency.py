"""
Unit tests for the currency list.
"""

import pytest

from portfolio_tracker.utils.currency import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    currency_label,
    get_currency,
    list_currencies,
)


def test_get_currency_is_case_insensitive():
    """Test looking up a currency by lowercase code."""
    assert get_currency("eur") == {"currency": "EUR", "name": "Euro"}


def test_get_currency_unknown():
    """Test that unsupported codes return None."""
    assert get_currency("XXX") is None


def test_currency_label():
    """Test the 'Name - CODE' display label."""
    assert currency_label("usd") == "United States Dollar - USD"


def test_currency_label_unknown():
    """Test that labels for unsupported codes raise ValueError."""
    with pytest.raises(ValueError):
        currency_label("XXX")


def test_list_currencies_includes_labels():
    """Test that every listed currency carries its label."""
    currencies = list_currencies()
    assert len(currencies) == len(CURRENCIES)
    assert all(c["label"] == f"{c['name']} - {c['currency']}" for c in currencies)


def test_default_currency_is_supported():
    """Test that the default currency is in the list."""
    assert get_currency(DEFAULT_CURRENCY) is not None

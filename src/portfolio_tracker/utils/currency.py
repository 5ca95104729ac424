"""
Supported currencies for the user's display preference.
"""

from typing import Dict, List, Optional

CURRENCIES: List[Dict[str, str]] = [
    {"currency": "AED", "name": "UAE Dirham"},
    {"currency": "AUD", "name": "Australian Dollar"},
    {"currency": "BRL", "name": "Brazilian Real"},
    {"currency": "CAD", "name": "Canadian Dollar"},
    {"currency": "CHF", "name": "Swiss Franc"},
    {"currency": "CNY", "name": "Chinese Yuan"},
    {"currency": "DKK", "name": "Danish Krone"},
    {"currency": "EUR", "name": "Euro"},
    {"currency": "GBP", "name": "British Pound"},
    {"currency": "HKD", "name": "Hong Kong Dollar"},
    {"currency": "INR", "name": "Indian Rupee"},
    {"currency": "JPY", "name": "Japanese Yen"},
    {"currency": "KRW", "name": "South Korean Won"},
    {"currency": "MXN", "name": "Mexican Peso"},
    {"currency": "NOK", "name": "Norwegian Krone"},
    {"currency": "NZD", "name": "New Zealand Dollar"},
    {"currency": "SAR", "name": "Saudi Riyal"},
    {"currency": "SEK", "name": "Swedish Krona"},
    {"currency": "SGD", "name": "Singapore Dollar"},
    {"currency": "USD", "name": "United States Dollar"},
    {"currency": "ZAR", "name": "South African Rand"},
]

DEFAULT_CURRENCY = "USD"


def get_currency(code: str) -> Optional[Dict[str, str]]:
    """
    Look up a currency by its ISO code (case-insensitive).

    Returns:
        The currency entry, or None if unsupported
    """
    code_upper = code.strip().upper()
    return next((c for c in CURRENCIES if c["currency"] == code_upper), None)


def currency_label(code: str) -> str:
    """
    Display label for a currency, e.g. "Euro - EUR".

    Raises:
        ValueError: If the currency is not supported
    """
    entry = get_currency(code)
    if entry is None:
        raise ValueError(f"Unsupported currency: {code}")
    return f"{entry['name']} - {entry['currency']}"


def list_currencies() -> List[Dict[str, str]]:
    """All supported currencies with their display labels."""
    return [
        {
            "currency": c["currency"],
            "name": c["name"],
            "label": f"{c['name']} - {c['currency']}",
        }
        for c in CURRENCIES
    ]

"""
Unit tests for date utilities.
"""

from datetime import date, datetime

import pytest
from freezegun import freeze_time

from portfolio_tracker.utils.date_utils import (
    EARLIEST_TRANSACTION_DATE,
    is_future_date,
    parse_date,
    today,
)


class TestParseDate:
    """Tests for parse_date function."""

    def test_parse_iso_string(self):
        """Test parsing a YYYY-MM-DD string."""
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_parse_strips_whitespace(self):
        """Test that surrounding whitespace is ignored."""
        assert parse_date(" 2024-01-05 ") == date(2024, 1, 5)

    def test_parse_date_passthrough(self):
        """Test that date objects are returned unchanged."""
        assert parse_date(date(2020, 5, 1)) == date(2020, 5, 1)

    def test_parse_datetime_truncates(self):
        """Test that datetimes are reduced to their date."""
        assert parse_date(datetime(2020, 5, 1, 13, 45)) == date(2020, 5, 1)

    @pytest.mark.parametrize("value", ["01/15/2024", "2023-02-29", "yesterday", ""])
    def test_parse_invalid(self, value):
        """Test that invalid dates raise ValueError."""
        with pytest.raises(ValueError):
            parse_date(value)


class TestTransactionRange:
    """Tests for transaction date range checks."""

    @freeze_time("2026-01-15")
    def test_today(self):
        """Test that today follows the clock."""
        assert today() == date(2026, 1, 15)

    @freeze_time("2026-01-15")
    def test_future_date(self):
        """Test future detection around today."""
        assert is_future_date(date(2026, 1, 16)) is True
        assert is_future_date(date(2026, 1, 15)) is False


    def test_earliest_transaction_date(self):
        """Test the lower bound used by date validation."""
        assert EARLIEST_TRANSACTION_DATE == date(1900, 1, 1)
        assert is_future_date(EARLIEST_TRANSACTION_DATE) is False

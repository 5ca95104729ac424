"""
Transaction model for portfolio data.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator


class TransactionType(str, Enum):
    """Direction of a transaction, stored in its abbreviated form."""

    DEBIT = "DR"
    CREDIT = "CR"

    @property
    def label(self) -> str:
        return "Debit" if self is TransactionType.DEBIT else "Credit"

    @classmethod
    def from_input(cls, value: str) -> "TransactionType":
        """
        Normalize a form value to a transaction type.

        Accepts "Debit"/"Credit" in any case, or the "DR"/"CR" abbreviations.

        Raises:
            ValueError: If the value names neither direction
        """
        normalized = value.strip().upper()
        if normalized in ("DR", "DEBIT"):
            return cls.DEBIT
        if normalized in ("CR", "CREDIT"):
            return cls.CREDIT
        raise ValueError(f"Unknown transaction type: {value}")


class Transaction(BaseModel):
    """
    A single debit or credit recorded against a portfolio.

    Field aliases follow the persisted (camelCase) record layout, so
    ``model_dump(by_alias=True)`` produces the stored shape.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    # Required fields
    id: str = Field(min_length=1)
    type: TransactionType
    transaction_name: str = Field(alias="transactionName", min_length=1)
    amount: Decimal = Field(gt=0, decimal_places=2)
    transaction_date: date = Field(alias="transactionDate")

    # Optional fields
    comments: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def type_label(self) -> str:
        """Long form of the type, as shown to users."""
        return self.type.label

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: object) -> object:
        """Accept the long form names as well as the abbreviations."""
        if isinstance(v, str) and not isinstance(v, TransactionType):
            return TransactionType.from_input(v)
        return v

    @field_validator("comments")
    @classmethod
    def empty_comments_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

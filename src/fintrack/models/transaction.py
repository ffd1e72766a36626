"""Transaction models as exchanged with the finance API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlmodel import Field, SQLModel

# Values the backend writes into ``category_source``.
CATEGORY_SOURCE_BANK = "bank"
CATEGORY_SOURCE_AI = "ai"
CATEGORY_SOURCE_MANUAL = "manual"


class Transaction(SQLModel):
    """A single imported bank transaction.

    ``amount`` is kept as :class:`~decimal.Decimal`; the API sends it as a
    string so no binary float ever touches stored values. Negative amounts are
    outflows, everything else is an inflow.
    """

    id: int
    hash: str
    account_id: int
    transaction_date: date
    booking_date: Optional[date] = None
    counterparty: Optional[str] = None
    description: str = ""
    amount: Decimal
    currency: str = Field(max_length=3)
    category_id: Optional[int] = None
    category_source: Optional[str] = None
    bank_category: Optional[str] = None
    bank_reference: Optional[str] = None
    bank_type: Optional[str] = None
    state: Optional[str] = None
    raw_data: Optional[dict[str, Any]] = None
    imported_at: Optional[datetime] = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


class TransactionPage(SQLModel):
    """One page of the transaction list.

    ``page`` is authoritative: the server may clamp the requested page.
    """

    data: list[Transaction] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 50


class CategorizeResult(SQLModel):
    categorized: int = 0

"""Aggregate rows computed by the API for the dashboard."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlmodel import SQLModel


class MonthlyStat(SQLModel):
    """Income and expense sums for one ``YYYY-MM`` month.

    ``expense`` is the sum of negative amounts and therefore never positive.
    The API reports ``null`` for a side with no rows.
    """

    month: str
    income: Optional[Decimal] = None
    expense: Optional[Decimal] = None

    @property
    def year(self) -> str:
        return self.month.split("-", 1)[0]


class CategoryStat(SQLModel):
    """Signed total and row count for one category (``None`` = uncategorized)."""

    category: Optional[str] = None
    total: Optional[Decimal] = None
    count: int = 0

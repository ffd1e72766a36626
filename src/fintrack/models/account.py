"""Account model."""

from __future__ import annotations

from sqlmodel import SQLModel


class Account(SQLModel):
    # ``name`` doubles as the filter value sent to the API and is unique.
    id: int
    name: str
    currency: str = "PLN"
    transaction_count: int = 0

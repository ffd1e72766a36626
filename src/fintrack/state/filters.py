"""Filter state for the transactions and dashboard views."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping

TRANSACTION_FILTER_KEYS = ("account", "category", "date_from", "date_to", "search", "page")
DASHBOARD_FILTER_KEYS = ("account", "year")


def parse_page(raw: str | None) -> int:
    """Return a 1-based page number, treating missing or invalid input as 1."""

    if not raw:
        return 1
    try:
        value = int(raw)
    except ValueError:
        return 1
    return value if value >= 1 else 1


@dataclass(frozen=True)
class TransactionFilters:
    """Filters narrowing the transaction list, as read from the route.

    Empty strings mean "no filter". ``category`` holds a category id.
    """

    account: str = ""
    category: str = ""
    date_from: str = ""
    date_to: str = ""
    search: str = ""
    page: int = 1

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "TransactionFilters":
        return cls(
            account=params.get("account", ""),
            category=params.get("category", ""),
            date_from=params.get("date_from", ""),
            date_to=params.get("date_to", ""),
            search=params.get("search", ""),
            page=parse_page(params.get("page")),
        )

    @property
    def is_filtered(self) -> bool:
        """True when any filter other than the page is active."""
        return any(
            getattr(self, f.name) for f in fields(self) if f.name != "page"
        )

    def to_api_params(self, per_page: int) -> dict[str, str]:
        """Translate into ``GET /api/transactions`` query parameters."""

        params = {"page": str(self.page), "per_page": str(per_page)}
        if self.account:
            params["account"] = self.account
        if self.category:
            params["category_id"] = self.category
        if self.date_from:
            params["date_from"] = self.date_from
        if self.date_to:
            params["date_to"] = self.date_to
        if self.search:
            params["search"] = self.search
        return params


@dataclass(frozen=True)
class DashboardFilters:
    """Reduced filter set of the dashboard: account name and year."""

    account: str = ""
    year: str = ""

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "DashboardFilters":
        return cls(account=params.get("account", ""), year=params.get("year", ""))

    def to_api_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.account:
            params["account"] = self.account
        if self.year:
            params["year"] = self.year
        return params

"""Filter state kept in lock-step with the navigable route."""

from .filters import (
    DASHBOARD_FILTER_KEYS,
    TRANSACTION_FILTER_KEYS,
    DashboardFilters,
    TransactionFilters,
    parse_page,
)
from .query_state import (
    Navigator,
    QueryState,
    build_route,
    dashboard_query_state,
    split_route,
    transaction_query_state,
)

__all__ = [
    "DASHBOARD_FILTER_KEYS",
    "DashboardFilters",
    "Navigator",
    "QueryState",
    "TRANSACTION_FILTER_KEYS",
    "TransactionFilters",
    "build_route",
    "dashboard_query_state",
    "parse_page",
    "split_route",
    "transaction_query_state",
]

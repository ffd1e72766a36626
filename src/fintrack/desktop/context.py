"""Application context shared by the router and the views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import flet as ft

from ..api import FinanceApiClient
from ..config import BaseConfig
from ..state import (
    DashboardFilters,
    Navigator,
    QueryState,
    TransactionFilters,
    dashboard_query_state,
    transaction_query_state,
)


@dataclass
class AppContext:
    """Configuration, the API client and the route-backed filter stores."""

    config: BaseConfig
    client: FinanceApiClient

    page: Optional[ft.Page] = None
    transactions_state: Optional[QueryState[TransactionFilters]] = None
    dashboard_state: Optional[QueryState[DashboardFilters]] = None
    query_states: list[QueryState] = field(default_factory=list)

    @property
    def dev_mode(self) -> bool:
        return bool(self.config.DEV_MODE)

    def attach(self, navigator: Navigator) -> None:
        """Bind the filter stores to the page whose route they mirror."""

        self.page = navigator  # type: ignore[assignment]
        self.transactions_state = transaction_query_state(navigator)
        self.dashboard_state = dashboard_query_state(navigator)
        self.query_states = [self.transactions_state, self.dashboard_state]

    def route_changed(self, route: str) -> bool:
        """Forward a route change to the store owning its path."""
        return any(state.route_changed(route) for state in self.query_states)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the application context with a configured API client."""

    if config is None:
        config = BaseConfig()
    return AppContext(config=config, client=FinanceApiClient.from_config(config))

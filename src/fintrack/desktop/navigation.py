"""Navigation and routing for the Flet desktop app."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Optional

import flet as ft

from ..logging_config import get_logger
from ..state import split_route

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

# View builder type
ViewBuilder = Callable[["AppContext", ft.Page], ft.View]

DEFAULT_ROUTE = "/dashboard"


def dispose_view(view: Optional[ft.View]) -> None:
    """Run the cleanup hook a view stored in ``data['dispose']``."""
    data = getattr(view, "data", None)
    if isinstance(data, dict) and callable(data.get("dispose")):
        data["dispose"]()


class Router:
    """Builds a view per path; query-only changes are handed to the filter stores.

    Changing ``/transactions?page=1`` to ``/transactions?page=2`` keeps the
    mounted view (and its loaded lookups) and only notifies its store.
    """

    def __init__(self, page: ft.Page, context: AppContext):
        self.page = page
        self.context = context
        self.routes: Dict[str, ViewBuilder] = {}
        self.current_path: Optional[str] = None

    def register(self, route: str, builder: ViewBuilder) -> None:
        logger.debug(f"Registering route: {route}")
        self.routes[route] = builder

    def route_change(self, e: ft.RouteChangeEvent) -> None:
        self.handle_route(e.route or "/")

    def handle_route(self, route: str) -> None:
        path, _ = split_route(route)
        logger.info(f"Route change requested: {route}")

        if path not in self.routes:
            logger.warning(f"Route not registered: {path}, redirecting to {DEFAULT_ROUTE}")
            self.page.go(DEFAULT_ROUTE)
            return

        if path == self.current_path and self.page.views:
            self.context.route_changed(route)
            return

        try:
            view = self.routes[path](self.context, self.page)
        except Exception as ex:
            logger.error(f"Failed to build view for route {route}: {ex}", exc_info=True)
            self.show_error(f"Error loading view: {ex}")
            return

        if self.page.views:
            dispose_view(self.page.views[-1])
            self.page.views[-1] = view
        else:
            self.page.views.append(view)
        self.current_path = path
        self.page.update()
        logger.info(f"Loaded view for route: {route}")

    def view_pop(self, e: ft.ViewPopEvent) -> None:
        """Handle back button navigation."""
        if len(self.page.views) > 1:
            dispose_view(self.page.views.pop())
        top = self.page.views[-1].route if self.page.views else None
        path, _ = split_route(self.page.route)
        # Stay on the current query string when the top view owns it.
        self.page.go(self.page.route if top and path == top else top or DEFAULT_ROUTE)

    def show_error(self, message: str) -> None:
        dialog = ft.AlertDialog(
            title=ft.Text("Error"),
            content=ft.Text(message),
            actions=[ft.TextButton("OK", on_click=lambda _: self.close_dialog(dialog))],
        )
        self.page.dialog = dialog
        dialog.open = True
        self.page.update()

    def close_dialog(self, dialog: ft.AlertDialog) -> None:
        dialog.open = False
        self.page.update()

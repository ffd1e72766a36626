"""Navigation metadata and helpers for the desktop app."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import flet as ft

from ..state import Navigator, split_route


@dataclass(frozen=True)
class NavigationDestination:
    """Metadata for a desktop navigation rail entry."""

    route: str
    label: str
    icon: str
    selected_icon: str


NAVIGATION_DESTINATIONS: List[NavigationDestination] = [
    NavigationDestination(
        "/dashboard",
        "Dashboard",
        ft.Icons.DASHBOARD_OUTLINED,
        ft.Icons.DASHBOARD,
    ),
    NavigationDestination(
        "/transactions",
        "Transactions",
        ft.Icons.RECEIPT_LONG_OUTLINED,
        ft.Icons.RECEIPT_LONG,
    ),
    NavigationDestination(
        "/import",
        "Import",
        ft.Icons.UPLOAD_FILE_OUTLINED,
        ft.Icons.UPLOAD_FILE,
    ),
]

_SHORTCUT_DIGIT_ROUTES = {
    str(position): dest.route for position, dest in enumerate(NAVIGATION_DESTINATIONS, start=1)
}


def nav_routes() -> list[str]:
    """List of routes represented in the navigation rail."""
    return [dest.route for dest in NAVIGATION_DESTINATIONS]


def route_for_index(selected_index: int) -> Optional[str]:
    """Return the route that corresponds to the selected navigation index."""
    if 0 <= selected_index < len(NAVIGATION_DESTINATIONS):
        return NAVIGATION_DESTINATIONS[selected_index].route
    return None


def index_for_route(route: str) -> int:
    """Return the rail index for ``route``, ignoring its query string."""
    path, _ = split_route(route)
    try:
        return nav_routes().index(path)
    except ValueError:
        return 0


def handle_navigation_selection(page: Navigator, selected_index: int) -> None:
    """Go to the route that was selected in the navigation rail."""
    if route := route_for_index(selected_index):
        page.go(route)


def resolve_shortcut_route(key: str, ctrl: bool, shift: bool) -> Optional[str]:
    """Map Ctrl+<digit> to the rail destinations."""
    key = (key or "").lower()
    if ctrl and not shift:
        return _SHORTCUT_DIGIT_ROUTES.get(key)
    return None


__all__ = [
    "NavigationDestination",
    "NAVIGATION_DESTINATIONS",
    "handle_navigation_selection",
    "index_for_route",
    "nav_routes",
    "resolve_shortcut_route",
    "route_for_index",
]

"""Controller helpers shared by the desktop views."""

from __future__ import annotations

import flet as ft

from .navigation_helpers import handle_navigation_selection, resolve_shortcut_route


def show_snack(page: ft.Page, message: str) -> None:
    """Display a snack bar message."""

    page.snack_bar = ft.SnackBar(content=ft.Text(message), show_close_icon=True)
    page.snack_bar.open = True
    page.update()


def navigate(page: ft.Page, route: str) -> None:
    clean = route if route.startswith("/") else f"/{route}"
    page.go(clean)


def handle_nav_selection(page: ft.Page, selected_index: int) -> None:
    handle_navigation_selection(page, selected_index)
    page.update()


def handle_shortcut(page: ft.Page, key: str, ctrl: bool, shift: bool) -> bool:
    """Resolve shortcut navigation; returns True when a route was triggered."""

    route = resolve_shortcut_route(key, ctrl, shift)
    if route:
        navigate(page, route)
        return True
    return False


__all__ = [
    "handle_nav_selection",
    "handle_shortcut",
    "navigate",
    "show_snack",
]

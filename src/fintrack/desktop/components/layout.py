"""Layout components for the desktop app."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import flet as ft

if TYPE_CHECKING:
    from ..context import AppContext

from .. import controllers
from ..navigation_helpers import NAVIGATION_DESTINATIONS, index_for_route


def build_app_bar(ctx: AppContext, title: str, page: ft.Page) -> ft.AppBar:
    """Build the app bar with a refresh action and the backend address."""

    def _refresh(_e):
        # Same-path navigation re-notifies the view's filter store.
        controllers.navigate(page, page.route or "/dashboard")

    actions: List[ft.Control] = [
        ft.IconButton(
            icon=ft.Icons.REFRESH,
            tooltip="Refresh",
            on_click=_refresh,
        ),
    ]
    if ctx.dev_mode:
        actions.insert(
            0,
            ft.Chip(label=ft.Text(ctx.config.API_URL), leading=ft.Icon(ft.Icons.DNS)),
        )

    return ft.AppBar(
        leading=ft.Icon(ft.Icons.ACCOUNT_BALANCE_WALLET),
        title=ft.Text(title, size=20, weight=ft.FontWeight.BOLD),
        center_title=False,
        bgcolor=ft.Colors.SURFACE_CONTAINER_HIGHEST,
        actions=actions,
    )


def build_navigation_rail(page: ft.Page, current_route: str) -> ft.NavigationRail:
    """Build the navigation rail with route selection."""

    def route_changed(e):
        controllers.handle_nav_selection(page, e.control.selected_index)

    return ft.NavigationRail(
        selected_index=index_for_route(current_route),
        label_type=ft.NavigationRailLabelType.ALL,
        min_width=100,
        min_extended_width=200,
        group_alignment=-0.9,
        destinations=[
            ft.NavigationRailDestination(
                icon=dest.icon,
                selected_icon=dest.selected_icon,
                label=dest.label,
            )
            for dest in NAVIGATION_DESTINATIONS
        ],
        on_change=route_changed,
    )


def build_main_layout(page: ft.Page, current_route: str, content: ft.Control) -> List[ft.Control]:
    """Navigation rail on the left, ``content`` filling the rest."""

    return [
        ft.Row(
            [
                build_navigation_rail(page, current_route),
                ft.VerticalDivider(width=1),
                ft.Container(content=content, expand=True, padding=20),
            ],
            spacing=0,
            expand=True,
        )
    ]

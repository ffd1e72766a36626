"""Tests for the desktop navigation helpers and router."""

from __future__ import annotations

from dataclasses import dataclass, field

import flet as ft

from conftest import PageStub
from fintrack.desktop.context import AppContext
from fintrack.desktop.navigation import Router
from fintrack.desktop.navigation_helpers import (
    handle_navigation_selection,
    index_for_route,
    nav_routes,
    resolve_shortcut_route,
    route_for_index,
)


@dataclass
class _PageSpy:
    """Minimal fake page that records navigation actions."""

    navigated_to: list[str] = field(default_factory=list)

    def go(self, route: str) -> None:
        self.navigated_to.append(route)


def test_navigation_selection_drives_page_route() -> None:
    page = _PageSpy()

    handle_navigation_selection(page, 1)

    assert page.navigated_to == ["/transactions"]


def test_navigation_selection_out_of_bounds_does_nothing() -> None:
    page = _PageSpy()

    handle_navigation_selection(page, 99)

    assert page.navigated_to == []


def test_index_and_route_round_trip() -> None:
    for index, route in enumerate(nav_routes()):
        assert route_for_index(index) == route
        assert index_for_route(route) == index


def test_index_ignores_query_string() -> None:
    assert index_for_route("/transactions?page=2&search=rent") == 1
    assert index_for_route("/unknown") == 0


def test_shortcuts_map_ctrl_digits() -> None:
    assert resolve_shortcut_route("1", ctrl=True, shift=False) == "/dashboard"
    assert resolve_shortcut_route("3", ctrl=True, shift=False) == "/import"
    assert resolve_shortcut_route("2", ctrl=False, shift=False) is None
    assert resolve_shortcut_route("2", ctrl=True, shift=True) is None


class _Event:
    def __init__(self, route: str):
        self.route = route


def _router(config, api):
    page = PageStub()
    ctx = AppContext(config=config, client=api)
    ctx.attach(page)
    router = Router(page, ctx)
    return page, ctx, router


def test_router_rebuilds_only_when_the_path_changes(config, api) -> None:
    page, ctx, router = _router(config, api)
    built: list[str] = []
    disposed: list[str] = []

    def builder(route: str):
        def _build(_ctx, _page):
            built.append(route)
            view = ft.View(route=route)
            view.data = {"dispose": lambda: disposed.append(route)}
            return view

        return _build

    router.register("/transactions", builder("/transactions"))
    router.register("/dashboard", builder("/dashboard"))
    notified = []
    ctx.transactions_state.subscribe(notified.append)

    page.route = "/transactions"
    router.route_change(_Event("/transactions"))
    page.route = "/transactions?page=2"
    router.route_change(_Event("/transactions?page=2"))
    page.route = "/dashboard"
    router.route_change(_Event("/dashboard"))

    assert built == ["/transactions", "/dashboard"]
    assert [f.page for f in notified] == [2]
    assert disposed == ["/transactions"]
    assert len(page.views) == 1
    assert page.views[0].route == "/dashboard"


def test_router_redirects_unknown_routes(config, api) -> None:
    page, _ctx, router = _router(config, api)

    router.route_change(_Event("/"))

    assert page.navigated_to == ["/dashboard"]


def test_back_keeps_the_active_filters(config, api) -> None:
    page, _ctx, router = _router(config, api)
    router.register("/transactions", lambda _c, _p: ft.View(route="/transactions"))
    page.route = "/transactions?account=Alior&page=2"
    router.route_change(_Event(page.route))

    router.view_pop(None)

    assert page.navigated_to == ["/transactions?account=Alior&page=2"]

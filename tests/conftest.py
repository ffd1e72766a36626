"""Pytest configuration and shared fixtures for the finance tracker client tests.

HTTP never leaves the process: every client talks to a :class:`FakeBackend`
through ``httpx.MockTransport``. Async code is driven with ``asyncio.run``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable

import flet as ft
import httpx
import pytest

from fintrack.api import FinanceApiClient
from fintrack.config import BaseConfig

# =============================================================================
# Fake backend
# =============================================================================

Handler = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


class FakeBackend:
    """Routes ``(method, path)`` to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def handler(_request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json)

        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": f"No route for {request.url.path}"})
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(backend: FakeBackend) -> FinanceApiClient:
    """API client wired to the fake backend."""

    return FinanceApiClient(
        "http://backend.test",
        auth=("admin", "admin"),
        transport=httpx.MockTransport(backend),
    )


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> BaseConfig:
    """Dev-mode configuration with its data directory under ``tmp_path``."""

    for name in (
        "FINTRACK_API_URL",
        "FINTRACK_AUTH_USER",
        "FINTRACK_AUTH_PASS",
        "FINTRACK_PER_PAGE",
        "FINTRACK_REQUEST_TIMEOUT",
        "FINTRACK_CURRENCY",
        "FINTRACK_SURFACE_EDIT_ERRORS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FINTRACK_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("FINTRACK_DEV_MODE", "true")
    return BaseConfig()


# =============================================================================
# Payload factories
# =============================================================================


def transaction_payload(transaction_id: int = 1, **overrides: Any) -> dict[str, Any]:
    """JSON shape of one transaction as the backend sends it."""

    payload: dict[str, Any] = {
        "id": transaction_id,
        "hash": f"hash-{transaction_id}",
        "account_id": 1,
        "transaction_date": "2024-01-15",
        "booking_date": "2024-01-16",
        "counterparty": "Biedronka",
        "description": f"Purchase {transaction_id}",
        "amount": "-42.50",
        "currency": "PLN",
        "category_id": None,
        "category_source": None,
        "bank_category": None,
        "bank_reference": None,
        "bank_type": None,
        "state": None,
        "raw_data": None,
        "imported_at": "2024-01-20T10:00:00",
    }
    payload.update(overrides)
    return payload


def page_payload(rows: list[dict[str, Any]], *, total: int | None = None, page: int = 1) -> dict[str, Any]:
    return {
        "data": rows,
        "total": len(rows) if total is None else total,
        "page": page,
        "per_page": 50,
    }


CATEGORIES = [
    {"id": 1, "name": "Food", "name_pl": "Jedzenie"},
    {"id": 2, "name": "Transport", "name_pl": "Transport"},
    {"id": 3, "name": "Bills", "name_pl": "Rachunki"},
]

ACCOUNTS = [
    {"id": 1, "name": "Alior", "currency": "PLN", "transaction_count": 10},
    {"id": 2, "name": "Revolut", "currency": "PLN", "transaction_count": 4},
]


@pytest.fixture
def lookups_backend(backend: FakeBackend) -> FakeBackend:
    """Backend answering the category and account lookups."""

    backend.on("GET", "/api/categories", json=CATEGORIES)
    backend.on("GET", "/api/accounts", json=ACCOUNTS)
    return backend


# =============================================================================
# Flet page stub
# =============================================================================


class PageStub:
    """Stand-in for ``ft.Page``: records navigation and scheduled coroutines."""

    def __init__(self, route: str = "/") -> None:
        self.views: list[ft.View] = []
        self.route = route
        self.navigated_to: list[str] = []
        self.tasks: list[tuple[Callable[..., Awaitable[Any]], tuple[Any, ...]]] = []
        self.snack_bar = None
        self.dialog = None
        self.overlay: list[ft.Control] = []
        self.padding = 0
        self.theme_mode = ft.ThemeMode.LIGHT

    def go(self, route: str) -> None:
        self.route = route
        self.navigated_to.append(route)

    def update(self) -> None:
        return None

    def run_task(self, handler: Callable[..., Awaitable[Any]], *args: Any) -> None:
        self.tasks.append((handler, args))


def run_tasks(page: PageStub) -> None:
    """Run every scheduled coroutine, including ones scheduled while draining."""

    async def _drain() -> None:
        while page.tasks:
            handler, args = page.tasks.pop(0)
            await handler(*args)

    asyncio.run(_drain())


@pytest.fixture
def page() -> PageStub:
    return PageStub()


def find_controls(
    root: Any, predicate: Callable[[Any], bool], *, skip_hidden: bool = False
) -> list[Any]:
    """Depth-first search over a control tree (``controls``, ``content``, rows, cells).

    With ``skip_hidden`` the subtrees of invisible controls are not entered.
    """

    found: list[Any] = []
    stack = [root]
    seen: set[int] = set()
    while stack:
        control = stack.pop()
        if id(control) in seen:
            continue
        seen.add(id(control))
        if skip_hidden and getattr(control, "visible", True) is False:
            continue
        if predicate(control):
            found.append(control)
        for attr in ("controls", "content", "actions", "rows", "cells"):
            child = getattr(control, attr, None)
            if child is None:
                continue
            if isinstance(child, list):
                stack.extend(reversed(child))
            elif isinstance(child, ft.Control):
                stack.append(child)
    return found


def find_control(root: Any, predicate: Callable[[Any], bool]) -> Any:
    matches = find_controls(root, predicate)
    return matches[0] if matches else None

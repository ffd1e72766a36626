"""Tests for the list and dashboard fetch orchestration."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import ACCOUNTS, CATEGORIES, page_payload, transaction_payload
from fintrack.services import (
    DashboardOrchestrator,
    GenerationCounter,
    LoadState,
    TransactionListOrchestrator,
)
from fintrack.state import DashboardFilters, TransactionFilters


def _gated_transactions(gates: dict[str, asyncio.Event], fail: set[str] = frozenset()):
    """Handler that holds each response until the gate for its search term opens."""

    async def handler(request: httpx.Request) -> httpx.Response:
        term = request.url.params.get("search", "")
        await gates[term].wait()
        if term in fail:
            return httpx.Response(500, json={"error": f"{term} failed"})
        row = transaction_payload(len(term), description=term)
        return httpx.Response(200, json=page_payload([row]))

    return handler


def test_generation_counter_issues_increasing_tokens():
    counter = GenerationCounter()

    first = counter.issue()
    second = counter.issue()

    assert second > first
    assert counter.is_current(second)
    assert not counter.is_current(first)


def test_refresh_loads_rows_and_server_page(api, backend):
    backend.on(
        "GET",
        "/api/transactions",
        json=page_payload([transaction_payload(1), transaction_payload(2)], total=120, page=3),
    )
    states: list[LoadState] = []
    orchestrator = TransactionListOrchestrator(api, per_page=50)
    orchestrator.on_change = lambda: states.append(orchestrator.state)

    applied = asyncio.run(orchestrator.refresh(TransactionFilters(page=9)))

    assert applied is True
    assert states == [LoadState.LOADING, LoadState.SUCCESS]
    assert [row.id for row in orchestrator.rows] == [1, 2]
    assert orchestrator.page == 3
    assert orchestrator.total == 120
    assert orchestrator.total_pages == 3
    assert orchestrator.has_previous and not orchestrator.has_next
    params = backend.calls("GET", "/api/transactions")[0].url.params
    assert params["page"] == "9"
    assert params["per_page"] == "50"


def test_total_pages_is_at_least_one(api):
    orchestrator = TransactionListOrchestrator(api, per_page=50)

    assert orchestrator.total_pages == 1
    assert not orchestrator.has_next


def test_error_is_stored_and_cleared_on_next_cycle(api, backend):
    backend.on("GET", "/api/transactions", status=500, json={"error": "Database error"})
    orchestrator = TransactionListOrchestrator(api)

    asyncio.run(orchestrator.refresh(TransactionFilters()))
    assert orchestrator.state is LoadState.ERROR
    assert orchestrator.error == "Database error"

    backend.on("GET", "/api/transactions", json=page_payload([]))
    seen_errors: list = []
    orchestrator.on_change = lambda: seen_errors.append(orchestrator.error)
    asyncio.run(orchestrator.refresh(TransactionFilters()))

    assert seen_errors == [None, None]
    assert orchestrator.state is LoadState.SUCCESS


def test_late_stale_response_is_discarded(api, backend):
    async def scenario():
        gates = {"old": asyncio.Event(), "new": asyncio.Event()}
        backend.on("GET", "/api/transactions", handler=_gated_transactions(gates))
        orchestrator = TransactionListOrchestrator(api)

        older = asyncio.create_task(orchestrator.refresh(TransactionFilters(search="old")))
        await asyncio.sleep(0)
        newer = asyncio.create_task(orchestrator.refresh(TransactionFilters(search="new")))
        await asyncio.sleep(0)

        gates["new"].set()
        newer_applied = await newer
        gates["old"].set()
        older_applied = await older
        return orchestrator, newer_applied, older_applied

    orchestrator, newer_applied, older_applied = asyncio.run(scenario())

    assert newer_applied is True
    assert older_applied is False
    assert [row.description for row in orchestrator.rows] == ["new"]
    assert orchestrator.state is LoadState.SUCCESS


def test_stale_failure_does_not_touch_state(api, backend):
    async def scenario():
        gates = {"old": asyncio.Event(), "new": asyncio.Event()}
        backend.on("GET", "/api/transactions", handler=_gated_transactions(gates, fail={"old"}))
        orchestrator = TransactionListOrchestrator(api)

        older = asyncio.create_task(orchestrator.refresh(TransactionFilters(search="old")))
        await asyncio.sleep(0)
        newer = asyncio.create_task(orchestrator.refresh(TransactionFilters(search="new")))
        await asyncio.sleep(0)

        gates["new"].set()
        await newer
        gates["old"].set()
        await older
        return orchestrator

    orchestrator = asyncio.run(scenario())

    assert orchestrator.state is LoadState.SUCCESS
    assert orchestrator.error is None


def test_lookups_load_once(api, lookups_backend):
    orchestrator = TransactionListOrchestrator(api)

    async def scenario():
        await asyncio.gather(orchestrator.load_lookups(), orchestrator.load_lookups())
        await orchestrator.load_lookups()

    asyncio.run(scenario())

    assert len(lookups_backend.calls("GET", "/api/categories")) == 1
    assert len(lookups_backend.calls("GET", "/api/accounts")) == 1
    assert orchestrator.lookups.category_label(1) == "Food"
    assert orchestrator.lookups.account_label(2) == "Revolut"


def test_lookup_failure_is_isolated(api, backend, caplog):
    backend.on("GET", "/api/categories", status=500, json={"error": "boom"})
    backend.on("GET", "/api/accounts", json=ACCOUNTS)
    orchestrator = TransactionListOrchestrator(api)

    with caplog.at_level("ERROR", logger="fintrack"):
        asyncio.run(orchestrator.load_lookups())

    assert len(orchestrator.lookups.categories) == 0
    assert orchestrator.lookups.category_label(1) == "Uncategorized"
    assert orchestrator.lookups.account_options() == ["Alior", "Revolut"]
    assert any(record.getMessage() == "Lookup fetch failed" for record in caplog.records)
    assert orchestrator.state is LoadState.IDLE


def _dashboard_backend(backend):
    backend.on(
        "GET",
        "/api/stats/monthly",
        handler=lambda request: httpx.Response(
            200,
            json=[
                {"month": "2023-12", "income": "100.00", "expense": "-50.00"},
                {"month": "2024-01", "income": "1000.00", "expense": "-400.00"},
            ]
            if "year" not in request.url.params
            else [{"month": "2024-01", "income": "1000.00", "expense": "-400.00"}],
        ),
    )
    backend.on(
        "GET",
        "/api/stats/categories",
        json=[
            {"category": "Food", "total": "-300.00", "count": 6},
            {"category": "Salary", "total": "1000.00", "count": 1},
            {"category": None, "total": "-100.00", "count": 3},
        ],
    )
    backend.on("GET", "/api/accounts", json=ACCOUNTS)
    return backend


def test_dashboard_refresh_derives_figures(api, backend):
    _dashboard_backend(backend)
    orchestrator = DashboardOrchestrator(api)
    observed = []
    orchestrator.on_change = lambda: observed.append(orchestrator.kpis())

    asyncio.run(orchestrator.refresh(DashboardFilters(account="Alior", year="2024")))

    assert observed[0] is None
    kpis = orchestrator.kpis()
    assert str(kpis.total_income) == "1000.00"
    assert str(kpis.total_expense) == "-400.00"
    assert str(kpis.net_balance) == "600.00"
    assert kpis.transaction_count == 10
    assert [row.label for row in orchestrator.monthly_series()] == ["Jan 2024"]
    assert [s.name for s in orchestrator.category_breakdown().slices] == ["Food", "Uncategorized"]
    for path in ("/api/stats/monthly", "/api/stats/categories"):
        assert dict(backend.calls("GET", path)[0].url.params) == {"account": "Alior", "year": "2024"}


def test_dashboard_options_use_unfiltered_months(api, backend):
    _dashboard_backend(backend)
    orchestrator = DashboardOrchestrator(api)

    asyncio.run(orchestrator.load_options())
    asyncio.run(orchestrator.load_options())

    assert orchestrator.years == ["2024", "2023"]
    assert [a.name for a in orchestrator.accounts] == ["Alior", "Revolut"]
    monthly_calls = backend.calls("GET", "/api/stats/monthly")
    assert len(monthly_calls) == 1
    assert not monthly_calls[0].url.params


def test_dashboard_error_from_either_request(api, backend):
    _dashboard_backend(backend)
    backend.on("GET", "/api/stats/categories", status=500, json={"error": "Stats unavailable"})
    orchestrator = DashboardOrchestrator(api)

    asyncio.run(orchestrator.refresh(DashboardFilters()))

    assert orchestrator.state is LoadState.ERROR
    assert orchestrator.error == "Stats unavailable"


def test_dashboard_programming_errors_propagate(api, backend):
    backend.on("GET", "/api/stats/monthly", json=[])

    def explode(request):
        raise RuntimeError("handler bug")

    backend.on("GET", "/api/stats/categories", handler=explode)
    orchestrator = DashboardOrchestrator(api)

    with pytest.raises(RuntimeError):
        asyncio.run(orchestrator.refresh(DashboardFilters()))


def test_categories_fixture_matches_lookup_options(api, lookups_backend):
    orchestrator = TransactionListOrchestrator(api)

    asyncio.run(orchestrator.load_lookups())

    assert orchestrator.lookups.category_options() == [
        (str(c["id"]), c["name"]) for c in CATEGORIES
    ]

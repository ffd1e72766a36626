"""Dashboard view: KPI cards and charts for the selected account and year."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import flet as ft

from ...services import DashboardOrchestrator
from ...services.stats import KpiTotals, format_count, format_currency
from ...state import DashboardFilters
from ..charts import category_donut_png, monthly_bar_png
from ..components import (
    build_app_bar,
    build_card,
    build_main_layout,
    build_stat_card,
    error_banner,
    set_banner,
)

if TYPE_CHECKING:
    from ..context import AppContext

ROUTE = "/dashboard"
ALL = "all"
LOADING_PLACEHOLDER = "..."


def kpi_texts(kpis: Optional[KpiTotals], currency: str) -> dict[str, str]:
    """Card values; every card shows a placeholder while figures are loading."""

    if kpis is None:
        return {key: LOADING_PLACEHOLDER for key in ("income", "expenses", "net", "count")}
    return {
        "income": format_currency(kpis.total_income, currency),
        "expenses": format_currency(abs(kpis.total_expense), currency),
        "net": format_currency(kpis.net_balance, currency),
        "count": format_count(kpis.transaction_count),
    }


def build_dashboard_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the dashboard view."""

    state = ctx.dashboard_state
    currency = ctx.config.CURRENCY
    orchestrator = DashboardOrchestrator(ctx.client)

    account_field = ft.Dropdown(label="Account", width=220, value=ALL)
    year_field = ft.Dropdown(label="Year", width=140, value=ALL)
    banner = error_banner()

    income_text = ft.Text(LOADING_PLACEHOLDER)
    expense_text = ft.Text(LOADING_PLACEHOLDER)
    net_text = ft.Text(LOADING_PLACEHOLDER)
    count_text = ft.Text(LOADING_PLACEHOLDER)

    monthly_image = ft.Image(height=300, fit=ft.ImageFit.CONTAIN, visible=False)
    category_image = ft.Image(height=300, fit=ft.ImageFit.CONTAIN, visible=False)
    monthly_loading = ft.ProgressRing(visible=True)
    category_loading = ft.ProgressRing(visible=True)

    def _sync_filter_controls(filters: DashboardFilters) -> None:
        account_field.options = [ft.dropdown.Option(ALL, "All accounts")] + [
            ft.dropdown.Option(account.name) for account in orchestrator.accounts
        ]
        year_field.options = [ft.dropdown.Option(ALL, "All years")] + [
            ft.dropdown.Option(year) for year in orchestrator.years
        ]
        account_field.value = filters.account or ALL
        year_field.value = filters.year or ALL

    def _render_kpis() -> None:
        kpis = orchestrator.kpis()
        values = kpi_texts(kpis, currency)
        income_text.value = values["income"]
        expense_text.value = values["expenses"]
        net_text.value = values["net"]
        count_text.value = values["count"]
        if kpis is not None:
            net_text.color = ft.Colors.GREEN if kpis.net_balance >= 0 else ft.Colors.RED

    chart_files: list[Path] = []
    rendered = {"generation": None}

    def _discard_charts() -> None:
        for path in chart_files:
            path.unlink(missing_ok=True)
        chart_files.clear()

    def _render_charts() -> None:
        ready = not orchestrator.loading and orchestrator.loaded_generation is not None
        monthly_loading.visible = orchestrator.loading
        category_loading.visible = orchestrator.loading
        monthly_image.visible = ready
        category_image.visible = ready
        if not ready or rendered["generation"] == orchestrator.loaded_generation:
            return
        _discard_charts()
        chart_files.append(monthly_bar_png(orchestrator.monthly_series(), currency))
        chart_files.append(category_donut_png(orchestrator.category_breakdown(), currency))
        monthly_image.src, category_image.src = (str(path) for path in chart_files)
        rendered["generation"] = orchestrator.loaded_generation

    def _render() -> None:
        _sync_filter_controls(state.current_filters())
        set_banner(banner, orchestrator.error)
        _render_kpis()
        _render_charts()
        page.update()

    orchestrator.on_change = _render

    async def _load(filters: DashboardFilters) -> None:
        await orchestrator.refresh(filters)

    async def _load_options() -> None:
        await orchestrator.load_options()

    def _on_select(key: str, control: ft.Dropdown) -> None:
        value = control.value or ALL
        state.set_filters({key: "" if value == ALL else value})

    account_field.on_change = lambda _e: _on_select("account", account_field)
    year_field.on_change = lambda _e: _on_select("year", year_field)

    unsubscribe = state.subscribe(lambda filters: page.run_task(_load, filters))

    stat_cards = ft.ResponsiveRow(
        controls=[
            ft.Container(
                content=build_stat_card(
                    "Total Income", income_text, icon=ft.Icons.TRENDING_UP, color=ft.Colors.GREEN
                ),
                col={"sm": 12, "md": 6, "lg": 3},
            ),
            ft.Container(
                content=build_stat_card(
                    "Total Expenses", expense_text, icon=ft.Icons.TRENDING_DOWN, color=ft.Colors.RED
                ),
                col={"sm": 12, "md": 6, "lg": 3},
            ),
            ft.Container(
                content=build_stat_card(
                    "Net Balance", net_text, icon=ft.Icons.ACCOUNT_BALANCE_WALLET
                ),
                col={"sm": 12, "md": 6, "lg": 3},
            ),
            ft.Container(
                content=build_stat_card(
                    "Transactions", count_text, icon=ft.Icons.RECEIPT_LONG, color=ft.Colors.BLUE
                ),
                col={"sm": 12, "md": 6, "lg": 3},
            ),
        ],
        spacing=12,
        run_spacing=12,
    )

    charts_row = ft.ResponsiveRow(
        controls=[
            ft.Container(
                content=build_card(
                    "Income vs Expenses",
                    ft.Stack([monthly_loading, monthly_image], alignment=ft.alignment.center),
                ),
                col={"sm": 12, "md": 7},
            ),
            ft.Container(
                content=build_card(
                    "Expenses by Category",
                    ft.Stack([category_loading, category_image], alignment=ft.alignment.center),
                ),
                col={"sm": 12, "md": 5},
            ),
        ],
        spacing=12,
        run_spacing=12,
    )

    content = ft.Column(
        controls=[
            ft.Row(
                controls=[
                    ft.Text("Dashboard", size=24, weight=ft.FontWeight.BOLD),
                    ft.Row([account_field, year_field], spacing=8),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                wrap=True,
            ),
            banner,
            stat_cards,
            ft.Container(height=12),
            charts_row,
        ],
        spacing=12,
        expand=True,
        scroll=ft.ScrollMode.AUTO,
    )

    _sync_filter_controls(state.current_filters())
    page.run_task(_load_options)
    page.run_task(_load, state.current_filters())

    def _dispose() -> None:
        unsubscribe()
        _discard_charts()

    app_bar = build_app_bar(ctx, "Dashboard", page)
    view = ft.View(
        route=ROUTE,
        appbar=app_bar,
        controls=build_main_layout(page, ROUTE, content),
        padding=0,
    )
    view.data = {"dispose": _dispose}
    return view

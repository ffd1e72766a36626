"""Transactions view: filter bar, paginated register and inline category edits."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import flet as ft

from ...api import ApiError
from ...logging_config import get_logger
from ...models import Transaction
from ...services import CategoryEditController, LoadState, TransactionListOrchestrator
from ...services.lookups import UNCATEGORIZED
from ...services.stats import format_amount, format_count
from ...state import TransactionFilters
from .. import controllers
from ..components import build_app_bar, build_main_layout, empty_state, error_banner, set_banner

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

ROUTE = "/transactions"
ALL = "all"
DATE_ERROR = "Use YYYY-MM-DD"
NO_TRANSACTIONS = "No transactions found."
LOADING_TEXT = "Loading..."


def _valid_date(raw: str) -> bool:
    try:
        date.fromisoformat(raw)
    except ValueError:
        return False
    return True


def pagination_text(page_number: int, total_pages: int, total: int) -> str:
    return f"Page {page_number} of {total_pages} ({format_count(total)} results)"


def build_transactions_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the transactions register bound to the route's query string."""

    state = ctx.transactions_state
    orchestrator = TransactionListOrchestrator(ctx.client, per_page=ctx.config.PER_PAGE)

    def _edit_failed(transaction_id: int, message: str) -> None:
        controllers.show_snack(page, f"Could not update transaction {transaction_id}: {message}")

    editor = CategoryEditController(
        ctx.client,
        orchestrator.rows,
        orchestrator.generations,
        lookups=lambda: orchestrator.lookups,
        on_failure=_edit_failed if ctx.config.SURFACE_EDIT_ERRORS else None,
    )

    account_field = ft.Dropdown(label="Account", width=200, value=ALL)
    category_field = ft.Dropdown(label="Category", width=220, value=ALL)
    date_from_field = ft.TextField(label="From", hint_text="YYYY-MM-DD", width=150)
    date_to_field = ft.TextField(label="To", hint_text="YYYY-MM-DD", width=150)
    search_field = ft.TextField(
        label="Search",
        hint_text="Description or counterparty",
        width=240,
        prefix_icon=ft.Icons.SEARCH,
    )
    clear_button = ft.TextButton("Clear filters", icon=ft.Icons.FILTER_ALT_OFF, visible=False)
    categorize_button = ft.OutlinedButton("Categorize", icon=ft.Icons.AUTO_AWESOME)

    progress = ft.ProgressRing(width=20, height=20, visible=False)
    banner = error_banner()
    total_text = ft.Text("", color=ft.Colors.ON_SURFACE_VARIANT)
    page_label = ft.Text("")
    previous_button = ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="Previous page", disabled=True)
    next_button = ft.IconButton(icon=ft.Icons.ARROW_FORWARD, tooltip="Next page", disabled=True)
    empty = empty_state(NO_TRANSACTIONS)
    empty.visible = False
    loading_text = ft.Text(LOADING_TEXT, color=ft.Colors.ON_SURFACE_VARIANT, visible=False)

    table = ft.DataTable(
        columns=[
            ft.DataColumn(ft.Text("Date")),
            ft.DataColumn(ft.Text("Description")),
            ft.DataColumn(ft.Text("Account")),
            ft.DataColumn(ft.Text("Category")),
            ft.DataColumn(ft.Text("Amount"), numeric=True),
        ],
        rows=[],
        expand=True,
        heading_row_height=36,
    )

    # Rendering -------------------------------------------------------------------

    def _sync_filter_controls(filters: TransactionFilters) -> None:
        lookups = orchestrator.lookups
        account_field.options = [ft.dropdown.Option(ALL, "All accounts")] + [
            ft.dropdown.Option(name) for name in lookups.account_options()
        ]
        category_field.options = [ft.dropdown.Option(ALL, "All categories")] + [
            ft.dropdown.Option(key, label) for key, label in lookups.category_options()
        ]
        account_field.value = filters.account or ALL
        category_field.value = filters.category or ALL
        date_from_field.value = filters.date_from
        date_to_field.value = filters.date_to
        search_field.value = filters.search
        clear_button.visible = filters.is_filtered

    def _category_cell(row: Transaction) -> ft.DataCell:
        edit = editor.begin_edit(row)
        picker = ft.Dropdown(
            value=edit.selected_value or None,
            hint_text=UNCATEGORIZED,
            options=[ft.dropdown.Option(key, label) for key, label in edit.options],
            width=200,
            disabled=editor.is_pending(row.id),
            data=row.id,
        )
        picker.on_change = lambda _e, dd=picker: _on_category_pick(dd)
        return ft.DataCell(picker)

    def _render_table() -> None:
        # Rows of the previous filter set stay hidden until the new page lands.
        loading_text.visible = orchestrator.loading
        if orchestrator.loading:
            table.rows = []
            empty.visible = False
            return
        lookups = orchestrator.lookups
        table.rows = [
            ft.DataRow(
                cells=[
                    ft.DataCell(ft.Text(row.transaction_date.isoformat())),
                    ft.DataCell(
                        ft.Column(
                            [
                                ft.Text(row.description),
                                ft.Text(
                                    row.counterparty or "",
                                    size=12,
                                    color=ft.Colors.ON_SURFACE_VARIANT,
                                    visible=bool(row.counterparty),
                                ),
                            ],
                            spacing=0,
                        )
                    ),
                    ft.DataCell(ft.Text(lookups.account_label(row.account_id) or "")),
                    _category_cell(row),
                    ft.DataCell(
                        ft.Text(
                            f"{format_amount(row.amount)} {row.currency}",
                            color=ft.Colors.RED if row.is_expense else ft.Colors.GREEN,
                            weight=ft.FontWeight.W_500,
                        )
                    ),
                ]
            )
            for row in orchestrator.rows
        ]
        empty.visible = orchestrator.state is LoadState.SUCCESS and not table.rows

    def _render() -> None:
        _sync_filter_controls(state.current_filters())
        progress.visible = orchestrator.loading
        set_banner(banner, orchestrator.error)
        _render_table()
        if orchestrator.loading:
            page_label.value = ""
            total_text.value = ""
        else:
            page_label.value = pagination_text(
                orchestrator.page, orchestrator.total_pages, orchestrator.total
            )
            total_text.value = f"{format_count(orchestrator.total)} transactions total"
        previous_button.disabled = orchestrator.loading or not orchestrator.has_previous
        next_button.disabled = orchestrator.loading or not orchestrator.has_next
        page.update()

    orchestrator.on_change = _render

    # Data loading ----------------------------------------------------------------

    async def _load(filters: TransactionFilters) -> None:
        await orchestrator.refresh(filters)

    async def _load_lookups() -> None:
        await orchestrator.load_lookups()

    async def _commit(transaction_id: int, category_id: int) -> None:
        await editor.commit(transaction_id, category_id)
        # The picker reverts to the row value when the commit was not applied.
        _render()

    async def _categorize() -> None:
        categorize_button.disabled = True
        page.update()
        try:
            result = await ctx.client.trigger_categorize()
        except ApiError as exc:
            logger.warning("Categorization failed", extra={"error": exc.message})
            categorize_button.disabled = False
            controllers.show_snack(page, f"Categorization failed: {exc.message}")
            return
        logger.info("Categorization finished", extra={"categorized": result.categorized})
        categorize_button.disabled = False
        controllers.show_snack(page, f"Categorized {result.categorized} transactions")
        await orchestrator.refresh(state.current_filters())

    # Event handlers ----------------------------------------------------------------

    def _on_category_pick(picker: ft.Dropdown) -> None:
        if not picker.value or editor.is_pending(picker.data):
            return
        picker.disabled = True
        page.update()
        page.run_task(_commit, picker.data, int(picker.value))

    def _on_select(key: str, control: ft.Dropdown) -> None:
        value = control.value or ALL
        state.set_filters({key: "" if value == ALL else value})

    def _on_date(key: str, field: ft.TextField) -> None:
        raw = (field.value or "").strip()
        if raw and not _valid_date(raw):
            field.error_text = DATE_ERROR
            page.update()
            return
        field.error_text = None
        state.set_filters({key: raw})

    def _on_search(_e=None) -> None:
        state.set_filters({"search": (search_field.value or "").strip()})

    def _paginate(delta: int) -> None:
        state.set_filters({"page": str(orchestrator.page + delta)})

    account_field.on_change = lambda _e: _on_select("account", account_field)
    category_field.on_change = lambda _e: _on_select("category", category_field)
    date_from_field.on_submit = lambda _e: _on_date("date_from", date_from_field)
    date_from_field.on_blur = date_from_field.on_submit
    date_to_field.on_submit = lambda _e: _on_date("date_to", date_to_field)
    date_to_field.on_blur = date_to_field.on_submit
    search_field.on_submit = _on_search
    clear_button.on_click = lambda _e: state.clear()
    categorize_button.on_click = lambda _e: page.run_task(_categorize)
    previous_button.on_click = lambda _e: _paginate(-1)
    next_button.on_click = lambda _e: _paginate(1)

    unsubscribe = state.subscribe(lambda filters: page.run_task(_load, filters))

    # Layout ------------------------------------------------------------------------

    filter_bar = ft.Row(
        controls=[
            account_field,
            category_field,
            date_from_field,
            date_to_field,
            search_field,
            clear_button,
        ],
        wrap=True,
        spacing=8,
        run_spacing=8,
    )

    register_card = ft.Card(
        content=ft.Container(
            ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Text("Transactions", weight=ft.FontWeight.BOLD, size=18),
                            progress,
                        ],
                        spacing=12,
                    ),
                    total_text,
                    ft.Divider(),
                    banner,
                    ft.Container(table, expand=True),
                    loading_text,
                    empty,
                    ft.Row(
                        controls=[previous_button, page_label, next_button],
                        alignment=ft.MainAxisAlignment.END,
                        spacing=4,
                    ),
                ],
                expand=True,
                spacing=12,
            ),
            padding=12,
        ),
        expand=True,
        elevation=2,
    )

    content = ft.Column(
        controls=[
            ft.Row(
                controls=[
                    ft.Text("Transactions", size=24, weight=ft.FontWeight.BOLD),
                    categorize_button,
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            ft.Container(height=8),
            filter_bar,
            ft.Container(height=8),
            register_card,
        ],
        expand=True,
        scroll=ft.ScrollMode.AUTO,
    )

    _sync_filter_controls(state.current_filters())
    page.run_task(_load_lookups)
    page.run_task(_load, state.current_filters())

    app_bar = build_app_bar(ctx, "Transactions", page)
    view = ft.View(
        route=ROUTE,
        appbar=app_bar,
        controls=build_main_layout(page, ROUTE, content),
        padding=0,
    )
    view.data = {"dispose": unsubscribe}
    return view


"""Main Flet desktop application entry point."""

from __future__ import annotations

import time

import flet as ft

from ..logging_config import session_log_path, setup_logging
from . import controllers
from .context import create_app_context
from .navigation import DEFAULT_ROUTE, Router
from .views.dashboard import build_dashboard_view
from .views.importer import build_import_view
from .views.transactions import build_transactions_view

ROUTE_BUILDERS = {
    "/dashboard": build_dashboard_view,
    "/transactions": build_transactions_view,
    "/import": build_import_view,
}


def main(page: ft.Page) -> None:
    """Main entry point for the Flet desktop app."""

    ctx = create_app_context()

    logger = setup_logging(ctx.config)
    logger.info("Finance tracker desktop application starting")

    # Filter stores read and write the page route
    ctx.attach(page)

    def on_page_close(_):
        logger.info("Application closing, releasing the API client")
        page.run_task(ctx.client.aclose)
        slp = session_log_path()
        if slp:
            logger.info(f"Debug session log saved to: {slp}")

    page.on_close = on_page_close

    page.title = "Finance Tracker (DEV)" if ctx.dev_mode else "Finance Tracker"
    page.theme_mode = ft.ThemeMode.LIGHT
    page.padding = 0
    page.window_width = 1280
    page.window_height = 800
    page.window_min_width = 1024
    page.window_min_height = 600
    transitions = ft.PageTransitionsTheme(
        android=ft.PageTransitionTheme.NONE,
        ios=ft.PageTransitionTheme.NONE,
        macos=ft.PageTransitionTheme.NONE,
        windows=ft.PageTransitionTheme.NONE,
    )
    page.theme = ft.Theme(page_transitions=transitions)
    page.dark_theme = ft.Theme(page_transitions=transitions)

    router = Router(page, ctx)
    for route, builder in ROUTE_BUILDERS.items():
        router.register(route, builder)

    page.on_route_change = router.route_change
    page.on_view_pop = router.view_pop

    # Identical Flet error events can repeat thousands of times per second
    _last_err_msg: str | None = None
    _last_err_ts: float = 0.0
    _suppress_count: int = 0

    def _on_error(e: ft.ControlEvent):  # pragma: no cover (UI callback)
        nonlocal _last_err_msg, _last_err_ts, _suppress_count
        msg = getattr(e, "data", None) or "<no-data>"
        now = time.time()
        if _last_err_msg == msg and (now - _last_err_ts) < 0.5:
            _suppress_count += 1
            _last_err_ts = now
            if _suppress_count % 100 == 0:
                logger.warning(
                    "Repeated Flet errors suppressed",
                    extra={"error_message": msg, "suppressed": _suppress_count},
                )
            return
        if _suppress_count:
            logger.warning(
                "Suppression summary",
                extra={"error_message": _last_err_msg, "suppressed": _suppress_count},
            )
        _last_err_msg = msg
        _last_err_ts = now
        _suppress_count = 0
        logger.error("Flet page error", extra={"data": msg})
        controllers.show_snack(page, f"UI error: {msg}")

    page.on_error = _on_error

    def handle_shortcuts(e: ft.KeyboardEvent):
        """Global keyboard shortcuts for quick navigation."""
        controllers.handle_shortcut(page, e.key, e.ctrl, e.shift)

    page.on_keyboard_event = handle_shortcuts

    # Honour a deep link the page was opened with
    start = page.route if page.route and page.route != "/" else DEFAULT_ROUTE
    page.go(start)


def run() -> None:
    """Console entry point."""
    ft.app(target=main)


if __name__ == "__main__":
    run()

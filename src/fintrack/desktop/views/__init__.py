"""Desktop views, one builder per route."""

from .dashboard import build_dashboard_view
from .importer import build_import_view
from .transactions import build_transactions_view

__all__ = ["build_dashboard_view", "build_import_view", "build_transactions_view"]

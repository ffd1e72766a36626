"""Chart helpers for Flet views.

Figures are rendered off-screen with the Agg backend and written to temporary
PNG files that ``ft.Image`` can display.
"""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from ..services.stats import CategoryBreakdown, MonthlyChartRow, format_currency

INCOME_COLOR = "#22C55E"
EXPENSE_COLOR = "#EF4444"

NO_DATA = "No data available"
NO_EXPENSE_DATA = "No expense data available"


def _save(fig) -> Path:
    with NamedTemporaryFile(delete=False, suffix=".png") as tmp:
        fig.savefig(tmp.name, bbox_inches="tight", dpi=100)
        path = Path(tmp.name)
    plt.close(fig)
    return path


def _placeholder(message: str, figsize: tuple[float, float]) -> Path:
    fig, ax = plt.subplots(figsize=figsize)
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=14, color="#666")
    ax.axis("off")
    return _save(fig)


def monthly_bar_png(rows: Sequence[MonthlyChartRow], currency: str = "PLN") -> Path:
    """Grouped income/expense bars per month; expense bars use magnitudes."""

    if not rows:
        return _placeholder(NO_DATA, (10, 5))

    positions = list(range(len(rows)))
    width = 0.4
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(
        [x - width / 2 for x in positions],
        [row.income for row in rows],
        width,
        label="Income",
        color=INCOME_COLOR,
    )
    ax.bar(
        [x + width / 2 for x in positions],
        [row.expense for row in rows],
        width,
        label="Expenses",
        color=EXPENSE_COLOR,
    )

    ax.grid(True, axis="y", linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    ax.set_title("Income vs Expenses", fontsize=14, fontweight="bold", pad=15)
    ax.set_xticks(positions)
    ax.set_xticklabels([row.label for row in rows], rotation=45, ha="right")
    ax.yaxis.set_major_formatter(
        mticker.FuncFormatter(lambda value, _pos: format_currency(value, currency, decimals=0))
    )
    ax.legend(loc="upper left", framealpha=0.9)
    plt.tight_layout()
    return _save(fig)


def category_donut_png(breakdown: CategoryBreakdown, currency: str = "PLN") -> Path:
    """Expense share per category, legend entries labelled ``name (pct%)``."""

    if breakdown.is_empty:
        return _placeholder(NO_EXPENSE_DATA, (8, 6))

    sizes = [float(item.value) for item in breakdown.slices]
    cmap = plt.get_cmap("tab20")
    colors = [cmap(i % cmap.N) for i in range(len(sizes))]

    fig, ax = plt.subplots(figsize=(8, 6))
    wedges, _texts = ax.pie(
        sizes,
        labels=None,
        wedgeprops=dict(width=0.5, edgecolor="white"),
        startangle=90,
        counterclock=False,
        colors=colors,
    )
    ax.text(
        0,
        0,
        f"Total\n{format_currency(breakdown.total, currency, decimals=0)}",
        ha="center",
        va="center",
        fontsize=12,
        fontweight="bold",
    )
    ax.legend(
        wedges,
        [item.label for item in breakdown.slices],
        title="Expenses by category",
        loc="center left",
        bbox_to_anchor=(1, 0, 0.5, 1),
        fontsize=8,
    )
    ax.axis("equal")
    plt.tight_layout()
    return _save(fig)

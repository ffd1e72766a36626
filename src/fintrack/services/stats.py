"""Dashboard figures derived from the aggregate rows.

Everything here is pure. Monetary sums use :class:`~decimal.Decimal`;
values are turned into floats only in the chart-ready shapes.

Sign convention: ``expense`` stays negative throughout, so the net balance is
``income + expense``. Magnitudes (``abs``) appear only in chart series.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..models import CategoryStat, MonthlyStat
from .lookups import UNCATEGORIZED

ZERO = Decimal("0")
HUNDRED = Decimal("100")

CURRENCY_SYMBOLS = {"PLN": "zł"}

# U+00A0, the group separator of the pl-PL number format
_GROUP_SEPARATOR = "\u00a0"


def _dec(value: Optional[Decimal]) -> Decimal:
    return value if value is not None else ZERO


@dataclass(frozen=True)
class KpiTotals:
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    transaction_count: int


@dataclass(frozen=True)
class MonthlyChartRow:
    month: str
    label: str
    income: float
    expense: float


@dataclass(frozen=True)
class CategorySlice:
    name: str
    value: Decimal
    count: int
    percentage: float

    @property
    def label(self) -> str:
        return f"{self.name} ({format_percentage(self.percentage)})"


@dataclass(frozen=True)
class CategoryBreakdown:
    slices: tuple[CategorySlice, ...]
    total: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.slices


def compute_kpis(
    monthly: Iterable[MonthlyStat], categories: Iterable[CategoryStat]
) -> KpiTotals:
    """Sum income and expense over months and the row count over categories.

    The count comes from the category aggregate, not the monthly one; the two
    are independent views of the filtered data.
    """
    total_income = ZERO
    total_expense = ZERO
    for stat in monthly:
        total_income += _dec(stat.income)
        total_expense += _dec(stat.expense)
    transaction_count = sum(stat.count for stat in categories)
    return KpiTotals(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=total_income + total_expense,
        transaction_count=transaction_count,
    )


def format_month(month: str) -> str:
    """``"2024-01"`` -> ``"Jan 2024"``; unparsable keys are returned unchanged."""

    try:
        year, month_number = month.split("-", 1)
        return date(int(year), int(month_number), 1).strftime("%b %Y")
    except ValueError:
        return month


def monthly_series(monthly: Iterable[MonthlyStat]) -> list[MonthlyChartRow]:
    return [
        MonthlyChartRow(
            month=stat.month,
            label=format_month(stat.month),
            income=float(_dec(stat.income)),
            expense=float(abs(_dec(stat.expense))),
        )
        for stat in monthly
    ]


def category_breakdown(categories: Iterable[CategoryStat]) -> CategoryBreakdown:
    """Expense-only slices, largest first, with shares of the expense total.

    Rows with a non-negative total are left out.
    """
    expenses = [
        (stat.category or UNCATEGORIZED, -_dec(stat.total), stat.count)
        for stat in categories
        if _dec(stat.total) < ZERO
    ]
    expenses.sort(key=lambda item: item[1], reverse=True)
    total = sum((value for _, value, _ in expenses), ZERO)
    slices = tuple(
        CategorySlice(
            name=name,
            value=value,
            count=count,
            percentage=float(value / total * HUNDRED),
        )
        for name, value, count in expenses
    )
    return CategoryBreakdown(slices=slices, total=total)


def available_years(monthly: Iterable[MonthlyStat]) -> list[str]:
    """Distinct ``YYYY`` prefixes of the month keys, newest first."""
    return sorted({stat.year for stat in monthly if stat.year}, reverse=True)


# Formatting -----------------------------------------------------------------------


def _group_digits(integer_part: str) -> str:
    # pl-PL leaves four-digit numbers ungrouped
    if len(integer_part) <= 4:
        return integer_part
    groups: list[str] = []
    while integer_part:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    return _GROUP_SEPARATOR.join(groups)


def format_number(value: Decimal | float | int, decimals: int = 2) -> str:
    """Format with pl-PL separators: ``12345.5`` -> ``"12 345,50"``."""

    quantum = Decimal(1).scaleb(-decimals)
    number = Decimal(str(value)).quantize(quantum)
    sign = "-" if number < 0 else ""
    text = f"{abs(number):f}"
    integer_part, _, fraction = text.partition(".")
    grouped = _group_digits(integer_part)
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(
    value: Decimal | float | int, currency: str = "PLN", *, decimals: int = 2
) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{format_number(value, decimals)}{_GROUP_SEPARATOR}{symbol}"


def format_amount(value: Decimal) -> str:
    """Amount column text: inflows get a ``+`` prefix, outflows keep their sign."""

    prefix = "" if value < 0 else "+"
    return f"{prefix}{format_number(value)}"


def format_count(count: int) -> str:
    return format_number(count, decimals=0)


def format_percentage(percentage: float) -> str:
    return f"{percentage:.1f}%"

"""Fetch orchestration for the transactions list and the dashboard.

Each refresh is a fetch cycle ``IDLE -> LOADING -> SUCCESS | ERROR``. Cycles
are stamped with a generation token; when filters change faster than the
network answers, only the latest cycle may write state. A superseded cycle
returns without touching data, loading flags or errors.
"""

from __future__ import annotations

import asyncio
import math
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from ..api import ApiError, FinanceApiClient
from ..logging_config import get_logger
from ..models import Account, CategoryStat, MonthlyStat
from ..state import DashboardFilters, TransactionFilters
from . import stats
from .lookups import Lookup, Lookups
from .rows import TransactionRows

logger = get_logger(__name__)

T = TypeVar("T")

ChangeCallback = Callable[[], None]


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class GenerationCounter:
    """Monotonically increasing token source for fetch cycles."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


class _Cycle:
    """Shared loading/error bookkeeping for the orchestrators."""

    def __init__(
        self,
        generations: Optional[GenerationCounter] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        self.generations = generations or GenerationCounter()
        self.on_change = on_change
        self.state = LoadState.IDLE
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _begin(self) -> int:
        token = self.generations.issue()
        self.state = LoadState.LOADING
        self.error = None
        self._notify()
        return token

    def _superseded(self, token: int, what: str) -> bool:
        if self.generations.is_current(token):
            return False
        logger.debug(
            "Discarding superseded response",
            extra={"what": what, "generation": token, "latest": self.generations.latest},
        )
        return True

    def _fail(self, exc: ApiError, what: str) -> None:
        logger.warning("Fetch failed", extra={"what": what, "error": exc.message})
        self.state = LoadState.ERROR
        self.error = exc.message
        self._notify()

    def _succeed(self) -> None:
        self.state = LoadState.SUCCESS
        self._notify()


async def _optional(
    fetch: Callable[[], Awaitable[Sequence[T]]], what: str
) -> Optional[list[T]]:
    """Run a lookup fetch whose failure must not fail the view."""
    try:
        return list(await fetch())
    except ApiError as exc:
        logger.error("Lookup fetch failed", extra={"what": what, "error": exc.message})
        return None


class TransactionListOrchestrator(_Cycle):
    """Loads pages of transactions plus the category/account lookups."""

    def __init__(
        self,
        client: FinanceApiClient,
        *,
        per_page: int = 50,
        rows: Optional[TransactionRows] = None,
        generations: Optional[GenerationCounter] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        super().__init__(generations, on_change)
        self.client = client
        self.per_page = per_page
        self.rows = rows if rows is not None else TransactionRows()
        self.lookups = Lookups()
        self.total = 0
        self.page = 1
        self._lookups_task: Optional[asyncio.Task] = None

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    async def load_lookups(self) -> Lookups:
        """Fetch categories and accounts once, independent of filters.

        Either fetch may fail on its own; its table then stays empty and
        labels render as unresolved.
        """
        if self._lookups_task is None:
            self._lookups_task = asyncio.ensure_future(self._fetch_lookups())
        await self._lookups_task
        return self.lookups

    async def _fetch_lookups(self) -> None:
        categories, accounts = await asyncio.gather(
            _optional(self.client.list_categories, "categories"),
            _optional(self.client.list_accounts, "accounts"),
        )
        self.lookups = Lookups(
            categories=Lookup(categories or (), key=lambda c: c.id),
            accounts=Lookup(accounts or (), key=lambda a: a.id),
        )
        self._notify()

    async def refresh(self, filters: TransactionFilters) -> bool:
        """Fetch the page described by ``filters``.

        Returns True when this cycle's result (or error) was applied.
        """
        token = self._begin()
        try:
            result = await self.client.list_transactions(filters.to_api_params(self.per_page))
        except ApiError as exc:
            if self._superseded(token, "transactions"):
                return False
            self._fail(exc, "transactions")
            return True

        if self._superseded(token, "transactions"):
            return False
        self.rows.replace_all(result.data, generation=token)
        self.total = result.total
        self.page = result.page
        logger.info(
            "Transactions loaded",
            extra={"generation": token, "page": result.page, "total": result.total},
        )
        self._succeed()
        return True


class DashboardOrchestrator(_Cycle):
    """Loads the monthly and category aggregates for the dashboard."""

    def __init__(
        self,
        client: FinanceApiClient,
        *,
        generations: Optional[GenerationCounter] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        super().__init__(generations, on_change)
        self.client = client
        self.monthly: list[MonthlyStat] = []
        self.categories: list[CategoryStat] = []
        self.accounts: list[Account] = []
        self.years: list[str] = []
        self._options_loaded = False
        # Generation of the cycle whose aggregates are currently held.
        self.loaded_generation: Optional[int] = None

    async def load_options(self) -> None:
        """Fetch the account list and the year list once.

        Years come from an unfiltered monthly fetch so the dropdown always
        offers every year with data.
        """
        if self._options_loaded:
            return
        self._options_loaded = True
        accounts, all_months = await asyncio.gather(
            _optional(self.client.list_accounts, "accounts"),
            _optional(self.client.monthly_stats, "years"),
        )
        self.accounts = accounts or []
        self.years = stats.available_years(all_months or [])
        self._notify()

    async def refresh(self, filters: DashboardFilters) -> bool:
        token = self._begin()
        params = filters.to_api_params()
        outcomes = await asyncio.gather(
            self.client.monthly_stats(params),
            self.client.category_stats(params),
            return_exceptions=True,
        )
        if self._superseded(token, "dashboard"):
            return False

        for outcome in outcomes:
            if isinstance(outcome, ApiError):
                self._fail(outcome, "dashboard")
                return True
            if isinstance(outcome, BaseException):
                raise outcome

        monthly, categories = outcomes
        self.monthly = list(monthly)
        self.categories = list(categories)
        self.loaded_generation = token
        logger.info(
            "Dashboard loaded",
            extra={
                "generation": token,
                "months": len(self.monthly),
                "categories": len(self.categories),
            },
        )
        self._succeed()
        return True

    def kpis(self) -> Optional[stats.KpiTotals]:
        """KPI totals, or None while a cycle is loading."""
        if self.loading:
            return None
        return stats.compute_kpis(self.monthly, self.categories)

    def monthly_series(self) -> list[stats.MonthlyChartRow]:
        return stats.monthly_series(self.monthly)

    def category_breakdown(self) -> stats.CategoryBreakdown:
        return stats.category_breakdown(self.categories)

"""Inline category editing for transaction rows.

The visible category changes only after the server confirms. Nothing is
applied optimistically, so a failed commit has nothing to roll back: the
failure is logged and the row stays as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..api import ApiError, FinanceApiClient
from ..logging_config import get_logger
from ..models import Transaction
from .lookups import Lookups
from .orchestrator import GenerationCounter
from .rows import TransactionRows

logger = get_logger(__name__)

FailureCallback = Callable[[int, str], None]


@dataclass(frozen=True)
class CategoryEdit:
    """Editable state for one row's category picker."""

    transaction_id: int
    current_category_id: Optional[int]
    options: tuple[tuple[str, str], ...]

    @property
    def selected_value(self) -> str:
        return "" if self.current_category_id is None else str(self.current_category_id)


class CategoryEditController:
    def __init__(
        self,
        client: FinanceApiClient,
        rows: TransactionRows,
        generations: GenerationCounter,
        *,
        lookups: Callable[[], Lookups] = Lookups,
        on_failure: Optional[FailureCallback] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.rows = rows
        self.generations = generations
        self._lookups = lookups
        self.on_failure = on_failure
        self.on_change = on_change
        self._pending: set[int] = set()

    def is_pending(self, transaction_id: int) -> bool:
        return transaction_id in self._pending

    def begin_edit(self, row: Transaction) -> CategoryEdit:
        return CategoryEdit(
            transaction_id=row.id,
            current_category_id=row.category_id,
            options=tuple(self._lookups().category_options()),
        )

    async def commit(self, transaction_id: int, category_id: int) -> Optional[Transaction]:
        """Send the new category and swap in the server's copy of the row.

        A second commit for a row whose first commit is still in flight is
        ignored. Returns the updated row, or None when nothing was applied.
        """
        if transaction_id in self._pending:
            logger.info(
                "Category update already in flight, ignoring",
                extra={"transaction_id": transaction_id, "category_id": category_id},
            )
            return None

        self._pending.add(transaction_id)
        try:
            updated = await self.client.update_transaction_category(transaction_id, category_id)
        except ApiError as exc:
            logger.error(
                "Failed to update category",
                extra={
                    "transaction_id": transaction_id,
                    "category_id": category_id,
                    "error": exc.message,
                },
            )
            if self.on_failure is not None:
                self.on_failure(transaction_id, exc.message)
            return None
        finally:
            self._pending.discard(transaction_id)

        self.rows.replace_one(updated, generation=self.generations.latest)
        logger.info(
            "Category updated",
            extra={
                "transaction_id": transaction_id,
                "category_id": updated.category_id,
                "category_source": updated.category_source,
            },
        )
        if self.on_change is not None:
            self.on_change()
        return updated

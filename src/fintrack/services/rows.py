"""The transaction rows currently held by the list view."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..models import Transaction


class TransactionRows:
    """Row collection with two writers: full list replaces and single-row edits.

    Both writers pass the fetch generation they belong to. A category edit
    stamped with generation ``G`` completed while fetch ``G`` (or an older one)
    could still be in flight, so when a full replace for generation ``F <= G``
    lands, the edited row is laid back over the fetched copy. Edits older than
    the landing fetch are forgotten because that fetch already reflects them.
    """

    def __init__(self, rows: Iterable[Transaction] = ()):
        self._rows: list[Transaction] = list(rows)
        self._edits: dict[int, tuple[int, Transaction]] = {}

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> tuple[Transaction, ...]:
        return tuple(self._rows)

    def find(self, transaction_id: int) -> Optional[Transaction]:
        for row in self._rows:
            if row.id == transaction_id:
                return row
        return None

    def replace_all(self, rows: Iterable[Transaction], *, generation: int) -> None:
        self._edits = {
            tx_id: edit for tx_id, edit in self._edits.items() if edit[0] >= generation
        }
        fresh = list(rows)
        for index, row in enumerate(fresh):
            edit = self._edits.get(row.id)
            if edit is not None:
                fresh[index] = edit[1]
        self._rows = fresh

    def replace_one(self, row: Transaction, *, generation: int) -> bool:
        """Swap the row with the same id for ``row``, keeping its position.

        Returns False when the row is no longer on the current page.
        """
        self._edits[row.id] = (generation, row)
        for index, existing in enumerate(self._rows):
            if existing.id == row.id:
                self._rows[index] = row
                return True
        return False

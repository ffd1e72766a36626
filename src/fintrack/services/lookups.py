"""Identity-keyed lookup tables for categories and accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from ..models import Account, Category

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

UNCATEGORIZED = "Uncategorized"


class Lookup(Generic[K, V]):
    """Items indexed by key, iterable in their original order."""

    def __init__(self, items: Iterable[V] = (), *, key: Callable[[V], K]):
        self._items = list(items)
        self._index: dict[K, V] = {key(item): item for item in self._items}

    def get(self, key: Optional[K]) -> Optional[V]:
        if key is None:
            return None
        return self._index.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[V]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


def _by_id(item: Category | Account) -> int:
    return item.id


@dataclass
class Lookups:
    """Category and account tables used to label rows and fill filter options."""

    categories: Lookup[int, Category] = field(default_factory=lambda: Lookup(key=_by_id))
    accounts: Lookup[int, Account] = field(default_factory=lambda: Lookup(key=_by_id))

    def category_label(self, category_id: Optional[int]) -> str:
        category = self.categories.get(category_id)
        return category.label if category else UNCATEGORIZED

    def account_label(self, account_id: Optional[int]) -> Optional[str]:
        account = self.accounts.get(account_id)
        return account.name if account else None

    def category_options(self) -> list[tuple[str, str]]:
        return [(str(c.id), c.label) for c in self.categories]

    def account_options(self) -> list[str]:
        return [a.name for a in self.accounts]

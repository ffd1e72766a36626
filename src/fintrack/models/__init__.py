"""Data models exchanged with the finance API."""

from .account import Account
from .category import Category
from .imports import ImportResult
from .stats import CategoryStat, MonthlyStat
from .transaction import (
    CATEGORY_SOURCE_AI,
    CATEGORY_SOURCE_BANK,
    CATEGORY_SOURCE_MANUAL,
    CategorizeResult,
    Transaction,
    TransactionPage,
)

__all__ = [
    "Account",
    "CATEGORY_SOURCE_AI",
    "CATEGORY_SOURCE_BANK",
    "CATEGORY_SOURCE_MANUAL",
    "CategorizeResult",
    "Category",
    "CategoryStat",
    "ImportResult",
    "MonthlyStat",
    "Transaction",
    "TransactionPage",
]

"""Client-side services: orchestration, editing, imports and stats."""

from .category_edit import CategoryEdit, CategoryEditController
from .import_flow import SUPPORTED_FORMATS, BankFormat, ImportSession
from .lookups import UNCATEGORIZED, Lookup, Lookups
from .orchestrator import (
    DashboardOrchestrator,
    GenerationCounter,
    LoadState,
    TransactionListOrchestrator,
)
from .rows import TransactionRows

__all__ = [
    "BankFormat",
    "CategoryEdit",
    "CategoryEditController",
    "DashboardOrchestrator",
    "GenerationCounter",
    "ImportSession",
    "LoadState",
    "Lookup",
    "Lookups",
    "SUPPORTED_FORMATS",
    "TransactionListOrchestrator",
    "TransactionRows",
    "UNCATEGORIZED",
]

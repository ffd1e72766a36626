"""CSV import summary."""

from __future__ import annotations

from sqlmodel import SQLModel


class ImportResult(SQLModel):
    # The counts are reported as-is; ``imported + skipped`` is not guaranteed
    # to equal ``total_rows``.
    total_rows: int = 0
    imported: int = 0
    skipped: int = 0

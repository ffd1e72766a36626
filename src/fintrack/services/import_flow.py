"""One CSV upload attempt: pick a file, upload it, show the outcome."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..api import ApiError, FinanceApiClient
from ..logging_config import get_logger
from ..models import ImportResult

logger = get_logger(__name__)

ACCEPTED_SUFFIXES = (".csv",)


@dataclass(frozen=True)
class BankFormat:
    bank: str
    file_pattern: str


# Statement layouts the backend detects on its own.
SUPPORTED_FORMATS = (
    BankFormat("Alior", "Historia_Operacji_*.csv"),
    BankFormat("Pekao", "Lista_operacji_*.csv"),
    BankFormat("Revolut", "account-statement_*.csv"),
)


def accepts(path: Path | str) -> bool:
    return Path(path).suffix.lower() in ACCEPTED_SUFFIXES


class ImportSession:
    """State of the import screen.

    ``result`` and ``error`` are mutually exclusive outcomes of the last
    upload; selecting or clearing a file resets both.
    """

    def __init__(self, client: FinanceApiClient):
        self.client = client
        self.selected: Optional[Path] = None
        self.uploading = False
        self.result: Optional[ImportResult] = None
        self.error: Optional[str] = None

    def select(self, path: Path | str) -> None:
        candidate = Path(path)
        if not accepts(candidate):
            raise ValueError(f"Only CSV files can be imported: {candidate.name}")
        self.selected = candidate
        self.result = None
        self.error = None

    def clear(self) -> None:
        self.selected = None
        self.result = None
        self.error = None

    @property
    def can_upload(self) -> bool:
        return self.selected is not None and not self.uploading

    async def upload(self) -> Optional[ImportResult]:
        if not self.can_upload:
            return None
        path = self.selected
        self.uploading = True
        self.result = None
        self.error = None
        try:
            result = await self.client.import_file(path)
        except ApiError as exc:
            logger.warning("Import failed", extra={"file": path.name, "error": exc.message})
            self.error = exc.message
            return None
        except OSError as exc:
            logger.warning("Import file unreadable", extra={"file": path.name, "error": str(exc)})
            self.error = f"Could not read {path.name}: {exc.strerror or exc}"
            return None
        finally:
            self.uploading = False
        self.result = result
        self.selected = None
        return result

    def summary_lines(self) -> list[str]:
        if self.result is None:
            return []
        return [
            f"{self.result.total_rows} total rows",
            f"{self.result.imported} imported",
            f"{self.result.skipped} skipped",
        ]

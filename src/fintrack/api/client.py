"""Typed async client for the finance tracker REST API.

The client performs no business logic. It attaches the basic-auth
credential, drops empty query parameters, converts payloads into models and
normalizes every failure into :class:`~fintrack.api.errors.ApiError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, TypeVar

import httpx
from pydantic import ValidationError
from sqlmodel import SQLModel

from ..config import BaseConfig
from ..logging_config import get_logger
from ..models import (
    Account,
    CategorizeResult,
    Category,
    CategoryStat,
    ImportResult,
    MonthlyStat,
    Transaction,
    TransactionPage,
)
from .errors import ApiError

logger = get_logger(__name__)

M = TypeVar("M", bound=SQLModel)

Params = Optional[Mapping[str, Any]]


def clean_params(params: Params) -> dict[str, str]:
    """Return query parameters with empty values removed and values stringified."""

    if not params:
        return {}
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        text = str(value)
        if text == "":
            continue
        cleaned[key] = text
    return cleaned


class FinanceApiClient:
    """Gateway to the backend endpoints.

    Use as an async context manager or call :meth:`aclose` when done. Tests
    inject an ``httpx.MockTransport`` through ``transport``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: tuple[str, str],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(*auth),
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: BaseConfig, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "FinanceApiClient":
        return cls(
            config.API_URL,
            auth=config.credentials,
            timeout=config.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "FinanceApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug("API request", extra={"method": method, "path": path})
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "API transport failure",
                extra={"method": method, "path": path, "error": repr(exc)},
            )
            raise ApiError.from_transport(exc) from exc

        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning(
                "API request failed",
                extra={
                    "method": method,
                    "path": path,
                    "status": response.status_code,
                    "error": error.message,
                },
            )
            raise error

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"Unexpected response from {path}", status_code=response.status_code
            ) from exc

    @staticmethod
    def _parse(model: type[M], payload: Any, path: str) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "API payload did not match the expected shape",
                extra={"path": path, "errors": exc.error_count()},
            )
            raise ApiError(f"Unexpected response from {path}") from exc

    def _parse_list(self, model: type[M], payload: Any, path: str) -> list[M]:
        if not isinstance(payload, list):
            raise ApiError(f"Unexpected response from {path}")
        return [self._parse(model, item, path) for item in payload]

    async def _get_json(self, path: str, params: Params = None) -> Any:
        return await self._request("GET", path, params=clean_params(params))

    # Transactions -----------------------------------------------------------------

    async def list_transactions(self, params: Params = None) -> TransactionPage:
        path = "/api/transactions"
        return self._parse(TransactionPage, await self._get_json(path, params), path)

    async def get_transaction(self, transaction_id: int) -> Transaction:
        path = f"/api/transactions/{transaction_id}"
        return self._parse(Transaction, await self._get_json(path), path)

    async def update_transaction_category(
        self, transaction_id: int, category_id: int
    ) -> Transaction:
        """Assign a category and return the full updated row."""

        path = f"/api/transactions/{transaction_id}/category"
        payload = await self._request("PUT", path, json={"category_id": category_id})
        return self._parse(Transaction, payload, path)

    # Lookups ----------------------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        path = "/api/categories"
        return self._parse_list(Category, await self._get_json(path), path)

    async def list_accounts(self) -> list[Account]:
        path = "/api/accounts"
        return self._parse_list(Account, await self._get_json(path), path)

    # Statistics -------------------------------------------------------------------

    async def monthly_stats(self, params: Params = None) -> list[MonthlyStat]:
        path = "/api/stats/monthly"
        return self._parse_list(MonthlyStat, await self._get_json(path, params), path)

    async def category_stats(self, params: Params = None) -> list[CategoryStat]:
        path = "/api/stats/categories"
        return self._parse_list(CategoryStat, await self._get_json(path, params), path)

    # Import / categorization ------------------------------------------------------

    async def import_file(self, path: Path | str) -> ImportResult:
        """Upload a bank statement CSV as the multipart ``file`` field."""

        file_path = Path(path)
        files = {"file": (file_path.name, file_path.read_bytes(), "text/csv")}
        payload = await self._request("POST", "/api/import", files=files)
        result = self._parse(ImportResult, payload, "/api/import")
        logger.info(
            "Statement imported",
            extra={
                "file": file_path.name,
                "total_rows": result.total_rows,
                "imported": result.imported,
                "skipped": result.skipped,
            },
        )
        return result

    async def trigger_categorize(self) -> CategorizeResult:
        payload = await self._request("POST", "/api/categorize")
        return self._parse(CategorizeResult, payload, "/api/categorize")

"""Remote data gateway for the finance tracker API."""

from .client import FinanceApiClient, clean_params
from .errors import ApiError

__all__ = ["ApiError", "FinanceApiClient", "clean_params"]

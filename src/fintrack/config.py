"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Range accepted by the backend's ``per_page`` parameter.
MIN_PER_PAGE = 1
MAX_PER_PAGE = 200


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Fintrack"
    DEFAULT_CREDENTIAL = ("admin", "admin")

    def __init__(self) -> None:
        self.API_URL = os.getenv("FINTRACK_API_URL", "http://localhost:3001").rstrip("/")
        self.AUTH_USER = os.getenv("FINTRACK_AUTH_USER", self.DEFAULT_CREDENTIAL[0])
        self.AUTH_PASS = os.getenv("FINTRACK_AUTH_PASS", self.DEFAULT_CREDENTIAL[1])
        self.PER_PAGE = min(
            MAX_PER_PAGE, max(MIN_PER_PAGE, _env_int("FINTRACK_PER_PAGE", 50))
        )
        self.REQUEST_TIMEOUT = _env_float("FINTRACK_REQUEST_TIMEOUT", 30.0)
        self.CURRENCY = os.getenv("FINTRACK_CURRENCY", "PLN").strip().upper() or "PLN"
        self.DEV_MODE = _env_bool("FINTRACK_DEV_MODE", default=True)
        self.SURFACE_EDIT_ERRORS = _env_bool("FINTRACK_SURFACE_EDIT_ERRORS", default=False)
        self.DATA_DIR = self._resolve_data_dir()
        if not self.DEV_MODE and (self.AUTH_USER, self.AUTH_PASS) == self.DEFAULT_CREDENTIAL:
            raise ValueError(
                "FINTRACK_AUTH_USER/FINTRACK_AUTH_PASS must be set in non-dev mode."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and session files live."""

        data_root = os.getenv("FINTRACK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def credentials(self) -> tuple[str, str]:
        return self.AUTH_USER, self.AUTH_PASS


class DevConfig(BaseConfig):
    """Development configuration pointing at a local backend."""

    DEBUG = True
    TESTING = False

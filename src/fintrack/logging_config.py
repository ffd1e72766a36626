"""Structured logging configuration with JSON file output and a session log."""

from __future__ import annotations

import atexit
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

PACKAGE_LOGGER = "fintrack"

_SESSION_START = datetime.now()


class SessionBufferHandler(logging.Handler):
    """Collect formatted lines for the current session.

    The buffer is written to ``logs/session_<timestamp>.log`` when the process
    exits so a user can attach it to a bug report.
    """

    def __init__(self, formatter: logging.Formatter, path: Path):
        super().__init__()
        self.setFormatter(formatter)
        self.path = path
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.lines.append(self.format(record))
        except Exception:  # noqa: BLE001 - logging must never raise into callers
            self.handleError(record)

    def flush_to_disk(self) -> None:
        if not self.lines:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                fh.write("# Fintrack session log\n")
                fh.write(f"# Started: {_SESSION_START.isoformat()}\n")
                fh.write(f"# Entries: {len(self.lines)}\n\n")
                fh.writelines(line + "\n" for line in self.lines)
        except OSError as exc:  # pragma: no cover - interpreter shutdown path
            sys.stderr.write(f"Failed to flush session log: {exc}\n")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    # LogRecord attributes that are not user supplied ``extra`` fields
    _STANDARD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


def _console_formatter(dev_mode: bool) -> logging.Formatter:
    if dev_mode:
        return logging.Formatter(
            fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
            datefmt="%H:%M:%S",
        )
    return logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Configure the package logger.

    Attaches a console handler, a rotating JSON file handler under
    ``DATA_DIR/logs`` and a session buffer that is flushed at exit.

    Args:
        config: Application configuration providing ``DATA_DIR`` and ``DEV_MODE``

    Returns:
        The configured ``fintrack`` logger
    """
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if config.DEV_MODE else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_formatter = _console_formatter(config.DEV_MODE)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    log_file = logs_dir / "fintrack.log"
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    logger.addHandler(file_handler)

    session_path = logs_dir / _SESSION_START.strftime("session_%Y%m%d_%H%M%S.log")
    session_handler = SessionBufferHandler(console_formatter, session_path)
    session_handler.setLevel(logging.DEBUG)
    logger.addHandler(session_handler)
    atexit.register(session_handler.flush_to_disk)

    logger.info(
        "Logging initialized",
        extra={
            "dev_mode": config.DEV_MODE,
            "log_file": str(log_file),
            "api_url": config.API_URL,
        },
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package logger.

    Module ``__name__`` values that already start with ``fintrack`` are used
    unchanged so ``get_logger(__name__)`` works from inside the package.
    """
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def session_log_path() -> Path | None:
    """Return where the current session log will be written, if configured."""
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        if isinstance(handler, SessionBufferHandler):
            return handler.path
    return None

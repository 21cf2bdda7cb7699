"""
Logging setup and the structured logger handed to components.

Components never call ``logging.getLogger`` themselves; they receive a
StructuredLogger at construction time so tests can substitute or inspect it.
"""

import contextvars
import logging
import os
from typing import Any, Optional

from .config import AppConfig

# ── Request ID tracking via ContextVar ────────────────────────────────────────
request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s:%(message)s"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


class RequestIDFilter(logging.Filter):
    """Injects the current request ID into every log record."""
    def filter(self, record):
        record.request_id = request_id_ctx.get("-")
        return True


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger with a ``log(level, message, **fields)``
    capability. Fields are attached to the record as ``extra["fields"]`` and
    appended to the message as ``key=value`` pairs.
    """

    def __init__(self, logger: logging.Logger, **bound: Any):
        self._logger = logger
        self._bound = bound

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Return a logger that attaches ``fields`` to every record."""
        return StructuredLogger(self._logger, **{**self._bound, **fields})

    def child(self, suffix: str) -> "StructuredLogger":
        return StructuredLogger(self._logger.getChild(suffix), **self._bound)

    def log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if fields:
            pairs = " ".join(f"{key}={value}" for key, value in fields.items())
            message = f"{message} {pairs}"
        self._logger.log(
            level, message,
            exc_info=exc_info,
            extra={"fields": {**self._bound, **fields}},
        )

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, exc_info=True, **fields)


def get_logger(name: str, config: Optional[AppConfig] = None) -> StructuredLogger:
    """Build a StructuredLogger bound to the service name."""
    service = config.service_name if config else AppConfig().service_name
    return StructuredLogger(logging.getLogger(name), service=service)


def _add_request_id_filter(target, rid_filter: RequestIDFilter) -> None:
    """Attach rid_filter unless target already carries a RequestIDFilter."""
    if any(isinstance(f, RequestIDFilter) for f in target.filters):
        return
    target.addFilter(rid_filter)


def _add_file_handler(target: logging.Logger, handler: logging.Handler) -> None:
    if any(h.get_name() == handler.get_name() for h in target.handlers):
        return
    target.addHandler(handler)


def configure_logging(config: AppConfig) -> None:
    """
    Configure the root and uvicorn loggers: level, request-ID filter,
    formatter, and optional combined/error log files.
    """
    log_level = getattr(logging, config.log_level, logging.INFO)
    rid_filter = RequestIDFilter()
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    _add_request_id_filter(root_logger, rid_filter)

    # If root has no handlers yet, add a console handler
    if not root_logger.handlers:
        console = logging.StreamHandler()
        console.setLevel(log_level)
        root_logger.addHandler(console)

    for handler in root_logger.handlers:
        handler.setFormatter(formatter)
        _add_request_id_filter(handler, rid_filter)

    # uvicorn loggers don't propagate to root
    for uv_logger_name in UVICORN_LOGGERS:
        uv_log = logging.getLogger(uv_logger_name)
        _add_request_id_filter(uv_log, rid_filter)
        for handler in uv_log.handlers:
            handler.setFormatter(formatter)
            _add_request_id_filter(handler, rid_filter)

    if not config.log_file_dir:
        return

    os.makedirs(config.log_file_dir, exist_ok=True)
    files = (
        ("calcservice.combined", "combined.log", log_level),
        ("calcservice.error", "error.log", logging.ERROR),
    )
    for handler_name, filename, level in files:
        file_handler = logging.FileHandler(
            os.path.join(config.log_file_dir, filename), encoding="utf-8", delay=True,
        )
        file_handler.set_name(handler_name)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        _add_request_id_filter(file_handler, rid_filter)
        _add_file_handler(root_logger, file_handler)
        for uv_logger_name in UVICORN_LOGGERS:
            _add_file_handler(logging.getLogger(uv_logger_name), file_handler)

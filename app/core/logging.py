import logging
import os
from typing import Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"
NO_REQUEST = "-"


class ContextFilter(logging.Filter):
    """Give every record a ``request_id`` so ``DEFAULT_FORMAT`` always renders."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "request_id"):
            record.request_id = NO_REQUEST
        return True


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Install a single stderr handler on the root logger.

    ``level`` defaults to ``LOG_LEVEL``. Calling it again replaces the handler,
    so uvicorn reloads do not print each line twice.
    """
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL), logging.INFO)

    root = logging.getLogger()
    root.setLevel(resolved_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.addFilter(ContextFilter())
    root.addHandler(handler)
    root.addFilter(ContextFilter())


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def request_logger(logger: logging.Logger, request_id: str) -> logging.LoggerAdapter:
    """Tag everything logged through the adapter with one generation's id."""
    return logging.LoggerAdapter(logger, {"request_id": request_id})

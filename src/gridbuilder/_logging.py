"""Call logging for the grid builder engine."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

F = TypeVar("F", bound=Callable[..., Any])

_LOG_DIR = os.environ.get("GRIDBUILDER_LOG_DIR", os.path.join(os.getcwd(), "logs"))
_LOG_FILE = os.path.join(_LOG_DIR, "gridbuilder.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _has_file_handler(logger: logging.Logger) -> bool:
    target = os.path.abspath(_LOG_FILE)
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )


def get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        _logger = logging.getLogger("gridbuilder.engine")
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        if not _has_file_handler(_logger):
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _summarize(value: Any) -> str:
    """Short, size-bounded description of an argument or result."""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return f"<{type(value).__name__} of {len(value)}>"
    if isinstance(value, BaseModel):
        return type(value).__name__
    return repr(value)


def _describe_call(fn: Callable[..., Any], args: tuple, kwargs: dict[str, Any]) -> str:
    parts = [_summarize(a) for a in args]
    parts += [f"{k}={_summarize(v)}" for k, v in kwargs.items()]
    return f"{fn.__qualname__}({', '.join(parts)})"


def log_grid_call(fn: F) -> F:
    """Decorator that logs engine calls, results and failures to the log file."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger()
        call = _describe_call(fn, args, kwargs)
        logger.info("CALL: %s", call)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            logger.error(
                "FAIL: %s -> %s: %s (%.3fs)",
                call, type(exc).__name__, exc, time.monotonic() - start,
            )
            raise

        count = len(result) if isinstance(result, (list, tuple, frozenset)) else 1
        logger.info("OK: %s -> %d items (%.3fs)", call, count, time.monotonic() - start)
        return result

    return wrapper  # type: ignore[return-value]

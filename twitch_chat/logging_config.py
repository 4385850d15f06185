"""
Console logging setup and error bookkeeping for the chat client.

``LoggerConfigurator`` installs a colorlog handler on the root logger. Every
error reported through ``log_structured_error`` is also counted per category
so a session that ends badly leaves a short recap in the log.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import Counter
from typing import Any

import colorlog

_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class ErrorAggregator:
    """Per-category error counts plus the latest occurrence of each category."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[str] = Counter()
        self._last: dict[str, dict[str, Any]] = {}
        self.started = time.monotonic()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        with self._lock:
            self._counts[error_type] += 1
            self._last[error_type] = {
                "timestamp": time.time(),
                "message": message,
                "context": dict(context or {}),
            }

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        """Return ``{category: {"total_count": n, "last_occurrence": entry}}``."""
        with self._lock:
            return {
                kind: {"total_count": count, "last_occurrence": self._last[kind]}
                for kind, count in self._counts.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._last.clear()
            self.started = time.monotonic()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("No chat client errors this run")
            return
        minutes = (time.monotonic() - self.started) / 60
        logging.warning("🚨 Chat client errors after %.1f min:", minutes)
        for kind, stats in sorted(summary.items()):
            logging.warning(
                "  %s x%d, last: %s",
                kind,
                stats["total_count"],
                stats["last_occurrence"]["message"],
            )


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``[CATEGORY] message | Exception: ... | Context: k=v`` and count it."""
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))
    error_aggregator.record_error(error_type, message, context)


class LoggerConfigurator:
    """Sets up colored console output on the root logger.

    DEBUG is used when ``debug`` is set or ``$DEBUG`` is one of
    'true', '1' or 'yes'; INFO otherwise.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def resolve_level(self) -> int:
        env_debug = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")
        return logging.DEBUG if self.debug or env_debug else logging.INFO

    def configure(self) -> int:
        level = self.resolve_level()
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
                datefmt="%H:%M:%S",
                log_colors=_LOG_COLORS,
                secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
                reset=True,
            )
        )
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)
        atexit.register(error_aggregator.log_summary_report)
        return level

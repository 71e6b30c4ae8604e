"""
reactrole.services.error_reporter — Operator-Facing Error Sink
===============================================================

Every :class:`~reactrole.errors.PlatformError` that a handler swallows is
passed here.  The reporter writes one WARNING log line and keeps the report
in a thread-safe ring buffer so the most recent failures can be inspected
from a REPL or a future status command.

No persistence — reports are lost on restart.  ``report()`` never raises:
a broken sink must not fail the event handler that called it.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500


class ErrorReport:
    """One reported failure."""
    __slots__ = ("timestamp", "operation", "message", "context")

    def __init__(self, timestamp: str, operation: str, message: str, context: dict[str, Any]):
        self.timestamp = timestamp
        self.operation = operation
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "message": self.message,
            "context": dict(self.context),
        }


class ErrorReporter:
    """Logs platform failures and remembers the last *capacity* of them."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._reports: deque[ErrorReport] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._total = 0

    def report(self, operation: str, exc: BaseException, **context: Any) -> None:
        """Record that *operation* failed with *exc*.

        Extra keyword arguments (``user_id=…``, ``emoji=…``) are kept as
        structured context and appended to the log line.
        """
        try:
            entry = ErrorReport(
                timestamp=datetime.now(UTC).isoformat(),
                operation=operation,
                message=str(exc),
                context=context,
            )
            with self._lock:
                self._reports.append(entry)
                self._total += 1

            details = " ".join(f"{k}={v}" for k, v in context.items())
            logger.warning(
                "%s failed: %s%s", operation, exc, f" ({details})" if details else "",
                extra={"operation": operation, **{f"ctx_{k}": v for k, v in context.items()}},
            )
        except Exception:
            logger.exception("Error reporter failed while reporting %s", operation)

    def recent(self, tail: int = 50) -> list[dict[str, Any]]:
        """Return the most recent *tail* reports, oldest first."""
        with self._lock:
            snapshot = list(self._reports)
        if tail and len(snapshot) > tail:
            snapshot = snapshot[-tail:]
        return [r.to_dict() for r in snapshot]

    @property
    def count(self) -> int:
        """Total number of reports since startup (including evicted ones)."""
        with self._lock:
            return self._total

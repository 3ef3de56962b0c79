"""Per-request API call and timing statistics."""

import time
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class UsageTracker:
    """
    Counts outbound API calls and measures elapsed time for one request.

    A tracker belongs to exactly one request and is passed explicitly to
    every repository call made on its behalf.
    """

    def __init__(self):
        self.api_calls = 0
        self.calls_by_operation: Dict[str, int] = {}
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None

    def record_call(self, operation: str) -> None:
        """Count one outbound call."""
        self.api_calls += 1
        self.calls_by_operation[operation] = self.calls_by_operation.get(operation, 0) + 1
        logger.debug(f"API call #{self.api_calls}: {operation}")

    def start(self) -> "UsageTracker":
        self._started_at = time.perf_counter()
        self._stopped_at = None
        return self

    def stop(self) -> None:
        if self._started_at is not None and self._stopped_at is None:
            self._stopped_at = time.perf_counter()

    @property
    def elapsed_milliseconds(self) -> int:
        """Elapsed time in whole milliseconds (up to now if still running)."""
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else time.perf_counter()
        return max(0, int((end - self._started_at) * 1000))

    def to_dict(self) -> Dict[str, object]:
        return {
            "api_calls": self.api_calls,
            "calls_by_operation": dict(self.calls_by_operation),
            "elapsed_milliseconds": self.elapsed_milliseconds,
        }

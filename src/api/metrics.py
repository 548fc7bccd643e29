"""Request counters served on ``/metrics``."""

import threading
from collections import Counter
from typing import Any, Dict, Optional


class MetricsService:
    """Counts handled requests per status code and tracks their latency.

    Fed by ``RequestLoggingMiddleware``; safe to update from worker threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def record_request(self, latency_ms: float, status_code: int) -> None:
        with self._lock:
            self._status_counts[status_code] += 1
            self._total_latency_ms += latency_ms
            if self._min_latency_ms is None or latency_ms < self._min_latency_ms:
                self._min_latency_ms = latency_ms
            self._max_latency_ms = max(self._max_latency_ms, latency_ms)

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of the counters.

        Latencies are in milliseconds and rounded to two decimals; all of
        them are 0 until the first request is recorded.
        """
        with self._lock:
            request_count = sum(self._status_counts.values())
            average = self._total_latency_ms / request_count if request_count else 0.0
            return {
                "request_count": request_count,
                "client_error_count": self._count_between(400, 500),
                "server_error_count": self._count_between(500, 600),
                "average_latency_ms": round(average, 2),
                "min_latency_ms": round(self._min_latency_ms or 0.0, 2),
                "max_latency_ms": round(self._max_latency_ms, 2),
            }

    def reset(self) -> None:
        with self._lock:
            self._status_counts: Counter = Counter()
            self._total_latency_ms = 0.0
            self._min_latency_ms: Optional[float] = None
            self._max_latency_ms = 0.0

    def _count_between(self, low: int, high: int) -> int:
        return sum(n for code, n in self._status_counts.items() if low <= code < high)


metrics_service = MetricsService()

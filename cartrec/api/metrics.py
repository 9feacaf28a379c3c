"""Metrics service for tracking API performance.

Singleton service to track suggestion requests, collaborator failures and
latency metrics.
"""

import threading
from typing import Dict


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking for suggestion requests.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize metrics counters."""
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._reset_counters()
        self._initialized = True

    def _reset_counters(self) -> None:
        self._request_count = 0
        self._suggestion_count = 0
        self._catalog_failures = 0
        self._history_failures = 0
        self._total_latency_ms = 0.0
        self._min_latency_ms = float('inf')
        self._max_latency_ms = 0.0

    def record_request(self, latency_ms: float, num_suggestions: int) -> None:
        """Record a completed suggestion request.

        Args:
            latency_ms: Latency in milliseconds
            num_suggestions: Number of suggestions returned
        """
        with self._lock:
            self._request_count += 1
            self._suggestion_count += num_suggestions
            self._total_latency_ms += latency_ms
            self._min_latency_ms = min(self._min_latency_ms, latency_ms)
            self._max_latency_ms = max(self._max_latency_ms, latency_ms)

    def record_catalog_failure(self) -> None:
        with self._lock:
            self._catalog_failures += 1

    def record_history_failure(self) -> None:
        with self._lock:
            self._history_failures += 1

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary with metrics including:
            - request_count: Completed suggestion requests
            - suggestion_count: Suggestions returned across all requests
            - catalog_failures: Requests that failed to read the catalog
            - history_failures: Requests served without purchase history
            - average_latency_ms: Average latency in milliseconds
            - min_latency_ms: Minimum latency observed
            - max_latency_ms: Maximum latency observed
        """
        with self._lock:
            avg_latency = (
                self._total_latency_ms / self._request_count
                if self._request_count > 0
                else 0.0
            )

            return {
                "request_count": self._request_count,
                "suggestion_count": self._suggestion_count,
                "catalog_failures": self._catalog_failures,
                "history_failures": self._history_failures,
                "average_latency_ms": round(avg_latency, 2),
                "min_latency_ms": round(self._min_latency_ms, 2) if self._min_latency_ms != float('inf') else 0.0,
                "max_latency_ms": round(self._max_latency_ms, 2),
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._reset_counters()


# Global singleton instance
metrics_service = MetricsService()

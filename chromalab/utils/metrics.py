"""
In-process counters and latency samples for the ChromaLab service.

Everything lives in one locked collector per process; `/v1/metrics`
serves `get_summary()` as JSON.
"""
import time
from collections import Counter, defaultdict
from threading import Lock
from typing import Any, Dict, List, Optional

import numpy as np

TIMING_SUFFIX = "_duration_ms"


class MetricsCollector:
    """Request, failure, cache and k-means counters plus per-operation timings."""

    def __init__(self):
        self._lock = Lock()
        self._counts: Counter = Counter()
        self._samples: Dict[str, List[float]] = defaultdict(list)
        self._started_at = time.time()

    def _bump(self, *names: str):
        with self._lock:
            for name in names:
                self._counts[name] += 1

    def increment_request_count(self, endpoint: str):
        self._bump("requests_total", f"requests_total_{endpoint}")

    def increment_failure_count(self, error_type: str):
        self._bump(f"failed_total_{error_type}")

    def increment_cache(self, hit: bool):
        self._bump("cache_hits_total" if hit else "cache_misses_total")

    def increment_convergence_warning(self):
        self._bump("kmeans_not_converged_total")

    def record_timing(self, operation: str, duration_ms: float):
        with self._lock:
            self._samples[operation + TIMING_SUFFIX].append(float(duration_ms))

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Summarize each timed operation.

        Percentiles interpolate linearly between the closest ranks, so five
        samples of 10..50 ms give p95 = 48.
        """
        with self._lock:
            snapshot = {name: list(values) for name, values in self._samples.items() if values}

        stats = {}
        for name, values in snapshot.items():
            arr = np.asarray(values, dtype=float)
            p50, p95 = np.percentile(arr, [50, 95])
            stats[name] = {
                "count": int(arr.size),
                "mean": float(arr.mean()),
                "min": float(arr.min()),
                "max": float(arr.max()),
                "p50": float(p50),
                "p95": float(p95),
            }
        return stats

    def get_uptime_seconds(self) -> float:
        return time.time() - self._started_at

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
        }

    def reset(self):
        with self._lock:
            self._counts.clear()
            self._samples.clear()
            self._started_at = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Process-wide collector, created on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    if _metrics is not None:
        _metrics.reset()

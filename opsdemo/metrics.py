import threading
import time

from prometheus_client import CollectorRegistry, Counter, Histogram


class RequestStats:
    """Request and error counters owned by one service instance.

    The plain integers back the JSON endpoints; every increment is mirrored
    into Prometheus collectors on a private registry so several apps can live
    in one process.
    """

    def __init__(self, service: str, registry: CollectorRegistry | None = None):
        self.service = service
        self.registry = registry or CollectorRegistry()
        self.started_at = time.monotonic()
        self._lock = threading.Lock()
        self._request_count = 0
        self._error_count = 0

        self.requests = Counter(
            "opsdemo_requests_total", "Total requests",
            ["service", "method", "status"], registry=self.registry,
        )
        self.errors = Counter(
            "opsdemo_errors_total", "Counted errors",
            ["service", "kind"], registry=self.registry,
        )
        self.latency = Histogram(
            "opsdemo_request_duration_seconds", "Request latency (s)",
            ["service"], buckets=(0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1, 2),
            registry=self.registry,
        )

    def record_request(self) -> int:
        """Count an inbound request and return its sequence number."""
        with self._lock:
            self._request_count += 1
            return self._request_count

    def record_errors(self, n: int, kind: str) -> None:
        if n <= 0:
            return
        with self._lock:
            self._error_count += n
        self.errors.labels(self.service, kind).inc(n)

    def observe(self, method: str, status: int, seconds: float) -> None:
        self.requests.labels(self.service, method, str(status)).inc()
        self.latency.labels(self.service).observe(seconds)

    @property
    def request_count(self) -> int:
        with self._lock:
            return self._request_count

    @property
    def error_count(self) -> int:
        with self._lock:
            return self._error_count

    def snapshot(self) -> tuple[int, int]:
        with self._lock:
            return self._request_count, self._error_count

    def uptime(self) -> float:
        return time.monotonic() - self.started_at

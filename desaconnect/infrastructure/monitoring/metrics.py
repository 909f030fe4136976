"""Prometheus metrics for the DesaConnect API.

Operational metrics only: request volume and latency plus two domain
counters (submissions created, admin authorization decisions). Each
collector owns its registry so tests can build isolated instances.
"""

import os
import threading

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# Request duration buckets, 10ms to 10s
DEFAULT_HISTOGRAM_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class MetricsCollector:
    """Collects and manages Prometheus metrics.

    Attributes:
        http_request_duration_seconds: Histogram for request latency.
        http_requests_total: Counter for all HTTP requests.
        submissions_created_total: Counter for accepted submissions.
        admin_authorization_checks_total: Counter of authorization decisions.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "desaconnect-api")

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            documentation="HTTP request duration in seconds",
            labelnames=["service", "environment", "method", "endpoint"],
            buckets=DEFAULT_HISTOGRAM_BUCKETS,
            registry=self._registry,
        )

        self.http_requests_total = Counter(
            name="http_requests_total",
            documentation="Total HTTP requests",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )

        self.submissions_created_total = Counter(
            name="submissions_created_total",
            documentation="Total citizen submissions accepted",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        # result: hit (served from cache), granted, denied, error
        self.admin_authorization_checks_total = Counter(
            name="admin_authorization_checks_total",
            documentation="Admin authorization decisions by outcome",
            labelnames=["service", "environment", "result"],
            registry=self._registry,
        )

    def observe_request_duration(
        self, method: str, endpoint: str, duration: float
    ) -> None:
        """Record a request duration observation.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: Route template or request path.
            duration: Request duration in seconds.
        """
        self.http_request_duration_seconds.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
        ).observe(duration)

    def increment_requests(self, method: str, endpoint: str, status: str) -> None:
        """Increment total requests counter.

        Args:
            method: HTTP method.
            endpoint: Route template or request path.
            status: HTTP status code as string.
        """
        self.http_requests_total.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
            status=status,
        ).inc()

    def increment_submissions_created(self) -> None:
        """Count one accepted submission."""
        self.submissions_created_total.labels(
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_authorization_check(self, result: str) -> None:
        """Count one admin authorization decision.

        Args:
            result: hit, granted, denied or error.
        """
        self.admin_authorization_checks_total.labels(
            service=self._service_name,
            environment=self._environment,
            result=result,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the singleton MetricsCollector instance (thread-safe)."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format."""
    return generate_latest(get_metrics_collector().get_registry())


def reset_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None

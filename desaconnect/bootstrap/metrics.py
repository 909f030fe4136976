"""Bootstrap wiring for operational metrics."""

from __future__ import annotations

from desaconnect.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    MetricsCollector,
    generate_metrics,
    get_metrics_collector as get_infra_metrics_collector,
    reset_metrics_collector,
)


class PrometheusMetricsExporter:
    """Renders the collector registry in Prometheus exposition format."""

    @property
    def content_type(self) -> str:
        return METRICS_CONTENT_TYPE

    def generate_metrics(self) -> bytes:
        return generate_metrics()


_metrics_exporter: PrometheusMetricsExporter | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the metrics collector instance."""
    return get_infra_metrics_collector()


def get_metrics_exporter() -> PrometheusMetricsExporter:
    """Get the metrics exporter instance."""
    global _metrics_exporter
    if _metrics_exporter is None:
        _metrics_exporter = PrometheusMetricsExporter()
    return _metrics_exporter


def reset_metrics() -> None:
    """Reset metrics singletons (testing cleanup)."""
    global _metrics_exporter
    _metrics_exporter = None
    reset_metrics_collector()

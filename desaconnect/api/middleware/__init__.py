"""HTTP middleware."""

from desaconnect.api.middleware.logging_middleware import (
    CORRELATION_HEADER,
    LoggingMiddleware,
)
from desaconnect.api.middleware.metrics_middleware import MetricsMiddleware

__all__: list[str] = ["CORRELATION_HEADER", "LoggingMiddleware", "MetricsMiddleware"]

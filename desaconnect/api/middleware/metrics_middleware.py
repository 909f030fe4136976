"""Metrics middleware recording HTTP request volume and latency."""

import time
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from desaconnect.bootstrap.metrics import get_metrics_collector


def _endpoint_label(request: Request) -> str:
    """Route template (e.g. /v1/submissions/{reference_id}) or raw path.

    Templates keep reference codes and ids out of metric labels.
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records duration and count of every request, labelled by status."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        collector = get_metrics_collector()
        endpoint = _endpoint_label(request)
        collector.observe_request_duration(
            method=request.method, endpoint=endpoint, duration=duration
        )
        collector.increment_requests(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        )
        return response

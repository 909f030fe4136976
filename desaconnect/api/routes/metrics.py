"""Metrics endpoint for Prometheus scraping.

Exposes operational metrics in Prometheus exposition format.
"""

from fastapi import APIRouter, Response

from desaconnect.bootstrap.metrics import get_metrics_exporter

router = APIRouter(prefix="/v1", tags=["metrics"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    description="Returns operational metrics in Prometheus exposition format for scraping.",
    response_class=Response,
    responses={
        200: {
            "description": "Metrics in Prometheus format",
            "content": {"text/plain": {}},
        }
    },
)
async def get_metrics() -> Response:
    """Get operational metrics in Prometheus format.

    Note:
        Exposes request volume and latency, submissions created and admin
        authorization decisions. No submission content is ever exported.
    """
    exporter = get_metrics_exporter()
    metrics_output = exporter.generate_metrics()
    return Response(
        content=metrics_output,
        media_type=exporter.content_type,
    )

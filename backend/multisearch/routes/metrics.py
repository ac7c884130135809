"""
Prometheus metrics endpoint.

GET /metrics
Exposes HTTP, translation cache/provider and suggestion metrics.
"""
from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from multisearch.core.logging import get_logger
from multisearch.core.metrics import get_metrics, get_metrics_content_type

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_class=PlainTextResponse)
async def metrics():
    """Metrics in Prometheus text format (no authentication)."""
    try:
        payload = get_metrics()
    except Exception as e:
        logger.error(
            "metrics_collection_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        payload = b"# Error collecting metrics\n"

    return Response(content=payload, media_type=get_metrics_content_type())

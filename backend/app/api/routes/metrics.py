"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - generations_total{kind, outcome}
    - generation_latency_ms{kind, outcome}
    - rate_limit_rejections_total{bucket}
    - geocode_lookups_total{provider, outcome}
    - geocode_cache_hits_total
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

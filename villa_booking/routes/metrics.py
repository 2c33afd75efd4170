"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP villa_quotes_total Total number of quote requests
        # TYPE villa_quotes_total counter
        villa_quotes_total{status="success"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Metrics of this process in Prometheus text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

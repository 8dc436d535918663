"""
HTTP performance monitoring.
"""

import time
from typing import Callable

import structlog
from fastapi import Request

from app.core.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)

logger = structlog.get_logger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 1000


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded (/stores/{slug}, not /stores/loja-x)
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


async def track_http_metrics(request: Request, call_next: Callable):
    """
    Middleware to track HTTP metrics.

    Records:
    - Request count by endpoint and status
    - Request duration histogram
    - Requests in progress gauge
    """
    method = request.method
    in_progress_endpoint = request.url.path

    http_requests_in_progress.labels(method=method, endpoint=in_progress_endpoint).inc()
    start_time = time.time()

    try:
        response = await call_next(request)

        duration = time.time() - start_time
        endpoint = _endpoint_label(request)

        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)
        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        if duration * 1000 > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                "slow_request_detected",
                method=method,
                endpoint=endpoint,
                duration_ms=round(duration * 1000, 2),
            )

        return response

    finally:
        http_requests_in_progress.labels(method=method, endpoint=in_progress_endpoint).dec()

"""
Prometheus metrics for monitoring.

Metrics collected:
- HTTP request duration, count and in-flight requests
- Store provisioning runs and per-step failures
- Sign-in attempts by credential source
- Contract extensions and expirations
"""

import time
from functools import wraps

from prometheus_client import Counter, Gauge, Histogram, Info

from app.config import settings

# Application info
app_info = Info("multiloja_app", "Multiloja application information")
app_info.info({
    "version": settings.app_version,
    "environment": settings.environment,
})

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
)

# Background task metrics
task_duration_seconds = Histogram(
    "task_duration_seconds",
    "Background task duration in seconds",
    ["task_name", "status"],
    buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0),
)

# Business metrics
tenants_provisioned_total = Counter(
    "tenants_provisioned_total",
    "Stores created by the provisioning workflow",
    ["mode"],  # real | demo
)

provisioning_step_failures_total = Counter(
    "provisioning_step_failures_total",
    "Provisioning steps that failed (fatal or skipped)",
    ["step"],
)

signins_total = Counter(
    "signins_total",
    "Sign-in attempts",
    ["source", "outcome"],  # source: local | backend; outcome: success | failure
)

contract_extensions_total = Counter(
    "contract_extensions_total",
    "Successful contract extensions",
)

contracts_expired_total = Counter(
    "contracts_expired_total",
    "Contracts marked expired by the status refresh",
)


def track_time(metric: Histogram, labels: dict = None):
    """
    Decorator to track async function execution time.

    Usage:
        @track_time(task_duration_seconds, {"task_name": "refresh", "status": "ok"})
        async def refresh():
            ...
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                if labels:
                    metric.labels(**labels).observe(duration)
                else:
                    metric.observe(duration)
        return wrapper
    return decorator

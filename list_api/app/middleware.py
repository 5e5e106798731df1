"""Metrics middleware for HTTP request instrumentation with trace correlation."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from list_api.infra.logging import clear_log_context
from list_api.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import FastAPI, Request, Response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect HTTP metrics, linked to the active trace through exemplars.

    Route path templates are used as the endpoint label to keep
    cardinality low. Each request starts with an empty log context.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        clear_log_context()
        method = request.method
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Process-Time"] = str(time.perf_counter() - start_time)
            return response
        finally:
            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            endpoint = getattr(route, "path", request.url.path)

            exemplar = None
            span = trace.get_current_span()
            if span and span.get_span_context().is_valid:
                exemplar = {"trace_id": format(span.get_span_context().trace_id, "032x")}

            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                duration, exemplar=exemplar
            )
            http_requests_total.labels(
                method=method, endpoint=endpoint, status=str(status_code)
            ).inc(exemplar=exemplar)


def configure_middleware(app: FastAPI) -> None:
    """Install middleware on ``app``."""
    app.add_middleware(MetricsMiddleware)

"""
Request context middleware.

Reuses X-Trace-ID (or X-Request-ID) from the caller or generates one, binds
trace_id, request_id and client_id into the log context, echoes the ids in
response headers and records HTTP metrics.
"""
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    new_correlation_id,
)
from .metrics import record_http_request
from .rate_limit import get_client_ip

logger = get_logger(__name__)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Attach trace/request ids to logs and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = (
            request.headers.get("X-Trace-ID") or
            request.headers.get("X-Request-ID") or
            new_correlation_id()
        )
        request_id = new_correlation_id()
        bind_request_context(trace_id, request_id, get_client_ip(request))

        start_time = time.time()
        request.state.start_time = start_time
        request.state.trace_id = trace_id
        logger.debug(
            "request_started",
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.time() - start_time
            record_http_request(request.method, request.url.path, 500, elapsed)
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=int(elapsed * 1000),
                exc_info=True,
            )
            raise
        else:
            elapsed = time.time() - start_time
            record_http_request(request.method, request.url.path, response.status_code, elapsed)
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                latency_ms=int(elapsed * 1000),
            )
            response.headers["X-Trace-ID"] = trace_id
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()

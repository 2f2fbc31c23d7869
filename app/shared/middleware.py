"""
Request middleware.

- TraceContextMiddleware binds the trace id and acting user for the request
  and echoes the trace id back in the ``x-trace-id`` response header.
- RequestLoggingMiddleware logs the start and completion of every request.

No business logic. Pure cross-cutting concern.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.shared.trace_context import (
    ANONYMOUS_USER,
    TRACE_ID_HEADER,
    USER_ID_HEADER,
    TraceContext,
    bind_trace_context,
    get_trace_context,
    reset_trace_context,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_500 = 500


def client_ip_address(request: Request) -> str:
    """Best-effort client address, honouring proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client:
        return request.client.host
    return "unknown"


class TraceContextMiddleware(BaseHTTPMiddleware):
    """Bind a TraceContext for the duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = TraceContext(
            trace_id=request.headers.get(TRACE_ID_HEADER) or uuid.uuid4().hex,
            user_id=request.headers.get(USER_ID_HEADER) or ANONYMOUS_USER,
        )
        request.state.trace_id = context.trace_id
        request.state.user_id = context.user_id

        token = bind_trace_context(context)
        try:
            response = await call_next(request)
        finally:
            reset_trace_context(token)

        response.headers[TRACE_ID_HEADER] = context.trace_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request start and completion with duration.

    Completion is logged at WARNING for 4xx/5xx responses, and always,
    even when the downstream application raised.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = get_trace_context()
        trace_id = context.trace_id if context else "-"
        user_id = context.user_id if context else ANONYMOUS_USER

        logger.info(
            "Request started - %s %s | TraceId: %s | UserId: %s | RemoteIP: %s",
            request.method,
            request.url.path,
            trace_id,
            user_id,
            client_ip_address(request),
        )

        started = time.perf_counter()
        status_code = HTTP_500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            level = logging.WARNING if status_code >= HTTP_400 else logging.INFO
            logger.log(
                level,
                "Request completed - %s %s | Status: %d | Duration: %.1fms | TraceId: %s | UserId: %s",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
                trace_id,
                user_id,
            )

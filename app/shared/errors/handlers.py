"""
Centralized error handlers for FastAPI.

Maps framework errors and anything that escapes typed Result handling
to the failure envelope. No stack traces or internal details are exposed
to clients. All error responses use ``Failure.to_dict``.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.failures import Failure, FailureCode
from app.shared.errors.responses import failure_response
from app.shared.trace_context import TRACE_ID_HEADER, get_trace_id

logger = logging.getLogger(__name__)

HTTP_500 = 500

SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "x-api-key",
        "x-auth-token",
        "authentication",
        "proxy-authorization",
    }
)

_STATUS_CODES: dict[int, FailureCode] = {
    401: FailureCode.UNAUTHORIZED,
    403: FailureCode.FORBIDDEN,
    404: FailureCode.NOT_FOUND,
    408: FailureCode.TIMEOUT,
}


def request_trace_id(request: Request) -> Optional[str]:
    """Return the trace id bound by the middleware for this request."""
    return getattr(request.state, "trace_id", None) or get_trace_id()


def extract_request_info(request: Request) -> dict[str, Any]:
    """Collect loggable request details. Sensitive headers are dropped."""
    info: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
    }
    if request.query_params:
        info["query"] = dict(request.query_params)
    headers = {
        name: value
        for name, value in request.headers.items()
        if name.lower() not in SENSITIVE_HEADERS
    }
    if headers:
        info["headers"] = headers
    return info


def _code_for_status(status_code: int) -> FailureCode:
    if status_code in _STATUS_CODES:
        return _STATUS_CODES[status_code]
    if status_code < HTTP_500:
        return FailureCode.INVALID_OPERATION
    return FailureCode.INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed headers, path parameters or bodies."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("Request validation failed: %s", errors)
        return failure_response(
            Failure(
                code=FailureCode.VALIDATION_ERROR,
                message="Request validation failed",
                trace_id=request_trace_id(request),
                data=jsonable_encoder(errors),
            )
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Unknown routes, wrong methods and explicit HTTP errors."""
        failure = Failure(
            code=_code_for_status(exc.status_code),
            message=str(exc.detail),
            trace_id=request_trace_id(request),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=failure.to_dict(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        trace_id = request_trace_id(request)
        logger.error(
            "Unhandled exception occurred - %s %s | TraceId: %s | ExceptionType: %s | RequestInfo: %s",
            request.method,
            request.url.path,
            trace_id,
            type(exc).__name__,
            extract_request_info(request),
            exc_info=exc,
        )
        failure = Failure(
            code=FailureCode.UNKNOWN,
            message="An unexpected error occurred",
            trace_id=trace_id,
            exception=exc,
        )
        headers = {TRACE_ID_HEADER: trace_id} if trace_id else None
        return JSONResponse(
            status_code=HTTP_500, content=failure.to_dict(), headers=headers
        )

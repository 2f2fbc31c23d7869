"""
Rate limiting configuration and setup.

Uses slowapi to enforce a default per-client rate limit on every endpoint.
The limit is checked by a router dependency, so it applies to exactly the
routes the router was included with. Protects against resource abuse.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.core.config import Settings
from app.domain.failures import Failure, FailureCode
from app.shared.errors.handlers import request_trace_id

HTTP_429 = 429


def build_limiter(settings: Settings) -> Limiter:
    """Create the limiter for one application instance.

    Args:
        settings: Application settings (limit string and on/off switch).
    """
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
        enabled=settings.rate_limit_enabled,
    )


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against the application's default limits.

    Raises:
        RateLimitExceeded: When the client is over its limit.
    """
    limiter: Limiter = request.app.state.limiter
    # in_middleware=True selects the default limits for undecorated routes
    limiter._check_request_limit(request, request.scope.get("endpoint"), True)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the failure envelope.

    Args:
        request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    failure = Failure(
        code=FailureCode.INVALID_OPERATION,
        message="Rate limit exceeded",
        trace_id=request_trace_id(request),
        data={"limit": str(exc.detail)},
    )
    return JSONResponse(status_code=HTTP_429, content=failure.to_dict())

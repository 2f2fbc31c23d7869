"""
Result to HTTP response adapter.

Turns a use case Result into a response: the success payload with a
2xx status, or the failure envelope with the mapped status.
This module does not log; failures are logged where they are produced.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.responses import Response

from app.domain.failures import Failure
from app.domain.result import Err, Result
from app.shared.errors.mapper import to_http_status

HTTP_200 = 200
HTTP_201 = 201
HTTP_204 = 204


def failure_response(failure: Failure) -> JSONResponse:
    """Build the JSON failure envelope for ``failure``."""
    return JSONResponse(
        status_code=to_http_status(failure.code),
        content=jsonable_encoder(failure.to_dict()),
    )


def to_response(
    result: Result[Any],
    status_code: int = HTTP_200,
    location: Optional[str] = None,
) -> Response:
    """Convert a Result into a response.

    Args:
        result: Outcome of a use case. On success its value is the
            payload (a Pydantic model, dataclass, or plain JSON data).
        status_code: Status for the success case. 204 sends no body.
        location: Value of the Location header on success, for 201.

    Returns:
        The response to send.
    """
    if isinstance(result, Err):
        return failure_response(result.error)

    headers = {"Location": location} if location else None
    if status_code == HTTP_204:
        return Response(status_code=HTTP_204, headers=headers)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(result.value, by_alias=True),
        headers=headers,
    )

"""
Failure code to HTTP status mapping.

Pure and total: any input, including codes this table does not know,
yields a status and never raises.
"""

from typing import Any

from app.domain.failures import FailureCode

DEFAULT_STATUS = 500

FAILURE_STATUS_CODES: dict[FailureCode, int] = {
    FailureCode.UNAUTHORIZED: 401,
    FailureCode.FORBIDDEN: 403,
    FailureCode.NOT_FOUND: 404,
    FailureCode.DUPLICATE_EMAIL: 409,
    FailureCode.DB_CONCURRENCY: 409,
    FailureCode.VALIDATION_ERROR: 400,
    FailureCode.INVALID_OPERATION: 400,
    FailureCode.INSUFFICIENT_STOCK: 400,
    FailureCode.TIMEOUT: 408,
    FailureCode.PAYMENT_FAILED: 402,
    FailureCode.DB_ERROR: 500,
    FailureCode.INTERNAL_SERVER_ERROR: 500,
    FailureCode.UNKNOWN: 500,
}


def to_http_status(code: Any) -> int:
    """Return the HTTP status for a failure code.

    Args:
        code: A FailureCode, its wire name (e.g. ``"DuplicateEmail"``),
            or anything else.

    Returns:
        The mapped status, or 500 for unrecognized input.
    """
    if isinstance(code, FailureCode):
        return FAILURE_STATUS_CODES.get(code, DEFAULT_STATUS)
    if isinstance(code, str):
        try:
            return FAILURE_STATUS_CODES.get(FailureCode(code), DEFAULT_STATUS)
        except ValueError:
            return DEFAULT_STATUS
    return DEFAULT_STATUS

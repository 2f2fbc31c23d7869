"""
Failure taxonomy shared by every layer.

A Failure is a typed error value. Lower layers return it instead of raising
for expected conditions; the interface layer maps its code to an HTTP status.
No framework imports allowed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class FailureCode(str, Enum):
    """Closed set of failure categories.

    Values are the wire names clients see in the ``code`` field.
    """

    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    DUPLICATE_EMAIL = "DuplicateEmail"
    DB_CONCURRENCY = "DbConcurrency"
    VALIDATION_ERROR = "ValidationError"
    INVALID_OPERATION = "InvalidOperation"
    TIMEOUT = "Timeout"
    DB_ERROR = "DbError"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    UNKNOWN = "Unknown"
    INSUFFICIENT_STOCK = "InsufficientStock"
    PAYMENT_FAILED = "PaymentFailed"


@dataclass(frozen=True)
class Failure:
    """A failed outcome.

    Attributes:
        code: Failure category.
        message: Human-readable description.
        trace_id: Correlation id of the request that produced the failure.
        data: Optional structured payload, must be JSON-serializable.
        exception: Original exception, kept in-process for logging only.
    """

    code: FailureCode
    message: str
    trace_id: Optional[str] = None
    data: Any = None
    exception: Optional[BaseException] = field(
        default=None, repr=False, compare=False
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the client-facing representation.

        The captured exception is never included.
        """
        body: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "traceId": self.trace_id,
        }
        if self.data is not None:
            body["data"] = self.data
        return body

"""
Input validation for member use cases.

Each check returns a ValidationError Failure, or None when the input is
acceptable. Checks run before any data access.
"""

import uuid
from typing import Optional

from app.domain.failures import Failure, FailureCode
from app.domain.members.entities import (
    AGE_MAX,
    AGE_MIN,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
)
from app.domain.pagination import MAX_SEQUENCE_ID
from app.shared.trace_context import get_trace_id

DEFAULT_MAX_PAGE_SIZE = 100
MAX_OFFSET = MAX_SEQUENCE_ID


def validation_failure(field: str, message: str) -> Failure:
    return Failure(
        code=FailureCode.VALIDATION_ERROR,
        message=message,
        trace_id=get_trace_id(),
        data={"field": field},
    )


def validate_member_id(member_id: str) -> Optional[Failure]:
    try:
        uuid.UUID(str(member_id))
    except ValueError:
        return validation_failure("id", "Member id must be a UUID")
    return None


def validate_member_fields(
    name: Optional[str], email: Optional[str], age: Optional[int]
) -> Optional[Failure]:
    """Check required fields and bounds of a member's editable data."""
    if name is None or not name.strip():
        return validation_failure("name", "Name must not be empty")
    if len(name) > NAME_MAX_LENGTH:
        return validation_failure(
            "name", f"Name must be at most {NAME_MAX_LENGTH} characters"
        )
    if email is None or not email.strip():
        return validation_failure("email", "Email must not be empty")
    if "@" not in email or len(email) > EMAIL_MAX_LENGTH:
        return validation_failure("email", "Email is not a valid address")
    if age is not None and not AGE_MIN <= age <= AGE_MAX:
        return validation_failure(
            "age", f"Age must be between {AGE_MIN} and {AGE_MAX}"
        )
    return None


def validate_page_size(
    page_size: int, max_page_size: int = DEFAULT_MAX_PAGE_SIZE
) -> Optional[Failure]:
    if not 1 <= page_size <= max_page_size:
        return validation_failure(
            "pageSize", f"Page size must be between 1 and {max_page_size}"
        )
    return None


def validate_page_index(page_index: int, page_size: int = 1) -> Optional[Failure]:
    """Check the index, and that the offset it implies fits the store."""
    if page_index < 0:
        return validation_failure("pageIndex", "Page index must be >= 0")
    if page_index * max(page_size, 1) > MAX_OFFSET:
        return validation_failure("pageIndex", "Page index is out of range")
    return None

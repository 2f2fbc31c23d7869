"""
Pydantic schemas for the members API.

Field names are snake_case in Python and camelCase on the wire.
These schemas define the API contract; business rules are enforced
by the use cases, so a request that passes here can still be refused.
"""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.application.members.dtos import MemberResult
from app.domain.members.entities import AGE_MAX, AGE_MIN, NAME_MAX_LENGTH
from app.domain.pagination import CursorPage, OffsetPage

ItemT = TypeVar("ItemT")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MemberWriteRequest(CamelModel):
    """Editable fields of a member.

    Attributes:
        name: Display name (1-20 characters).
        email: Contact email address.
        age: Optional age in years (0-150).
    """

    name: str = Field(..., max_length=NAME_MAX_LENGTH, description="Display name")
    email: str = Field(..., description="Contact email address")
    age: Optional[int] = Field(
        default=None, ge=AGE_MIN, le=AGE_MAX, description="Age in years"
    )


class CreateMemberRequest(MemberWriteRequest):
    """Request schema for registering a member."""


class UpdateMemberRequest(MemberWriteRequest):
    """Request schema for replacing a member's editable fields."""


class MemberResponse(CamelModel):
    """A member as returned by the API. The internal sequence is never exposed."""

    id: str
    name: str
    email: str
    age: Optional[int] = None
    created_at: datetime
    created_by: str
    changed_at: datetime
    changed_by: str

    @classmethod
    def from_result(cls, member: MemberResult) -> "MemberResponse":
        return cls(
            id=member.id,
            name=member.name,
            email=member.email,
            age=member.age,
            created_at=member.created_at,
            created_by=member.created_by,
            changed_at=member.changed_at,
            changed_by=member.changed_by,
        )


class OffsetPageResponse(CamelModel, Generic[ItemT]):
    """One offset page with its navigation metadata."""

    items: list[ItemT]
    page_index: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool


class CursorPageResponse(CamelModel, Generic[ItemT]):
    """One cursor page. ``next_page_token`` is null on the last page."""

    items: list[ItemT]
    next_page_token: Optional[str] = None
    previous_page_token: Optional[str] = None
    has_next_page: bool


def member_offset_page(page: OffsetPage[MemberResult]) -> OffsetPageResponse[MemberResponse]:
    return OffsetPageResponse[MemberResponse](
        items=[MemberResponse.from_result(item) for item in page.items],
        page_index=page.page_index,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
        has_previous_page=page.has_previous_page,
        has_next_page=page.has_next_page,
    )


def member_cursor_page(page: CursorPage[MemberResult]) -> CursorPageResponse[MemberResponse]:
    return CursorPageResponse[MemberResponse](
        items=[MemberResponse.from_result(item) for item in page.items],
        next_page_token=page.next_page_token,
        previous_page_token=page.previous_page_token,
        has_next_page=page.has_next_page,
    )


class FailureResponse(CamelModel):
    """Failure envelope returned by every non-2xx response."""

    code: str
    message: str
    trace_id: Optional[str] = None
    data: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str

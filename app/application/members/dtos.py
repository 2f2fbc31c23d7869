"""
Data Transfer Objects for the members application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior. Output DTOs never carry
the store-assigned sequence number.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.members.entities import Member


@dataclass(frozen=True)
class CreateMemberCommand:
    """Input DTO for registering a member.

    Attributes:
        name: Display name (1-20 characters).
        email: Contact email; unique across members.
        age: Optional age in years.
    """

    name: str
    email: str
    age: Optional[int] = None


@dataclass(frozen=True)
class UpdateMemberCommand:
    """Input DTO for replacing a member's editable fields.

    Attributes:
        member_id: Public identifier of the member to change.
        name: New display name.
        email: New email; must not belong to another member.
        age: New age, or None to clear it.
    """

    member_id: str
    name: str
    email: str
    age: Optional[int] = None


@dataclass(frozen=True)
class ListMembersQuery:
    """Input DTO for an offset page.

    Attributes:
        page_index: Zero-based page index.
        page_size: Number of members per page.
        no_cache: Bypass the page cache.
    """

    page_index: int = 0
    page_size: int = 10
    no_cache: bool = False


@dataclass(frozen=True)
class ListMembersCursorQuery:
    """Input DTO for a cursor page.

    Attributes:
        page_size: Number of members per page.
        next_page_token: Opaque token from the previous page, None for the first.

    Cursor pages are never cached, so there is no cache flag.
    """

    page_size: int = 10
    next_page_token: Optional[str] = None


@dataclass(frozen=True)
class MemberResult:
    """Output DTO for a member."""

    id: str
    name: str
    email: str
    age: Optional[int]
    created_at: datetime
    created_by: str
    changed_at: datetime
    changed_by: str

    @classmethod
    def from_entity(cls, member: Member) -> "MemberResult":
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

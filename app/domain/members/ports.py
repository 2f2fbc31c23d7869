"""
Port interfaces for the members bounded context.

The domain layer never depends on concrete implementations.
"""

from abc import abstractmethod
from typing import Optional

from app.domain.members.entities import Member
from app.domain.ports import EntityRepository
from app.domain.result import Result


class MemberRepository(EntityRepository[Member]):
    """Port for persisting and querying members."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Result[Optional[Member]]:
        """Return the member owning ``email``, or Ok(None)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_name(self, name: str) -> Result[Optional[Member]]:
        """Return the first member named ``name``, or Ok(None)."""
        raise NotImplementedError

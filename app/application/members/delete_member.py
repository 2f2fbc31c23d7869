"""
Use case: Remove a member.

Input: member id (UUID string)
Output: Result[None]
Side effects: Deletes one row.
Failure cases: ValidationError (malformed id), NotFound, DbError.
"""

import logging

from app.application.members.validation import validate_member_id
from app.domain.members.ports import MemberRepository
from app.domain.result import Err, Result

logger = logging.getLogger(__name__)


class DeleteMemberUseCase:
    """Checks that the member exists, then deletes it."""

    def __init__(self, member_repo: MemberRepository) -> None:
        self._member_repo = member_repo

    async def execute(self, member_id: str) -> Result[None]:
        failure = validate_member_id(member_id)
        if failure is not None:
            return Err(failure)

        existing = await self._member_repo.get_by_id(member_id)
        if isinstance(existing, Err):
            return existing

        deleted = await self._member_repo.delete(member_id)
        if isinstance(deleted, Err):
            return deleted
        logger.info("Member %s deleted", member_id)
        return deleted

"""
Use case: Retrieve one member by id.

Input: member id (UUID string)
Output: Result[MemberResult]
Side effects: None (read-only query).
Failure cases: ValidationError (malformed id), NotFound, DbError.
"""

from app.application.members.dtos import MemberResult
from app.application.members.validation import validate_member_id
from app.domain.members.ports import MemberRepository
from app.domain.result import Err, Ok, Result


class GetMemberUseCase:
    """Fetches a single member and maps it to its output DTO."""

    def __init__(self, member_repo: MemberRepository) -> None:
        self._member_repo = member_repo

    async def execute(self, member_id: str) -> Result[MemberResult]:
        failure = validate_member_id(member_id)
        if failure is not None:
            return Err(failure)

        found = await self._member_repo.get_by_id(member_id)
        if isinstance(found, Err):
            return found
        return Ok(MemberResult.from_entity(found.value))

"""
Use case: Replace a member's editable fields.

Input: UpdateMemberCommand (member_id, name, email, optional age)
Output: Result[MemberResult]
Side effects: Updates one row; refreshes changed_at / changed_by.
Failure cases:
    - ValidationError: malformed id or fields.
    - NotFound: no member with that id.
    - DuplicateEmail: the new email belongs to another member.
    - DbConcurrency: the row changed between read and write.
    - DbError: propagated unchanged from the repository.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from app.application.members.dtos import MemberResult, UpdateMemberCommand
from app.application.members.validation import (
    validate_member_fields,
    validate_member_id,
)
from app.domain.failures import Failure, FailureCode
from app.domain.members.ports import MemberRepository
from app.domain.result import Err, Ok, Result
from app.shared.providers import utc_now
from app.shared.trace_context import get_trace_id, get_user_id

logger = logging.getLogger(__name__)


class UpdateMemberUseCase:
    """Orchestrates updating an existing member."""

    def __init__(
        self,
        member_repo: MemberRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._member_repo = member_repo
        self._clock = clock

    async def execute(self, command: UpdateMemberCommand) -> Result[MemberResult]:
        failure = validate_member_id(command.member_id) or validate_member_fields(
            command.name, command.email, command.age
        )
        if failure is not None:
            return Err(failure)

        existing = await self._member_repo.get_by_id(command.member_id)
        if isinstance(existing, Err):
            return existing
        member = existing.value

        if command.email != member.email:
            by_email = await self._member_repo.find_by_email(command.email)
            if isinstance(by_email, Err):
                return by_email
            if by_email.value is not None and by_email.value.id != member.id:
                logger.info("Update member rejected: duplicate email")
                return Err(
                    Failure(
                        code=FailureCode.DUPLICATE_EMAIL,
                        message="Email is already registered",
                        trace_id=get_trace_id(),
                        data={"id": by_email.value.id, "email": by_email.value.email},
                    )
                )

        changed = replace(
            member,
            name=command.name,
            email=command.email,
            age=command.age,
            changed_at=self._clock(),
            changed_by=get_user_id(),
        )
        updated = await self._member_repo.update(changed)
        if isinstance(updated, Err):
            return updated
        return Ok(MemberResult.from_entity(updated.value))

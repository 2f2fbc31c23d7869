"""
Use case: Register a new member.

Input: CreateMemberCommand (name, email, optional age)
Output: Result[MemberResult]
Side effects: Inserts one row into the member store.
Failure cases:
    - ValidationError: missing/invalid fields, or the name is already in use.
    - DuplicateEmail: another member owns the email.
    - DbError: propagated unchanged from the repository.
"""

import logging
from datetime import datetime
from typing import Callable

from app.application.members.dtos import CreateMemberCommand, MemberResult
from app.application.members.validation import (
    validate_member_fields,
    validation_failure,
)
from app.domain.failures import Failure, FailureCode
from app.domain.members.entities import Member
from app.domain.members.ports import MemberRepository
from app.domain.result import Err, Ok, Result
from app.shared.providers import new_uuid, utc_now
from app.shared.trace_context import get_trace_id, get_user_id

logger = logging.getLogger(__name__)


class CreateMemberUseCase:
    """Orchestrates member registration.

    Validates the command, rejects duplicate emails and names, then
    stamps identity and audit fields and delegates the insert.
    """

    def __init__(
        self,
        member_repo: MemberRepository,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_uuid,
    ) -> None:
        """Initialize the use case.

        Args:
            member_repo: Repository for persisting members.
            clock: Source of the current UTC time.
            id_factory: Source of new public member identifiers.
        """
        self._member_repo = member_repo
        self._clock = clock
        self._id_factory = id_factory

    async def execute(self, command: CreateMemberCommand) -> Result[MemberResult]:
        """Run the create member use case.

        Args:
            command: Fields of the new member.

        Returns:
            Ok with the stored member, or Err with the reason it was refused.
        """
        failure = validate_member_fields(command.name, command.email, command.age)
        if failure is not None:
            logger.info("Create member rejected: %s", failure.message)
            return Err(failure)

        by_email = await self._member_repo.find_by_email(command.email)
        if isinstance(by_email, Err):
            return by_email
        if by_email.value is not None:
            logger.info("Create member rejected: duplicate email")
            return Err(
                Failure(
                    code=FailureCode.DUPLICATE_EMAIL,
                    message="Email is already registered",
                    trace_id=get_trace_id(),
                    data={"id": by_email.value.id, "email": by_email.value.email},
                )
            )

        by_name = await self._member_repo.find_by_name(command.name)
        if isinstance(by_name, Err):
            return by_name
        if by_name.value is not None:
            logger.info("Create member rejected: duplicate name")
            return Err(validation_failure("name", "Name is already in use"))

        now = self._clock()
        user_id = get_user_id()
        member = Member(
            id=self._id_factory(),
            name=command.name,
            email=command.email,
            age=command.age,
            created_at=now,
            created_by=user_id,
            changed_at=now,
            changed_by=user_id,
        )

        inserted = await self._member_repo.insert(member)
        if isinstance(inserted, Err):
            return inserted
        return Ok(MemberResult.from_entity(inserted.value))

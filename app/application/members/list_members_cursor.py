"""
Use case: List members by cursor.

Input: ListMembersCursorQuery (page_size, next_page_token)
Output: Result[CursorPage[MemberResult]]
Side effects: None (read-only query, never cached).
Failure cases:
    - ValidationError: size out of bounds, or a token that does not decode.
      A bad token never falls back to the first page.
    - DbError: propagated unchanged from the repository.
"""

import logging

from app.application.members.dtos import ListMembersCursorQuery, MemberResult
from app.application.members.validation import (
    DEFAULT_MAX_PAGE_SIZE,
    validate_page_size,
    validation_failure,
)
from app.domain.members.ports import MemberRepository
from app.domain.pagination import (
    CursorPage,
    InvalidCursorTokenError,
    decode_cursor_token,
)
from app.domain.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class ListMembersCursorUseCase:
    """Orchestrates cursor pagination over members."""

    def __init__(
        self,
        member_repo: MemberRepository,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self._member_repo = member_repo
        self._max_page_size = max_page_size

    async def execute(
        self, query: ListMembersCursorQuery
    ) -> Result[CursorPage[MemberResult]]:
        """Run the cursor listing use case.

        Args:
            query: Page size and the token returned by the previous page.

        Returns:
            Ok with the page and the token of the next one, or Err.
        """
        failure = validate_page_size(query.page_size, self._max_page_size)
        if failure is not None:
            return Err(failure)

        after = None
        if query.next_page_token is not None:
            try:
                after = decode_cursor_token(query.next_page_token)
            except InvalidCursorTokenError as exc:
                logger.info("Rejected cursor token: %s", exc.reason)
                return Err(
                    validation_failure("nextPageToken", "Next page token is malformed")
                )

        page = await self._member_repo.get_cursor_page(query.page_size, after)
        if isinstance(page, Err):
            return page
        return Ok(page.value.map(MemberResult.from_entity))

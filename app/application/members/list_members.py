"""
Use case: List members one offset page at a time.

Input: ListMembersQuery (page_index, page_size, no_cache)
Output: Result[OffsetPage[MemberResult]]
Side effects: May populate the page cache.
Failure cases: ValidationError (index < 0, size out of bounds), DbError.
"""

import logging

from app.application.members.dtos import ListMembersQuery, MemberResult
from app.application.members.validation import (
    DEFAULT_MAX_PAGE_SIZE,
    validate_page_index,
    validate_page_size,
)
from app.domain.members.ports import MemberRepository
from app.domain.pagination import OffsetPage
from app.domain.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class ListMembersUseCase:
    """Orchestrates offset pagination over members."""

    def __init__(
        self,
        member_repo: MemberRepository,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        """Initialize the use case.

        Args:
            member_repo: Repository for reading members.
            max_page_size: Largest page size a caller may request.
        """
        self._member_repo = member_repo
        self._max_page_size = max_page_size

    async def execute(self, query: ListMembersQuery) -> Result[OffsetPage[MemberResult]]:
        """Run the list members use case.

        Args:
            query: Page index, page size and cache switch.

        Returns:
            Ok with the page of members, or Err.
        """
        failure = validate_page_index(
            query.page_index, query.page_size
        ) or validate_page_size(
            query.page_size, self._max_page_size
        )
        if failure is not None:
            return Err(failure)

        logger.info(
            "Listing members: page_index=%d, page_size=%d, no_cache=%s",
            query.page_index,
            query.page_size,
            query.no_cache,
        )
        page = await self._member_repo.get_offset_page(
            query.page_index, query.page_size, query.no_cache
        )
        if isinstance(page, Err):
            return page
        return Ok(page.value.map(MemberResult.from_entity))

"""
Dependency injection for the members bounded context.

Wires the repository adapter into use cases via constructor injection.
The engine, cache and settings are created once by ``create_app`` and
kept on ``app.state``; a repository is built per request on top of them.
"""

from fastapi import Depends, Request

from app.application.members.create_member import CreateMemberUseCase
from app.application.members.delete_member import DeleteMemberUseCase
from app.application.members.get_member import GetMemberUseCase
from app.application.members.list_members import ListMembersUseCase
from app.application.members.list_members_cursor import ListMembersCursorUseCase
from app.application.members.update_member import UpdateMemberUseCase
from app.core.config import Settings
from app.domain.members.ports import MemberRepository
from app.infrastructure.members.member_repository import SqlAlchemyMemberRepository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_member_repository(request: Request) -> MemberRepository:
    """Build the member repository on the application's engine and cache."""
    state = request.app.state
    return SqlAlchemyMemberRepository(
        engine=state.engine,
        cache=state.cache,
        cache_ttl_seconds=state.settings.cache_ttl_seconds,
    )


def get_create_member_use_case(
    repo: MemberRepository = Depends(get_member_repository),
) -> CreateMemberUseCase:
    return CreateMemberUseCase(member_repo=repo)


def get_get_member_use_case(
    repo: MemberRepository = Depends(get_member_repository),
) -> GetMemberUseCase:
    return GetMemberUseCase(member_repo=repo)


def get_list_members_use_case(
    repo: MemberRepository = Depends(get_member_repository),
    settings: Settings = Depends(get_app_settings),
) -> ListMembersUseCase:
    return ListMembersUseCase(member_repo=repo, max_page_size=settings.max_page_size)


def get_list_members_cursor_use_case(
    repo: MemberRepository = Depends(get_member_repository),
    settings: Settings = Depends(get_app_settings),
) -> ListMembersCursorUseCase:
    return ListMembersCursorUseCase(
        member_repo=repo, max_page_size=settings.max_page_size
    )


def get_update_member_use_case(
    repo: MemberRepository = Depends(get_member_repository),
) -> UpdateMemberUseCase:
    return UpdateMemberUseCase(member_repo=repo)


def get_delete_member_use_case(
    repo: MemberRepository = Depends(get_member_repository),
) -> DeleteMemberUseCase:
    return DeleteMemberUseCase(member_repo=repo)

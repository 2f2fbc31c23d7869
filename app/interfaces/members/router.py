"""
FastAPI router for the members bounded context.

All routes delegate to use cases and convert the returned Result with
``to_response``. Pagination parameters travel in request headers.
Error mapping is handled by the centralized failure mapper.
"""

from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Header, Request
from starlette.responses import Response

from app.application.members.create_member import CreateMemberUseCase
from app.application.members.delete_member import DeleteMemberUseCase
from app.application.members.dtos import (
    CreateMemberCommand,
    ListMembersCursorQuery,
    ListMembersQuery,
    UpdateMemberCommand,
)
from app.application.members.get_member import GetMemberUseCase
from app.application.members.list_members import ListMembersUseCase
from app.application.members.list_members_cursor import ListMembersCursorUseCase
from app.application.members.update_member import UpdateMemberUseCase
from app.core.config import Settings
from app.domain.result import Ok, Result
from app.interfaces.members.dependencies import (
    get_app_settings,
    get_create_member_use_case,
    get_delete_member_use_case,
    get_get_member_use_case,
    get_list_members_cursor_use_case,
    get_list_members_use_case,
    get_update_member_use_case,
)
from app.interfaces.members.schemas import (
    CreateMemberRequest,
    CursorPageResponse,
    FailureResponse,
    MemberResponse,
    OffsetPageResponse,
    UpdateMemberRequest,
    member_cursor_page,
    member_offset_page,
)
from app.shared.errors.responses import HTTP_201, HTTP_204, to_response

router = APIRouter(prefix="/members", tags=["members"])

NO_CACHE_DIRECTIVES = frozenset({"no-cache", "true"})

FAILURE_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": FailureResponse},
    404: {"model": FailureResponse},
    409: {"model": FailureResponse},
    500: {"model": FailureResponse},
}


def _map_ok(result: Result[Any], convert: Callable[[Any], Any]) -> Result[Any]:
    if isinstance(result, Ok):
        return Ok(convert(result.value))
    return result


def wants_no_cache(cache_control: Optional[str]) -> bool:
    """True when the Cache-Control header asks to bypass the page cache."""
    if not cache_control:
        return False
    directives = {part.strip().lower() for part in cache_control.split(",")}
    return not directives.isdisjoint(NO_CACHE_DIRECTIVES)


@router.get(
    "",
    response_model=OffsetPageResponse[MemberResponse],
    responses=FAILURE_RESPONSES,
    summary="List members",
    description="Return one offset page of members ordered by creation.",
)
async def list_members(
    page_index: int = Header(default=0, alias="x-page-index"),
    page_size: Optional[int] = Header(default=None, alias="x-page-size"),
    cache_control: Optional[str] = Header(default=None, alias="cache-control"),
    settings: Settings = Depends(get_app_settings),
    use_case: ListMembersUseCase = Depends(get_list_members_use_case),
) -> Response:
    query = ListMembersQuery(
        page_index=page_index,
        page_size=page_size if page_size is not None else settings.default_page_size,
        no_cache=wants_no_cache(cache_control),
    )
    result = await use_case.execute(query)
    return to_response(_map_ok(result, member_offset_page))


@router.get(
    ":cursor",
    response_model=CursorPageResponse[MemberResponse],
    responses=FAILURE_RESPONSES,
    summary="List members by cursor",
    description=(
        "Return the page after the position encoded in x-next-page-token. "
        "Omit the token for the first page."
    ),
)
async def list_members_cursor(
    page_size: Optional[int] = Header(default=None, alias="x-page-size"),
    next_page_token: Optional[str] = Header(default=None, alias="x-next-page-token"),
    settings: Settings = Depends(get_app_settings),
    use_case: ListMembersCursorUseCase = Depends(get_list_members_cursor_use_case),
) -> Response:
    query = ListMembersCursorQuery(
        page_size=page_size if page_size is not None else settings.default_page_size,
        next_page_token=next_page_token or None,
    )
    result = await use_case.execute(query)
    return to_response(_map_ok(result, member_cursor_page))


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    responses=FAILURE_RESPONSES,
    summary="Get a member",
)
async def get_member(
    member_id: str,
    use_case: GetMemberUseCase = Depends(get_get_member_use_case),
) -> Response:
    result = await use_case.execute(member_id)
    return to_response(_map_ok(result, MemberResponse.from_result))


@router.post(
    "",
    status_code=HTTP_201,
    response_model=MemberResponse,
    responses=FAILURE_RESPONSES,
    summary="Create a member",
    description="Register a member. The Location header points at the new resource.",
)
async def create_member(
    request: Request,
    body: CreateMemberRequest,
    use_case: CreateMemberUseCase = Depends(get_create_member_use_case),
) -> Response:
    command = CreateMemberCommand(name=body.name, email=body.email, age=body.age)
    result = await use_case.execute(command)
    location = None
    if isinstance(result, Ok):
        location = f"{request.url.path.rstrip('/')}/{result.value.id}"
    return to_response(
        _map_ok(result, MemberResponse.from_result),
        status_code=HTTP_201,
        location=location,
    )


@router.put(
    "/{member_id}",
    response_model=MemberResponse,
    responses=FAILURE_RESPONSES,
    summary="Update a member",
)
async def update_member(
    member_id: str,
    body: UpdateMemberRequest,
    use_case: UpdateMemberUseCase = Depends(get_update_member_use_case),
) -> Response:
    command = UpdateMemberCommand(
        member_id=member_id, name=body.name, email=body.email, age=body.age
    )
    result = await use_case.execute(command)
    return to_response(_map_ok(result, MemberResponse.from_result))


@router.delete(
    "/{member_id}",
    status_code=HTTP_204,
    responses=FAILURE_RESPONSES,
    summary="Delete a member",
)
async def delete_member(
    member_id: str,
    use_case: DeleteMemberUseCase = Depends(get_delete_member_use_case),
) -> Response:
    result = await use_case.execute(member_id)
    return to_response(result, status_code=HTTP_204)

"""
Adapter: Member repository.

Implements the MemberRepository port on top of a SQLAlchemy async engine.
Offset pages are cached through a CacheProvider; cursor pages never are.
Every data-access exception is caught here and returned as a DbError
failure that keeps the original exception for logging.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.domain.failures import Failure, FailureCode
from app.domain.members.entities import Member
from app.domain.members.ports import MemberRepository
from app.domain.pagination import (
    CursorPage,
    CursorPosition,
    OffsetPage,
    build_cursor_page,
)
from app.domain.ports import CacheProvider
from app.domain.result import Err, Ok, Result
from app.infrastructure.database import members_table
from app.shared.trace_context import get_trace_id

logger = logging.getLogger(__name__)

OFFSET_CACHE_PREFIX = "members:offset:"
DEFAULT_CACHE_TTL_SECONDS = 300


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_member(row: Row) -> Member:
    data = row._mapping
    return Member(
        id=data["id"],
        name=data["name"],
        age=data["age"],
        email=data["email"],
        created_at=_as_utc(data["created_at"]),
        created_by=data["created_by"],
        changed_at=_as_utc(data["changed_at"]),
        changed_by=data["changed_by"],
        sequence_id=data["sequence_id"],
    )


def _member_to_cache(member: Member) -> dict[str, Any]:
    return {
        "id": member.id,
        "name": member.name,
        "age": member.age,
        "email": member.email,
        "createdAt": member.created_at.isoformat(),
        "createdBy": member.created_by,
        "changedAt": member.changed_at.isoformat(),
        "changedBy": member.changed_by,
        "sequenceId": member.sequence_id,
    }


def _member_from_cache(data: dict[str, Any]) -> Member:
    return Member(
        id=data["id"],
        name=data["name"],
        age=data["age"],
        email=data["email"],
        created_at=datetime.fromisoformat(data["createdAt"]),
        created_by=data["createdBy"],
        changed_at=datetime.fromisoformat(data["changedAt"]),
        changed_by=data["changedBy"],
        sequence_id=data["sequenceId"],
    )


def offset_cache_key(page_index: int, page_size: int) -> str:
    """Cache key of one offset page; includes every pagination parameter."""
    return f"{OFFSET_CACHE_PREFIX}{page_index}:{page_size}"


class SqlAlchemyMemberRepository(MemberRepository):
    """SQL implementation of the member repository.

    Each call checks a connection out of the engine's pool, so concurrent
    requests never share a connection.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        cache: Optional[CacheProvider] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._cache_ttl_seconds = cache_ttl_seconds

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> Result[Member]:
        query = select(members_table).where(members_table.c.id == entity_id)
        try:
            async with self._engine.connect() as conn:
                row = (await conn.execute(query)).first()
        except Exception as exc:
            return self._db_error("get_by_id", exc, member_id=entity_id)

        if row is None:
            return Err(
                Failure(
                    code=FailureCode.NOT_FOUND,
                    message=f"Member {entity_id} not found",
                    trace_id=get_trace_id(),
                )
            )
        return Ok(_row_to_member(row))

    async def find_by_email(self, email: str) -> Result[Optional[Member]]:
        return await self._find_one(members_table.c.email == email, "find_by_email")

    async def find_by_name(self, name: str) -> Result[Optional[Member]]:
        return await self._find_one(members_table.c.name == name, "find_by_name")

    async def get_offset_page(
        self, page_index: int, page_size: int, no_cache: bool = False
    ) -> Result[OffsetPage[Member]]:
        """Return one page ordered by sequence.

        ``no_cache`` skips the cache read; a fresh result still refreshes
        the cache entry.
        """
        key = offset_cache_key(page_index, page_size)
        if not no_cache:
            cached = await self._cache_get(key)
            if cached is not None:
                logger.debug("Offset page cache hit: %s", key)
                return Ok(
                    OffsetPage(
                        items=[_member_from_cache(item) for item in cached["items"]],
                        page_index=page_index,
                        page_size=page_size,
                        total_count=cached["totalCount"],
                    )
                )

        count_query = select(func.count()).select_from(members_table)
        page_query = (
            select(members_table)
            .order_by(members_table.c.sequence_id)
            .offset(page_index * page_size)
            .limit(page_size)
        )
        try:
            async with self._engine.connect() as conn:
                total_count = (await conn.execute(count_query)).scalar_one()
                rows = (await conn.execute(page_query)).all()
        except Exception as exc:
            return self._db_error(
                "get_offset_page", exc, page_index=page_index, page_size=page_size
            )

        page = OffsetPage(
            items=[_row_to_member(row) for row in rows],
            page_index=page_index,
            page_size=page_size,
            total_count=total_count,
        )
        await self._cache_set(
            key,
            {
                "items": [_member_to_cache(item) for item in page.items],
                "totalCount": page.total_count,
            },
        )
        return Ok(page)

    async def get_cursor_page(
        self, page_size: int, after: Optional[CursorPosition] = None
    ) -> Result[CursorPage[Member]]:
        """Return up to ``page_size`` members after ``after``.

        Fetches one extra row to learn whether a further page exists.
        """
        query = (
            select(members_table)
            .order_by(members_table.c.sequence_id)
            .limit(page_size + 1)
        )
        if after is not None:
            query = query.where(members_table.c.sequence_id > after.sequence_id)

        try:
            async with self._engine.connect() as conn:
                rows = (await conn.execute(query)).all()
        except Exception as exc:
            return self._db_error("get_cursor_page", exc, page_size=page_size)

        members = [_row_to_member(row) for row in rows]
        return Ok(
            build_cursor_page(members, page_size, lambda m: m.cursor_position)
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def insert(self, entity: Member) -> Result[Member]:
        statement = insert(members_table).values(
            id=entity.id,
            name=entity.name,
            age=entity.age,
            email=entity.email,
            created_at=entity.created_at,
            created_by=entity.created_by,
            changed_at=entity.changed_at,
            changed_by=entity.changed_by,
        )
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
                sequence_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            return self._integrity_error("insert", exc, entity)
        except Exception as exc:
            return self._db_error("insert", exc, member_id=entity.id)

        await self._invalidate_offset_pages()
        logger.info("Member created: id=%s sequence_id=%d", entity.id, sequence_id)
        return Ok(replace(entity, sequence_id=sequence_id))

    async def update(self, entity: Member) -> Result[Member]:
        statement = (
            update(members_table)
            .where(members_table.c.id == entity.id)
            .values(
                name=entity.name,
                age=entity.age,
                email=entity.email,
                changed_at=entity.changed_at,
                changed_by=entity.changed_by,
            )
        )
        reload = select(members_table).where(members_table.c.id == entity.id)
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
                if result.rowcount == 0:
                    return Err(
                        Failure(
                            code=FailureCode.DB_CONCURRENCY,
                            message=f"Member {entity.id} was modified or removed concurrently",
                            trace_id=get_trace_id(),
                        )
                    )
                row = (await conn.execute(reload)).one()
        except IntegrityError as exc:
            return self._integrity_error("update", exc, entity)
        except Exception as exc:
            return self._db_error("update", exc, member_id=entity.id)

        await self._invalidate_offset_pages()
        logger.info("Member updated: id=%s", entity.id)
        return Ok(_row_to_member(row))

    async def delete(self, entity_id: str) -> Result[None]:
        statement = delete(members_table).where(members_table.c.id == entity_id)
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
        except Exception as exc:
            return self._db_error("delete", exc, member_id=entity_id)

        if result.rowcount == 0:
            return Err(
                Failure(
                    code=FailureCode.NOT_FOUND,
                    message=f"Member {entity_id} not found",
                    trace_id=get_trace_id(),
                )
            )

        await self._invalidate_offset_pages()
        logger.info("Member deleted: id=%s", entity_id)
        return Ok(None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _find_one(self, condition: Any, operation: str) -> Result[Optional[Member]]:
        query = (
            select(members_table)
            .where(condition)
            .order_by(members_table.c.sequence_id)
            .limit(1)
        )
        try:
            async with self._engine.connect() as conn:
                row = (await conn.execute(query)).first()
        except Exception as exc:
            return self._db_error(operation, exc)
        return Ok(_row_to_member(row) if row is not None else None)

    def _db_error(self, operation: str, exc: Exception, **context: Any) -> Err:
        trace_id = get_trace_id()
        logger.error(
            "Member %s failed | TraceId: %s | Context: %s",
            operation,
            trace_id,
            context,
            exc_info=exc,
        )
        return Err(
            Failure(
                code=FailureCode.DB_ERROR,
                message=f"Member {operation} failed",
                trace_id=trace_id,
                exception=exc,
            )
        )

    def _integrity_error(self, operation: str, exc: IntegrityError, entity: Member) -> Err:
        """Map a constraint violation to a failure.

        Only the unique email constraint means DuplicateEmail; any other
        violation (an id collision, a NOT NULL column) is a DbError.
        """
        if "email" not in str(exc.orig).lower():
            return self._db_error(operation, exc, member_id=entity.id)
        trace_id = get_trace_id()
        logger.warning(
            "Member write rejected by unique email | TraceId: %s | id=%s",
            trace_id,
            entity.id,
        )
        return Err(
            Failure(
                code=FailureCode.DUPLICATE_EMAIL,
                message="Email is already registered",
                trace_id=trace_id,
                data={"email": entity.email},
                exception=exc,
            )
        )

    async def _cache_get(self, key: str) -> Optional[Any]:
        if self._cache is None:
            return None
        try:
            return await self._cache.get(key)
        except Exception:
            logger.warning("Cache read failed for %s; querying the database.", key, exc_info=True)
            return None

    async def _cache_set(self, key: str, value: Any) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(key, value, self._cache_ttl_seconds)
        except Exception:
            logger.warning("Cache write failed for %s.", key, exc_info=True)

    async def _invalidate_offset_pages(self) -> None:
        if self._cache is None:
            return
        try:
            removed = await self._cache.invalidate_prefix(OFFSET_CACHE_PREFIX)
        except Exception:
            logger.warning("Cache invalidation failed.", exc_info=True)
            return
        logger.debug("Invalidated %d cached offset pages.", removed)

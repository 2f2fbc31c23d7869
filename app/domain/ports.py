"""
Generic port interfaces shared by every bounded context.

A resource repository implements ``EntityRepository`` for its entity type
instead of being stamped out from a text template per resource.
Infrastructure adapters implement these interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from app.domain.pagination import CursorPage, CursorPosition, OffsetPage
from app.domain.result import Result

TEntity = TypeVar("TEntity")


class EntityRepository(ABC, Generic[TEntity]):
    """CRUD and pagination contract for a single entity type.

    Every method returns a Result. Expected conditions (missing rows,
    unique violations) and unexpected data-access errors are returned as
    failures, never raised.
    """

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Result[TEntity]:
        """Return the entity, or a NotFound failure."""
        raise NotImplementedError

    @abstractmethod
    async def get_offset_page(
        self, page_index: int, page_size: int, no_cache: bool = False
    ) -> Result[OffsetPage[TEntity]]:
        """Return one offset page ordered by the store's sequence."""
        raise NotImplementedError

    @abstractmethod
    async def get_cursor_page(
        self, page_size: int, after: Optional[CursorPosition] = None
    ) -> Result[CursorPage[TEntity]]:
        """Return the page that starts right after ``after``.

        ``after`` of None means the first page.
        """
        raise NotImplementedError

    @abstractmethod
    async def insert(self, entity: TEntity) -> Result[TEntity]:
        """Persist a new entity and return it with its sequence assigned."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, entity: TEntity) -> Result[TEntity]:
        """Persist changes to an existing entity."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, entity_id: str) -> Result[None]:
        """Remove an entity, or return a NotFound failure."""
        raise NotImplementedError


class CacheProvider(ABC):
    """Port for an advisory key/value cache.

    Values are JSON-serializable objects. A miss returns None.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        raise NotImplementedError

    @abstractmethod
    async def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with ``prefix``; return how many."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the provider."""
        return None

"""
Shared fixtures.

Every test gets its own in-memory SQLite database, so tests never
share members.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.infrastructure.cache import MemoryCacheProvider
from app.infrastructure.database import build_engine, create_schema
from app.infrastructure.members.member_repository import SqlAlchemyMemberRepository
from app.main import create_app
from tests.factories import IN_MEMORY_DB


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=IN_MEMORY_DB,
        cache_provider="memory",
        auto_create_schema=True,
        rate_limit_enabled=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(IN_MEMORY_DB)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def cache() -> MemoryCacheProvider:
    return MemoryCacheProvider()


@pytest.fixture
def repository(engine, cache) -> SqlAlchemyMemberRepository:
    return SqlAlchemyMemberRepository(engine, cache=cache, cache_ttl_seconds=60)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client

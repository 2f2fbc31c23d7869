"""
Database engine and schema.

Builds the SQLAlchemy async engine from settings and declares the
``members`` table. ``sequence_id`` is the store-assigned, strictly
increasing key that orders every page; ``id`` is the public identifier.
"""

import logging

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
)
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.members.entities import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH

logger = logging.getLogger(__name__)

metadata = MetaData()

members_table = Table(
    "members",
    metadata,
    Column(
        "sequence_id",
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    ),
    Column("id", String(36), nullable=False, unique=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("age", Integer, nullable=True),
    Column("email", String(EMAIL_MAX_LENGTH), nullable=False, unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("created_by", String(64), nullable=False),
    Column("changed_at", DateTime(timezone=True), nullable=False),
    Column("changed_by", String(64), nullable=False),
    # never reuse sequence numbers of deleted rows
    sqlite_autoincrement=True,
)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    In-memory SQLite databases share a single connection so that every
    session sees the same data.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database schema ensured.")

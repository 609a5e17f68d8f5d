"""Integration test fixtures using Docker.

Provides containerized PostgreSQL and Redis and the real store, cache and
repository built on them.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Iterator
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from newsdesk.cache.redis import RedisCache, create_redis
from newsdesk.persistence.db import create_session_factory
from newsdesk.persistence.repositories import ArticleRepository
from newsdesk.persistence.store import SqlArticleStore
from newsdesk.persistence.tables import AuthorTable, Base
from tests.integration.docker_utils import (
    POSTGRES,
    REDIS,
    RunningService,
    get_docker_client,
    start_service,
)

KEY_PREFIX = "news:"
CACHE_TTL = 50


def pytest_collection_modifyitems(items):
    """Mark everything in this directory as an integration test."""
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def docker_client():
    """Create a Docker client or skip if Docker is unavailable."""
    try:
        client = get_docker_client()
        client.ping()
    except Exception as exc:
        pytest.skip(f"Docker not available: {exc}")
    yield client
    client.close()


@pytest.fixture(scope="session")
def postgres_service(docker_client) -> Iterator[RunningService]:
    """Start PostgreSQL for the test session."""
    with start_service(docker_client, POSTGRES) as service:
        yield service


@pytest.fixture(scope="session")
def redis_service(docker_client) -> Iterator[RunningService]:
    """Start Redis for the test session."""
    with start_service(docker_client, REDIS) as service:
        yield service


@pytest.fixture(scope="session")
def database_url(postgres_service: RunningService) -> str:
    return (
        f"postgresql+asyncpg://newsdesk:newsdesk@"
        f"{postgres_service.host}:{postgres_service.host_port}/newsdesk"
    )


@pytest.fixture(scope="session")
def redis_url(redis_service: RunningService) -> str:
    return f"redis://{redis_service.host}:{redis_service.host_port}/0"


@pytest_asyncio.fixture
async def db_engine(database_url: str) -> AsyncIterator[AsyncEngine]:
    """Engine with a fresh schema per test."""
    engine = create_async_engine(database_url, echo=False)
    await _wait_for_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def redis_client(redis_url: str) -> AsyncIterator[Redis]:
    """Redis client flushed after each test."""
    client = create_redis(redis_url)
    await _wait_for_redis(client)
    yield client
    await client.flushdb()
    await client.aclose()


@pytest.fixture
def sql_store(db_engine: AsyncEngine) -> SqlArticleStore:
    return SqlArticleStore(create_session_factory(db_engine))


@pytest.fixture
def redis_cache(redis_client: Redis) -> RedisCache:
    return RedisCache(redis_client)


@pytest.fixture
def repository(sql_store: SqlArticleStore, redis_cache: RedisCache) -> ArticleRepository:
    return ArticleRepository(sql_store, redis_cache, key_prefix=KEY_PREFIX, cache_ttl=CACHE_TTL)


@pytest_asyncio.fixture
async def author_id(db_engine: AsyncEngine) -> UUID:
    """Insert one author row and return its id."""
    session_factory = create_session_factory(db_engine)
    author = AuthorTable(
        id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email=f"ada-{uuid4().hex[:8]}@example.com",
    )
    async with session_factory() as session, session.begin():
        session.add(author)
    return author.id


async def _wait_for_engine(engine: AsyncEngine, timeout: float = 30.0) -> None:
    """Wait for the database engine to accept connections."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            async with engine.connect():
                return
        except Exception:
            if time.monotonic() >= deadline:
                raise
            await asyncio.sleep(0.5)


async def _wait_for_redis(client: Redis, timeout: float = 30.0) -> None:
    """Wait for Redis to accept connections."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            await client.ping()
            return
        except Exception:
            if time.monotonic() >= deadline:
                raise
            await asyncio.sleep(0.5)

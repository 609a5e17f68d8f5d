"""Resource wiring for newsdesk.

Builds the connection pools and the article repository from settings and
tears them down again. The caller owns the returned resources; there are no
process-wide singletons for the database or Redis.

Usage:
    async with open_resources() as resources:
        article = await resources.repository.get_by_id(article_id)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from newsdesk.cache.redis import RedisCache, create_redis
from newsdesk.config import Settings
from newsdesk.config import settings as default_settings
from newsdesk.observability.logging import configure_logging
from newsdesk.observability.metrics import get_metrics
from newsdesk.persistence.db import create_engine, create_session_factory, init_db
from newsdesk.persistence.repositories import ArticleRepository
from newsdesk.persistence.store import SqlArticleStore

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    """Open connection pools and the repository built on them."""

    engine: AsyncEngine
    redis: Redis
    cache: RedisCache
    store: SqlArticleStore
    repository: ArticleRepository


@asynccontextmanager
async def open_resources(
    settings: Settings | None = None,
    *,
    configure_logs: bool = True,
    create_schema: bool = False,
) -> AsyncIterator[Resources]:
    """Open database and Redis pools and yield a ready repository.

    On exit both pools are closed, even if the body raised.
    """
    settings = settings or default_settings

    if configure_logs:
        configure_logging(json_format=settings.use_json_logs, level=settings.log_level)
    get_metrics()  # Initialize metrics registry

    engine = create_engine(settings)
    redis = create_redis(settings.redis_url)
    try:
        if create_schema:
            await init_db(engine)
        cache = RedisCache(redis)
        store = SqlArticleStore(create_session_factory(engine))
        repository = ArticleRepository(
            store,
            cache,
            key_prefix=settings.cache_key_prefix,
            cache_ttl=settings.cache_ttl,
        )
        logger.info("newsdesk resources opened (%s)", settings.env)
        yield Resources(
            engine=engine,
            redis=redis,
            cache=cache,
            store=store,
            repository=repository,
        )
    finally:
        await redis.aclose()
        await engine.dispose()
        logger.info("newsdesk resources closed")

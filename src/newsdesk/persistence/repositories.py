"""Article repository: cache-aside reads over a durable store.

Read path (get_by_id):
- Cache hit returns the snapshot immediately; the store is not consulted
- Miss or any cache failure falls through to the store
- Store hit is written back to the cache with a fixed TTL

Write path (update, delete):
- Store first; on success the single-item cache entry is deleted
- Create never touches the cache (nothing can be cached for a new id yet)

List and search go straight to the store and are never cached.

Every cache interaction goes through a fail-soft wrapper: failures are
logged at WARNING and counted, never raised. The store is the only source
of truth, so availability equals the store's availability and a cache outage
costs latency only.

Consistency window: store-write-then-invalidate is not atomic. If the
invalidation fails, or a concurrent get_by_id repopulates the entry between
the store write and the delete, a stale snapshot can be served until its
TTL expires. The TTL is kept short to bound that window.
"""

from __future__ import annotations

import logging
from uuid import UUID

from newsdesk.cache.base import Cache
from newsdesk.cache.keys import CacheKeys
from newsdesk.core.errors import NotFoundError
from newsdesk.core.model import (
    Article,
    ArticleList,
    ArticleUpdate,
    ArticleWithAuthor,
    NewArticle,
)
from newsdesk.core.pagination import PaginationQuery, has_more, total_pages
from newsdesk.observability.metrics import (
    record_cache_error,
    record_cache_hit,
    record_cache_miss,
)
from newsdesk.persistence.store import ArticleStore

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "Article"


class ArticleRepository:
    """Data access for articles with a cache-aside single-item read.

    The repository is stateless apart from its configuration; one instance
    can serve any number of concurrent tasks.
    """

    def __init__(
        self,
        store: ArticleStore,
        cache: Cache,
        *,
        key_prefix: str,
        cache_ttl: int,
    ):
        if cache_ttl < 1:
            raise ValueError(f"cache_ttl must be >= 1 second, got {cache_ttl}")
        self.store = store
        self.cache = cache
        self.keys = CacheKeys(key_prefix)
        self.cache_ttl = cache_ttl

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create(self, article: NewArticle) -> Article:
        """Insert a new article.

        Raises:
            StoreError: If the insert fails.
        """
        return await self.store.insert(article)

    async def update(self, article: ArticleUpdate) -> Article:
        """Update an article and invalidate its cached snapshot.

        Raises:
            NotFoundError: If no article has that id.
            StoreError: If the update fails.
        """
        updated = await self.store.update(article)
        if updated is None:
            raise NotFoundError(RESOURCE_TYPE, article.id)

        await self._invalidate(updated.id)
        return updated

    async def delete(self, article_id: UUID) -> None:
        """Delete an article and invalidate its cached snapshot.

        Raises:
            NotFoundError: If no article has that id.
            StoreError: If the delete fails.
        """
        rows_affected = await self.store.delete(article_id)
        if rows_affected == 0:
            raise NotFoundError(RESOURCE_TYPE, article_id)

        await self._invalidate(article_id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_by_id(self, article_id: UUID) -> ArticleWithAuthor:
        """Get one article with its author, from the cache when possible.

        Raises:
            NotFoundError: If the article does not exist in the store.
            StoreError: If the store lookup fails.
        """
        key = self.keys.article(article_id)

        cached = await self._read_cache(key)
        if cached is not None:
            return cached

        article = await self.store.get_with_author(article_id)
        if article is None:
            raise NotFoundError(RESOURCE_TYPE, article_id)

        await self._write_cache(key, article)
        return article

    async def list_page(self, query: PaginationQuery) -> ArticleList:
        """List one page of all articles.

        Raises:
            StoreError: If either the count or the page query fails.
        """
        total_count = await self.store.count_all()
        items = await self.store.scan_page(query.offset, query.limit)
        return _build_page(total_count, query, items)

    async def search_by_title(self, title: str, query: PaginationQuery) -> ArticleList:
        """List one page of articles whose title contains ``title``.

        Matching is case-insensitive and treats ``title`` literally.

        Raises:
            StoreError: If either the count or the page query fails.
        """
        total_count = await self.store.count_by_title(title)
        items = await self.store.scan_by_title(title, query.offset, query.limit)
        return _build_page(total_count, query, items)

    # -------------------------------------------------------------------------
    # Fail-soft cache boundary
    # -------------------------------------------------------------------------

    async def _read_cache(self, key: str) -> ArticleWithAuthor | None:
        try:
            payload = await self.cache.get(key)
        except Exception as exc:
            record_cache_error("get")
            logger.warning("Cache get failed for %s: %s", key, exc)
            return None

        if payload is None:
            record_cache_miss()
            logger.debug("Cache MISS: %s", key)
            return None

        try:
            article = ArticleWithAuthor.from_bytes(payload)
        except Exception as exc:
            record_cache_error("decode")
            logger.warning("Cache payload for %s could not be decoded: %s", key, exc)
            return None

        record_cache_hit()
        logger.debug("Cache HIT: %s", key)
        return article

    async def _write_cache(self, key: str, article: ArticleWithAuthor) -> None:
        try:
            await self.cache.set(key, article.to_bytes(), self.cache_ttl)
        except Exception as exc:
            record_cache_error("set")
            logger.warning("Cache set failed for %s: %s", key, exc)
            return
        logger.debug("Cache SET: %s (TTL: %ss)", key, self.cache_ttl)

    async def _invalidate(self, article_id: UUID) -> None:
        key = self.keys.article(article_id)
        try:
            await self.cache.delete(key)
        except Exception as exc:
            record_cache_error("delete")
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return
        logger.debug("Cache DELETE: %s", key)


def _build_page(total_count: int, query: PaginationQuery, items: list[Article]) -> ArticleList:
    return ArticleList(
        total_count=total_count,
        total_pages=total_pages(total_count, query.size),
        page=query.page,
        size=query.size,
        has_more=has_more(query.page, query.size, total_count),
        items=items,
    )

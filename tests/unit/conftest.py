"""Unit test fixtures: in-memory store and cache doubles.

The store counts every call so tests can assert that a cache hit never
reaches it. The cache can be switched into failure modes per operation to
simulate an outage or a corrupt payload.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from newsdesk.cache.base import Cache
from newsdesk.core.errors import CacheError
from newsdesk.core.model import Article, ArticleUpdate, ArticleWithAuthor, NewArticle
from newsdesk.persistence.repositories import ArticleRepository
from newsdesk.persistence.store import ArticleStore

KEY_PREFIX = "news:"
CACHE_TTL = 50


class InMemoryArticleStore(ArticleStore):
    """ArticleStore double keeping rows in a dict and counting calls."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Article] = {}
        self.authors: dict[UUID, str] = {}
        self.calls: Counter[str] = Counter()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def add_author(self, name: str = "Ada Lovelace") -> UUID:
        author_id = uuid4()
        self.authors[author_id] = name
        return author_id

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def insert(self, article: NewArticle) -> Article:
        self.calls["insert"] += 1
        now = self._tick()
        row = Article(
            id=uuid4(),
            author_id=article.author_id,
            title=article.title,
            content=article.content,
            image_url=article.image_url,
            category=article.category,
            created_at=now,
            updated_at=now,
        )
        self.rows[row.id] = row
        return row.model_copy()

    async def update(self, article: ArticleUpdate) -> Article | None:
        self.calls["update"] += 1
        existing = self.rows.get(article.id)
        if existing is None:
            return None
        row = existing.model_copy(
            update={
                "title": article.title,
                "content": article.content,
                "image_url": article.image_url,
                "category": article.category,
                "updated_at": self._tick(),
            }
        )
        self.rows[row.id] = row
        return row.model_copy()

    async def delete(self, article_id: UUID) -> int:
        self.calls["delete"] += 1
        return 1 if self.rows.pop(article_id, None) is not None else 0

    async def get_with_author(self, article_id: UUID) -> ArticleWithAuthor | None:
        self.calls["get_with_author"] += 1
        row = self.rows.get(article_id)
        if row is None or row.author_id not in self.authors:
            return None
        return ArticleWithAuthor(author=self.authors[row.author_id], **row.model_dump())

    def _ordered(self, title: str | None = None) -> list[Article]:
        rows = sorted(self.rows.values(), key=lambda r: (r.created_at, r.id))
        if title is not None:
            rows = [r for r in rows if title.casefold() in r.title.casefold()]
        return rows

    async def count_all(self) -> int:
        self.calls["count_all"] += 1
        return len(self.rows)

    async def scan_page(self, offset: int, limit: int) -> list[Article]:
        self.calls["scan_page"] += 1
        return [r.model_copy() for r in self._ordered()[offset : offset + limit]]

    async def count_by_title(self, title: str) -> int:
        self.calls["count_by_title"] += 1
        return len(self._ordered(title))

    async def scan_by_title(self, title: str, offset: int, limit: int) -> list[Article]:
        self.calls["scan_by_title"] += 1
        return [r.model_copy() for r in self._ordered(title)[offset : offset + limit]]


class FlakyCache(Cache):
    """Cache double with switchable per-operation failures."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.calls: Counter[str] = Counter()
        self.fail_get = False
        self.fail_set = False
        self.fail_delete = False

    async def get(self, key: str) -> bytes | None:
        self.calls["get"] += 1
        if self.fail_get:
            raise CacheError("get", key, "connection refused")
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        self.calls["set"] += 1
        if self.fail_set:
            raise CacheError("set", key, "connection refused")
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        self.calls["delete"] += 1
        if self.fail_delete:
            raise CacheError("delete", key, "connection refused")
        self.data.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def store() -> InMemoryArticleStore:
    return InMemoryArticleStore()


@pytest.fixture
def cache() -> FlakyCache:
    return FlakyCache()


@pytest.fixture
def repo(store: InMemoryArticleStore, cache: FlakyCache) -> ArticleRepository:
    return ArticleRepository(store, cache, key_prefix=KEY_PREFIX, cache_ttl=CACHE_TTL)


@pytest.fixture
def author_id(store: InMemoryArticleStore) -> UUID:
    return store.add_author("Ada Lovelace")


@pytest.fixture
def new_article(author_id: UUID) -> NewArticle:
    return NewArticle(
        author_id=author_id,
        title="Launch",
        content="We have lift-off.",
        category="space",
    )

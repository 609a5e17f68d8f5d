"""Durable article store.

ArticleStore is the abstract capability the repository depends on;
SqlArticleStore implements it on SQLAlchemy asyncio. Each operation runs in
its own short transaction taken from the shared session factory, so the
store holds no per-call state and needs no locking.

Misses are reported as values (None, or 0 rows affected), not exceptions;
the repository decides what a miss means.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from newsdesk.core.errors import StoreError
from newsdesk.core.model import Article, ArticleUpdate, ArticleWithAuthor, NewArticle
from newsdesk.observability.metrics import record_store_operation
from newsdesk.persistence.tables import ArticleTable, AuthorTable

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.sql.elements import ColumnElement


class ArticleStore(ABC):
    """Abstract base class for durable article persistence."""

    @abstractmethod
    async def insert(self, article: NewArticle) -> Article:
        """Insert a row and return it with its assigned id and timestamps."""
        ...

    @abstractmethod
    async def update(self, article: ArticleUpdate) -> Article | None:
        """Update the mutable fields; None if no row has that id."""
        ...

    @abstractmethod
    async def delete(self, article_id: UUID) -> int:
        """Delete by id and return the number of rows affected."""
        ...

    @abstractmethod
    async def get_with_author(self, article_id: UUID) -> ArticleWithAuthor | None:
        """Point lookup joined with the author; None if absent."""
        ...

    @abstractmethod
    async def count_all(self) -> int:
        ...

    @abstractmethod
    async def scan_page(self, offset: int, limit: int) -> list[Article]:
        ...

    @abstractmethod
    async def count_by_title(self, title: str) -> int:
        ...

    @abstractmethod
    async def scan_by_title(self, title: str, offset: int, limit: int) -> list[Article]:
        ...


# Columns returned for Article rows, keyed by attribute name
_ARTICLE_COLUMNS = (
    ArticleTable.id,
    ArticleTable.author_id,
    ArticleTable.title,
    ArticleTable.content,
    ArticleTable.image_url,
    ArticleTable.category,
    ArticleTable.created_at,
    ArticleTable.updated_at,
)

# Stable total order: ties on created_at are broken by the primary key
_PAGE_ORDER = (ArticleTable.created_at, ArticleTable.id)


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so value matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def _title_filter(title: str) -> ColumnElement[bool]:
    return ArticleTable.title.ilike(f"%{escape_like(title)}%", escape="\\")


class SqlArticleStore(ArticleStore):
    """ArticleStore on a PostgreSQL database via SQLAlchemy asyncio."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run one operation in its own transaction.

        SQLAlchemy failures become StoreError; cancellation passes through.
        """
        start = time.perf_counter()
        try:
            async with self.session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(operation, str(exc)) from exc
        finally:
            record_store_operation(operation, time.perf_counter() - start)

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    async def insert(self, article: NewArticle) -> Article:
        async with self._transaction("insert") as session:
            row = ArticleTable(
                author_id=article.author_id,
                title=article.title,
                content=article.content,
                image_url=article.image_url,
                category=article.category,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return Article.model_validate(row)

    async def update(self, article: ArticleUpdate) -> Article | None:
        stmt = (
            update(ArticleTable)
            .where(ArticleTable.id == article.id)
            .values(
                title=article.title,
                content=article.content,
                image_url=article.image_url,
                category=article.category,
                updated_at=func.now(),
            )
            .returning(*_ARTICLE_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        async with self._transaction("update") as session:
            result = await session.execute(stmt)
            row = result.mappings().one_or_none()
        if row is None:
            return None
        return Article.model_validate(dict(row))

    async def delete(self, article_id: UUID) -> int:
        stmt = (
            delete(ArticleTable)
            .where(ArticleTable.id == article_id)
            .execution_options(synchronize_session=False)
        )
        async with self._transaction("delete") as session:
            result = await session.execute(stmt)
            return int(result.rowcount or 0)

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    async def get_with_author(self, article_id: UUID) -> ArticleWithAuthor | None:
        author_name = (AuthorTable.first_name + " " + AuthorTable.last_name).label("author")
        stmt = (
            select(*_ARTICLE_COLUMNS, author_name)
            .select_from(ArticleTable)
            .join(AuthorTable, AuthorTable.id == ArticleTable.author_id)
            .where(ArticleTable.id == article_id)
        )
        async with self._transaction("get") as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        if row is None:
            return None
        return ArticleWithAuthor.model_validate(dict(row))

    async def count_all(self) -> int:
        stmt = select(func.count()).select_from(ArticleTable)
        async with self._transaction("count") as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def scan_page(self, offset: int, limit: int) -> list[Article]:
        stmt = select(*_ARTICLE_COLUMNS).order_by(*_PAGE_ORDER).offset(offset).limit(limit)
        async with self._transaction("scan") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [Article.model_validate(dict(row)) for row in rows]

    async def count_by_title(self, title: str) -> int:
        stmt = select(func.count()).select_from(ArticleTable).where(_title_filter(title))
        async with self._transaction("count") as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def scan_by_title(self, title: str, offset: int, limit: int) -> list[Article]:
        stmt = (
            select(*_ARTICLE_COLUMNS)
            .where(_title_filter(title))
            .order_by(*_PAGE_ORDER)
            .offset(offset)
            .limit(limit)
        )
        async with self._transaction("scan") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [Article.model_validate(dict(row)) for row in rows]

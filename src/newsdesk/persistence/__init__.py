"""Persistence layer for newsdesk.

Provides:
- ArticleStore / SqlArticleStore: durable storage on PostgreSQL
- ArticleRepository: cache-aside orchestration over store and cache
- Engine and session factory helpers
"""

from newsdesk.persistence.db import create_engine, create_session_factory, health_check, init_db
from newsdesk.persistence.repositories import ArticleRepository
from newsdesk.persistence.store import ArticleStore, SqlArticleStore
from newsdesk.persistence.tables import ArticleTable, AuthorTable, Base

__all__ = [
    "ArticleRepository",
    "ArticleStore",
    "ArticleTable",
    "AuthorTable",
    "Base",
    "SqlArticleStore",
    "create_engine",
    "create_session_factory",
    "health_check",
    "init_db",
]

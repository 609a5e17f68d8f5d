"""Article domain: models, pagination and the error taxonomy."""

from newsdesk.core.errors import CacheError, NewsdeskError, NotFoundError, StoreError
from newsdesk.core.model import (
    Article,
    ArticleList,
    ArticleUpdate,
    ArticleWithAuthor,
    NewArticle,
)
from newsdesk.core.pagination import PaginationQuery, has_more, total_pages

__all__ = [
    "Article",
    "ArticleList",
    "ArticleUpdate",
    "ArticleWithAuthor",
    "CacheError",
    "NewArticle",
    "NewsdeskError",
    "NotFoundError",
    "PaginationQuery",
    "StoreError",
    "has_more",
    "total_pages",
]

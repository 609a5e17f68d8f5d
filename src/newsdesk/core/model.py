"""Article domain models.

All models use Pydantic v2. Read models are built straight from ORM rows or
SQL result mappings (from_attributes), and ArticleWithAuthor is frozen so a
snapshot taken from the cache cannot be mutated by a caller.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

import orjson
from pydantic import BaseModel, Field


class StrictModel(BaseModel):
    """Base model for all article models."""

    model_config = {
        "extra": "forbid",
        "from_attributes": True,
        "validate_default": True,
    }


class NewArticle(StrictModel):
    """Fields a caller supplies when creating an article.

    The id and both timestamps are assigned by the store.
    """

    author_id: UUID
    title: str = Field(min_length=1)
    content: str
    image_url: str | None = None
    category: str


class ArticleUpdate(StrictModel):
    """Mutable fields of an existing article; author_id is not updatable."""

    id: UUID
    title: str = Field(min_length=1)
    content: str
    image_url: str | None = None
    category: str


class Article(StrictModel):
    """A persisted article."""

    id: UUID
    author_id: UUID
    title: str
    content: str
    image_url: str | None = None
    category: str | None = None
    created_at: datetime
    updated_at: datetime


class ArticleWithAuthor(StrictModel):
    """Article joined with the author's display name.

    This is the only model that is ever written to the cache.
    """

    model_config = {**StrictModel.model_config, "frozen": True}

    id: UUID
    author_id: UUID
    author: str
    title: str
    content: str
    image_url: str | None = None
    category: str | None = None
    created_at: datetime
    updated_at: datetime

    def to_bytes(self) -> bytes:
        """Serialize to JSON bytes for the cache."""
        return orjson.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_bytes(cls, data: bytes) -> ArticleWithAuthor:
        """Deserialize from cached JSON bytes.

        Raises orjson.JSONDecodeError or pydantic.ValidationError on a
        corrupt payload.
        """
        return cls.model_validate(orjson.loads(data))


class ArticleList(StrictModel):
    """One page of articles plus pagination metadata."""

    total_count: int
    total_pages: int
    page: int
    size: int
    has_more: bool
    items: list[Article]

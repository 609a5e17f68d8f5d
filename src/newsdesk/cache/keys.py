"""Cache key schema for articles.

Key format: {prefix}{article_id}

Where:
- prefix: configured namespace, e.g. "news:" (shared Redis across services)
- article_id: canonical UUID string (lowercase, hyphenated)

Only the id participates in the key. List and search results are never
cached, so there is no key for them.
"""

from __future__ import annotations

from uuid import UUID


class CacheKeys:
    """Cache key generator bound to one prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix

    def article(self, article_id: UUID | str) -> str:
        """Key for a single ArticleWithAuthor snapshot."""
        return f"{self.prefix}{UUID(str(article_id))}"

    def parse_article_id(self, key: str) -> UUID | None:
        """Recover the article id from a key.

        Returns None if the key has another prefix or no valid id.
        """
        if not key.startswith(self.prefix):
            return None
        try:
            return UUID(key[len(self.prefix) :])
        except ValueError:
            return None

"""Offset pagination for article listings.

Pages are 1-based. A page request translates to ``offset = (page - 1) * size``
and ``limit = size``. The page envelope is computed from a separately queried
total count, so under concurrent writes the count and the page rows may
disagree; callers get the count as of the count query.
"""

from __future__ import annotations

from dataclasses import dataclass

# Defaults mirror the query-string contract (?page=1&size=10)
DEFAULT_PAGE = 1
DEFAULT_SIZE = 10
MAX_SIZE = 100


@dataclass(frozen=True)
class PaginationQuery:
    """Validated page request."""

    page: int = DEFAULT_PAGE
    size: int = DEFAULT_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    @classmethod
    def from_params(
        cls,
        page: str | int | None = None,
        size: str | int | None = None,
        *,
        default_size: int = DEFAULT_SIZE,
        max_size: int = MAX_SIZE,
    ) -> PaginationQuery:
        """Build a query from raw query-string values.

        Missing or blank values fall back to the defaults. Sizes above
        ``max_size`` are clamped.

        Raises:
            ValueError: If a value is not an integer or is below 1.
        """
        page_value = _parse_int("page", page, DEFAULT_PAGE)
        size_value = _parse_int("size", size, default_size)
        return cls(page=page_value, size=min(size_value, max_size))


def _parse_int(name: str, raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def total_pages(total_count: int, size: int) -> int:
    """Number of pages needed to hold ``total_count`` rows."""
    return (total_count + size - 1) // size


def has_more(page: int, size: int, total_count: int) -> bool:
    """True iff at least one row exists beyond the given page."""
    return page * size < total_count

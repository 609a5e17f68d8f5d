"""Base cache interface.

Defines the abstract key/value capability the article repository depends
on. Values are opaque bytes; serialization belongs to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Cache(ABC):
    """Abstract base class for ephemeral key/value caches with TTL."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the cached bytes, or None on a miss.

        Raises:
            CacheError: If the backend is unreachable or fails.
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store bytes under key, expiring after ttl seconds.

        Raises:
            CacheError: If the backend is unreachable or fails.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error.

        Raises:
            CacheError: If the backend is unreachable or fails.
        """
        ...

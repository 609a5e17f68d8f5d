"""Error taxonomy for the article data-access layer.

Only NotFoundError and StoreError cross the repository boundary. CacheError
is raised by cache backends and always absorbed by the repository. Caller
cancellation surfaces as asyncio.CancelledError (or TimeoutError from
asyncio.timeout) and is never wrapped.
"""

from __future__ import annotations


class NewsdeskError(Exception):
    """Base class for all newsdesk errors."""


class NotFoundError(NewsdeskError):
    """Requested entity does not exist."""

    def __init__(self, resource_type: str, identifier: object):
        self.resource_type = resource_type
        self.identifier = str(identifier)
        super().__init__(f"{resource_type} with identifier '{self.identifier}' not found")


class StoreError(NewsdeskError):
    """Durable store failure (connectivity, constraint, serialization)."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store operation '{operation}' failed: {reason}")


class CacheError(NewsdeskError):
    """Cache backend failure."""

    def __init__(self, operation: str, key: str, reason: str):
        self.operation = operation
        self.key = key
        self.reason = reason
        super().__init__(f"Cache {operation} failed for key '{key}': {reason}")

"""Cache backend protocol used by the permission registrar."""

from abc import abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Minimal key/value contract for the store holding the permission snapshot."""

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a live entry exists for key."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get the value stored under key, or None when absent or expired."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key; ttl in seconds, None or 0 for no expiry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key. Returns False when nothing was stored."""
        ...

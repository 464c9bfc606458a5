"""Memory cache backend adapter for neo-permissions."""

import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry metadata."""
    value: Any
    created_at: float = field(default_factory=time.time)
    expires_at: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        """Check if entry is expired."""
        if self.expires_at is None:
            return False
        return time.time() > self.expires_at


class MemoryCacheBackend:
    """Process-local cache backend.

    Values are deep-copied on the way in and out so callers can never mutate
    what another reader will get.
    """

    def __init__(self):
        self._store: Dict[str, MemoryCacheEntry] = {}

    def _live_entry(self, key: str) -> Optional[MemoryCacheEntry]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired:
            del self._store[key]
            logger.debug(f"Memory cache entry expired: {key}")
            return None
        return entry

    async def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def get(self, key: str) -> Optional[Any]:
        entry = self._live_entry(key)
        if entry is None:
            return None
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = time.time() + ttl if ttl and ttl > 0 else None
        self._store[key] = MemoryCacheEntry(value=copy.deepcopy(value), expires_at=expires_at)

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def clear(self) -> None:
        """Drop every entry."""
        self._store.clear()

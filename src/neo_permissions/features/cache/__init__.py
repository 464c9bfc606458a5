"""Cache feature: backend protocol, adapters and backend selection."""

from .entities import CacheBackend
from .adapters import MemoryCacheBackend, RedisCacheBackend
from .services import CacheManager

__all__ = [
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "CacheManager",
]

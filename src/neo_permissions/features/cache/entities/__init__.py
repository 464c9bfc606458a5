"""Cache entities package."""

from .protocols import CacheBackend

__all__ = ["CacheBackend"]

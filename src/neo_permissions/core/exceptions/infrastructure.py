"""Infrastructure exceptions raised by cache backends."""

from .base import NeoPermissionsError


class CacheError(NeoPermissionsError):
    """Base exception for cache errors."""
    pass


class CacheBackendError(CacheError):
    """Raised when a cache backend operation fails."""
    pass


class CacheInvalidationError(CacheError):
    """Raised when the permission snapshot could not be removed from the backend."""
    pass

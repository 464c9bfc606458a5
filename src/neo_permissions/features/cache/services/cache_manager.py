"""Cache backend selection.

Maps the ``cache_store`` setting onto a configured backend instance.
"""

import logging
from typing import Dict, Optional

from ....core.exceptions import ConfigurationError
from ..entities.protocols import CacheBackend

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "default"


class CacheManager:
    """Registry of named cache backends."""

    def __init__(
        self,
        backends: Optional[Dict[str, CacheBackend]] = None,
        default: Optional[str] = None,
    ):
        self._backends: Dict[str, CacheBackend] = dict(backends or {})
        self._default = default

    def register(self, name: str, backend: CacheBackend, make_default: bool = False) -> None:
        """Register a backend under a name."""
        self._backends[name] = backend
        if make_default or self._default is None:
            self._default = name

    def get_driver(self, name: str = DEFAULT_DRIVER) -> CacheBackend:
        """Get the backend for a selector; 'default' resolves to the default backend."""
        if name == DEFAULT_DRIVER and DEFAULT_DRIVER not in self._backends:
            if self._default is None:
                raise ConfigurationError("No default cache backend is configured")
            name = self._default

        backend = self._backends.get(name)
        if backend is None:
            raise ConfigurationError(
                f"Cache store `{name}` is not configured",
                details={"store": name, "available": sorted(self._backends)},
            )
        return backend

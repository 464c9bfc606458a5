"""
Permission registrar: the process-wide snapshot of every permission.

Every authorization check resolves permission names through this snapshot, so
the store is queried once per cache lifetime instead of once per check. Any
write that changes a permission, a role-permission link or a
principal-permission link must call ``forget_cached_permissions()``.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ....config.settings import PermissionSettings
from ....core.exceptions import CacheInvalidationError
from ...cache.entities.protocols import CacheBackend
from ...cache.services.cache_manager import CacheManager
from ..entities.permission import Permission
from ..entities.protocols import PermissionRepository
from ..entities.role import Role

logger = logging.getLogger(__name__)


class PermissionRegistrar:
    """
    Owns the in-memory permission snapshot and its copy in the cache backend.

    Features:
    - Lazy load on first read after invalidation, one store query per process
    - Snapshot shared through the configured cache backend with a TTL
    - Filtered reads always return a new list; the snapshot is never exposed
    """

    def __init__(
        self,
        settings: PermissionSettings,
        permission_repository: PermissionRepository,
        cache_manager: CacheManager,
    ):
        self._settings = settings
        self._repository = permission_repository
        self._cache: CacheBackend = cache_manager.get_driver(settings.cache_store)
        self._permissions: Optional[Tuple[Permission, ...]] = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def cache_key(self) -> str:
        return self._settings.cache_key

    @property
    def cache_store(self) -> CacheBackend:
        """Get the backend holding the shared snapshot."""
        return self._cache

    def get_permission_class(self) -> type:
        return self._settings.permission_model

    def get_role_class(self) -> type:
        return self._settings.role_model

    async def get_permissions(
        self,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Permission]:
        """Get all permissions, narrowed by attribute equality filters.

        Args:
            filters: Mapping of attribute name to required value, e.g.
                ``{"name": "posts.edit", "guard_name": "web"}``

        Returns:
            New list of matching permissions ordered by id
        """
        if self._settings.enable_cache:
            permissions = self._permissions
            if permissions is None:
                permissions = await self._load_snapshot()
        else:
            permissions = tuple(await self._repository.list_all(with_roles=True))

        result = list(permissions)
        for attribute, value in (filters or {}).items():
            result = [
                permission for permission in result
                if getattr(permission, attribute, None) == value
            ]
        return result

    async def forget_cached_permissions(self) -> bool:
        """Drop the local snapshot and delete the shared one.

        Returns:
            Whether the backend held a snapshot to delete

        Raises:
            CacheInvalidationError: If the backend failed while deleting
        """
        self._generation += 1
        self._permissions = None

        try:
            deleted = await self._cache.delete(self.cache_key)
        except Exception as e:
            logger.error(f"Failed to forget cached permissions under {self.cache_key}: {e}")
            raise CacheInvalidationError(
                f"Failed to forget cached permissions: {e}",
                details={"cache_key": self.cache_key},
            ) from e

        logger.debug(f"Forgot cached permissions (deleted={deleted})")
        return deleted

    def clear_class_permissions(self) -> None:
        """Drop only the in-process snapshot, leaving the shared backend untouched.

        Long-lived workers call this at a lifecycle boundary so they do not
        keep references from a previous unit of work.
        """
        self._generation += 1
        self._permissions = None

    async def _load_snapshot(self) -> Tuple[Permission, ...]:
        async with self._lock:
            if self._permissions is not None:
                return self._permissions

            generation = self._generation
            cached = None
            if await self._cache.has(self.cache_key):
                cached = await self._cache.get(self.cache_key)

            if cached is not None:
                permissions = self._deserialize_permissions(cached)
                logger.debug(f"Loaded {len(permissions)} permissions from cache")
            else:
                permissions = tuple(await self._repository.list_all(with_roles=True))
                logger.debug(f"Loaded {len(permissions)} permissions from store")
                if generation == self._generation:
                    await self._cache.set(
                        self.cache_key,
                        self._serialize_permissions(permissions),
                        self._settings.cache_ttl_seconds,
                    )

            # An invalidation while loading makes this snapshot stale for later readers
            if generation == self._generation:
                self._permissions = permissions
            return permissions

    def _serialize_permissions(self, permissions: Iterable[Permission]) -> List[Dict[str, Any]]:
        return [self._serialize_permission(permission) for permission in permissions]

    def _serialize_permission(self, permission: Permission) -> Dict[str, Any]:
        """Serialize permission to JSON-compatible format."""
        return {
            "id": permission.id,
            "name": permission.name,
            "guard_name": permission.guard_name,
            "roles": [self._serialize_role(role) for role in permission.roles],
        }

    def _serialize_role(self, role: Role) -> Dict[str, Any]:
        return {
            "id": role.id,
            "name": role.name,
            "guard_name": role.guard_name,
        }

    def _deserialize_permissions(self, data: Iterable[Dict[str, Any]]) -> Tuple[Permission, ...]:
        return tuple(self._deserialize_permission(item) for item in data)

    def _deserialize_permission(self, data: Dict[str, Any]) -> Permission:
        """Rebuild a permission, and its roles, from cached data."""
        role_class = self.get_role_class()
        return self.get_permission_class()(
            id=data["id"],
            name=data["name"],
            guard_name=data["guard_name"],
            roles=tuple(
                role_class(id=role["id"], name=role["name"], guard_name=role["guard_name"])
                for role in data.get("roles", [])
            ),
        )

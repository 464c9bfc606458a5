"""Permission lookup and lifecycle service.

Lookups by name or id go through the registrar snapshot and are always scoped
to a guard. Writes go to the store and are followed by cache invalidation.
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional, Union

from ....config.settings import PermissionSettings
from ....core.exceptions import (
    InvalidPermissionArgumentError,
    PermissionAlreadyExistsError,
    PermissionNotFoundError,
)
from ..entities.permission import Permission
from ..entities.protocols import PermissionRepository
from .permission_registrar import PermissionRegistrar

logger = logging.getLogger(__name__)

PermissionRef = Union[str, int, Permission]


def flatten_refs(values: Any) -> Iterator[Any]:
    """Flatten nested lists, tuples and sets of references.

    Strings and entities are leaves; a single reference yields itself.
    """
    if isinstance(values, (list, tuple, set, frozenset)):
        for value in values:
            yield from flatten_refs(value)
    else:
        yield values


class PermissionService:
    """Service for finding, creating and deleting permissions."""

    def __init__(
        self,
        settings: PermissionSettings,
        permission_repository: PermissionRepository,
        registrar: PermissionRegistrar,
    ):
        self._settings = settings
        self._repository = permission_repository
        self._registrar = registrar

    def _guard(self, guard_name: Optional[str]) -> str:
        return guard_name or self._settings.default_guard

    async def get_by_name(self, name: str, guard_name: Optional[str] = None) -> Optional[Permission]:
        """Get permission by name within a guard, or None."""
        permissions = await self._registrar.get_permissions(
            {"name": name, "guard_name": self._guard(guard_name)}
        )
        return permissions[0] if permissions else None

    async def get_by_id(self, permission_id: int, guard_name: Optional[str] = None) -> Optional[Permission]:
        """Get permission by id within a guard, or None."""
        permissions = await self._registrar.get_permissions(
            {"id": permission_id, "guard_name": self._guard(guard_name)}
        )
        return permissions[0] if permissions else None

    async def find_by_name(self, name: str, guard_name: Optional[str] = None) -> Permission:
        """Find permission by name within a guard.

        Raises:
            PermissionNotFoundError: If no permission has that name in the guard
        """
        guard_name = self._guard(guard_name)
        permission = await self.get_by_name(name, guard_name)
        if permission is None:
            raise PermissionNotFoundError.create(name, guard_name)
        return permission

    async def find_by_id(self, permission_id: int, guard_name: Optional[str] = None) -> Permission:
        """Find permission by id within a guard.

        Raises:
            PermissionNotFoundError: If no permission has that id in the guard
        """
        guard_name = self._guard(guard_name)
        permission = await self.get_by_id(permission_id, guard_name)
        if permission is None:
            raise PermissionNotFoundError.with_id(permission_id, guard_name)
        return permission

    async def resolve(self, permission: PermissionRef, guard_name: Optional[str] = None) -> Permission:
        """Turn a name, id or Permission into a stored Permission.

        Names and ids are looked up in the guard. An entity is re-read from the
        snapshot in its own guard, so its roles are the current ones.

        Raises:
            PermissionNotFoundError: If a name, id or entity does not resolve
            InvalidPermissionArgumentError: If the reference has another type
        """
        if isinstance(permission, Permission):
            return await self.find_by_id(permission.id, permission.guard_name)
        if isinstance(permission, str):
            return await self.find_by_name(permission, guard_name)
        if isinstance(permission, int) and not isinstance(permission, bool):
            return await self.find_by_id(permission, guard_name)
        raise InvalidPermissionArgumentError.create(permission)

    async def resolve_in_guard(self, permission: PermissionRef, guard_name: Optional[str] = None) -> Permission:
        """Resolve a reference that must belong to the given guard.

        Raises:
            PermissionNotFoundError: If it does not resolve, or resolves in another guard
        """
        guard_name = self._guard(guard_name)
        resolved = await self.resolve(permission, guard_name)
        if resolved.guard_name != guard_name:
            raise PermissionNotFoundError.with_id(resolved.id, guard_name)
        return resolved

    async def get_stored_permissions(
        self,
        names: Iterable[str],
        guard_names: Iterable[str],
    ) -> List[Permission]:
        """Get every permission matching any of the names in any of the guards.

        Names that do not exist are skipped.
        """
        names = set(names)
        guard_names = set(guard_names)
        if not names or not guard_names:
            return []
        return await self._repository.list_by_names(names, guard_names)

    async def find_or_create(self, name: str, guard_name: Optional[str] = None) -> Permission:
        """Find permission by name, creating it in the guard when missing."""
        guard_name = self._guard(guard_name)
        permission = await self.get_by_name(name, guard_name)
        if permission is not None:
            return permission

        try:
            permission = await self._repository.find_or_create(name, guard_name)
        finally:
            await self._registrar.forget_cached_permissions()
        logger.info(f"Created permission {name} for guard {guard_name}")
        return permission

    async def create(self, name: str, guard_name: Optional[str] = None) -> Permission:
        """Create a permission.

        Raises:
            PermissionAlreadyExistsError: If the guard already has a permission with that name
        """
        guard_name = self._guard(guard_name)
        if await self.get_by_name(name, guard_name) is not None:
            raise PermissionAlreadyExistsError.create(name, guard_name)

        try:
            permission = await self._repository.create(name, guard_name)
        finally:
            await self._registrar.forget_cached_permissions()
        logger.info(f"Created permission {name} for guard {guard_name}")
        return permission

    async def delete(self, permission: Permission) -> bool:
        """Delete a permission; the store detaches it from roles and principals."""
        try:
            deleted = await self._repository.delete(permission.id)
        finally:
            await self._registrar.forget_cached_permissions()
        logger.info(f"Deleted permission {permission.name} for guard {permission.guard_name}")
        return deleted

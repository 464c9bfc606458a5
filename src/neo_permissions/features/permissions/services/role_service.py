"""Role lookup and role -> permission association service."""

import logging
from typing import Any, List, Optional

from ....config.settings import PermissionSettings
from ....core.exceptions import (
    GuardMismatchError,
    RoleAlreadyExistsError,
    RoleNotFoundError,
)
from ..entities.permission import Permission
from ..entities.protocols import RoleRepository
from ..entities.role import Role
from ..entities.wildcard import WildcardPermission
from .permission_registrar import PermissionRegistrar
from .permission_service import PermissionRef, PermissionService, flatten_refs

logger = logging.getLogger(__name__)


class RoleService:
    """Service for roles and the permissions attached to them."""

    def __init__(
        self,
        settings: PermissionSettings,
        role_repository: RoleRepository,
        permission_service: PermissionService,
        registrar: PermissionRegistrar,
    ):
        self._settings = settings
        self._repository = role_repository
        self._permissions = permission_service
        self._registrar = registrar

    def _guard(self, guard_name: Optional[str]) -> str:
        return guard_name or self._settings.default_guard

    async def find_by_name(self, name: str, guard_name: Optional[str] = None) -> Role:
        """Find role by name within a guard.

        Raises:
            RoleNotFoundError: If no role has that name in the guard
        """
        guard_name = self._guard(guard_name)
        role = await self._repository.get_by_name(name, guard_name)
        if role is None:
            raise RoleNotFoundError.create(name, guard_name)
        return role

    async def find_by_id(self, role_id: int, guard_name: Optional[str] = None) -> Role:
        """Find role by id within a guard.

        Raises:
            RoleNotFoundError: If no role has that id in the guard
        """
        guard_name = self._guard(guard_name)
        role = await self._repository.get_by_id(role_id, guard_name)
        if role is None:
            raise RoleNotFoundError.with_id(role_id, guard_name)
        return role

    async def find_or_create(self, name: str, guard_name: Optional[str] = None) -> Role:
        guard_name = self._guard(guard_name)
        role = await self._repository.get_by_name(name, guard_name)
        if role is not None:
            return role

        try:
            role = await self._repository.find_or_create(name, guard_name)
        finally:
            await self._registrar.forget_cached_permissions()
        return role

    async def create(self, name: str, guard_name: Optional[str] = None) -> Role:
        """Create a role.

        Raises:
            RoleAlreadyExistsError: If the guard already has a role with that name
        """
        guard_name = self._guard(guard_name)
        if await self._repository.get_by_name(name, guard_name) is not None:
            raise RoleAlreadyExistsError.create(name, guard_name)

        try:
            role = await self._repository.create(name, guard_name)
        finally:
            await self._registrar.forget_cached_permissions()
        logger.info(f"Created role {name} for guard {guard_name}")
        return role

    async def delete(self, role: Role) -> bool:
        """Delete a role; the store detaches its permissions and principals."""
        try:
            deleted = await self._repository.delete(role.id)
        finally:
            await self._registrar.forget_cached_permissions()
        logger.info(f"Deleted role {role.name} for guard {role.guard_name}")
        return deleted

    async def has_permission_to(self, role: Role, permission: PermissionRef) -> bool:
        """Check whether a role holds a permission.

        Raises:
            PermissionNotFoundError: If a name or id does not resolve in the role's guard
            GuardMismatchError: If the permission belongs to another guard
        """
        if self._settings.enable_wildcard_permission:
            return await self._has_wildcard_permission(role, permission)

        permission = await self._permissions.resolve(permission, role.guard_name)
        self._ensure_shares_guard(role, permission)
        return permission.id in role.permission_ids

    async def give_permission_to(self, role: Role, permissions: Any) -> Role:
        """Attach permissions to a role and return the reloaded role."""
        stored = await self._collect_permissions(role, permissions)
        try:
            await self._repository.attach_permissions(role.id, [p.id for p in stored])
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Gave {len(stored)} permissions to role {role.name}")
        return await self.find_by_id(role.id, role.guard_name)

    async def revoke_permission_to(self, role: Role, permissions: Any) -> Role:
        """Detach permissions from a role and return the reloaded role."""
        stored = await self._collect_permissions(role, permissions)
        try:
            await self._repository.detach_permissions(role.id, [p.id for p in stored])
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Revoked {len(stored)} permissions from role {role.name}")
        return await self.find_by_id(role.id, role.guard_name)

    async def sync_permissions(self, role: Role, permissions: Any) -> Role:
        """Replace every permission of a role with the given ones."""
        stored = await self._collect_permissions(role, permissions)
        try:
            await self._repository.detach_permissions(role.id)
            await self._repository.attach_permissions(role.id, [p.id for p in stored])
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Synced {len(stored)} permissions on role {role.name}")
        return await self.find_by_id(role.id, role.guard_name)

    async def _collect_permissions(self, role: Role, permissions: Any) -> List[Permission]:
        collected = {}
        for ref in flatten_refs(permissions):
            if ref is None or ref == "":
                continue
            permission = await self._permissions.resolve(ref, role.guard_name)
            self._ensure_shares_guard(role, permission)
            collected.setdefault(permission.id, permission)
        return list(collected.values())

    async def _has_wildcard_permission(self, role: Role, permission: PermissionRef) -> bool:
        if not isinstance(permission, str):
            resolved = await self._permissions.resolve(permission, role.guard_name)
            self._ensure_shares_guard(role, resolved)
            permission = resolved.name

        requested = WildcardPermission(permission)
        return any(
            WildcardPermission(owned.name).implies(requested)
            for owned in role.permissions
            if owned.guard_name == role.guard_name
        )

    @staticmethod
    def _ensure_shares_guard(role: Role, permission: Permission) -> None:
        if permission.guard_name != role.guard_name:
            raise GuardMismatchError.create(permission.guard_name, [role.guard_name])

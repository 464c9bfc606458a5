"""
Authorization service: decides whether a principal may perform an action.

A principal holds a permission when it is granted directly or through any of
its roles. With wildcard permissions enabled the check instead walks every
permission the principal holds and asks whether one of them implies the
requested name.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ....config.settings import PermissionSettings
from ....core.exceptions import (
    PermissionNotFoundError,
    PrincipalNotPersistedError,
)
from ...guards.guard_resolver import GuardResolver
from ..entities.permission import Permission
from ..entities.principal import Principal
from ..entities.protocols import PrincipalPermissionRepository
from ..entities.wildcard import WildcardPermission
from .permission_registrar import PermissionRegistrar
from .permission_service import PermissionRef, PermissionService, flatten_refs

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Permission checks and direct grants for principals."""

    def __init__(
        self,
        settings: PermissionSettings,
        guard_resolver: GuardResolver,
        permission_service: PermissionService,
        principal_repository: PrincipalPermissionRepository,
        registrar: PermissionRegistrar,
    ):
        self._settings = settings
        self._guards = guard_resolver
        self._permissions = permission_service
        self._principals = principal_repository
        self._registrar = registrar

    # Checks

    async def has_permission(
        self,
        principal: Principal,
        permission: PermissionRef,
        guard_name: Optional[str] = None,
    ) -> bool:
        """Determine if the principal may perform the given permission.

        Args:
            principal: Principal being checked
            permission: Permission name, id or entity
            guard_name: Guard to resolve names in; defaults to the principal's guard

        Raises:
            PermissionNotFoundError: If the reference does not resolve in the guard
            InvalidPermissionArgumentError: If the reference has an unsupported type
        """
        guard_name = guard_name or self._guards.default_guard_for(principal)

        if self._settings.enable_wildcard_permission:
            return await self.has_wildcard_permission(principal, permission, guard_name)

        permission = await self._permissions.resolve_in_guard(permission, guard_name)
        return self._holds_direct(principal, permission) or self._holds_via_role(principal, permission)

    async def check_permission(
        self,
        principal: Principal,
        permission: PermissionRef,
        guard_name: Optional[str] = None,
    ) -> bool:
        """Same as has_permission, but unknown permissions deny instead of raising."""
        try:
            return await self.has_permission(principal, permission, guard_name)
        except PermissionNotFoundError:
            return False

    async def has_any_permission(
        self,
        principal: Principal,
        permissions: Iterable[PermissionRef],
        guard_name: Optional[str] = None,
    ) -> bool:
        """Determine if the principal has any of the given permissions.

        Unknown permissions count as not held.
        """
        for permission in flatten_refs(permissions):
            if await self.check_permission(principal, permission, guard_name):
                return True
        return False

    async def has_all_permissions(
        self,
        principal: Principal,
        permissions: Iterable[PermissionRef],
        guard_name: Optional[str] = None,
    ) -> bool:
        """Determine if the principal has all of the given permissions.

        Raises:
            PermissionNotFoundError: If one of the permissions does not exist
        """
        for permission in flatten_refs(permissions):
            if not await self.has_permission(principal, permission, guard_name):
                return False
        return True

    async def has_direct_permission(self, principal: Principal, permission: PermissionRef) -> bool:
        """Determine if the permission is granted straight to the principal.

        Raises:
            PermissionNotFoundError: If a name or id does not resolve in the principal's guard
        """
        permission = await self._permissions.resolve_in_guard(
            permission, self._guards.default_guard_for(principal)
        )
        return self._holds_direct(principal, permission)

    async def has_all_direct_permissions(
        self,
        principal: Principal,
        permissions: Iterable[PermissionRef],
    ) -> bool:
        for permission in flatten_refs(permissions):
            if not await self.has_direct_permission(principal, permission):
                return False
        return True

    async def has_any_direct_permission(
        self,
        principal: Principal,
        permissions: Iterable[PermissionRef],
    ) -> bool:
        for permission in flatten_refs(permissions):
            if await self.has_direct_permission(principal, permission):
                return True
        return False

    async def has_wildcard_permission(
        self,
        principal: Principal,
        permission: PermissionRef,
        guard_name: Optional[str] = None,
    ) -> bool:
        """Check whether any permission the principal holds implies the requested one.

        Raises:
            MalformedPatternError: If the requested name is not a valid pattern
            InvalidPermissionArgumentError: If the reference has an unsupported type
        """
        guard_name = guard_name or self._guards.default_guard_for(principal)

        if not isinstance(permission, str):
            permission = (await self._permissions.resolve_in_guard(permission, guard_name)).name

        requested = WildcardPermission(permission)
        for owned in self.get_all_permissions(principal):
            if owned.guard_name != guard_name:
                continue
            if WildcardPermission(owned.name).implies(requested):
                return True
        return False

    # Collections

    def get_permissions_via_roles(self, principal: Principal) -> List[Permission]:
        """Get all permissions the principal holds through its roles."""
        return self._unique_sorted(
            permission
            for role in principal.roles
            for permission in role.permissions
        )

    def get_all_permissions(self, principal: Principal) -> List[Permission]:
        """Get all permissions the principal holds, directly and through roles."""
        permissions = list(principal.direct_permissions)
        if principal.roles:
            permissions.extend(self.get_permissions_via_roles(principal))
        return self._unique_sorted(permissions)

    def get_permission_names(self, principal: Principal) -> List[str]:
        """Get the names of the permissions granted straight to the principal."""
        return [permission.name for permission in principal.direct_permissions]

    # Mutations

    async def give_permission_to(self, principal: Principal, permissions: Any) -> Principal:
        """Grant permissions straight to a principal.

        Raises:
            PrincipalNotPersistedError: If the principal has no stored identity
            PermissionNotFoundError: If a name or id does not resolve
            GuardMismatchError: If a permission belongs to another guard
        """
        self._ensure_persisted(principal)
        permission_ids = await self._collect_permission_ids(principal, permissions)

        try:
            await self._principals.attach_permissions(principal, permission_ids)
            await self._reload(principal)
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Gave permissions {permission_ids} to principal {principal.principal_id}")
        return principal

    async def sync_permissions(self, principal: Principal, permissions: Any) -> Principal:
        """Replace every direct permission of a principal with the given ones.

        All references are resolved and guard-checked before anything is detached.
        """
        self._ensure_persisted(principal)
        permission_ids = await self._collect_permission_ids(principal, permissions)

        try:
            await self._principals.detach_permissions(principal)
            await self._principals.attach_permissions(principal, permission_ids)
            await self._reload(principal)
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Synced permissions {permission_ids} on principal {principal.principal_id}")
        return principal

    async def revoke_permission_to(self, principal: Principal, permissions: Any) -> Principal:
        """Revoke direct permissions from a principal.

        A single reference must resolve; in a list, names that do not exist
        in the principal's guards are skipped.
        """
        self._ensure_persisted(principal)

        if isinstance(permissions, (list, tuple, set, frozenset)):
            refs = list(flatten_refs(permissions))
            names = [ref for ref in refs if isinstance(ref, str)]
            stored = await self._permissions.get_stored_permissions(
                names, self._guards.names_for(principal) or [self._guards.default_guard_for(principal)]
            )
            for ref in refs:
                if not isinstance(ref, str):
                    stored.append(await self._resolve_for(principal, ref))
        else:
            stored = [await self._resolve_for(principal, permissions)]

        for permission in stored:
            self._guards.ensure_shares_guard(principal, permission)
        permission_ids = list(dict.fromkeys(permission.id for permission in stored))

        try:
            await self._principals.detach_permissions(principal, permission_ids)
            await self._reload(principal)
        finally:
            await self._registrar.forget_cached_permissions()

        logger.info(f"Revoked permissions {permission_ids} from principal {principal.principal_id}")
        return principal

    async def detach_all(self, principal: Principal) -> int:
        """Detach every direct permission; call before deleting a principal."""
        try:
            detached = await self._principals.detach_permissions(principal)
            principal.refresh_permissions([])
        finally:
            await self._registrar.forget_cached_permissions()
        return detached

    # Helpers

    def _holds_direct(self, principal: Principal, permission: Permission) -> bool:
        return any(owned.id == permission.id for owned in principal.direct_permissions)

    def _holds_via_role(self, principal: Principal, permission: Permission) -> bool:
        role_ids = permission.role_ids
        return any(role.id in role_ids for role in principal.roles)

    async def _resolve_for(self, principal: Principal, permission: PermissionRef) -> Permission:
        return await self._permissions.resolve(permission, self._guards.default_guard_for(principal))

    async def _collect_permission_ids(self, principal: Principal, permissions: Any) -> List[int]:
        collected: Dict[int, Permission] = {}
        for ref in flatten_refs(permissions):
            if ref is None or ref == "":
                continue
            permission = await self._resolve_for(principal, ref)
            self._guards.ensure_shares_guard(principal, permission)
            collected.setdefault(permission.id, permission)
        return list(collected)

    async def _reload(self, principal: Principal) -> None:
        principal.refresh_permissions(await self._principals.get_direct_permissions(principal))

    @staticmethod
    def _ensure_persisted(principal: Principal) -> None:
        if principal.principal_id is None:
            raise PrincipalNotPersistedError(
                "Permissions can only be granted to a persisted principal",
                "PRINCIPAL_NOT_PERSISTED",
            )

    @staticmethod
    def _unique_sorted(permissions: Iterable[Permission]) -> List[Permission]:
        unique: Dict[int, Permission] = {}
        for permission in permissions:
            unique.setdefault(permission.id, permission)
        return sorted(unique.values())

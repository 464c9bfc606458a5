"""In-memory implementations of the permission, role and principal stores.

Useful for tests and for services that define their permissions in code.
Rows live in a shared InMemoryStorage so the three repositories see the same
associations, the way tables do in a database.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ....core.exceptions import PermissionAlreadyExistsError, RoleAlreadyExistsError
from ..entities.permission import Permission
from ..entities.principal import Principal
from ..entities.role import Role

logger = logging.getLogger(__name__)


@dataclass
class InMemoryStorage:
    """Tables backing the in-memory repositories."""

    permissions: Dict[int, Tuple[str, str]] = field(default_factory=dict)
    roles: Dict[int, Tuple[str, str]] = field(default_factory=dict)
    role_permissions: Set[Tuple[int, int]] = field(default_factory=set)
    principal_permissions: Dict[Any, List[int]] = field(default_factory=dict)
    _permission_ids: Any = field(default_factory=lambda: itertools.count(1), repr=False)
    _role_ids: Any = field(default_factory=lambda: itertools.count(1), repr=False)

    def next_permission_id(self) -> int:
        return next(self._permission_ids)

    def next_role_id(self) -> int:
        return next(self._role_ids)

    def roles_of(self, permission_id: int) -> List[Role]:
        return [
            Role(id=role_id, name=name, guard_name=guard_name)
            for role_id, (name, guard_name) in sorted(self.roles.items())
            if (role_id, permission_id) in self.role_permissions
        ]

    def permissions_of(self, role_id: int) -> List[Permission]:
        return [
            Permission(id=permission_id, name=name, guard_name=guard_name)
            for permission_id, (name, guard_name) in sorted(self.permissions.items())
            if (role_id, permission_id) in self.role_permissions
        ]


class InMemoryPermissionRepository:
    """Permission store over InMemoryStorage."""

    def __init__(self, storage: InMemoryStorage):
        self._storage = storage

    def _build(self, permission_id: int, with_roles: bool = True) -> Permission:
        name, guard_name = self._storage.permissions[permission_id]
        roles = self._storage.roles_of(permission_id) if with_roles else ()
        return Permission(id=permission_id, name=name, guard_name=guard_name, roles=tuple(roles))

    def _find(self, name: str, guard_name: str) -> Optional[int]:
        for permission_id, row in self._storage.permissions.items():
            if row == (name, guard_name):
                return permission_id
        return None

    async def get_by_name(self, name: str, guard_name: str) -> Optional[Permission]:
        permission_id = self._find(name, guard_name)
        return self._build(permission_id) if permission_id is not None else None

    async def get_by_id(self, permission_id: int, guard_name: str) -> Optional[Permission]:
        row = self._storage.permissions.get(permission_id)
        if row is None or row[1] != guard_name:
            return None
        return self._build(permission_id)

    async def find_or_create(self, name: str, guard_name: str) -> Permission:
        permission = await self.get_by_name(name, guard_name)
        if permission is None:
            permission = await self.create(name, guard_name)
        return permission

    async def create(self, name: str, guard_name: str) -> Permission:
        if self._find(name, guard_name) is not None:
            raise PermissionAlreadyExistsError.create(name, guard_name)
        permission_id = self._storage.next_permission_id()
        self._storage.permissions[permission_id] = (name, guard_name)
        logger.debug(f"Stored permission {permission_id}: {name}@{guard_name}")
        return self._build(permission_id)

    async def list_all(self, with_roles: bool = True) -> List[Permission]:
        return [
            self._build(permission_id, with_roles)
            for permission_id in sorted(self._storage.permissions)
        ]

    async def list_by_names(
        self,
        names: Iterable[str],
        guard_names: Iterable[str],
    ) -> List[Permission]:
        names = set(names)
        guard_names = set(guard_names)
        return [
            self._build(permission_id)
            for permission_id, (name, guard_name) in sorted(self._storage.permissions.items())
            if name in names and guard_name in guard_names
        ]

    async def list_by_ids(self, permission_ids: Iterable[int]) -> List[Permission]:
        return [
            self._build(permission_id)
            for permission_id in sorted(set(permission_ids))
            if permission_id in self._storage.permissions
        ]

    async def delete(self, permission_id: int) -> bool:
        if self._storage.permissions.pop(permission_id, None) is None:
            return False
        self._storage.role_permissions = {
            link for link in self._storage.role_permissions if link[1] != permission_id
        }
        for principal_id, permission_ids in self._storage.principal_permissions.items():
            self._storage.principal_permissions[principal_id] = [
                pid for pid in permission_ids if pid != permission_id
            ]
        return True


class InMemoryRoleRepository:
    """Role store over InMemoryStorage."""

    def __init__(self, storage: InMemoryStorage):
        self._storage = storage

    def _build(self, role_id: int) -> Role:
        name, guard_name = self._storage.roles[role_id]
        return Role(
            id=role_id,
            name=name,
            guard_name=guard_name,
            permissions=tuple(self._storage.permissions_of(role_id)),
        )

    def _find(self, name: str, guard_name: str) -> Optional[int]:
        for role_id, row in self._storage.roles.items():
            if row == (name, guard_name):
                return role_id
        return None

    async def get_by_name(self, name: str, guard_name: str) -> Optional[Role]:
        role_id = self._find(name, guard_name)
        return self._build(role_id) if role_id is not None else None

    async def get_by_id(self, role_id: int, guard_name: str) -> Optional[Role]:
        row = self._storage.roles.get(role_id)
        if row is None or row[1] != guard_name:
            return None
        return self._build(role_id)

    async def find_or_create(self, name: str, guard_name: str) -> Role:
        role = await self.get_by_name(name, guard_name)
        if role is None:
            role = await self.create(name, guard_name)
        return role

    async def create(self, name: str, guard_name: str) -> Role:
        if self._find(name, guard_name) is not None:
            raise RoleAlreadyExistsError.create(name, guard_name)
        role_id = self._storage.next_role_id()
        self._storage.roles[role_id] = (name, guard_name)
        return self._build(role_id)

    async def delete(self, role_id: int) -> bool:
        if self._storage.roles.pop(role_id, None) is None:
            return False
        await self.detach_permissions(role_id)
        return True

    async def attach_permissions(self, role_id: int, permission_ids: Sequence[int]) -> int:
        added = 0
        for permission_id in permission_ids:
            link = (role_id, permission_id)
            if link not in self._storage.role_permissions:
                self._storage.role_permissions.add(link)
                added += 1
        return added

    async def detach_permissions(
        self,
        role_id: int,
        permission_ids: Optional[Sequence[int]] = None,
    ) -> int:
        before = len(self._storage.role_permissions)
        self._storage.role_permissions = {
            link for link in self._storage.role_permissions
            if link[0] != role_id or (permission_ids is not None and link[1] not in permission_ids)
        }
        return before - len(self._storage.role_permissions)


class InMemoryPrincipalPermissionRepository:
    """Principal -> permission association over InMemoryStorage."""

    def __init__(self, storage: InMemoryStorage):
        self._storage = storage
        self._permissions = InMemoryPermissionRepository(storage)

    async def attach_permissions(self, principal: Principal, permission_ids: Sequence[int]) -> int:
        owned = self._storage.principal_permissions.setdefault(principal.principal_id, [])
        added = 0
        for permission_id in permission_ids:
            if permission_id not in owned:
                owned.append(permission_id)
                added += 1
        return added

    async def detach_permissions(
        self,
        principal: Principal,
        permission_ids: Optional[Sequence[int]] = None,
    ) -> int:
        owned = self._storage.principal_permissions.get(principal.principal_id, [])
        kept = [] if permission_ids is None else [pid for pid in owned if pid not in permission_ids]
        self._storage.principal_permissions[principal.principal_id] = kept
        return len(owned) - len(kept)

    async def get_direct_permissions(self, principal: Principal) -> List[Permission]:
        owned = self._storage.principal_permissions.get(principal.principal_id, [])
        return await self._permissions.list_by_ids(owned)

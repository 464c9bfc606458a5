"""Protocol interfaces for the stores the authorization engine depends on.

Persistence is owned by the host application. Implementations must honor the
(name, guard_name) uniqueness of permissions and roles, and must detach
associations when a permission or role is deleted. Cache invalidation after a
write is driven by the services in this package, not by the stores.
"""

from abc import abstractmethod
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from .permission import Permission
from .principal import Principal
from .role import Role


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission data access operations."""

    @abstractmethod
    async def get_by_name(self, name: str, guard_name: str) -> Optional[Permission]:
        """Get permission by name within a guard."""
        ...

    @abstractmethod
    async def get_by_id(self, permission_id: int, guard_name: str) -> Optional[Permission]:
        """Get permission by id within a guard."""
        ...

    @abstractmethod
    async def find_or_create(self, name: str, guard_name: str) -> Permission:
        """Return the stored permission, creating it when missing."""
        ...

    @abstractmethod
    async def create(self, name: str, guard_name: str) -> Permission:
        """Create a permission; raises PermissionAlreadyExistsError on duplicates."""
        ...

    @abstractmethod
    async def list_all(self, with_roles: bool = True) -> List[Permission]:
        """List every permission ordered by id, optionally with roles attached."""
        ...

    @abstractmethod
    async def list_by_names(
        self,
        names: Iterable[str],
        guard_names: Iterable[str],
    ) -> List[Permission]:
        """List permissions whose name and guard are in the given sets."""
        ...

    @abstractmethod
    async def delete(self, permission_id: int) -> bool:
        """Delete a permission and detach it from roles and principals."""
        ...


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role data access operations."""

    @abstractmethod
    async def get_by_name(self, name: str, guard_name: str) -> Optional[Role]:
        """Get role, with permissions loaded, by name within a guard."""
        ...

    @abstractmethod
    async def get_by_id(self, role_id: int, guard_name: str) -> Optional[Role]:
        """Get role, with permissions loaded, by id within a guard."""
        ...

    @abstractmethod
    async def find_or_create(self, name: str, guard_name: str) -> Role:
        ...

    @abstractmethod
    async def create(self, name: str, guard_name: str) -> Role:
        """Create a role; raises RoleAlreadyExistsError on duplicates."""
        ...

    @abstractmethod
    async def delete(self, role_id: int) -> bool:
        """Delete a role and detach its permissions and principals."""
        ...

    @abstractmethod
    async def attach_permissions(self, role_id: int, permission_ids: Sequence[int]) -> int:
        """Attach permissions to a role, ignoring existing links. Returns rows added."""
        ...

    @abstractmethod
    async def detach_permissions(
        self,
        role_id: int,
        permission_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Detach the given permissions, or all of them when None. Returns rows removed."""
        ...


@runtime_checkable
class PrincipalPermissionRepository(Protocol):
    """Protocol for the principal -> permission association."""

    @abstractmethod
    async def attach_permissions(self, principal: Principal, permission_ids: Sequence[int]) -> int:
        """Attach permissions to a principal, ignoring existing links. Returns rows added."""
        ...

    @abstractmethod
    async def detach_permissions(
        self,
        principal: Principal,
        permission_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Detach the given permissions, or all of them when None. Returns rows removed."""
        ...

    @abstractmethod
    async def get_direct_permissions(self, principal: Principal) -> List[Permission]:
        """Load the permissions granted straight to a principal."""
        ...

"""Principal capability interface.

Principals (users, API clients, service accounts) live in the host
application. The engine only reads their permission and role collections and
asks for an explicit guard, so each principal type implements this protocol
instead of being probed for attributes at runtime.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from .permission import Permission
from .role import Role


@runtime_checkable
class Principal(Protocol):
    """Capabilities the authorization engine needs from a principal."""

    @property
    def principal_id(self) -> Optional[Any]:
        """Stored identity, or None while the principal is not persisted."""
        ...

    @property
    def direct_permissions(self) -> Sequence[Permission]:
        """Permissions granted straight to the principal."""
        ...

    @property
    def roles(self) -> Sequence[Role]:
        """Roles held by the principal, with their permissions loaded."""
        ...

    def guard_name(self) -> Optional[str]:
        """Explicit guard of this principal, or None to use the configured mapping."""
        ...

    def refresh_permissions(self, permissions: Sequence[Permission]) -> None:
        """Replace the loaded direct permissions after a grant or revoke."""
        ...


@dataclass
class Subject:
    """Plain principal implementation for services without their own user model."""

    principal_id: Optional[Any] = None
    direct_permissions: List[Permission] = field(default_factory=list)
    roles: List[Role] = field(default_factory=list)
    guard: Optional[str] = None

    def guard_name(self) -> Optional[str]:
        return self.guard

    def refresh_permissions(self, permissions: Sequence[Permission]) -> None:
        self.direct_permissions = list(permissions)

"""Role domain entity."""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Tuple

from .permission import Permission


@dataclass(frozen=True, order=True)
class Role:
    """Named collection of permissions scoped to a guard."""

    id: int
    name: str
    guard_name: str
    permissions: Tuple[Permission, ...] = field(default=(), compare=False, repr=False)

    @property
    def permission_ids(self) -> FrozenSet[int]:
        return frozenset(permission.id for permission in self.permissions)

    def with_permissions(self, permissions: Iterable[Permission]) -> "Role":
        """Return a copy holding the given permissions."""
        return replace(self, permissions=tuple(permissions))

    def __str__(self) -> str:
        return self.name

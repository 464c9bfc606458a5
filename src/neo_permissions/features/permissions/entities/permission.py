"""Permission domain entity.

A permission is identified by its (name, guard_name) pair and knows the roles
it is attached to, so role-inherited checks can be answered from a cached
snapshot without another store round trip.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, FrozenSet, Iterable, Tuple

if TYPE_CHECKING:
    from .role import Role


@dataclass(frozen=True, order=True)
class Permission:
    """Permission scoped to a guard. Natural ordering follows the id."""

    id: int
    name: str
    guard_name: str
    roles: Tuple["Role", ...] = field(default=(), compare=False, repr=False)

    @property
    def role_ids(self) -> FrozenSet[int]:
        """Ids of the roles this permission is attached to."""
        return frozenset(role.id for role in self.roles)

    def with_roles(self, roles: Iterable["Role"]) -> "Permission":
        """Return a copy attached to the given roles."""
        return replace(self, roles=tuple(roles))

    def __str__(self) -> str:
        return self.name

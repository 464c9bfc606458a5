"""Permission entities package.

Domain entities and protocols for permission and role management.
"""

from .permission import Permission
from .role import Role
from .principal import Principal, Subject
from .wildcard import WildcardPermission, parse_pattern, WILDCARD_TOKEN
from .protocols import (
    PermissionRepository,
    RoleRepository,
    PrincipalPermissionRepository,
)

__all__ = [
    # Domain entities
    "Permission",
    "Role",
    "Principal",
    "Subject",
    "WildcardPermission",
    "parse_pattern",
    "WILDCARD_TOKEN",

    # Protocols
    "PermissionRepository",
    "RoleRepository",
    "PrincipalPermissionRepository",
]

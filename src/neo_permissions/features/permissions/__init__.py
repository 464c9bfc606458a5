"""Permissions feature: entities, stores, cache registrar and authorization services."""

from .entities import (
    Permission,
    Role,
    Principal,
    Subject,
    WildcardPermission,
    PermissionRepository,
    RoleRepository,
    PrincipalPermissionRepository,
)
from .repositories import (
    InMemoryStorage,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryPrincipalPermissionRepository,
)
from .services import (
    PermissionRegistrar,
    PermissionService,
    RoleService,
    AuthorizationService,
)
from .factory import PermissionComponents, create_permission_components

__all__ = [
    # Entities
    "Permission",
    "Role",
    "Principal",
    "Subject",
    "WildcardPermission",

    # Protocols
    "PermissionRepository",
    "RoleRepository",
    "PrincipalPermissionRepository",

    # Repositories
    "InMemoryStorage",
    "InMemoryPermissionRepository",
    "InMemoryRoleRepository",
    "InMemoryPrincipalPermissionRepository",

    # Services
    "PermissionRegistrar",
    "PermissionService",
    "RoleService",
    "AuthorizationService",

    # Factory
    "PermissionComponents",
    "create_permission_components",
]

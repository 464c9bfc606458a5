"""
neo-permissions: role and permission authorization engine.

Decides whether a principal may perform a named action from permissions
granted directly and permissions inherited through roles, with optional
hierarchical wildcard matching such as ``posts.*.edit``.
"""

from .__version__ import __version__
from .config import PermissionSettings, get_settings
from .core.exceptions import (
    NeoPermissionsError,
    PermissionNotFoundError,
    RoleNotFoundError,
    AlreadyExistsError,
    PermissionAlreadyExistsError,
    RoleAlreadyExistsError,
    GuardMismatchError,
    MalformedPatternError,
    InvalidPermissionArgumentError,
    PrincipalNotPersistedError,
    CacheInvalidationError,
)
from .features.cache import CacheBackend, CacheManager, MemoryCacheBackend, RedisCacheBackend
from .features.guards import GuardResolver
from .features.permissions import (
    Permission,
    Role,
    Principal,
    Subject,
    WildcardPermission,
    PermissionRegistrar,
    PermissionService,
    RoleService,
    AuthorizationService,
    PermissionComponents,
    create_permission_components,
)

__all__ = [
    "__version__",

    # Configuration
    "PermissionSettings",
    "get_settings",

    # Exceptions
    "NeoPermissionsError",
    "PermissionNotFoundError",
    "RoleNotFoundError",
    "AlreadyExistsError",
    "PermissionAlreadyExistsError",
    "RoleAlreadyExistsError",
    "GuardMismatchError",
    "MalformedPatternError",
    "InvalidPermissionArgumentError",
    "PrincipalNotPersistedError",
    "CacheInvalidationError",

    # Cache
    "CacheBackend",
    "CacheManager",
    "MemoryCacheBackend",
    "RedisCacheBackend",

    # Guards
    "GuardResolver",

    # Permissions
    "Permission",
    "Role",
    "Principal",
    "Subject",
    "WildcardPermission",
    "PermissionRegistrar",
    "PermissionService",
    "RoleService",
    "AuthorizationService",
    "PermissionComponents",
    "create_permission_components",
]

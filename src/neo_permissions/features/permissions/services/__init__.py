"""Permission services."""

from .permission_registrar import PermissionRegistrar
from .permission_service import PermissionService, PermissionRef, flatten_refs
from .role_service import RoleService
from .authorization_service import AuthorizationService

__all__ = [
    "PermissionRegistrar",
    "PermissionService",
    "PermissionRef",
    "flatten_refs",
    "RoleService",
    "AuthorizationService",
]

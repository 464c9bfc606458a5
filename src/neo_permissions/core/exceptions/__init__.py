"""Exception hierarchy for neo-permissions."""

from .base import (
    NeoPermissionsError,
    ConfigurationError,
    create_error_response,
)
from .authorization import (
    AuthorizationError,
    PermissionNotFoundError,
    RoleNotFoundError,
    AlreadyExistsError,
    PermissionAlreadyExistsError,
    RoleAlreadyExistsError,
    GuardMismatchError,
    MalformedPatternError,
    InvalidPermissionArgumentError,
    PrincipalNotPersistedError,
)
from .infrastructure import (
    CacheError,
    CacheBackendError,
    CacheInvalidationError,
)

__all__ = [
    # Base
    "NeoPermissionsError",
    "ConfigurationError",
    "create_error_response",

    # Authorization
    "AuthorizationError",
    "PermissionNotFoundError",
    "RoleNotFoundError",
    "AlreadyExistsError",
    "PermissionAlreadyExistsError",
    "RoleAlreadyExistsError",
    "GuardMismatchError",
    "MalformedPatternError",
    "InvalidPermissionArgumentError",
    "PrincipalNotPersistedError",

    # Infrastructure
    "CacheError",
    "CacheBackendError",
    "CacheInvalidationError",
]

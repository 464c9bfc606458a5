"""Permission repositories."""

from .memory_repository import (
    InMemoryStorage,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemoryPrincipalPermissionRepository,
)

__all__ = [
    "InMemoryStorage",
    "InMemoryPermissionRepository",
    "InMemoryRoleRepository",
    "InMemoryPrincipalPermissionRepository",
]

"""
Factory functions for wiring the permission engine.

Builds the registrar, guard resolver and services around host-supplied stores
with a single settings instance.
"""
from dataclasses import dataclass
from typing import Optional

from ...config.settings import PermissionSettings
from ..cache.adapters.memory_adapter import MemoryCacheBackend
from ..cache.services.cache_manager import CacheManager
from ..guards.guard_resolver import GuardResolver
from .entities.protocols import (
    PermissionRepository,
    PrincipalPermissionRepository,
    RoleRepository,
)
from .services.authorization_service import AuthorizationService
from .services.permission_registrar import PermissionRegistrar
from .services.permission_service import PermissionService
from .services.role_service import RoleService


@dataclass(frozen=True)
class PermissionComponents:
    """Wired components of the permission engine."""
    settings: PermissionSettings
    registrar: PermissionRegistrar
    guards: GuardResolver
    permissions: PermissionService
    roles: RoleService
    authorization: AuthorizationService


def create_default_cache_manager() -> CacheManager:
    """Create a cache manager with a single process-local backend."""
    return CacheManager({"memory": MemoryCacheBackend()}, default="memory")


def create_permission_components(
    settings: PermissionSettings,
    permission_repository: PermissionRepository,
    role_repository: RoleRepository,
    principal_repository: PrincipalPermissionRepository,
    cache_manager: Optional[CacheManager] = None,
    guard_resolver: Optional[GuardResolver] = None,
) -> PermissionComponents:
    """
    Create the permission engine with proper dependencies.

    Args:
        settings: Settings shared by every component
        permission_repository: Store for permissions
        role_repository: Store for roles and role -> permission links
        principal_repository: Store for principal -> permission links
        cache_manager: Backends the cache_store setting selects from;
            defaults to a process-local memory backend
        guard_resolver: Resolver with principal type registrations

    Returns:
        PermissionComponents sharing one registrar
    """
    if cache_manager is None:
        cache_manager = create_default_cache_manager()
    if guard_resolver is None:
        guard_resolver = GuardResolver(settings)

    registrar = PermissionRegistrar(settings, permission_repository, cache_manager)
    permission_service = PermissionService(settings, permission_repository, registrar)

    return PermissionComponents(
        settings=settings,
        registrar=registrar,
        guards=guard_resolver,
        permissions=permission_service,
        roles=RoleService(settings, role_repository, permission_service, registrar),
        authorization=AuthorizationService(
            settings,
            guard_resolver,
            permission_service,
            principal_repository,
            registrar,
        ),
    )

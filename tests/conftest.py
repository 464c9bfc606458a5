"""Pytest configuration and fixtures for neo-permissions tests."""

from datetime import timedelta

import pytest
import pytest_asyncio

from neo_permissions.config.settings import PermissionSettings
from neo_permissions.features.cache.adapters.memory_adapter import MemoryCacheBackend
from neo_permissions.features.cache.services.cache_manager import CacheManager
from neo_permissions.features.permissions.entities.principal import Subject
from neo_permissions.features.permissions.factory import create_permission_components
from neo_permissions.features.permissions.repositories.memory_repository import (
    InMemoryPermissionRepository,
    InMemoryPrincipalPermissionRepository,
    InMemoryRoleRepository,
    InMemoryStorage,
)


class AdminUser(Subject):
    """Principal type mapped to the admin guard through configuration."""
    pass


@pytest.fixture
def settings():
    """Settings with caching on and wildcard matching off."""
    return PermissionSettings(
        enable_cache=True,
        cache_key="test.permission.cache",
        cache_expiration_time=timedelta(minutes=5),
        enable_wildcard_permission=False,
        default_guard="web",
        guards={"admin": f"{AdminUser.__module__}.{AdminUser.__qualname__}"},
    )


@pytest.fixture
def wildcard_settings(settings):
    """Settings with wildcard matching on."""
    return settings.model_copy(update={"enable_wildcard_permission": True})


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def permission_repository(storage):
    return InMemoryPermissionRepository(storage)


@pytest.fixture
def role_repository(storage):
    return InMemoryRoleRepository(storage)


@pytest.fixture
def principal_repository(storage):
    return InMemoryPrincipalPermissionRepository(storage)


@pytest.fixture
def cache_backend():
    return MemoryCacheBackend()


@pytest.fixture
def cache_manager(cache_backend):
    return CacheManager({"memory": cache_backend}, default="memory")


@pytest.fixture
def components(settings, permission_repository, role_repository, principal_repository, cache_manager):
    """Engine wired over the in-memory stores."""
    return create_permission_components(
        settings,
        permission_repository,
        role_repository,
        principal_repository,
        cache_manager=cache_manager,
    )


@pytest.fixture
def wildcard_components(
    wildcard_settings, permission_repository, role_repository, principal_repository, cache_manager
):
    """Engine wired over the in-memory stores with wildcard matching on."""
    return create_permission_components(
        wildcard_settings,
        permission_repository,
        role_repository,
        principal_repository,
        cache_manager=cache_manager,
    )


@pytest_asyncio.fixture
async def seeded(permission_repository, role_repository):
    """Sample permissions and a writer role holding posts.edit."""
    edit = await permission_repository.create("posts.edit", "web")
    view = await permission_repository.create("posts.view", "web")
    delete = await permission_repository.create("posts.delete", "web")
    admin_edit = await permission_repository.create("posts.edit", "admin")
    writer = await role_repository.create("writer", "web")
    await role_repository.attach_permissions(writer.id, [edit.id])
    return {
        "edit": edit,
        "view": view,
        "delete": delete,
        "admin_edit": admin_edit,
        "writer": await role_repository.get_by_id(writer.id, "web"),
    }


@pytest.fixture
def user():
    """Persisted principal in the default guard."""
    return Subject(principal_id=1)


@pytest.fixture
def admin_user():
    """Persisted principal resolved to the admin guard by configuration."""
    return AdminUser(principal_id=2)

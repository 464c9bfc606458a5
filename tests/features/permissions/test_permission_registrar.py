"""Tests for the permission registrar snapshot cache."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from neo_permissions.core.exceptions import CacheInvalidationError
from neo_permissions.features.cache.adapters.memory_adapter import MemoryCacheBackend
from neo_permissions.features.cache.services.cache_manager import CacheManager
from neo_permissions.features.permissions.services.permission_registrar import PermissionRegistrar


class TestPermissionRegistrar:
    """Test snapshot loading, filtering and invalidation."""

    @pytest.fixture
    def registrar(self, settings, permission_repository, cache_manager):
        return PermissionRegistrar(settings, permission_repository, cache_manager)

    @pytest.mark.asyncio
    async def test_loads_all_permissions_with_roles(self, registrar, seeded):
        permissions = await registrar.get_permissions()

        assert [p.name for p in permissions] == ["posts.edit", "posts.view", "posts.delete", "posts.edit"]
        assert permissions[0].role_ids == {seeded["writer"].id}

    @pytest.mark.asyncio
    async def test_filters_by_attribute_equality(self, registrar, seeded):
        permissions = await registrar.get_permissions({"name": "posts.edit", "guard_name": "admin"})

        assert permissions == [seeded["admin_edit"]]

    @pytest.mark.asyncio
    async def test_consecutive_reads_query_store_once(self, registrar, permission_repository, seeded):
        with patch.object(permission_repository, "list_all", wraps=permission_repository.list_all) as list_all:
            first = await registrar.get_permissions()
            second = await registrar.get_permissions()

        assert first == second
        list_all.assert_awaited_once_with(with_roles=True)

    @pytest.mark.asyncio
    async def test_concurrent_cold_reads_share_one_load(self, registrar, permission_repository, seeded):
        original = permission_repository.list_all

        async def slow_list_all(with_roles=True):
            await asyncio.sleep(0)
            return await original(with_roles=with_roles)

        with patch.object(permission_repository, "list_all", AsyncMock(side_effect=slow_list_all)) as list_all:
            first, second = await asyncio.gather(
                registrar.get_permissions(),
                registrar.get_permissions(),
            )
            third = await registrar.get_permissions()

        list_all.assert_awaited_once_with(with_roles=True)
        assert first == second == third
        assert len(first) == 4

    @pytest.mark.asyncio
    async def test_filtering_never_mutates_snapshot(self, registrar, seeded):
        filtered = await registrar.get_permissions({"guard_name": "admin"})
        filtered.clear()

        assert len(await registrar.get_permissions()) == 4

    @pytest.mark.asyncio
    async def test_invalidate_forces_one_fresh_query(self, registrar, permission_repository, seeded):
        await registrar.get_permissions()
        await permission_repository.create("posts.publish", "web")

        assert len(await registrar.get_permissions()) == 4
        assert await registrar.forget_cached_permissions() is True

        with patch.object(permission_repository, "list_all", wraps=permission_repository.list_all) as list_all:
            permissions = await registrar.get_permissions()
            await registrar.get_permissions()

        assert len(permissions) == 5
        list_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_forget_without_snapshot_returns_false(self, registrar):
        assert await registrar.forget_cached_permissions() is False

    @pytest.mark.asyncio
    async def test_snapshot_shared_through_backend(
        self, settings, permission_repository, cache_manager, seeded
    ):
        first = PermissionRegistrar(settings, permission_repository, cache_manager)
        second = PermissionRegistrar(settings, permission_repository, cache_manager)
        await first.get_permissions()

        with patch.object(permission_repository, "list_all", wraps=permission_repository.list_all) as list_all:
            permissions = await second.get_permissions()

        list_all.assert_not_awaited()
        assert permissions == await first.get_permissions()
        assert permissions[0].role_ids == {seeded["writer"].id}

    @pytest.mark.asyncio
    async def test_clear_class_permissions_keeps_backend_entry(
        self, registrar, cache_backend, permission_repository, seeded
    ):
        await registrar.get_permissions()
        registrar.clear_class_permissions()

        assert await cache_backend.has("test.permission.cache")
        with patch.object(permission_repository, "list_all", wraps=permission_repository.list_all) as list_all:
            await registrar.get_permissions()
        list_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_disabled_always_queries_store(self, settings, permission_repository, cache_manager, seeded):
        registrar = PermissionRegistrar(
            settings.model_copy(update={"enable_cache": False}), permission_repository, cache_manager
        )

        with patch.object(permission_repository, "list_all", wraps=permission_repository.list_all) as list_all:
            await registrar.get_permissions()
            await registrar.get_permissions()

        assert list_all.await_count == 2

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, registrar, permission_repository):
        with patch.object(permission_repository, "list_all", AsyncMock(side_effect=RuntimeError("db down"))):
            with pytest.raises(RuntimeError, match="db down"):
                await registrar.get_permissions()

    @pytest.mark.asyncio
    async def test_backend_failure_on_forget_is_surfaced(self, settings, permission_repository):
        backend = MemoryCacheBackend()
        backend.delete = AsyncMock(side_effect=ConnectionError("cache down"))
        registrar = PermissionRegistrar(
            settings, permission_repository, CacheManager({"memory": backend}, default="memory")
        )

        with pytest.raises(CacheInvalidationError) as exc_info:
            await registrar.forget_cached_permissions()
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_invalidation_during_load_discards_stale_snapshot(
        self, registrar, permission_repository, seeded
    ):
        original = permission_repository.list_all

        async def list_all_then_invalidate(with_roles=True):
            permissions = await original(with_roles=with_roles)
            await registrar.forget_cached_permissions()
            return permissions

        with patch.object(permission_repository, "list_all", side_effect=list_all_then_invalidate):
            await registrar.get_permissions()

        await permission_repository.create("posts.publish", "web")
        assert len(await registrar.get_permissions()) == 5

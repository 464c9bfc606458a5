"""Tests for permission lookup and lifecycle."""

from unittest.mock import patch

import pytest

from neo_permissions.core.exceptions import (
    InvalidPermissionArgumentError,
    PermissionAlreadyExistsError,
    PermissionNotFoundError,
)
from neo_permissions.features.permissions.services.permission_service import flatten_refs


class TestPermissionService:
    """Test guard-scoped lookups and cache-invalidating writes."""

    @pytest.fixture
    def service(self, components):
        return components.permissions

    @pytest.mark.asyncio
    async def test_find_by_name_is_guard_scoped(self, service, seeded):
        assert await service.find_by_name("posts.edit", "web") == seeded["edit"]
        assert await service.find_by_name("posts.edit", "admin") == seeded["admin_edit"]
        assert await service.find_by_name("posts.edit") == seeded["edit"]

    @pytest.mark.asyncio
    async def test_find_by_name_missing(self, service, seeded):
        with pytest.raises(PermissionNotFoundError) as exc_info:
            await service.find_by_name("posts.view", "admin")

        assert exc_info.value.details == {"permission_name": "posts.view", "guard_name": "admin"}
        assert await service.get_by_name("posts.view", "admin") is None

    @pytest.mark.asyncio
    async def test_find_by_id_checks_guard(self, service, seeded):
        assert await service.find_by_id(seeded["admin_edit"].id, "admin") == seeded["admin_edit"]

        with pytest.raises(PermissionNotFoundError):
            await service.find_by_id(seeded["admin_edit"].id, "web")

    @pytest.mark.asyncio
    async def test_resolve_rejects_unsupported_types(self, service, seeded):
        with pytest.raises(InvalidPermissionArgumentError):
            await service.resolve({"name": "posts.edit"})

    @pytest.mark.asyncio
    async def test_resolve_rereads_entities_from_snapshot(self, service, seeded):
        resolved = await service.resolve(seeded["edit"])

        assert resolved == seeded["edit"]
        assert resolved.role_ids == {seeded["writer"].id}

        await service.delete(seeded["view"])
        with pytest.raises(PermissionNotFoundError):
            await service.resolve(seeded["view"])

    @pytest.mark.asyncio
    async def test_resolve_in_guard(self, service, seeded):
        assert await service.resolve_in_guard(seeded["admin_edit"], "admin") == seeded["admin_edit"]
        assert await service.resolve(seeded["admin_edit"], "web") == seeded["admin_edit"]

        with pytest.raises(PermissionNotFoundError):
            await service.resolve_in_guard(seeded["admin_edit"], "web")

    @pytest.mark.asyncio
    async def test_create_rejects_duplicates(self, service, seeded):
        with pytest.raises(PermissionAlreadyExistsError):
            await service.create("posts.edit", "web")

        created = await service.create("posts.edit", "api")
        assert await service.find_by_name("posts.edit", "api") == created

    @pytest.mark.asyncio
    async def test_find_or_create(self, service, components, seeded):
        existing = await service.find_or_create("posts.edit")
        assert existing == seeded["edit"]

        with patch.object(
            components.registrar,
            "forget_cached_permissions",
            wraps=components.registrar.forget_cached_permissions,
        ) as forget:
            created = await service.find_or_create("posts.publish")

        forget.assert_awaited_once()
        assert created.name == "posts.publish"
        assert await service.find_by_name("posts.publish") == created

    @pytest.mark.asyncio
    async def test_delete_detaches_and_invalidates(self, service, components, user, principal_repository, seeded):
        user.roles = [seeded["writer"]]
        await components.authorization.give_permission_to(user, "posts.edit")

        assert await service.delete(seeded["edit"]) is True
        assert await principal_repository.get_direct_permissions(user) == []
        assert await service.delete(seeded["edit"]) is False
        assert await components.authorization.check_permission(user, "posts.edit") is False

    @pytest.mark.asyncio
    async def test_get_stored_permissions(self, service, seeded):
        permissions = await service.get_stored_permissions(
            ["posts.edit", "posts.view", "posts.archive"], ["admin"]
        )

        assert permissions == [seeded["admin_edit"]]
        assert await service.get_stored_permissions([], ["web"]) == []


class TestFlattenRefs:
    """Test flattening of permission references."""

    def test_single_reference(self):
        assert list(flatten_refs("posts.edit")) == ["posts.edit"]

    def test_nested_sequences(self):
        assert list(flatten_refs(["a", ("b", ["c"]), 4])) == ["a", "b", "c", 4]

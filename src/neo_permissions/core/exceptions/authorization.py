"""Authorization exceptions for permission and role resolution."""

from typing import Any, Iterable, Optional

from .base import NeoPermissionsError


class AuthorizationError(NeoPermissionsError):
    """Base exception for authorization errors."""
    pass


class PermissionNotFoundError(AuthorizationError):
    """Raised when a permission name or id does not resolve under a guard."""

    @classmethod
    def create(cls, permission_name: str, guard_name: str = "") -> "PermissionNotFoundError":
        return cls(
            f"There is no permission named `{permission_name}` for guard `{guard_name}`.",
            "PERMISSION_NOT_FOUND",
            {"permission_name": permission_name, "guard_name": guard_name},
        )

    @classmethod
    def with_id(cls, permission_id: Any, guard_name: str = "") -> "PermissionNotFoundError":
        return cls(
            f"There is no permission with id `{permission_id}` for guard `{guard_name}`.",
            "PERMISSION_NOT_FOUND",
            {"permission_id": permission_id, "guard_name": guard_name},
        )


class RoleNotFoundError(AuthorizationError):
    """Raised when a role name or id does not resolve under a guard."""

    @classmethod
    def create(cls, role_name: str, guard_name: str = "") -> "RoleNotFoundError":
        return cls(
            f"There is no role named `{role_name}` for guard `{guard_name}`.",
            "ROLE_NOT_FOUND",
            {"role_name": role_name, "guard_name": guard_name},
        )

    @classmethod
    def with_id(cls, role_id: Any, guard_name: str = "") -> "RoleNotFoundError":
        return cls(
            f"There is no role with id `{role_id}` for guard `{guard_name}`.",
            "ROLE_NOT_FOUND",
            {"role_id": role_id, "guard_name": guard_name},
        )


class AlreadyExistsError(AuthorizationError):
    """Raised when a (name, guard) pair is created twice."""
    pass


class PermissionAlreadyExistsError(AlreadyExistsError):
    """Permission with the same name already exists for the guard."""

    @classmethod
    def create(cls, permission_name: str, guard_name: str) -> "PermissionAlreadyExistsError":
        return cls(
            f"A `{permission_name}` permission already exists for guard `{guard_name}`.",
            "PERMISSION_ALREADY_EXISTS",
            {"permission_name": permission_name, "guard_name": guard_name},
        )


class RoleAlreadyExistsError(AlreadyExistsError):
    """Role with the same name already exists for the guard."""

    @classmethod
    def create(cls, role_name: str, guard_name: str) -> "RoleAlreadyExistsError":
        return cls(
            f"A role `{role_name}` already exists for guard `{guard_name}`.",
            "ROLE_ALREADY_EXISTS",
            {"role_name": role_name, "guard_name": guard_name},
        )


class GuardMismatchError(AuthorizationError):
    """Raised when a role or permission belongs to a different guard than the principal."""

    @classmethod
    def create(cls, given: str, expected: Iterable[str]) -> "GuardMismatchError":
        expected = list(expected)
        return cls(
            f"The given role or permission should use guard `{', '.join(expected)}` "
            f"instead of `{given}`.",
            "GUARD_MISMATCH",
            {"given_guard": given, "expected_guards": expected},
        )


class MalformedPatternError(AuthorizationError):
    """Raised when a wildcard permission string is not properly formatted."""

    @classmethod
    def create(cls, pattern: Optional[str]) -> "MalformedPatternError":
        return cls(
            f"Wildcard permission `{pattern}` is not properly formatted.",
            "MALFORMED_PATTERN",
            {"pattern": pattern},
        )


class InvalidPermissionArgumentError(AuthorizationError):
    """Raised when a permission reference is not a name, an id or a Permission."""

    @classmethod
    def create(cls, value: Any) -> "InvalidPermissionArgumentError":
        return cls(
            "Permission reference must be a string, an integer id or a Permission, "
            f"got {type(value).__name__}.",
            "INVALID_PERMISSION_ARGUMENT",
            {"type": type(value).__name__},
        )


class PrincipalNotPersistedError(AuthorizationError):
    """Raised when permissions are granted to a principal without a stored identity."""
    pass

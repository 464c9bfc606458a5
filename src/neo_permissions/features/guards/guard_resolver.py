"""Guard resolution for principals.

A guard is the authentication realm a principal, permission or role belongs
to. The guard of a principal comes from, in order:

1. the principal's own ``guard_name()``
2. a static registration of its type (``GuardResolver.register``)
3. every configured guard whose model path names the principal's class,
   in configuration order
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from ...config.settings import PermissionSettings
from ...core.exceptions import GuardMismatchError

if TYPE_CHECKING:
    from ..permissions.entities.permission import Permission
    from ..permissions.entities.principal import Principal
    from ..permissions.entities.role import Role

logger = logging.getLogger(__name__)


def _model_path(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class GuardResolver:
    """Pure lookup of guard names over principals and static configuration."""

    def __init__(
        self,
        settings: PermissionSettings,
        registrations: Optional[Dict[type, str]] = None,
    ):
        self._settings = settings
        self._registrations: Dict[type, str] = dict(registrations or {})

    def register(self, principal_type: type, guard_name: str) -> None:
        """Register the guard used by every instance of a principal type."""
        self._registrations[principal_type] = guard_name

    def names_for(self, principal: Union["Principal", type]) -> List[str]:
        """Get the guard names a principal or principal type belongs to."""
        if not isinstance(principal, type):
            guard_name = principal.guard_name()
            if guard_name:
                return [guard_name]
            principal_type = type(principal)
        else:
            principal_type = principal

        for klass in principal_type.__mro__:
            if klass in self._registrations:
                return [self._registrations[klass]]

        path = _model_path(principal_type)
        return [
            guard_name
            for guard_name, model in self._settings.guards.items()
            if model.replace(":", ".") == path
        ]

    def default_guard_for(self, principal: Union["Principal", type]) -> str:
        """Get the first guard of a principal, or the configured default guard."""
        names = self.names_for(principal)
        return names[0] if names else self._settings.default_guard

    def ensure_shares_guard(
        self,
        principal: Union["Principal", type],
        role_or_permission: Union["Permission", "Role"],
    ) -> None:
        """Raise GuardMismatchError unless the item belongs to one of the principal's guards."""
        names = self.names_for(principal) or [self._settings.default_guard]
        if role_or_permission.guard_name not in names:
            logger.warning(
                f"Guard mismatch: {role_or_permission.name} uses "
                f"{role_or_permission.guard_name}, expected one of {names}"
            )
            raise GuardMismatchError.create(role_or_permission.guard_name, names)

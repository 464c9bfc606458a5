"""Guard resolution feature."""

from .guard_resolver import GuardResolver

__all__ = ["GuardResolver"]

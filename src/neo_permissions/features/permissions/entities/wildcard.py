"""
Wildcard permission patterns.

A pattern is a dot-delimited list of parts, each part a comma-delimited set of
alternatives. The token ``*`` in a part matches anything at that position.

Examples:
    - ``posts.*`` implies ``posts.edit``
    - ``posts.edit,view`` implies ``posts.view``
    - ``posts`` implies ``posts.edit`` (missing parts act as wildcards)
    - ``posts.edit.*`` implies ``posts.edit``
    - ``posts.edit.secret`` does not imply ``posts.edit``
"""
from functools import lru_cache
from typing import FrozenSet, Tuple, Union

from ....core.exceptions import MalformedPatternError

WILDCARD_TOKEN = "*"
PART_DELIMITER = "."
SUBPART_DELIMITER = ","

_WILDCARD_PART = frozenset({WILDCARD_TOKEN})


@lru_cache(maxsize=1024)
def parse_pattern(permission: str) -> Tuple[FrozenSet[str], ...]:
    """Split a permission string into its parts.

    Raises:
        MalformedPatternError: If the string is empty or any part or
            alternative is empty.
    """
    if not permission:
        raise MalformedPatternError.create(permission)

    parts = []
    for part in permission.split(PART_DELIMITER):
        sub_parts = part.split(SUBPART_DELIMITER)
        if "" in sub_parts:
            raise MalformedPatternError.create(permission)
        parts.append(frozenset(sub_parts))

    if not parts:
        raise MalformedPatternError.create(permission)

    return tuple(parts)


class WildcardPermission:
    """Parsed wildcard permission that can decide implication."""

    __slots__ = ("permission", "parts")

    def __init__(self, permission: str):
        if not isinstance(permission, str):
            raise MalformedPatternError.create(permission)
        self.permission = permission
        self.parts = parse_pattern(permission)

    def implies(self, permission: Union[str, "WildcardPermission"]) -> bool:
        """Check whether this (owned) pattern covers the requested one."""
        if not isinstance(permission, WildcardPermission):
            permission = WildcardPermission(permission)

        for index, other_part in enumerate(permission.parts):
            if index >= len(self.parts):
                return True

            part = self.parts[index]
            if WILDCARD_TOKEN not in part and not other_part <= part:
                return False

        # Owned parts beyond the requested ones must each be exactly the wildcard
        for part in self.parts[len(permission.parts):]:
            if part != _WILDCARD_PART:
                return False

        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WildcardPermission):
            return NotImplemented
        return self.parts == other.parts

    def __hash__(self) -> int:
        return hash(self.parts)

    def __str__(self) -> str:
        return self.permission

    def __repr__(self) -> str:
        return f"WildcardPermission('{self.permission}')"

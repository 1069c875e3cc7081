"""
Map classic personal access token OAuth scopes to permission levels.

Classic tokens carry broad scopes (``repo``, ``project``...) rather than
per-category permissions. Each scope can only raise a category's level, so
the result does not depend on the order scopes are listed in.
"""

from __future__ import annotations

from typing import Iterable

from access_control.permissions import (
    REPOSITORY_CATEGORIES,
    PermissionCategory,
    PermissionLevel,
    PermissionMap,
)

_FULL_REPOSITORY: tuple[tuple[PermissionCategory, PermissionLevel], ...] = (
    (PermissionCategory.CONTENTS, PermissionLevel.WRITE),
    (PermissionCategory.ISSUES, PermissionLevel.WRITE),
    (PermissionCategory.PULL_REQUESTS, PermissionLevel.WRITE),
)

SCOPE_GRANTS: dict[str, tuple[tuple[PermissionCategory, PermissionLevel], ...]] = {
    "repo": _FULL_REPOSITORY,
    "public_repo": _FULL_REPOSITORY,
    "repo:status": ((PermissionCategory.CONTENTS, PermissionLevel.READ),),
    "repo_deployment": ((PermissionCategory.CONTENTS, PermissionLevel.READ),),
    "write:discussion": ((PermissionCategory.DISCUSSIONS, PermissionLevel.WRITE),),
    "read:discussion": ((PermissionCategory.DISCUSSIONS, PermissionLevel.READ),),
    "project": ((PermissionCategory.PROJECTS, PermissionLevel.WRITE),),
    "read:project": ((PermissionCategory.PROJECTS, PermissionLevel.READ),),
    "repo:invite": (),
    "security_events": (),
}


def parse_scopes_header(value: str | None) -> tuple[str, ...]:
    """Split an ``X-OAuth-Scopes`` header value into scope names."""
    if not value:
        return ()
    return tuple(s.strip() for s in value.split(",") if s.strip())


def map_scopes_to_permissions(scopes: Iterable[str]) -> PermissionMap:
    """Convert classic token scopes into a PermissionMap.

    Unrecognized scopes are ignored.
    """
    levels: dict[PermissionCategory, PermissionLevel] = {
        category: PermissionLevel.NONE for category in REPOSITORY_CATEGORIES
    }
    for scope in scopes:
        for category, level in SCOPE_GRANTS.get(scope.strip(), ()):
            if level.rank > levels[category].rank:
                levels[category] = level
    return PermissionMap(levels)

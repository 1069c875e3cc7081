"""
Permission primitives shared by the authorization engine.

A token's grants are modelled as a PermissionMap: one level per category.
Requirements are expressed as PermissionFacts ("issues:write").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping


class PermissionCategory(StrEnum):
    CONTENTS = "contents"
    ISSUES = "issues"
    PULL_REQUESTS = "pull_requests"
    DISCUSSIONS = "discussions"
    PROJECTS = "projects"
    # Only ever granted by a successful fine-grained probe
    METADATA = "metadata"


class PermissionLevel(StrEnum):
    NONE = "none"
    UNKNOWN = "unknown"
    READ = "read"
    WRITE = "write"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


# UNKNOWN ranks with NONE so it never satisfies a requirement.
_LEVEL_RANK: dict[PermissionLevel, int] = {
    PermissionLevel.NONE: 0,
    PermissionLevel.UNKNOWN: 0,
    PermissionLevel.READ: 1,
    PermissionLevel.WRITE: 2,
}

# Categories reported by the scope mapper and the fine-grained probe.
REPOSITORY_CATEGORIES: tuple[PermissionCategory, ...] = (
    PermissionCategory.CONTENTS,
    PermissionCategory.ISSUES,
    PermissionCategory.PULL_REQUESTS,
    PermissionCategory.DISCUSSIONS,
    PermissionCategory.PROJECTS,
)


@dataclass(frozen=True)
class PermissionFact:
    """A single ``category:level`` grant or requirement."""

    category: PermissionCategory
    level: PermissionLevel

    @classmethod
    def parse(cls, value: str) -> PermissionFact:
        category, sep, level = value.partition(":")
        if not sep:
            raise ValueError(f"Permission must be in 'category:level' format: {value!r}")
        try:
            return cls(PermissionCategory(category), PermissionLevel(level))
        except ValueError as exc:
            raise ValueError(f"Unknown permission: {value!r}") from exc

    def __str__(self) -> str:
        return f"{self.category.value}:{self.level.value}"


@dataclass(frozen=True)
class PermissionMap:
    """Highest level granted per category. Missing categories read as ``none``."""

    levels: Mapping[PermissionCategory, PermissionLevel] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "levels", MappingProxyType(dict(self.levels)))

    @classmethod
    def from_dict(cls, raw: Mapping[str, str]) -> PermissionMap:
        """Build a map from plain strings, e.g. ``{"issues": "write"}``."""
        return cls({PermissionCategory(k): PermissionLevel(v) for k, v in raw.items()})

    def level_of(self, category: PermissionCategory) -> PermissionLevel:
        return self.levels.get(category, PermissionLevel.NONE)

    def satisfies(self, fact: PermissionFact) -> bool:
        current = self.level_of(fact.category)
        # "none" and "unknown" never satisfy anything, not even a "none" requirement.
        if current.rank == 0:
            return False
        return current.rank >= fact.level.rank

    def as_dict(self) -> dict[str, str]:
        return {category.value: level.value for category, level in self.levels.items()}

"""
Permission requirements for each safe output operation.

The table is read-only at run time. Operation kinds that are not listed are
treated as authorized by the validator so new safe outputs keep working
before their requirements are registered here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from access_control.permissions import PermissionFact


class Combinator(StrEnum):
    """How the required facts of an operation combine."""

    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class OperationRequirement:
    """Describes what a safe output operation needs from the token."""

    required: tuple[PermissionFact, ...]
    description: str
    combinator: Combinator = Combinator.ALL
    optional: tuple[PermissionFact, ...] = ()


def _requirement(
    *required: str,
    description: str,
    requires_any: bool = False,
    optional: tuple[str, ...] = (),
) -> OperationRequirement:
    return OperationRequirement(
        required=tuple(PermissionFact.parse(r) for r in required),
        description=description,
        combinator=Combinator.ANY if requires_any else Combinator.ALL,
        optional=tuple(PermissionFact.parse(o) for o in optional),
    )


_OPERATION_REQUIREMENTS: dict[str, OperationRequirement] = {
    "create_issue": _requirement("issues:write", description="Create issues"),
    "update_issue": _requirement("issues:write", description="Update issues"),
    "close_issue": _requirement("issues:write", description="Close issues"),
    "add_comment": _requirement(
        "issues:write",
        "pull_requests:write",
        requires_any=True,
        description="Add comments to issues or pull requests",
    ),
    "hide_comment": _requirement(
        "issues:write",
        "pull_requests:write",
        requires_any=True,
        description="Hide comments on issues or pull requests",
    ),
    "add_labels": _requirement("issues:write", description="Add labels to issues or pull requests"),
    "remove_labels": _requirement("issues:write", description="Remove labels from issues or pull requests"),
    "assign_milestone": _requirement("issues:write", description="Assign milestones to issues"),
    "assign_to_user": _requirement("issues:write", description="Assign users to issues"),
    "assign_to_agent": _requirement("issues:write", description="Assign Copilot agents to issues"),
    "add_reviewer": _requirement("pull_requests:write", description="Request pull request reviews"),
    "link_sub_issue": _requirement("issues:write", description="Link sub-issues to parent issues"),
    "create_pull_request": _requirement(
        "pull_requests:write",
        "contents:write",
        description="Create pull requests",
    ),
    "update_pull_request": _requirement("pull_requests:write", description="Update pull requests"),
    "close_pull_request": _requirement("pull_requests:write", description="Close pull requests"),
    "mark_pull_request_as_ready_for_review": _requirement(
        "pull_requests:write",
        description="Mark pull requests as ready for review",
    ),
    "create_discussion": _requirement("discussions:write", description="Create discussions"),
    "update_discussion": _requirement("discussions:write", description="Update discussions"),
    "close_discussion": _requirement("discussions:write", description="Close discussions"),
    "create_project": _requirement("projects:write", description="Create GitHub Projects"),
    "update_project": _requirement(
        "projects:write",
        # Label operations on project items
        optional=("issues:write",),
        description="Update GitHub Projects",
    ),
    "copy_project": _requirement("projects:write", description="Copy GitHub Projects"),
    "create_project_status_update": _requirement(
        "projects:write",
        description="Create project status updates",
    ),
    "update_release": _requirement("contents:write", description="Update releases"),
    "upload_assets": _requirement("contents:write", description="Upload assets to orphaned branches"),
}

OPERATION_REQUIREMENTS: Mapping[str, OperationRequirement] = MappingProxyType(_OPERATION_REQUIREMENTS)


def lookup(operation_kind: str) -> OperationRequirement | None:
    """Return the requirement for an operation kind, or None if unregistered."""
    return OPERATION_REQUIREMENTS.get(operation_kind)

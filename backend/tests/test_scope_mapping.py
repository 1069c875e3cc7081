from itertools import permutations

from access_control.permissions import PermissionCategory, PermissionLevel
from access_control.scopes import map_scopes_to_permissions, parse_scopes_header


def test_repo_scope_grants_contents_issues_and_pull_requests_write() -> None:
    permissions = map_scopes_to_permissions({"repo"})
    assert permissions.as_dict() == {
        "contents": "write",
        "issues": "write",
        "pull_requests": "write",
        "discussions": "none",
        "projects": "none",
    }


def test_public_repo_resolves_like_repo() -> None:
    assert map_scopes_to_permissions(["public_repo"]) == map_scopes_to_permissions(["repo"])


def test_status_and_deployment_scopes_grant_contents_read() -> None:
    for scope in ("repo:status", "repo_deployment"):
        permissions = map_scopes_to_permissions([scope])
        assert permissions.level_of(PermissionCategory.CONTENTS) == PermissionLevel.READ
        assert permissions.level_of(PermissionCategory.ISSUES) == PermissionLevel.NONE


def test_read_scope_never_downgrades_write() -> None:
    permissions = map_scopes_to_permissions(["repo", "repo:status", "project", "read:project"])
    assert permissions.level_of(PermissionCategory.CONTENTS) == PermissionLevel.WRITE
    assert permissions.level_of(PermissionCategory.PROJECTS) == PermissionLevel.WRITE


def test_discussion_scopes() -> None:
    assert map_scopes_to_permissions(["read:discussion"]).level_of(PermissionCategory.DISCUSSIONS) == PermissionLevel.READ
    assert (
        map_scopes_to_permissions(["write:discussion", "read:discussion"]).level_of(PermissionCategory.DISCUSSIONS)
        == PermissionLevel.WRITE
    )


def test_inert_and_unrecognized_scopes_are_ignored() -> None:
    permissions = map_scopes_to_permissions(["repo:invite", "security_events", "gist", "admin:org"])
    assert set(permissions.as_dict().values()) == {"none"}


def test_mapping_is_independent_of_scope_order() -> None:
    scopes = ["read:discussion", "write:discussion", "repo:status", "repo", "read:project", "project"]
    expected = map_scopes_to_permissions(scopes)
    for ordering in permutations(scopes):
        assert map_scopes_to_permissions(ordering) == expected


def test_parse_scopes_header_trims_and_drops_empty_entries() -> None:
    assert parse_scopes_header(" repo, , read:org,project ") == ("repo", "read:org", "project")
    assert parse_scopes_header("") == ()
    assert parse_scopes_header(None) == ()

from access_control.permissions import PermissionFact
from access_control.registry import OPERATION_REQUIREMENTS, Combinator, lookup


def _facts(*values: str) -> tuple[PermissionFact, ...]:
    return tuple(PermissionFact.parse(v) for v in values)


def test_registry_defines_every_safe_output_operation() -> None:
    expected = {
        "create_issue", "update_issue", "close_issue", "add_comment", "hide_comment",
        "add_labels", "remove_labels", "assign_milestone", "assign_to_user",
        "assign_to_agent", "add_reviewer", "link_sub_issue", "create_pull_request",
        "update_pull_request", "close_pull_request",
        "mark_pull_request_as_ready_for_review", "create_discussion",
        "update_discussion", "close_discussion", "create_project", "update_project",
        "copy_project", "create_project_status_update", "update_release", "upload_assets",
    }
    assert set(OPERATION_REQUIREMENTS) == expected


def test_comment_operations_require_any_of_issues_or_pull_requests() -> None:
    for kind in ("add_comment", "hide_comment"):
        requirement = lookup(kind)
        assert requirement is not None
        assert requirement.combinator == Combinator.ANY
        assert requirement.required == _facts("issues:write", "pull_requests:write")


def test_create_pull_request_requires_both_permissions_in_order() -> None:
    requirement = lookup("create_pull_request")
    assert requirement is not None
    assert requirement.combinator == Combinator.ALL
    assert requirement.required == _facts("pull_requests:write", "contents:write")


def test_update_project_declares_optional_issues_write() -> None:
    requirement = lookup("update_project")
    assert requirement is not None
    assert requirement.required == _facts("projects:write")
    assert requirement.optional == _facts("issues:write")
    assert requirement.description == "Update GitHub Projects"


def test_release_operations_require_contents_write() -> None:
    for kind in ("update_release", "upload_assets"):
        requirement = lookup(kind)
        assert requirement is not None
        assert requirement.required == _facts("contents:write")


def test_lookup_returns_none_for_unregistered_kind() -> None:
    assert lookup("summon_dragon") is None


def test_registry_is_read_only() -> None:
    try:
        OPERATION_REQUIREMENTS["create_issue"] = OPERATION_REQUIREMENTS["close_issue"]  # type: ignore[index]
    except TypeError:
        pass
    else:
        raise AssertionError("registry should not accept writes")


def test_permission_fact_parse_rejects_malformed_values() -> None:
    for value in ("issues", "issues:admin", "wiki:write"):
        try:
            PermissionFact.parse(value)
        except ValueError:
            continue
        raise AssertionError(f"{value} should not parse")
    assert str(PermissionFact.parse("issues:write")) == "issues:write"

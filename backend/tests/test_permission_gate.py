import logging

import pytest

from access_control.gate import SafeOutputPermissionError, enforce_permissions
from access_control.permissions import PermissionMap
from access_control.probe import CapabilityProbe, CredentialFamily, ProbeFailure, ProbeSuccess
from access_control.scopes import map_scopes_to_permissions
from access_control.validator import validate_probed_batch


def _classic(*scopes: str) -> CapabilityProbe:
    return CapabilityProbe(
        permissions=map_scopes_to_permissions(scopes),
        family=CredentialFamily.LEGACY_SCOPE,
        probe=ProbeSuccess(scopes=scopes),
    )


def test_enforce_permissions_passes_authorized_batch() -> None:
    batch = validate_probed_batch(_classic("repo"), ["create_issue", "create_pull_request"])
    enforce_permissions(batch)


def test_enforce_permissions_raises_with_remediation_report() -> None:
    batch = validate_probed_batch(_classic("repo"), ["create_issue", "create_discussion"])

    with pytest.raises(SafeOutputPermissionError) as excinfo:
        enforce_permissions(batch)

    assert excinfo.value.batch is batch
    assert "write:discussion" in excinfo.value.report
    assert str(excinfo.value) == excinfo.value.report


def test_enforce_permissions_only_warns_for_degraded_operations(caplog) -> None:
    batch = validate_probed_batch(_classic("project"), ["update_project"])

    with caplog.at_level(logging.WARNING, logger="access_control.gate"):
        enforce_permissions(batch)

    assert "Optional Permissions Missing" in caplog.text


def test_probe_failure_blocks_write_operations() -> None:
    capabilities = CapabilityProbe(
        permissions=PermissionMap(),
        family=CredentialFamily.FINE_GRAINED,
        probe=ProbeFailure(error="timed out"),
    )
    batch = validate_probed_batch(capabilities, ["add_comment"])

    assert batch.probe_error == "timed out"
    with pytest.raises(SafeOutputPermissionError) as excinfo:
        enforce_permissions(batch)
    assert "For Fine-Grained Personal Access Tokens:" in excinfo.value.report


def test_enforce_permissions_reports_through_given_logger(caplog) -> None:
    batch = validate_probed_batch(_classic("repo"), ["create_discussion"])
    handler_logger = logging.getLogger("handlers.create_discussion")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(SafeOutputPermissionError):
            enforce_permissions(batch, logger=handler_logger)

    assert [r.name for r in caplog.records] == ["handlers.create_discussion"]
    assert caplog.records[0].failed_operations == ["create_discussion"]

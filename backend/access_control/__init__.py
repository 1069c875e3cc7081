"""
Access control layer for safe outputs.

Classifies the GitHub token a workflow runs with, checks each requested safe
output operation against the permissions it needs, and renders remediation
reports when something is missing.
"""

from access_control.gate import SafeOutputPermissionError, enforce_permissions
from access_control.permissions import (
    PermissionCategory,
    PermissionFact,
    PermissionLevel,
    PermissionMap,
)
from access_control.probe import (
    CapabilityProbe,
    CredentialFamily,
    ProbeFailure,
    ProbeSkipped,
    ProbeSuccess,
    probe_capabilities,
)
from access_control.registry import (
    OPERATION_REQUIREMENTS,
    Combinator,
    OperationRequirement,
    lookup,
)
from access_control.remediation import render_blocking, render_warning
from access_control.scopes import map_scopes_to_permissions
from access_control.validator import (
    BatchValidation,
    ValidationVerdict,
    all_valid,
    validate_batch,
    validate_operation,
    validate_token_permissions,
)

__all__ = [
    "BatchValidation",
    "CapabilityProbe",
    "Combinator",
    "CredentialFamily",
    "OPERATION_REQUIREMENTS",
    "OperationRequirement",
    "PermissionCategory",
    "PermissionFact",
    "PermissionLevel",
    "PermissionMap",
    "ProbeFailure",
    "ProbeSkipped",
    "ProbeSuccess",
    "SafeOutputPermissionError",
    "ValidationVerdict",
    "all_valid",
    "enforce_permissions",
    "lookup",
    "map_scopes_to_permissions",
    "probe_capabilities",
    "render_blocking",
    "render_warning",
    "validate_batch",
    "validate_operation",
    "validate_token_permissions",
]

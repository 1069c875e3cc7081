"""
Validate requested safe output operations against a token's permissions.

Each operation is evaluated independently from the batch's PermissionMap, so
verdicts never depend on the order operations are listed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from access_control.permissions import PermissionFact, PermissionMap
from access_control.probe import (
    CapabilityProbe,
    CredentialFamily,
    RepositoryMetadataClient,
    probe_capabilities,
)
from access_control.registry import Combinator, lookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome for a single operation kind."""

    operation_kind: str
    valid: bool
    description: str
    missing: tuple[PermissionFact, ...] = ()
    optional_gaps: tuple[PermissionFact, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "operation_type": self.operation_kind,
            "valid": self.valid,
            "missing": [str(f) for f in self.missing],
            "optional": [str(f) for f in self.optional_gaps],
            "description": self.description,
        }


@dataclass(frozen=True)
class BatchValidation:
    """Verdicts for every requested operation plus what was learned about the token."""

    verdicts: tuple[ValidationVerdict, ...]
    permissions: PermissionMap
    family: CredentialFamily
    probe_error: str | None = None
    all_valid: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "all_valid", all_valid(self.verdicts))

    @property
    def failed(self) -> tuple[ValidationVerdict, ...]:
        return tuple(v for v in self.verdicts if not v.valid)

    @property
    def degraded(self) -> tuple[ValidationVerdict, ...]:
        return tuple(v for v in self.verdicts if v.optional_gaps)


def validate_operation(permissions: PermissionMap, operation_kind: str) -> ValidationVerdict:
    """Check one operation kind against the current permissions."""
    requirement = lookup(operation_kind)
    if requirement is None:
        # Unregistered operation types are let through.
        return ValidationVerdict(
            operation_kind=operation_kind,
            valid=True,
            description=f"Unknown operation type: {operation_kind}",
        )

    if requirement.combinator == Combinator.ANY:
        if any(permissions.satisfies(fact) for fact in requirement.required):
            missing: tuple[PermissionFact, ...] = ()
        else:
            missing = requirement.required
    else:
        missing = tuple(fact for fact in requirement.required if not permissions.satisfies(fact))

    optional_gaps = tuple(fact for fact in requirement.optional if not permissions.satisfies(fact))

    return ValidationVerdict(
        operation_kind=operation_kind,
        valid=not missing,
        description=requirement.description,
        missing=missing,
        optional_gaps=optional_gaps,
    )


def validate_batch(
    permissions: PermissionMap,
    operation_kinds: Iterable[str],
) -> list[ValidationVerdict]:
    return [validate_operation(permissions, kind) for kind in operation_kinds]


def all_valid(verdicts: Iterable[ValidationVerdict]) -> bool:
    return all(v.valid for v in verdicts)


def validate_probed_batch(
    capabilities: CapabilityProbe,
    operation_kinds: Sequence[str],
) -> BatchValidation:
    """Validate a batch against an already-probed token."""
    verdicts = validate_batch(capabilities.permissions, operation_kinds)
    return BatchValidation(
        verdicts=tuple(verdicts),
        permissions=capabilities.permissions,
        family=capabilities.family,
        probe_error=capabilities.error,
    )


async def validate_token_permissions(
    client: RepositoryMetadataClient,
    owner: str,
    repo: str,
    operation_kinds: Sequence[str],
) -> BatchValidation:
    """Probe the token once, then validate every requested operation kind."""
    logger.info("Validating token permissions for %d operation type(s)...", len(operation_kinds))

    capabilities = await probe_capabilities(client, owner, repo)
    batch = validate_probed_batch(capabilities, operation_kinds)

    logger.info(
        "Token permission validation finished",
        extra={
            "repo": f"{owner}/{repo}",
            "token_type": batch.family.value,
            "valid": batch.all_valid,
            "failed_operations": [v.operation_kind for v in batch.failed],
            "probe_error": batch.probe_error,
        },
    )
    return batch

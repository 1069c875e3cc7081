"""
Safe output routes.

Lets a workflow runner check token permissions before executing a batch of
safe outputs, and normalize update items before handing them to the update
handlers.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from access_control import (
    CredentialFamily,
    enforce_permissions,
    map_scopes_to_permissions,
    render_blocking,
    render_warning,
    validate_token_permissions,
)
from access_control.probe import CapabilityProbe, ProbeSkipped, fine_grained_permissions
from access_control.validator import BatchValidation, validate_probed_batch
from config import settings
from connectors.github import GitHubClient
from services.update_payload import UPDATE_PROFILES, CanonicalPayload, build_entity_update

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================


class PermissionValidationRequest(BaseModel):
    """Operations to check, and how to learn the token's permissions.

    ``scopes`` validates against a classic token's scope list. Otherwise
    ``repository`` ("owner/repo") triggers a live probe with the configured
    token. With neither, the conservative fine-grained map is used; nothing is
    assumed readable, not even metadata.
    """

    operations: list[str]
    scopes: Optional[list[str]] = None
    repository: Optional[str] = None


class OperationVerdictResponse(BaseModel):
    operation_type: str
    valid: bool
    missing: list[str]
    optional: list[str]
    description: str


class PermissionValidationResponse(BaseModel):
    valid: bool
    token_type: str
    permissions: dict[str, str]
    results: list[OperationVerdictResponse]
    error_message: str
    warning_message: str
    probe_error: Optional[str] = None


class UpdatePayloadRequest(BaseModel):
    entity: str
    item: dict[str, Any]
    config: dict[str, Any] = Field(default_factory=dict)


class UpdatePayloadResponse(BaseModel):
    skipped: bool
    reason: Optional[str] = None
    data: Optional[dict[str, Any]] = None


# =============================================================================
# Endpoints
# =============================================================================


def _fine_grained_capabilities() -> CapabilityProbe:
    return CapabilityProbe(
        permissions=fine_grained_permissions(metadata_readable=False),
        family=CredentialFamily.FINE_GRAINED,
        probe=ProbeSkipped(),
    )


async def _validate(request: PermissionValidationRequest) -> BatchValidation:
    if request.scopes is not None:
        scopes = tuple(s.strip() for s in request.scopes if s.strip())
        if not scopes:
            return validate_probed_batch(_fine_grained_capabilities(), request.operations)
        capabilities = CapabilityProbe(
            permissions=map_scopes_to_permissions(scopes),
            family=CredentialFamily.LEGACY_SCOPE,
            probe=ProbeSkipped(scopes=scopes),
        )
        return validate_probed_batch(capabilities, request.operations)

    if request.repository:
        owner, sep, repo = request.repository.partition("/")
        if not sep or not owner or not repo:
            raise HTTPException(status_code=422, detail="repository must be in 'owner/repo' format")
        if not settings.GITHUB_TOKEN:
            raise HTTPException(status_code=503, detail="GITHUB_TOKEN is not configured")
        client = GitHubClient(settings.GITHUB_TOKEN)
        return await validate_token_permissions(client, owner, repo, request.operations)

    return validate_probed_batch(_fine_grained_capabilities(), request.operations)


@router.post("/permissions/validate", response_model=PermissionValidationResponse)
async def validate_permissions(request: PermissionValidationRequest) -> PermissionValidationResponse:
    """Validate a batch of safe output operations against token permissions."""
    batch = await _validate(request)
    return PermissionValidationResponse(
        valid=batch.all_valid,
        token_type=batch.family.value,
        permissions=batch.permissions.as_dict(),
        results=[OperationVerdictResponse(**v.to_dict()) for v in batch.verdicts],
        error_message=render_blocking(batch.verdicts, batch.family),
        warning_message=render_warning(batch.verdicts),
        probe_error=batch.probe_error,
    )


@router.post("/permissions/enforce")
async def enforce_permissions_route(request: PermissionValidationRequest) -> dict[str, Any]:
    """Like /permissions/validate, but answers 403 with the remediation report when blocked."""
    batch = await _validate(request)
    enforce_permissions(batch, logger=logger)
    return {
        "status": "authorized",
        "token_type": batch.family.value,
        "warning_message": render_warning(batch.verdicts),
    }


@router.post("/update-payload", response_model=UpdatePayloadResponse)
async def build_update_payload_route(request: UpdatePayloadRequest) -> UpdatePayloadResponse:
    """Normalize an update item for the given entity type."""
    if request.entity not in UPDATE_PROFILES:
        raise HTTPException(status_code=422, detail=f"Unknown update entity: {request.entity}")

    try:
        result = build_entity_update(request.entity, request.item, request.config)
    except ValidationError as exc:
        logger.info("Rejected malformed update item", extra={"entity": request.entity})
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc

    if isinstance(result, CanonicalPayload):
        return UpdatePayloadResponse(skipped=False, data=result.to_dict())
    return UpdatePayloadResponse(skipped=True, reason=result.reason)

"""
Capability probe: work out what kind of token we hold and what it can do.

One lightweight ``GET /repos/{owner}/{repo}`` is made per validation batch.

- Classic personal access tokens advertise their OAuth scopes in the
  ``X-OAuth-Scopes`` header; those are mapped to permission levels.
- Fine-grained tokens and ``GITHUB_TOKEN`` advertise nothing. A successful
  read only proves metadata access, so every other category is ``unknown``.
- If the probe itself fails the batch continues as fine-grained with nothing
  granted at all. The failure is reported, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, Union

import httpx

from access_control.permissions import (
    REPOSITORY_CATEGORIES,
    PermissionCategory,
    PermissionLevel,
    PermissionMap,
)
from access_control.scopes import map_scopes_to_permissions, parse_scopes_header

logger = logging.getLogger(__name__)


class CredentialFamily(StrEnum):
    LEGACY_SCOPE = "legacy_scope"
    FINE_GRAINED = "fine_grained"


class RepositoryMetadataResponse(Protocol):
    @property
    def oauth_scopes(self) -> str | None: ...

    @property
    def accepted_permissions(self) -> str | None: ...


class RepositoryMetadataClient(Protocol):
    async def get_repository(self, owner: str, repo: str) -> RepositoryMetadataResponse: ...


@dataclass(frozen=True)
class ProbeSuccess:
    """The metadata read worked. ``scopes`` may legitimately be empty."""

    scopes: tuple[str, ...]
    accepted_permissions: str = ""


@dataclass(frozen=True)
class ProbeFailure:
    """The metadata read could not be made (network, auth, 404...)."""

    error: str
    scopes: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProbeSkipped:
    """No metadata read was made; ``scopes`` came from the caller, if anywhere."""

    scopes: tuple[str, ...] = ()


ProbeResult = Union[ProbeSuccess, ProbeFailure, ProbeSkipped]


@dataclass(frozen=True)
class CapabilityProbe:
    """What a validation batch knows about its token."""

    permissions: PermissionMap
    family: CredentialFamily
    probe: ProbeResult

    @property
    def error(self) -> str | None:
        return self.probe.error if isinstance(self.probe, ProbeFailure) else None


def fine_grained_permissions(metadata_readable: bool = True) -> PermissionMap:
    """Conservative map for tokens that do not advertise scopes."""
    levels: dict[PermissionCategory, PermissionLevel] = {
        category: PermissionLevel.UNKNOWN for category in REPOSITORY_CATEGORIES
    }
    if metadata_readable:
        levels[PermissionCategory.METADATA] = PermissionLevel.READ
    return PermissionMap(levels)


async def check_token_scopes(
    client: RepositoryMetadataClient,
    owner: str,
    repo: str,
) -> ProbeResult:
    """Read repository metadata and extract the advertised scopes."""
    try:
        response = await client.get_repository(owner, repo)
    except (httpx.HTTPError, OSError, ValueError) as exc:
        logger.warning(
            "Token capability probe failed",
            extra={"repo": f"{owner}/{repo}", "error": str(exc)},
        )
        return ProbeFailure(error=str(exc) or exc.__class__.__name__)

    scopes = parse_scopes_header(response.oauth_scopes)
    accepted = response.accepted_permissions or ""
    logger.debug("Classic token scopes: %s", ", ".join(scopes))
    logger.debug("Fine-grained token permissions header: %s", accepted)
    return ProbeSuccess(scopes=scopes, accepted_permissions=accepted)


async def probe_capabilities(
    client: RepositoryMetadataClient,
    owner: str,
    repo: str,
) -> CapabilityProbe:
    """Classify the token and build its PermissionMap."""
    result = await check_token_scopes(client, owner, repo)

    if isinstance(result, ProbeSuccess) and result.scopes:
        logger.info("Detected classic token with scopes: %s", ", ".join(result.scopes))
        return CapabilityProbe(
            permissions=map_scopes_to_permissions(result.scopes),
            family=CredentialFamily.LEGACY_SCOPE,
            probe=result,
        )

    logger.info("Detected fine-grained or GITHUB_TOKEN token")
    return CapabilityProbe(
        permissions=fine_grained_permissions(metadata_readable=isinstance(result, ProbeSuccess)),
        family=CredentialFamily.FINE_GRAINED,
        probe=result,
    )

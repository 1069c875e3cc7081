"""
GitHub connector – REST client used by the safe output pipeline.

Two callers share this client:

- the capability probe, which reads repository metadata and inspects the
  ``X-OAuth-Scopes`` / ``X-Accepted-GitHub-Permissions`` response headers
- update execution, which fetches the current issue or pull request body
  when a body merge is needed and then PATCHes the entity
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from config import settings
from services.body_merge import merge_body
from services.update_payload import OPERATION_KEY, RAW_BODY_KEY, CanonicalPayload

logger = logging.getLogger(__name__)

GITHUB_API_BASE: str = "https://api.github.com"

SUPPORTED_UPDATE_ENTITIES: frozenset[str] = frozenset({"issue", "pull_request"})


@dataclass(frozen=True)
class RepositoryResponse:
    """Repository metadata plus the response headers the probe inspects."""

    data: dict[str, Any]
    headers: httpx.Headers

    @property
    def oauth_scopes(self) -> str | None:
        return self.headers.get("x-oauth-scopes")

    @property
    def accepted_permissions(self) -> str | None:
        return self.headers.get("x-accepted-github-permissions")


class GitHubClient:
    """Thin async wrapper over the GitHub REST API."""

    def __init__(
        self,
        token: str,
        *,
        api_base: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self.api_base: str = (api_base or settings.GITHUB_API_URL or GITHUB_API_BASE).rstrip("/")
        self.api_version: str = api_version or settings.GITHUB_API_VERSION
        self.timeout: float = timeout if timeout is not None else settings.GITHUB_HTTP_TIMEOUT_SECONDS
        self._transport = transport

    # ── HTTP helpers ─────────────────────────────────────────────────────

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _gh_get_response(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET from the GitHub REST API. Raises on non-2xx."""
        async with self._client() as client:
            resp: httpx.Response = await client.get(
                f"{self.api_base}{path}",
                headers=self._get_headers(),
                params=params or {},
            )
            resp.raise_for_status()
            return resp

    async def _gh_get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET from the GitHub REST API. Returns parsed JSON."""
        resp = await self._gh_get_response(path, params)
        return resp.json()

    async def _gh_patch(
        self,
        path: str,
        payload: dict[str, Any],
    ) -> Any:
        """PATCH to the GitHub REST API. Returns parsed JSON."""
        async with self._client() as client:
            resp: httpx.Response = await client.patch(
                f"{self.api_base}{path}",
                headers=self._get_headers(),
                json=payload,
            )
            resp.raise_for_status()
            return resp.json()

    # ── Repository metadata ──────────────────────────────────────────────

    async def get_repository(self, owner: str, repo: str) -> RepositoryResponse:
        """Fetch repository metadata, keeping the response headers."""
        resp = await self._gh_get_response(f"/repos/{owner}/{repo}")
        return RepositoryResponse(data=resp.json(), headers=resp.headers)

    # ── Issues & pull requests ───────────────────────────────────────────

    async def get_issue(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._gh_get(f"/repos/{owner}/{repo}/issues/{number}")

    async def update_issue(
        self, owner: str, repo: str, number: int, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._gh_patch(f"/repos/{owner}/{repo}/issues/{number}", data)

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._gh_get(f"/repos/{owner}/{repo}/pulls/{number}")

    async def update_pull_request(
        self, owner: str, repo: str, number: int, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._gh_patch(f"/repos/{owner}/{repo}/pulls/{number}", data)


async def execute_update(
    client: GitHubClient,
    entity: str,
    owner: str,
    repo: str,
    number: int,
    payload: CanonicalPayload | Mapping[str, Any],
    *,
    run_id: str | int | None = None,
    default_operation: str = "replace",
) -> dict[str, Any]:
    """Apply a normalized update payload to an issue or pull request.

    Reserved keys are never sent to the API. When the payload carries a raw
    body, the entity's current body is fetched first and merged according to
    the payload's body operation.
    """
    if entity not in SUPPORTED_UPDATE_ENTITIES:
        raise ValueError(f"Unsupported update entity: {entity}")

    data: Mapping[str, Any] = payload.data if isinstance(payload, CanonicalPayload) else payload
    operation: str = data.get(OPERATION_KEY) or default_operation
    api_data: dict[str, Any] = {
        k: v for k, v in data.items() if k not in (OPERATION_KEY, RAW_BODY_KEY)
    }

    if RAW_BODY_KEY in data:
        if entity == "issue":
            current: dict[str, Any] = await client.get_issue(owner, repo, number)
        else:
            current = await client.get_pull_request(owner, repo, number)
        # An explicit null body merges as empty content.
        raw_body: str = data[RAW_BODY_KEY] or ""
        api_data["body"] = merge_body(
            current.get("body") or "",
            raw_body,
            operation,
            run_id=run_id if run_id is not None else settings.GITHUB_RUN_ID,
        )
        logger.info(
            "Will update %s #%d body (operation=%s, length=%d)",
            entity,
            number,
            operation,
            len(api_data["body"]),
        )

    logger.info(
        "Updating GitHub %s",
        entity,
        extra={"repo": f"{owner}/{repo}", "number": number, "fields": sorted(api_data)},
    )
    if entity == "issue":
        return await client.update_issue(owner, repo, number, api_data)
    return await client.update_pull_request(owner, repo, number, api_data)

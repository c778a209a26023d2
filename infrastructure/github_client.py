# ============================================================================
# GITHUB REPOSITORY CLIENT
# ============================================================================
# STATUS: Infrastructure - Async HTTP client for the repository host
# PURPOSE: Catalog snapshot, monthly releases, asset uploads, tracking issues
# CREATED: 04 SEP 2026
# ============================================================================
"""
GitHub Repository Client

Async httpx client for the one repository that hosts everything:

- raw.githubusercontent.com: the catalog snapshot (approved.json)
- api.github.com: releases (asset buckets) and issues (tracking records)
- uploads.github.com: release asset uploads

Transport failures and non-success statuses are converted to the service's
error taxonomy here, so callers only see UpstreamUnavailable (catalog) or
UpstreamError (releases, uploads, issues).
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from __version__ import USER_AGENT
from core.config import GITHUB, TIMEOUTS
from core.errors import UpstreamError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async client for one GitHub repository."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        owner: str,
        repo: str,
        token: str = "",
        branch: str = "main",
        catalog_path: str = "content-database/approved.json",
        api_base: str = GITHUB.api_base,
        upload_base: str = GITHUB.upload_base,
        raw_base: str = GITHUB.raw_base,
    ):
        self._http = http
        self.owner = owner
        self.repo = repo
        self._token = token
        self.branch = branch
        self.catalog_path = catalog_path.lstrip("/")
        self._api = f"{api_base.rstrip('/')}/repos/{owner}/{repo}"
        self._uploads = f"{upload_base.rstrip('/')}/repos/{owner}/{repo}"
        self._raw = f"{raw_base.rstrip('/')}/{owner}/{repo}"

    @property
    def catalog_url(self) -> str:
        return f"{self._raw}/{self.branch}/{self.catalog_path}"

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {
            "user-agent": USER_AGENT,
            "accept": "application/vnd.github+json",
            "x-github-api-version": "2022-11-28",
        }
        if self._token:
            headers["authorization"] = f"Bearer {self._token}"
        headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        action: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request, converting transport errors to UpstreamError.

        Status handling is left to the caller.
        """
        kwargs.setdefault("timeout", TIMEOUTS.api)
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"GitHub timeout during {action}: {e}")
            raise UpstreamError(f"{action} timed out")
        except httpx.HTTPError as e:
            logger.error(f"GitHub unreachable during {action}: {e}")
            raise UpstreamError(f"{action} failed: {e}")

    @staticmethod
    def _json(resp: httpx.Response, action: str) -> Any:
        try:
            return resp.json()
        except ValueError:
            raise UpstreamError(f"{action} returned an invalid response")

    # ------------------------------------------------------------------
    # CATALOG SNAPSHOT
    # ------------------------------------------------------------------

    async def fetch_catalog(self) -> Any:
        """
        Fetch and decode approved.json.

        Returns the decoded payload, or None when the body is not JSON.

        Raises:
            UpstreamUnavailable: transport failure or non-success status.
        """
        try:
            resp = await self._http.get(
                self.catalog_url,
                headers={"user-agent": USER_AGENT},
                timeout=TIMEOUTS.api,
            )
        except httpx.HTTPError as e:
            logger.error(f"Catalog fetch failed: {e}")
            raise UpstreamUnavailable()

        if resp.status_code != 200:
            logger.error(f"Catalog fetch returned {resp.status_code}: {self.catalog_url}")
            raise UpstreamUnavailable()

        try:
            return resp.json()
        except ValueError:
            logger.warning("Catalog body is not valid JSON")
            return None

    # ------------------------------------------------------------------
    # RELEASES
    # ------------------------------------------------------------------

    async def get_release_by_tag(self, tag: str) -> Optional[Dict[str, Any]]:
        """Release JSON for ``tag``, or None if the lookup did not succeed."""
        resp = await self._request(
            "GET", f"{self._api}/releases/tags/{tag}", "Release lookup", headers=self._headers()
        )
        if resp.status_code == 200:
            return self._json(resp, "Release lookup")
        if resp.status_code != 404:
            logger.warning(f"Release lookup for {tag} returned {resp.status_code}")
        return None

    async def create_release(self, tag: str) -> Dict[str, Any]:
        """Create a published (non-draft) release used as an asset bucket."""
        resp = await self._request(
            "POST",
            f"{self._api}/releases",
            "Release creation",
            headers=self._headers(),
            json={
                "tag_name": tag,
                "name": f"UGC Uploads {tag}",
                "body": GITHUB.release_body,
                "draft": False,
                "prerelease": False,
            },
        )
        if resp.status_code not in (200, 201):
            logger.error(f"Release creation for {tag} failed: {resp.status_code} {resp.text[:200]}")
            raise UpstreamError("Failed to create release")
        return self._json(resp, "Release creation")

    async def upload_release_asset(
        self,
        release_id: int,
        name: str,
        content: AsyncIterator[bytes],
        size: int,
    ) -> Dict[str, Any]:
        """Stream one asset into a release; returns the asset JSON."""
        resp = await self._request(
            "POST",
            f"{self._uploads}/releases/{release_id}/assets",
            "Asset upload",
            params={"name": name},
            headers=self._headers(**{
                "content-type": "application/octet-stream",
                "content-length": str(size),
            }),
            content=content,
            timeout=TIMEOUTS.transfer,
        )
        if resp.status_code not in (200, 201):
            logger.error(f"Asset upload {name} failed: {resp.status_code} {resp.text[:200]}")
            raise UpstreamError(f"Asset upload failed for {name}")
        return self._json(resp, "Asset upload")

    # ------------------------------------------------------------------
    # ISSUES
    # ------------------------------------------------------------------

    async def create_issue(
        self,
        title: str,
        body: str,
        labels: Sequence[str] = GITHUB.issue_labels,
    ) -> Dict[str, Any]:
        resp = await self._request(
            "POST",
            f"{self._api}/issues",
            "Issue creation",
            headers=self._headers(),
            json={"title": title, "body": body, "labels": list(labels)},
        )
        if resp.status_code not in (200, 201):
            logger.error(f"Issue creation failed: {resp.status_code} {resp.text[:200]}")
            raise UpstreamError("Issue creation failed")
        return self._json(resp, "Issue creation")

    async def list_issues(
        self,
        labels: Sequence[str] = ("ugc",),
        state: str = "all",
        page: int = 1,
        per_page: int = GITHUB.issues_per_page,
    ) -> List[Dict[str, Any]]:
        """One page of issues (pull requests included, as GitHub returns them)."""
        resp = await self._request(
            "GET",
            f"{self._api}/issues",
            "Issue listing",
            headers=self._headers(),
            params={
                "labels": ",".join(labels),
                "state": state,
                "per_page": per_page,
                "page": page,
            },
        )
        if resp.status_code != 200:
            raise UpstreamError(f"Issue listing failed with status {resp.status_code}")
        data = self._json(resp, "Issue listing")
        if not isinstance(data, list):
            raise UpstreamError("Issue listing returned an invalid response")
        return data


__all__ = ["GitHubClient"]

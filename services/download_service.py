# ============================================================================
# DOWNLOAD SERVICE
# ============================================================================
# STATUS: Domain service - Download proxy and tracking
# PURPOSE: Stream allow-listed assets and count downloads
# CREATED: 06 SEP 2026
# ============================================================================
"""
DownloadService

Two ways to count a download:

- ``open_asset``: proxy an asset from an allow-listed GitHub host, counting
  the download when an item id is supplied and upstream answers 2xx.
- ``track_download``: count only, for clients that fetch the file directly.

The host check runs before any upstream request. Counter increments use the
same read-increment-write as likes (last-write-wins).
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, FrozenSet, Optional
from urllib.parse import urlsplit

import httpx

from __version__ import USER_AGENT
from core.config import DOWNLOADS, TIMEOUTS
from core.contracts import CounterKind
from core.errors import Forbidden, InvalidRequest, UpstreamError
from core.logging import get_logger
from repositories import CounterRepository

logger = get_logger(__name__)

# Not forwarded from the upstream response
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "set-cookie",
})


@dataclass
class ProxiedAsset:
    """An upstream response ready to be relayed."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    response: Optional[httpx.Response] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Upstream body exactly as received (no content decoding)."""
        if self.response is None:
            return
        async for chunk in self.response.aiter_raw():
            yield chunk

    async def aclose(self) -> None:
        if self.response is not None:
            await self.response.aclose()


class DownloadService:
    """Download proxy and download counting."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        counter_repo: CounterRepository,
        allowed_hosts: FrozenSet[str] = DOWNLOADS.allowed_hosts,
    ):
        self._http = http
        self.counter_repo = counter_repo
        self.allowed_hosts = allowed_hosts

    def validate_asset_url(self, asset_url: str) -> str:
        """
        Check an asset URL against the host allow-list.

        Raises:
            InvalidRequest: empty or unparsable URL.
            Forbidden: host not allow-listed.
        """
        try:
            parts = urlsplit((asset_url or "").strip())
            host = parts.hostname
        except ValueError:
            raise InvalidRequest("Invalid asset url")
        if parts.scheme not in ("http", "https") or not host:
            raise InvalidRequest("Invalid asset url")
        if host not in self.allowed_hosts:
            logger.warning(f"Download blocked for host {host}")
            raise Forbidden("Disallowed asset host")
        return parts.geturl()

    async def open_asset(self, asset_url: str, item_id: Optional[str] = None) -> ProxiedAsset:
        """
        Start fetching an allow-listed asset.

        A non-2xx upstream status is returned as-is (body discarded) and
        nothing is counted. On success the caller must stream and then
        ``aclose()`` the returned asset.
        """
        url = self.validate_asset_url(asset_url)

        request = self._http.build_request(
            "GET", url, headers={"user-agent": USER_AGENT}, timeout=TIMEOUTS.transfer
        )
        try:
            response = await self._http.send(request, stream=True, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.error(f"Asset fetch failed for {url}: {e}")
            raise UpstreamError("Asset fetch failed")

        if not response.is_success:
            logger.info(f"Asset upstream returned {response.status_code}: {url}")
            await response.aclose()
            return ProxiedAsset(status_code=response.status_code)

        item_id = (item_id or "").strip()
        if item_id:
            try:
                downloads = await self.counter_repo.increment(CounterKind.DOWNLOADS, item_id)
            except Exception:
                await response.aclose()
                raise
            logger.info(f"Download counted: item={item_id} downloads={downloads}")

        headers = {
            name: value
            for name, value in response.headers.items()
            if name.lower() not in HOP_BY_HOP_HEADERS
        }
        if "cache-control" not in response.headers:
            headers["cache-control"] = f"public, max-age={DOWNLOADS.cache_seconds}"

        return ProxiedAsset(status_code=200, headers=headers, response=response)

    async def track_download(self, item_id: str, file_name: str = "") -> int:
        """Count a download reported by the client. Returns the new total."""
        item_id = str(item_id or "").strip()
        if not item_id:
            raise InvalidRequest("Missing itemId")

        downloads = await self.counter_repo.increment(CounterKind.DOWNLOADS, item_id)
        logger.info(f"Download tracked: item={item_id} file={file_name!r} downloads={downloads}")
        return downloads

# ============================================================================
# DOWNLOAD SERVICE TESTS
# ============================================================================
# STATUS: Tests - Download proxy and tracking
# PURPOSE: Host allow-list, status passthrough, counting, header relay
# CREATED: 13 SEP 2026
# ============================================================================
"""
Download Service Tests

Tests for services/download_service.py. Upstream hosts are served by
httpx.MockTransport; counters use the in-memory store.

Run with:
    pytest tests/test_download_service.py -v
"""

import asyncio

import httpx
import pytest

from core.errors import Forbidden, InvalidRequest, UpstreamError
from infrastructure.kv_store import MemoryKeyValueStore
from repositories import CounterRepository
from services.download_service import DownloadService

ASSET_URL = "https://github.com/o/r/releases/download/ugc-uploads-2026-09/spa.json"
CDN_URL = "https://objects.githubusercontent.com/blob/spa.json"


class _AsyncBody(httpx.AsyncByteStream):
    """Async-only body so the response is still unread when it reaches the service."""

    def __init__(self, chunks):
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


def _upstream(request: httpx.Request) -> httpx.Response:
    if request.url.host == "github.com" and request.url.path.endswith("/spa.json"):
        return httpx.Response(302, headers={"location": CDN_URL})
    if request.url.host == "objects.githubusercontent.com":
        return httpx.Response(
            200,
            stream=_AsyncBody([b'{"tyre": ', b'27}']),
            headers={
                "content-type": "application/octet-stream",
                "connection": "keep-alive",
                "set-cookie": "a=b",
            },
        )
    if request.url.host == "raw.githubusercontent.com":
        raise httpx.ConnectError("boom", request=request)
    return httpx.Response(404, text="nope")


def _download(url, item_id=None, handler=_upstream):
    """Open, read and close one asset; returns (asset, body, store)."""
    store = MemoryKeyValueStore()
    requests = []

    def recording(request):
        requests.append(request)
        return handler(request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(recording)) as http:
            service = DownloadService(http, CounterRepository(store))
            asset = await service.open_asset(url, item_id)
            body = b"".join([chunk async for chunk in asset.iter_bytes()])
            await asset.aclose()
            return asset, body

    asset, body = asyncio.run(run())
    return asset, body, store, requests


class TestValidateAssetUrl:

    def _service(self):
        return DownloadService(http=None, counter_repo=None)

    @pytest.mark.parametrize("url", [ASSET_URL, CDN_URL, "https://raw.githubusercontent.com/o/r/main/a.json"])
    def test_allowed(self, url):
        assert self._service().validate_asset_url(url) == url

    @pytest.mark.parametrize("url", ["https://evil.example.com/a.zip", "https://github.com.evil.io/a"])
    def test_disallowed_host(self, url):
        with pytest.raises(Forbidden) as exc:
            self._service().validate_asset_url(url)
        assert exc.value.message == "Disallowed asset host"
        assert exc.value.status_code == 400

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://github.com/a", "https://"])
    def test_invalid(self, url):
        with pytest.raises(InvalidRequest):
            self._service().validate_asset_url(url)


class TestOpenAsset:

    def test_streams_and_counts(self):
        asset, body, store, _ = _download(ASSET_URL, "spa-setup")

        assert asset.ok
        assert body == b'{"tyre": 27}'
        assert asyncio.run(store.get("downloads:spa-setup")) == "1"

    def test_relays_headers(self):
        asset, _, _, _ = _download(ASSET_URL, "spa-setup")

        assert asset.headers["content-type"] == "application/octet-stream"
        assert asset.headers["cache-control"] == "public, max-age=86400"
        assert "connection" not in asset.headers
        assert "set-cookie" not in asset.headers

    def test_without_id_nothing_counted(self):
        asset, _, store, _ = _download(ASSET_URL)
        assert asset.ok
        assert len(store) == 0

    def test_upstream_status_passes_through(self):
        asset, body, store, _ = _download("https://github.com/o/r/missing.zip", "x")
        assert asset.status_code == 404
        assert not asset.ok
        assert body == b""
        assert len(store) == 0

    def test_disallowed_host_makes_no_request(self):
        with pytest.raises(Forbidden):
            _download("https://evil.example.com/a.zip", "x")

    def test_transport_error(self):
        with pytest.raises(UpstreamError):
            _download("https://raw.githubusercontent.com/o/r/main/a.json", "x")


class TestTrackDownload:

    def test_increments(self):
        store = MemoryKeyValueStore()
        service = DownloadService(http=None, counter_repo=CounterRepository(store))
        assert asyncio.run(service.track_download("a", "spa.json")) == 1
        assert asyncio.run(service.track_download("a")) == 2

    def test_missing_id(self):
        service = DownloadService(http=None, counter_repo=CounterRepository(MemoryKeyValueStore()))
        with pytest.raises(InvalidRequest, match="Missing itemId"):
            asyncio.run(service.track_download(""))

# ============================================================================
# API ROUTE TESTS
# ============================================================================
# STATUS: Tests - HTTP surface
# PURPOSE: Status codes, response shapes, CORS, error envelope
# CREATED: 15 SEP 2026
# ============================================================================
"""
API Route Tests

Drives the full application (main.create_app) with FastAPI TestClient.
Services run for real on in-memory stores; GitHub, hCaptcha and asset
hosts are mocked.

Run with:
    pytest tests/test_routes.py -v
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from api.routes import set_services
from core.config import UPLOADS, EdgeConfig
from core.errors import UpstreamUnavailable
from infrastructure.kv_store import MemoryKeyValueStore
from main import create_app
from repositories import CounterRepository, RateLimitRepository
from services import CatalogService, DownloadService, InteractionService, SubmissionService

SNAPSHOT = {
    "items": [
        {"id": "spa-setup", "title": "Spa", "category": "setup", "game": "acc", "downloads": 10},
        {"number": 17, "title": "Legacy", "category": "livery", "game": "iracing"},
    ]
}

FORM = {
    "title": "Spa Hotlap",
    "category": "setup",
    "game": "acc",
    "description": "Low drag",
    "author": "pitwall",
}

ORIGINS = "https://simracemarket.com,https://*.srm-preview.pages.dev"


# ============================================================================
# FIXTURES
# ============================================================================

class _AsyncBody(httpx.AsyncByteStream):
    """Unread async body, as a real transport hands it over."""

    def __init__(self, chunks):
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


def _asset_host(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/spa.json"):
        return httpx.Response(
            200,
            stream=_AsyncBody([b'{"tyre": 27}']),
            headers={"content-type": "application/json"},
        )
    return httpx.Response(404, text="gone")


def _make_github():
    github = MagicMock()
    github.fetch_catalog = AsyncMock(return_value=SNAPSHOT)
    github.get_release_by_tag = AsyncMock(return_value={"id": 5})
    github.create_release = AsyncMock()
    github.upload_release_asset = AsyncMock(
        side_effect=lambda release_id, name, content, size: {
            "browser_download_url": f"https://github.com/o/r/releases/download/t/{name}"
        }
    )
    github.create_issue = AsyncMock(
        return_value={"number": 57, "html_url": "https://github.com/SimRaceMarket/SRM-UGC/issues/57"}
    )
    return github


def _make_client(max_file_bytes=1024, catalog_service=None):
    """App with fresh stores and mocked upstreams. Returns (client, github, counts)."""
    counts = MemoryKeyValueStore()
    counter_repo = CounterRepository(counts)
    github = _make_github()
    captcha = MagicMock()
    captcha.verify = AsyncMock(return_value=True)

    set_services(
        catalog_service=catalog_service or CatalogService(github, counter_repo),
        interaction_service=InteractionService(counter_repo, RateLimitRepository(MemoryKeyValueStore())),
        download_service=DownloadService(
            httpx.AsyncClient(transport=httpx.MockTransport(_asset_host)), counter_repo
        ),
        submission_service=SubmissionService(github, captcha, max_file_bytes=max_file_bytes),
    )
    app = create_app(EdgeConfig(allowed_origins=ORIGINS))
    return TestClient(app), github, counts


@pytest.fixture
def client():
    test_client, _, _ = _make_client()
    return test_client


# ============================================================================
# CATALOG
# ============================================================================

class TestContent:

    def test_list(self, client):
        response = client.get("/content")
        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["title"] for i in items] == ["Spa", "Legacy"]
        assert items[0]["downloads"] == 10
        assert items[1]["likes"] == 0

    def test_item_by_legacy_number(self, client):
        response = client.get("/content/17")
        assert response.status_code == 200
        assert response.json()["title"] == "Legacy"

    def test_item_not_found(self, client):
        response = client.get("/content/nope")
        assert response.status_code == 404
        assert response.json() == {"ok": False, "error": "Item not found"}

    def test_catalog_unavailable(self):
        test_client, github, _ = _make_client()
        github.fetch_catalog.side_effect = UpstreamUnavailable()

        response = test_client.get("/content")

        assert response.status_code == 502
        assert response.json() == {"ok": False, "error": "Upstream fetch failed"}

    def test_stats(self, client):
        response = client.get("/stats")
        assert response.json() == {
            "totalItems": 2,
            "totalDownloads": 10,
            "categories": {"setup": 1, "livery": 1},
            "games": {"acc": 1, "iracing": 1},
        }

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert response.json()["ok"] is False


# ============================================================================
# INTERACTIONS
# ============================================================================

class TestLike:

    def test_like_then_rate_limited(self, client):
        headers = {"cf-connecting-ip": "203.0.113.9"}

        first = client.post("/like", json={"id": "spa-setup"}, headers=headers)
        assert first.status_code == 200
        assert first.json() == {"ok": True, "id": "spa-setup", "likes": 1}

        second = client.post("/like", json={"id": "spa-setup"}, headers=headers)
        assert second.status_code == 429
        assert second.json() == {"ok": False, "error": "Rate limited"}

        other = client.post("/like", json={"id": "spa-setup"}, headers={"x-forwarded-for": "198.51.100.1, 10.0.0.1"})
        assert other.json()["likes"] == 2

        assert client.get("/content/spa-setup").json()["likes"] == 2

    def test_invalid_body_counts_as_empty(self, client):
        response = client.post("/like", content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Missing id"}


class TestRate:

    def test_rate_then_already_rated(self, client):
        response = client.post("/rate", json={"id": "17", "rating": 4})
        assert response.json() == {"ok": True, "id": "17", "rating": 4.0, "totalRatings": 1}

        again = client.post("/rate", json={"id": "17", "rating": 5})
        assert again.status_code == 429
        assert again.json()["error"] == "Already rated this item"

    def test_invalid_rating(self, client):
        response = client.post("/rate", json={"id": "17", "rating": 9})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid rating (must be 1-5)"


# ============================================================================
# DOWNLOADS
# ============================================================================

class TestDownload:

    def test_proxy_counts(self):
        test_client, _, counts = _make_client()
        response = test_client.get(
            "/download",
            params={"asset": "https://objects.githubusercontent.com/x/spa.json", "id": "spa-setup"},
        )
        assert response.status_code == 200
        assert response.content == b'{"tyre": 27}'
        assert response.headers["cache-control"] == "public, max-age=86400"
        assert response.headers["access-control-allow-origin"] == "*"
        assert test_client.get("/content/spa-setup").json()["downloads"] == 1

    def test_disallowed_host(self, client):
        response = client.get("/download", params={"asset": "https://evil.example.com/a.zip"})
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Disallowed asset host"}

    def test_upstream_status_passthrough(self, client):
        response = client.get("/download", params={"asset": "https://github.com/o/r/missing.zip", "id": "x"})
        assert response.status_code == 404
        assert response.text == "Asset not found"

    def test_track(self, client):
        response = client.post("/download/track", json={"itemId": "17", "fileName": "legacy.zip"})
        assert response.json() == {"ok": True, "itemId": "17", "downloads": 1, "fileName": "legacy.zip"}

    def test_track_missing_id(self, client):
        assert client.post("/download/track", json={}).status_code == 400


# ============================================================================
# SUBMISSIONS
# ============================================================================

class TestSubmit:

    def test_accepted(self):
        test_client, github, _ = _make_client()
        response = test_client.post(
            "/submit",
            data={**FORM, "captchaToken": "tok"},
            files=[("files", ("spa.json", b"{}", "application/json"))],
        )
        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "message": "Submission created successfully! It will be reviewed and published soon.",
            "issueUrl": "https://github.com/SimRaceMarket/SRM-UGC/issues/57",
            "submissionId": 57,
        }
        assert github.upload_release_asset.await_args.args[1] == "spa.json"

    def test_only_upload_field_is_uploaded(self):
        test_client, github, _ = _make_client()
        response = test_client.post(
            "/submit",
            data=FORM,
            files=[
                (UPLOADS.upload_field, ("spa.json", b"{}", "application/json")),
                ("attachment", ("other.zip", b"1", "application/zip")),
            ],
        )
        assert response.status_code == 200
        assert github.upload_release_asset.await_count == 1
        assert github.upload_release_asset.await_args.args[1] == "spa.json"

    def test_requires_multipart(self, client):
        response = client.post("/submit", json=FORM)
        assert response.status_code == 415
        assert response.json() == {"ok": False, "error": "Use multipart/form-data"}

    def test_missing_fields(self, client):
        response = client.post(
            "/submit",
            data={"title": "Only"},
            files=[("files", ("a.zip", b"1", "application/zip"))],
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Missing required fields:")

    def test_oversized_file(self):
        test_client, github, _ = _make_client(max_file_bytes=8)
        response = test_client.post(
            "/submit",
            data=FORM,
            files=[("files", ("big.zip", b"x" * 64, "application/zip"))],
        )
        assert response.status_code == 413
        github.upload_release_asset.assert_not_awaited()


# ============================================================================
# CORS AND ERROR BOUNDARY
# ============================================================================

class TestCors:

    def test_preflight(self, client):
        response = client.options("/like", headers={"origin": "https://simracemarket.com"})
        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "https://simracemarket.com"
        assert response.headers["access-control-allow-methods"] == "GET,POST,OPTIONS"
        assert response.headers["access-control-allow-headers"] == "authorization,content-type"
        assert response.headers["access-control-max-age"] == "600"

    def test_wildcard_origin(self, client):
        origin = "https://feature-x.srm-preview.pages.dev"
        response = client.get("/content", headers={"origin": origin})
        assert response.headers["access-control-allow-origin"] == origin

    def test_unlisted_origin_gets_star(self, client):
        response = client.get("/content", headers={"origin": "https://elsewhere.example"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_errors_carry_cors(self, client):
        response = client.get("/content/nope", headers={"origin": "https://simracemarket.com"})
        assert response.headers["access-control-allow-origin"] == "https://simracemarket.com"


class TestErrorBoundary:

    def test_unexpected_error_is_500_json(self):
        broken = MagicMock()
        broken.get_collection = AsyncMock(side_effect=RuntimeError("kaboom"))
        test_client, _, _ = _make_client(catalog_service=broken)

        response = test_client.get("/content")

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "kaboom"}
        assert response.headers["access-control-allow-origin"] == "*"


class TestHealth:

    def test_livez(self, client):
        assert client.get("/livez").json()["status"] == "alive"

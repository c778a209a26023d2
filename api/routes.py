# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: Core - FastAPI route definitions
# PURPOSE: Catalog, interaction, download and submission endpoints
# CREATED: 07 SEP 2026
# ============================================================================
"""
API Routes

Thin HTTP layer over the services. Routes parse input and shape output;
services raise EdgeError subclasses, which main.py renders as
``{"ok": false, "error": ...}`` with the matching status.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile

from core.config import UPLOADS
from core.errors import UnsupportedMediaType
from core.logging import log_context
from .cors import client_identity
from .schemas import (
    ContentListResponse,
    LikeResponse,
    RateResponse,
    TrackDownloadResponse,
    SubmitResponse,
    StatsResponse,
)

router = APIRouter()


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_catalog_service = None
_interaction_service = None
_download_service = None
_submission_service = None


def set_services(catalog_service, interaction_service, download_service, submission_service):
    """Set service instances for dependency injection."""
    global _catalog_service, _interaction_service, _download_service, _submission_service
    _catalog_service = catalog_service
    _interaction_service = interaction_service
    _download_service = download_service
    _submission_service = submission_service


def get_catalog_service():
    if _catalog_service is None:
        raise HTTPException(503, "Services not initialized")
    return _catalog_service


def get_interaction_service():
    if _interaction_service is None:
        raise HTTPException(503, "Services not initialized")
    return _interaction_service


def get_download_service():
    if _download_service is None:
        raise HTTPException(503, "Services not initialized")
    return _download_service


def get_submission_service():
    if _submission_service is None:
        raise HTTPException(503, "Services not initialized")
    return _submission_service


async def _json_body(request: Request) -> Dict[str, Any]:
    """Request JSON as a dict; anything unparsable counts as ``{}``."""
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


# ============================================================================
# CATALOG
# ============================================================================

@router.get("/content", response_model=ContentListResponse, tags=["Content"])
async def list_content(service=Depends(get_catalog_service)):
    """All approved items with live counters."""
    return {"items": await service.get_collection()}


@router.get("/content/{item_id}", tags=["Content"])
async def get_content(item_id: str, service=Depends(get_catalog_service)):
    """One item by id or legacy number."""
    with log_context(item_id=item_id, operation="get_content"):
        return await service.get_item(item_id)


@router.get("/stats", response_model=StatsResponse, tags=["Content"])
async def get_stats(service=Depends(get_catalog_service)):
    return await service.get_stats()


# ============================================================================
# INTERACTIONS
# ============================================================================

@router.post("/like", response_model=LikeResponse, tags=["Interactions"])
async def like(request: Request, service=Depends(get_interaction_service)):
    """
    Like an item. One like per client per item per day.

    Body: ``{"id": "..."}``
    """
    body = await _json_body(request)
    item_id = str(body.get("id") or "").strip()

    with log_context(item_id=item_id, operation="like"):
        likes = await service.like(item_id, client_identity(request))

    return LikeResponse(id=item_id, likes=likes)


@router.post("/rate", response_model=RateResponse, tags=["Interactions"])
async def rate(request: Request, service=Depends(get_interaction_service)):
    """
    Rate an item 1-5. One rating per client per item per week.

    Body: ``{"id": "...", "rating": 4}``
    """
    body = await _json_body(request)
    item_id = str(body.get("id") or "").strip()

    with log_context(item_id=item_id, operation="rate"):
        average, count = await service.rate(item_id, body.get("rating"), client_identity(request))

    return RateResponse(id=item_id, rating=average, totalRatings=count)


# ============================================================================
# DOWNLOADS
# ============================================================================

@router.get("/download", tags=["Downloads"])
async def download(
    asset: str = Query(default=""),
    id: str = Query(default=""),
    service=Depends(get_download_service),
):
    """
    Proxy an asset from an allow-listed host, counting the download
    against ``id`` when given.
    """
    with log_context(item_id=id or None, operation="download"):
        proxied = await service.open_asset(asset, id)

    if not proxied.ok:
        return PlainTextResponse("Asset not found", status_code=proxied.status_code)

    return StreamingResponse(
        proxied.iter_bytes(),
        status_code=proxied.status_code,
        headers=proxied.headers,
        background=BackgroundTask(proxied.aclose),
    )


@router.post("/download/track", response_model=TrackDownloadResponse, tags=["Downloads"])
async def track_download(request: Request, service=Depends(get_download_service)):
    """
    Count a download the client fetched directly.

    Body: ``{"itemId": "...", "fileName": "..."}``
    """
    body = await _json_body(request)
    item_id = str(body.get("itemId") or "").strip()
    file_name = str(body.get("fileName") or "")

    with log_context(item_id=item_id, operation="track_download"):
        downloads = await service.track_download(item_id, file_name)

    return TrackDownloadResponse(itemId=item_id, downloads=downloads, fileName=file_name)


# ============================================================================
# SUBMISSIONS
# ============================================================================

@router.post("/submit", response_model=SubmitResponse, tags=["Submissions"])
async def submit(request: Request, service=Depends(get_submission_service)):
    """
    Accept a community submission (multipart/form-data).

    Text fields describe the item; ``files`` may repeat. The files are
    uploaded to the monthly release and a tracking issue is filed.
    """
    content_type = request.headers.get("content-type") or ""
    if "multipart/form-data" not in content_type.lower():
        raise UnsupportedMediaType("Use multipart/form-data")

    form = await request.form()
    try:
        files = [
            f for f in form.getlist(UPLOADS.upload_field)
            if isinstance(f, UploadFile) and f.filename
        ]
        token = form.get("captchaToken")
        token = token if isinstance(token, str) else None

        with log_context(operation="submit"):
            receipt = await service.submit(
                form,
                files,
                captcha_token=token,
                remote_ip=client_identity(request),
            )
    finally:
        await form.close()

    return SubmitResponse(issueUrl=receipt.url, submissionId=receipt.number)

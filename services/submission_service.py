# ============================================================================
# SUBMISSION SERVICE
# ============================================================================
# STATUS: Domain service - Submission intake
# PURPOSE: Validate, upload assets to the monthly release, file tracking issue
# CREATED: 06 SEP 2026
# ============================================================================
"""
SubmissionService

Linear pipeline per submission, no retries:

1. Validate fields        -> InvalidRequest
2. Pre-check file sizes   -> PayloadTooLarge (nothing uploaded)
3. Verify captcha         -> CaptchaFailed
4. Resolve monthly release (look up by tag, create if absent) -> UpstreamError
5. Upload each file       -> UpstreamError
6. File tracking issue    -> UpstreamError

A submission is durable only once step 6 succeeds. Failures in steps 5-6
do not undo earlier uploads: the host has no multi-resource transaction,
so orphaned release assets are accepted.

Oversized files are rejected before any upload. If any file exceeds
``max_file_bytes`` nothing is uploaded and no release is resolved.
"""

import os
import re
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, List, Mapping, Optional, Sequence

from core.config import GITHUB, UPLOADS, classify_file
from core.errors import CaptchaFailed, PayloadTooLarge, UpstreamError
from core.logging import get_logger, log_checkpoint
from core.models import IssueReceipt, SubmissionMetadata, UploadedAsset
from infrastructure.captcha import CaptchaVerifier
from infrastructure.github_client import GitHubClient

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(name: str, max_length: int = UPLOADS.max_filename_length) -> str:
    """Restrict to [A-Za-z0-9._-] (others become "_") and cap the length."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name or "")[:max_length] or "file"


def release_tag(now: datetime) -> str:
    """Monthly bucket tag, e.g. ugc-uploads-2026-09 (UTC)."""
    now = now.astimezone(timezone.utc)
    return f"{GITHUB.release_tag_prefix}-{now.year}-{now.month:02d}"


def file_size(upload: Any) -> int:
    """Byte size of an uploaded file, measuring the spooled file if needed."""
    size = getattr(upload, "size", None)
    if size is not None:
        return int(size)
    handle = upload.file
    position = handle.tell()
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(position)
    return size


async def _read_chunks(upload: Any, chunk_size: int = UPLOADS.chunk_size) -> AsyncIterator[bytes]:
    await upload.seek(0)
    while True:
        chunk = await upload.read(chunk_size)
        if not chunk:
            break
        yield chunk


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionService:
    """Submission intake against the repository host."""

    def __init__(
        self,
        github: GitHubClient,
        captcha: CaptchaVerifier,
        max_file_bytes: int = UPLOADS.max_file_bytes,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.github = github
        self.captcha = captcha
        self.max_file_bytes = max_file_bytes
        self._clock = clock

    # ================================================================
    # SUBMIT
    # ================================================================

    async def submit(
        self,
        form: Mapping[str, Any],
        files: Sequence[Any],
        captcha_token: Optional[str] = None,
        remote_ip: Optional[str] = None,
    ) -> IssueReceipt:
        """
        Main entry point.

        Args:
            form: multipart text fields
            files: uploaded files from the ``files`` field (objects with
                ``filename``, ``size``, async ``read``/``seek``)
            captcha_token: hCaptcha response token
            remote_ip: client address passed on to the captcha verifier

        Returns:
            IssueReceipt with the tracking issue number and URL.
        """
        # 1. Validate fields
        metadata = SubmissionMetadata.from_form(form)

        # 2. Reject oversized files before anything is uploaded
        sizes = [file_size(f) for f in files]
        for upload, size in zip(files, sizes):
            if size > self.max_file_bytes:
                logger.info(f"Submission rejected: {upload.filename} is {size} bytes")
                raise PayloadTooLarge(
                    f"File too large: {upload.filename} ({size} > {self.max_file_bytes})"
                )

        # 3. Captcha
        if not await self.captcha.verify(captcha_token, remote_ip):
            raise CaptchaFailed()

        now = self._clock()

        # 4. Monthly release
        release_id = await self.resolve_release(release_tag(now))

        # 5. Upload assets
        assets: List[UploadedAsset] = []
        for upload, size in zip(files, sizes):
            assets.append(await self.upload_asset(release_id, upload, size))

        # 6. Tracking issue
        issue = await self.github.create_issue(
            title=metadata.issue_title(),
            body=metadata.issue_body(assets, now),
            labels=GITHUB.issue_labels,
        )
        try:
            receipt = IssueReceipt(number=issue["number"], url=issue["html_url"])
        except (KeyError, TypeError, ValueError):
            raise UpstreamError("Issue creation returned an invalid response")

        log_checkpoint("issue_created", {
            "issue": receipt.number,
            "assets": len(assets),
            "category": metadata.category,
        })
        logger.info(f"Submission filed as issue #{receipt.number} with {len(assets)} assets")
        return receipt

    # ================================================================
    # STEPS
    # ================================================================

    async def resolve_release(self, tag: str) -> int:
        """Release id for ``tag``, creating the release on first use."""
        release = await self.github.get_release_by_tag(tag)
        created = False
        if release is None:
            release = await self.github.create_release(tag)
            created = True

        try:
            release_id = int(release["id"])
        except (KeyError, TypeError, ValueError):
            raise UpstreamError("Release response has no id")

        log_checkpoint("release_resolved", {"tag": tag, "release_id": release_id, "created": created})
        return release_id

    async def upload_asset(self, release_id: int, upload: Any, size: int) -> UploadedAsset:
        """Stream one file into the release."""
        name = sanitize_filename(upload.filename)
        result = await self.github.upload_release_asset(
            release_id, name, _read_chunks(upload), size
        )
        url = result.get("browser_download_url") if isinstance(result, dict) else None
        if not url:
            raise UpstreamError(f"Asset upload failed for {upload.filename}")

        asset = UploadedAsset(name=name, url=url, size=size, type=classify_file(upload.filename))
        log_checkpoint("asset_uploaded", {"name": name, "size": size, "release_id": release_id})
        return asset

#!/usr/bin/env python3
# ============================================================================
# CATALOG REBUILD TOOL
# ============================================================================
# STATUS: Tool - Offline catalog snapshot rebuild
# PURPOSE: Regenerate approved.json from approved tracking issues
# CREATED: 10 SEP 2026
# ============================================================================
"""
Rebuild the catalog snapshot from tracking issues.

Reads every issue labeled ``approved`` and ``ugc``, parses the JSON summary
block each submission carries, and writes ``{"items": [...]}`` to the
snapshot path. Counters start at zero; live values come from the counter
store at read time.

Usage:
    # Default repository and output path
    python tools/build_catalog.py

    # Other repository, custom output
    python tools/build_catalog.py --repo SimRaceMarket/SRM-UGC --output /tmp/approved.json

    # Print instead of writing
    python tools/build_catalog.py --dry-run

Requires:
    GH_TOKEN (or GITHUB_TOKEN) for private repositories and higher rate limits
"""

import argparse
import asyncio
import json
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from __version__ import USER_AGENT
from core.config import GITHUB, TIMEOUTS, classify_file
from core.logging import configure_logging, get_logger
from core.models import TrackingRecord
from infrastructure.github_client import GitHubClient
from services.tracking_service import TrackingService

logger = get_logger(__name__)

_CATEGORY_PREFIX = re.compile(r"^\[[^\]]+\]\s*")


def human_size(files: Iterable[Dict[str, Any]]) -> str:
    """Total size of the listed files, e.g. "1.5 MB", or "Unknown"."""
    total = 0
    for f in files:
        size = f.get("size") if isinstance(f, dict) else None
        if isinstance(size, (int, float)) and not isinstance(size, bool):
            total += size
    if total == 0:
        return "Unknown"
    if total > 1024 * 1024:
        return f"{total / (1024 * 1024):.1f} MB"
    return f"{total / 1024:.1f} KB"


def _shape_file(f: Dict[str, Any]) -> Dict[str, Any]:
    name = f.get("name") or ""
    return {
        "name": name,
        "url": f.get("url"),
        "size": f.get("size") or "Unknown",
        "type": f.get("type") or classify_file(name),
        "description": f.get("description") or "",
    }


def shape_item(record: TrackingRecord) -> Dict[str, Any]:
    """One catalog item from an approved tracking record."""
    meta = record.summary or {}
    files = [f for f in meta.get("files") or [] if isinstance(f, dict)]

    date = (record.created_at or "")[:10]
    title = (
        meta.get("title")
        or _CATEGORY_PREFIX.sub("", record.title or "")
        or f"Item #{record.number}"
    )

    return {
        "id": record.number,
        "title": title,
        "category": meta.get("category") or "submission",
        "game": meta.get("game") or "other",
        "description": meta.get("description") or "",
        "longDescription": meta.get("longDescription") or meta.get("description") or "",
        "author": meta.get("author") or record.author or "unknown",
        "date": date,
        "lastUpdated": (record.updated_at or "")[:10] or date,
        "downloads": 0,
        "likes": 0,
        "rating": meta.get("rating") or 0,
        "totalRatings": meta.get("totalRatings") or 0,
        "version": meta.get("version") or "1.0",
        "fileSize": human_size(files),
        "compatibility": meta.get("compatibility") or [],
        "requirements": meta.get("requirements") or [],
        "installation": meta.get("installation") or [],
        "tags": meta.get("tags") or [],
        "files": [_shape_file(f) for f in files],
        "screenshots": meta.get("screenshots") or [],
        "changelog": meta.get("changelog") or [],
    }


async def build_catalog(tracking: TrackingService) -> Dict[str, List[Dict[str, Any]]]:
    """Snapshot payload from all approved submissions."""
    records = await tracking.list_submissions(labels=GITHUB.approved_labels, state="all")
    return {"items": [shape_item(r) for r in records]}


async def run(owner: str, repo: str, token: str, output: Optional[Path]) -> Dict[str, Any]:
    async with httpx.AsyncClient(timeout=TIMEOUTS.api, headers={"user-agent": USER_AGENT}) as http:
        github = GitHubClient(http, owner=owner, repo=repo, token=token)
        catalog = await build_catalog(TrackingService(github))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(catalog, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Wrote {len(catalog['items'])} items to {output}")
    return catalog


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Rebuild the catalog snapshot from approved tracking issues",
    )
    parser.add_argument(
        "--repo", "-r",
        default=os.environ.get("GITHUB_REPOSITORY")
        or f"{os.environ.get('GH_OWNER', 'SimRaceMarket')}/{os.environ.get('GH_REPO', 'SRM-UGC')}",
        help="owner/repo (default: GITHUB_REPOSITORY or GH_OWNER/GH_REPO)",
    )
    parser.add_argument(
        "--output", "-o",
        default=os.path.join("content-database", "approved.json"),
        help="Snapshot path (default: content-database/approved.json)",
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Print the snapshot instead of writing it",
    )
    args = parser.parse_args(argv)

    owner, _, repo = args.repo.partition("/")
    if not owner or not repo:
        print(f"ERROR: --repo must be owner/repo, got {args.repo!r}", file=sys.stderr)
        return 1

    configure_logging(level=os.environ.get("LOG_LEVEL", "INFO"))
    token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN") or ""

    catalog = asyncio.run(run(owner, repo, token, None if args.dry_run else Path(args.output)))
    if args.dry_run:
        print(json.dumps(catalog, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

# ============================================================================
# TRACKING SERVICE
# ============================================================================
# STATUS: Domain service - Tracking record reader
# PURPOSE: Read submissions back from tracking issues
# CREATED: 08 SEP 2026
# ============================================================================
"""
TrackingService

Every accepted submission is a repository issue whose body ends with a
fenced JSON summary block. This service pages through those issues and
parses the blocks back into TrackingRecord objects. It is the read side
used by the offline catalog rebuild (tools/build_catalog.py).
"""

import json
import re
from typing import Any, Dict, List, Optional, Sequence

from core.config import GITHUB
from core.logging import get_logger
from core.models import TrackingRecord
from infrastructure.github_client import GitHubClient

logger = get_logger(__name__)

_SUMMARY_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")


def parse_summary_block(body: Optional[str]) -> Optional[Dict[str, Any]]:
    """First fenced ```json block of an issue body as a dict, else None."""
    if not body:
        return None
    match = _SUMMARY_BLOCK.search(body)
    if not match:
        return None
    try:
        data = json.loads(match.group(1))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _label_names(labels: Any) -> List[str]:
    names = []
    for label in labels or []:
        name = label.get("name") if isinstance(label, dict) else label
        if name:
            names.append(str(name))
    return names


class TrackingService:
    """Reads tracking issues from the repository host."""

    def __init__(self, github: GitHubClient):
        self.github = github

    async def list_submissions(
        self,
        labels: Sequence[str] = ("ugc",),
        state: str = "all",
        max_pages: int = 100,
    ) -> List[TrackingRecord]:
        """
        All issues carrying ``labels``, oldest page first as GitHub returns
        them. Pull requests are skipped. Issues without a parsable summary
        block are returned with ``summary=None``.
        """
        records: List[TrackingRecord] = []
        for page in range(1, max_pages + 1):
            issues = await self.github.list_issues(
                labels=labels, state=state, page=page, per_page=GITHUB.issues_per_page
            )
            if not issues:
                break
            for issue in issues:
                if not isinstance(issue, dict) or "pull_request" in issue:
                    continue
                records.append(TrackingRecord(
                    number=issue["number"],
                    url=issue.get("html_url"),
                    title=issue.get("title") or "",
                    labels=_label_names(issue.get("labels")),
                    author=(issue.get("user") or {}).get("login"),
                    created_at=issue.get("created_at"),
                    updated_at=issue.get("updated_at"),
                    summary=parse_summary_block(issue.get("body")),
                ))
        else:
            logger.warning(f"Stopped listing tracking issues after {max_pages} pages")

        logger.info(f"Read {len(records)} tracking records (labels={','.join(labels)})")
        return records

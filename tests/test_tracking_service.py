# ============================================================================
# TRACKING READER AND CATALOG REBUILD TESTS
# ============================================================================
# STATUS: Tests - Tracking issues back to catalog items
# PURPOSE: Summary block parsing, paging, rebuild item shaping
# CREATED: 14 SEP 2026
# ============================================================================
"""
Tracking Reader and Catalog Rebuild Tests

Tests for services/tracking_service.py and tools/build_catalog.py.

Run with:
    pytest tests/test_tracking_service.py -v
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

from core.models import TrackingRecord
from services.tracking_service import TrackingService, parse_summary_block
from tools.build_catalog import build_catalog, human_size, shape_item


def _make_issue(number, summary=None, title="[SETUP] Spa", **extra):
    body = "Some text"
    if summary is not None:
        body += "\n```json\n" + json.dumps(summary) + "\n```\n"
    issue = {
        "number": number,
        "html_url": f"https://github.com/o/r/issues/{number}",
        "title": title,
        "body": body,
        "labels": [{"name": "approved"}, {"name": "ugc"}],
        "user": {"login": "pitwall"},
        "created_at": "2026-09-14T08:30:00Z",
        "updated_at": "2026-09-20T10:00:00Z",
    }
    issue.update(extra)
    return issue


def _make_github(pages):
    github = MagicMock()
    github.list_issues = AsyncMock(side_effect=list(pages) + [[]])
    return github


class TestParseSummaryBlock:

    def test_first_block(self):
        body = 'x\n```json\n{"a": 1}\n```\n```json\n{"a": 2}\n```'
        assert parse_summary_block(body) == {"a": 1}

    def test_absent_or_invalid(self):
        assert parse_summary_block(None) is None
        assert parse_summary_block("no block") is None
        assert parse_summary_block("```json\n{broken\n```") is None
        assert parse_summary_block("```json\n[1, 2]\n```") is None


class TestListSubmissions:

    def test_pages_until_empty(self):
        github = _make_github([[_make_issue(1, {"title": "A"})], [_make_issue(2)]])

        records = asyncio.run(TrackingService(github).list_submissions(labels=("approved", "ugc")))

        assert [r.number for r in records] == [1, 2]
        assert records[0].summary == {"title": "A"}
        assert records[1].summary is None
        assert records[0].labels == ["approved", "ugc"]
        assert records[0].author == "pitwall"
        assert github.list_issues.await_count == 3
        assert github.list_issues.await_args.kwargs["page"] == 3

    def test_skips_pull_requests(self):
        github = _make_github([[_make_issue(1), _make_issue(2, pull_request={"url": "x"})]])
        records = asyncio.run(TrackingService(github).list_submissions())
        assert [r.number for r in records] == [1]


class TestShapeItem:

    def _record(self, summary=None, title="[LIVERY] Gulf GT3"):
        return TrackingRecord(
            number=42,
            url="https://github.com/o/r/issues/42",
            title=title,
            labels=["approved", "ugc"],
            author="issue-author",
            created_at="2026-09-14T08:30:00Z",
            updated_at="2026-09-20T10:00:00Z",
            summary=summary,
        )

    def test_defaults_without_summary(self):
        item = shape_item(self._record())

        assert item["id"] == 42
        assert item["title"] == "Gulf GT3"
        assert item["category"] == "submission"
        assert item["game"] == "other"
        assert item["author"] == "issue-author"
        assert item["date"] == "2026-09-14"
        assert item["lastUpdated"] == "2026-09-20"
        assert item["likes"] == 0
        assert item["downloads"] == 0
        assert item["version"] == "1.0"
        assert item["fileSize"] == "Unknown"

    def test_summary_fields_win(self):
        summary = {
            "title": "Gulf Livery",
            "category": "livery",
            "game": "acc",
            "description": "Blue",
            "author": "painter",
            "tags": ["gulf"],
            "files": [{"name": "gulf.zip", "url": "https://github.com/x/gulf.zip", "size": 3 * 1024 * 1024}],
        }
        item = shape_item(self._record(summary))

        assert item["title"] == "Gulf Livery"
        assert item["longDescription"] == "Blue"
        assert item["author"] == "painter"
        assert item["fileSize"] == "3.0 MB"
        assert item["files"][0]["type"] == "Archive"
        assert item["files"][0]["description"] == ""

    def test_untitled_issue(self):
        assert shape_item(self._record(title=""))["title"] == "Item #42"


class TestHumanSize:

    def test_units(self):
        assert human_size([]) == "Unknown"
        assert human_size([{"size": 512}, {"size": 512}]) == "1.0 KB"
        assert human_size([{"size": 2 * 1024 * 1024 + 1}]) == "2.0 MB"
        assert human_size([{"size": "Unknown"}]) == "Unknown"


class TestBuildCatalog:

    def test_reads_approved_issues(self):
        github = _make_github([[_make_issue(7, {"title": "Spa", "game": "acc"})]])

        catalog = asyncio.run(build_catalog(TrackingService(github)))

        assert [item["id"] for item in catalog["items"]] == [7]
        assert catalog["items"][0]["game"] == "acc"
        assert github.list_issues.await_args_list[0].kwargs["labels"] == ("approved", "ugc")

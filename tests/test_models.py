# ============================================================================
# DOMAIN MODEL TESTS
# ============================================================================
# STATUS: Tests - Catalog and submission models
# PURPOSE: Tolerant catalog parsing and submission normalization
# CREATED: 11 SEP 2026
# ============================================================================
"""
Domain Model Tests

Tests for core/models/catalog.py and core/models/submission.py.

Run with:
    pytest tests/test_models.py -v
"""

import json
from datetime import datetime, timezone

import pytest

from core.errors import InvalidRequest
from core.models import (
    Catalog,
    CatalogItem,
    SubmissionMetadata,
    UploadedAsset,
    split_commas,
    split_lines,
)
from services.tracking_service import parse_summary_block


def _make_form(**overrides):
    form = {
        "title": "  Spa Hotlap Setup ",
        "category": "setup",
        "game": "acc",
        "description": "Low drag setup",
        "author": "pitwall",
    }
    form.update(overrides)
    return form


# ============================================================================
# CATALOG
# ============================================================================

class TestCatalogItem:
    """Tests for CatalogItem parsing."""

    def test_counters_parse_leniently(self):
        item = CatalogItem.from_raw({"id": "a", "likes": "7", "downloads": "x", "rating": None})
        assert item.likes == 7.0
        assert item.downloads is None
        assert item.rating is None

    def test_total_ratings_alias(self):
        item = CatalogItem.from_raw({"id": "a", "totalRatings": 3})
        assert item.total_ratings == 3

    def test_non_list_fields_become_empty(self):
        item = CatalogItem.from_raw({"id": "a", "tags": "racing", "files": None})
        assert item.tags == []
        assert item.files == []

    def test_non_string_text_is_coerced(self):
        item = CatalogItem.from_raw({"id": 1, "title": 42, "version": 2.1})
        assert item.title == "42"
        assert item.version == "2.1"

    def test_raw_is_a_copy(self):
        item = CatalogItem.from_raw({"id": "a", "custom": "kept"})
        raw = item.raw
        raw["custom"] = "changed"
        assert item.raw["custom"] == "kept"

    def test_item_key_prefers_id(self):
        assert CatalogItem.from_raw({"id": 5, "number": 9}).item_key == "5"
        assert CatalogItem.from_raw({"number": 9}).item_key == "9"
        assert CatalogItem.from_raw({"title": "orphan"}).item_key == ""

    def test_matches_id_or_legacy_number(self):
        item = CatalogItem.from_raw({"id": "abc", "number": 12})
        assert item.matches("abc")
        assert item.matches("12")
        assert not item.matches("13")

    def test_numeric_id_matches_string(self):
        assert CatalogItem.from_raw({"id": 42}).matches("42")


class TestCatalog:
    """Tests for Catalog.parse_payload."""

    def test_missing_items_is_empty(self):
        assert Catalog.parse_payload({"other": []}).items == []
        assert Catalog.parse_payload(None).items == []
        assert Catalog.parse_payload([1, 2]).items == []

    def test_non_object_entries_are_skipped(self):
        catalog = Catalog.parse_payload({"items": [{"id": "a"}, "junk", 3, {"id": "b"}]})
        assert [i.item_key for i in catalog.items] == ["a", "b"]

    def test_item_with_odd_file_entries_is_kept(self):
        catalog = Catalog.parse_payload({"items": [
            {"id": "a", "files": ["not-an-object", {"name": "a.zip"}]},
            {"id": "b", "files": [{"name": 123, "url": None}]},
            {"id": "c", "files": [{"name": "c.zip", "size": {"bytes": 10}}]},
            {"id": "d"},
        ]})

        assert [i.item_key for i in catalog.items] == ["a", "b", "c", "d"]
        assert [f.name for f in catalog.items[0].files] == ["a.zip"]
        assert catalog.items[1].files[0].name == "123"
        assert catalog.items[2].files[0].size == {"bytes": 10}

    def test_odd_file_entries_stay_in_raw(self):
        catalog = Catalog.parse_payload({"items": [{"id": "a", "files": ["spa.zip"]}]})
        assert catalog.items[0].raw["files"] == ["spa.zip"]

    def test_float_and_bool_ids_are_kept_as_text(self):
        catalog = Catalog.parse_payload({"items": [{"id": 17.0}, {"number": True}, {"number": 9}]})

        assert [i.item_key for i in catalog.items] == ["17.0", "True", "9"]
        assert catalog.items[0].matches("17.0")
        assert catalog.items[2].number == 9


# ============================================================================
# SUBMISSION
# ============================================================================

class TestSplitting:

    def test_split_commas_dedupes_in_order(self):
        assert split_commas("acc, iracing,,acc , rf2") == ["acc", "iracing", "rf2"]

    def test_split_commas_empty(self):
        assert split_commas("") == []
        assert split_commas(None) == []

    def test_split_lines_drops_blanks(self):
        assert split_lines("step one\n\n  step two  \r\n") == ["step one", "step two"]


class TestSubmissionMetadata:
    """Tests for SubmissionMetadata.from_form and issue rendering."""

    def test_required_fields_trimmed(self):
        metadata = SubmissionMetadata.from_form(_make_form())
        assert metadata.title == "Spa Hotlap Setup"

    def test_missing_fields_listed(self):
        with pytest.raises(InvalidRequest) as exc:
            SubmissionMetadata.from_form(_make_form(title="  ", author=None))
        assert exc.value.message == "Missing required fields: title, author"
        assert exc.value.status_code == 400

    def test_optional_fields(self):
        metadata = SubmissionMetadata.from_form(_make_form(
            tags="gt3, spa, gt3",
            requirements="ACC 1.9\nContent Manager",
            carTrack="Ferrari 296 @ Spa",
            version="",
        ))
        assert metadata.tags == ["gt3", "spa"]
        assert metadata.requirements == ["ACC 1.9", "Content Manager"]
        assert metadata.car_track == "Ferrari 296 @ Spa"
        assert metadata.version is None
        assert metadata.media_urls == []

    def test_issue_title(self):
        assert SubmissionMetadata.from_form(_make_form()).issue_title() == "[SETUP] Spa Hotlap Setup"

    def test_issue_body_embeds_summary(self):
        metadata = SubmissionMetadata.from_form(_make_form(tags="gt3", longDescription="More"))
        asset = UploadedAsset(name="spa.json", url="https://github.com/o/r/releases/download/t/spa.json", size=12, type="Setup File")
        submitted_at = datetime(2026, 9, 14, 8, 30, tzinfo=timezone.utc)

        body = metadata.issue_body([asset], submitted_at)
        summary = parse_summary_block(body)

        assert "- [spa.json](" in body
        assert body.endswith("*Created via SRM API.*")
        assert summary["title"] == "Spa Hotlap Setup"
        assert summary["longDescription"] == "More"
        assert summary["tags"] == ["gt3"]
        assert summary["files"][0]["size"] == 12
        assert summary["submittedAt"] == "2026-09-14T08:30:00+00:00"

    def test_issue_body_without_files(self):
        metadata = SubmissionMetadata.from_form(_make_form())
        body = metadata.issue_body([], datetime(2026, 9, 14, tzinfo=timezone.utc))
        assert "No files attached." in body
        assert json.loads(body.split("```json")[1].split("```")[0])["files"] == []

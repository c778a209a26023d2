# ============================================================================
# SUBMISSION MODELS
# ============================================================================
# STATUS: Domain model - User-generated-content submissions
# PURPOSE: Normalized submission metadata, uploaded assets, tracking records
# CREATED: 04 SEP 2026
# ============================================================================
"""
Submission Models

A submission is never stored by this service. It becomes:
1. zero or more release assets (UploadedAsset)
2. one tracking issue whose body embeds ``SubmissionMetadata.summary`` as a JSON block

The summary block is the durable record: the offline catalog rebuild reads
it back through TrackingRecord.summary. Its keys use the camelCase names of
the multipart form so the catalog stays compatible with older snapshots.
"""

import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from core.errors import InvalidRequest

REQUIRED_FIELDS = ("title", "category", "game", "description", "author")

# Form field name -> separator for list-valued fields
COMMA_FIELDS = ("compatibility", "tags")
LINE_FIELDS = ("requirements", "installation", "mediaUrls")
TEXT_FIELDS = ("longDescription", "version", "carTrack", "license", "notes")


def split_commas(value: Optional[str]) -> List[str]:
    """Comma-separated -> unique, order-preserving, empties dropped."""
    seen: List[str] = []
    for part in (value or "").split(","):
        part = part.strip()
        if part and part not in seen:
            seen.append(part)
    return seen


def split_lines(value: Optional[str]) -> List[str]:
    """Newline-separated -> ordered, blank lines dropped."""
    return [line.strip() for line in (value or "").splitlines() if line.strip()]


class UploadedAsset(BaseModel):
    """A file uploaded to the monthly release container."""
    name: str
    url: str
    size: int = Field(..., ge=0)
    type: str = "File"


class SubmissionMetadata(BaseModel):
    """
    Normalized submission fields.

    Required fields are trimmed and must be non-empty. List fields are
    split from their form text with empty entries dropped.
    """

    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    game: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)

    long_description: Optional[str] = Field(default=None, alias="longDescription")
    version: Optional[str] = None
    car_track: Optional[str] = Field(default=None, alias="carTrack")
    license: Optional[str] = None
    notes: Optional[str] = None

    compatibility: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    installation: List[str] = Field(default_factory=list)
    media_urls: List[str] = Field(default_factory=list, alias="mediaUrls")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SubmissionMetadata":
        """
        Build metadata from multipart form fields.

        Raises:
            InvalidRequest: one or more required fields missing or blank.
        """

        def text(name: str) -> str:
            value = form.get(name)
            return value.strip() if isinstance(value, str) else ""

        missing = [name for name in REQUIRED_FIELDS if not text(name)]
        if missing:
            raise InvalidRequest(f"Missing required fields: {', '.join(missing)}")

        data: Dict[str, Any] = {name: text(name) for name in REQUIRED_FIELDS}
        for name in TEXT_FIELDS:
            data[name] = text(name) or None
        for name in COMMA_FIELDS:
            data[name] = split_commas(text(name))
        for name in LINE_FIELDS:
            data[name] = split_lines(text(name))
        return cls.model_validate(data)

    def issue_title(self) -> str:
        return f"[{self.category.upper()}] {self.title}"

    def summary(self, files: Iterable[UploadedAsset], submitted_at: datetime) -> Dict[str, Any]:
        """Canonical summary dict: every metadata field plus the asset list."""
        summary = self.model_dump(by_alias=True)
        summary["files"] = [f.model_dump() for f in files]
        summary["submittedAt"] = submitted_at.isoformat()
        return summary

    def issue_body(self, files: List[UploadedAsset], submitted_at: datetime) -> str:
        """Human-readable issue body ending with the fenced JSON summary block."""
        block = json.dumps(self.summary(files, submitted_at), indent=2)
        lines = [
            f"**Category:** {self.category}",
            f"**Game/Sim:** {self.game}",
            f"**Author:** {self.author}",
        ]
        if self.version:
            lines.append(f"**Version:** {self.version}")
        if self.car_track:
            lines.append(f"**Car/Track:** {self.car_track}")
        lines += ["", "**Description:**", self.description, ""]
        if files:
            lines.append("**Files:**")
            lines += [f"- [{f.name}]({f.url}) ({f.size} bytes, {f.type})" for f in files]
        else:
            lines.append("No files attached.")
        lines += ["", "---", "```json", block, "```", "", "*Created via SRM API.*"]
        return "\n".join(lines)


class IssueReceipt(BaseModel):
    """Durable receipt for an accepted submission."""
    number: int
    url: str


class TrackingRecord(BaseModel):
    """A tracking issue read back from the repository host."""
    number: int
    url: Optional[str] = None
    title: str = ""
    labels: List[str] = Field(default_factory=list)
    author: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    summary: Optional[Dict[str, Any]] = None


__all__ = [
    "REQUIRED_FIELDS",
    "split_commas",
    "split_lines",
    "UploadedAsset",
    "SubmissionMetadata",
    "IssueReceipt",
    "TrackingRecord",
]

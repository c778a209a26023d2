# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Response schemas
# PURPOSE: Pydantic models for API responses
# CREATED: 07 SEP 2026
# ============================================================================
"""
API Schemas

Response models for the JSON endpoints. Field names are camelCase where the
web client already depends on them.

Request bodies for /like, /rate and /download/track are parsed tolerantly
in the routes (an invalid body behaves like ``{}``), so they have no
request models here.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ContentListResponse(BaseModel):
    """Merged catalog."""
    items: List[Dict[str, Any]] = Field(default_factory=list)


class LikeResponse(BaseModel):
    ok: bool = True
    id: str
    likes: int


class RateResponse(BaseModel):
    ok: bool = True
    id: str
    rating: float = Field(..., description="Running average, one decimal")
    totalRatings: int


class TrackDownloadResponse(BaseModel):
    ok: bool = True
    itemId: str
    downloads: int
    fileName: str = ""


class SubmitResponse(BaseModel):
    """Receipt for an accepted submission."""
    ok: bool = True
    message: str = "Submission created successfully! It will be reviewed and published soon."
    issueUrl: str
    submissionId: int

    model_config = {
        "json_schema_extra": {
            "example": {
                "ok": True,
                "message": "Submission created successfully! It will be reviewed and published soon.",
                "issueUrl": "https://github.com/SimRaceMarket/SRM-UGC/issues/57",
                "submissionId": 57,
            }
        }
    }


class StatsResponse(BaseModel):
    totalItems: int
    totalDownloads: int
    categories: Dict[str, int] = Field(default_factory=dict)
    games: Dict[str, int] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Body of every error response."""
    ok: bool = False
    error: str


__all__ = [
    "ContentListResponse",
    "LikeResponse",
    "RateResponse",
    "TrackDownloadResponse",
    "SubmitResponse",
    "StatsResponse",
    "ErrorResponse",
]

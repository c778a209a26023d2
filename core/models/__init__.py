# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 03 SEP 2026
# ============================================================================
"""
Models Module - Central Export Point

Catalog snapshot models (read-only, tolerant) and submission models
(normalized form metadata, uploaded assets, tracking records).
"""

from core.models.catalog import Catalog, CatalogItem, CatalogFile, LiveCounters
from core.models.submission import (
    SubmissionMetadata,
    UploadedAsset,
    IssueReceipt,
    TrackingRecord,
    split_commas,
    split_lines,
)

__all__ = [
    # Catalog
    "Catalog",
    "CatalogItem",
    "CatalogFile",
    "LiveCounters",
    # Submission
    "SubmissionMetadata",
    "UploadedAsset",
    "IssueReceipt",
    "TrackingRecord",
    "split_commas",
    "split_lines",
]

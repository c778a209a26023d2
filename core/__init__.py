# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors, and models
# CREATED: 02 SEP 2026
# ============================================================================

from core.contracts import CounterKind, InteractionKind
from core.errors import EdgeError
from core.models import (
    Catalog,
    CatalogItem,
    LiveCounters,
    SubmissionMetadata,
    UploadedAsset,
    IssueReceipt,
    TrackingRecord,
)

__all__ = [
    # Enums
    "CounterKind",
    "InteractionKind",
    # Errors
    "EdgeError",
    # Models
    "Catalog",
    "CatalogItem",
    "LiveCounters",
    "SubmissionMetadata",
    "UploadedAsset",
    "IssueReceipt",
    "TrackingRecord",
]

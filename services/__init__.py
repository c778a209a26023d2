# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Domain services
# PURPOSE: Business rules behind the HTTP routes
# CREATED: 05 SEP 2026
# ============================================================================
"""
Services Module

- CatalogService: snapshot + live counter merge, stats
- InteractionService: likes and ratings
- SubmissionService: multipart submission intake
- DownloadService: download proxy and tracking
- TrackingService: reading submissions back from tracking issues
"""

from services.catalog_service import CatalogService
from services.interaction_service import InteractionService
from services.submission_service import SubmissionService
from services.download_service import DownloadService
from services.tracking_service import TrackingService

__all__ = [
    "CatalogService",
    "InteractionService",
    "SubmissionService",
    "DownloadService",
    "TrackingService",
]

# ============================================================================
# VERSION - COMMUNITY CONTENT EDGE API
# ============================================================================
"""
Version information for the Community Content Edge API.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "1.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-18"

SERVICE_NAME = "srm-edge-api"
USER_AGENT = f"srm-worker/{__version__}"

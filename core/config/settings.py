# ============================================================================
# EDGE API CONFIGURATION
# ============================================================================
# STATUS: Core - Configuration management
# PURPOSE: Environment-based configuration for the edge API
# CREATED: 02 SEP 2026
# ============================================================================
"""
Edge API Configuration

Loads configuration from environment variables with sensible defaults.

The service needs:
- repository coordinates and a write token for the GitHub host
- an optional hCaptcha secret (unset = open mode, no captcha required)
- an optional CORS origin allow-list
- the maximum upload size
- the counter store backend (memory for development, postgres for deployment)
"""

import os
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.config.defaults import UPLOADS

logger = logging.getLogger(__name__)


@dataclass
class EdgeConfig:
    """Configuration for the edge API."""

    # Repository host
    gh_owner: str = "SimRaceMarket"
    gh_repo: str = "SRM-UGC"
    gh_token: str = ""
    gh_branch: str = "main"
    catalog_path: str = "content-database/approved.json"

    # Submission intake
    hcaptcha_secret: Optional[str] = None
    max_file_bytes: int = UPLOADS.max_file_bytes

    # CORS ("*" or comma-separated origins, "*" wildcards allowed)
    allowed_origins: str = "*"

    # Catalog snapshot cache
    catalog_cache_seconds: float = 300.0

    # Counter / rate-limit stores
    store_backend: str = "memory"

    @classmethod
    def from_env(cls) -> "EdgeConfig":
        """Load configuration from environment variables."""
        return cls(
            gh_owner=os.environ.get("GH_OWNER", "SimRaceMarket"),
            gh_repo=os.environ.get("GH_REPO", "SRM-UGC"),
            gh_token=os.environ.get("GH_TOKEN", ""),
            gh_branch=os.environ.get("GH_BRANCH", "main"),
            catalog_path=os.environ.get("CATALOG_PATH", "content-database/approved.json"),
            hcaptcha_secret=os.environ.get("HCAPTCHA_SECRET") or None,
            max_file_bytes=int(os.environ.get("MAX_FILE_BYTES") or UPLOADS.max_file_bytes),
            allowed_origins=os.environ.get("ALLOWED_ORIGINS") or "*",
            catalog_cache_seconds=float(os.environ.get("CATALOG_CACHE_SECONDS", "300")),
            store_backend=os.environ.get("STORE_BACKEND", "memory").lower(),
        )

    @property
    def origin_patterns(self) -> List[str]:
        """Allow-list entries, trimmed, empties dropped."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def has_github_token(self) -> bool:
        return bool(self.gh_token)


# Global config singleton
_config: Optional[EdgeConfig] = None


def get_config() -> EdgeConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = EdgeConfig.from_env()
        if not _config.has_github_token:
            logger.warning("GH_TOKEN not set - submissions will be rejected by GitHub")
    return _config


def set_config(config: Optional[EdgeConfig]) -> None:
    """Replace the global configuration (tests, embedding)."""
    global _config
    _config = config


__all__ = ["EdgeConfig", "get_config", "set_config"]

# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for rate limits, hosts, uploads, timeouts
# CREATED: 02 SEP 2026
# ============================================================================
"""
Configuration Defaults

Fixed values shared by the services. Deployment-specific settings
(repository coordinates, credentials, limits) live in core.config.settings.

Design:
- Immutable dataclasses for defaults
- Type-safe access
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet

import httpx


@dataclass(frozen=True)
class RateLimitDefaults:
    """Rate-limit marker windows, in seconds."""
    like_window_seconds: int = 86400  # 1 day
    rate_window_seconds: int = 86400 * 7  # 7 days
    marker_value: str = "1"


@dataclass(frozen=True)
class GitHubDefaults:
    """Endpoints and identifiers for the GitHub repository host."""
    api_base: str = "https://api.github.com"
    upload_base: str = "https://uploads.github.com"
    raw_base: str = "https://raw.githubusercontent.com"
    release_tag_prefix: str = "ugc-uploads"
    release_body: str = "Automated bucket for community uploads."
    issue_labels: tuple = ("pending", "ugc")
    approved_labels: tuple = ("approved", "ugc")
    issues_per_page: int = 100


@dataclass(frozen=True)
class DownloadDefaults:
    """Download proxy settings."""
    allowed_hosts: FrozenSet[str] = frozenset({
        "github.com",
        "raw.githubusercontent.com",
        "github-releases.githubusercontent.com",
        "objects.githubusercontent.com",
        "uploads.github.com",
    })
    cache_seconds: int = 86400  # 1 day


@dataclass(frozen=True)
class UploadDefaults:
    """Submission upload settings."""
    max_file_bytes: int = 100 * 1024 * 1024  # 100 MB
    upload_field: str = "files"
    max_filename_length: int = 120
    chunk_size: int = 256 * 1024
    file_types: Dict[str, str] = field(default_factory=lambda: {
        "json": "Setup File",
        "zip": "Archive",
        "rar": "Archive",
        "7z": "Archive",
        "pdf": "Documentation",
        "txt": "Text File",
        "md": "Documentation",
        "stl": "3D Model",
        "obj": "3D Model",
        "ini": "Config File",
        "cfg": "Config File",
        "xml": "Config File",
        "jpg": "Image",
        "jpeg": "Image",
        "png": "Image",
        "gif": "Image",
        "mp4": "Video",
        "avi": "Video",
        "mov": "Video",
    })
    default_file_type: str = "File"


@dataclass(frozen=True)
class TimeoutDefaults:
    """Outbound HTTP timeouts."""
    api: httpx.Timeout = field(
        default_factory=lambda: httpx.Timeout(connect=10.0, read=30.0, write=30.0, pool=10.0)
    )
    # Asset uploads and downloads can be large
    transfer: httpx.Timeout = field(
        default_factory=lambda: httpx.Timeout(connect=10.0, read=300.0, write=300.0, pool=10.0)
    )
    captcha: httpx.Timeout = field(default_factory=lambda: httpx.Timeout(10.0))


RATE_LIMITS = RateLimitDefaults()
GITHUB = GitHubDefaults()
DOWNLOADS = DownloadDefaults()
UPLOADS = UploadDefaults()
TIMEOUTS = TimeoutDefaults()

HCAPTCHA_VERIFY_URL = "https://hcaptcha.com/siteverify"
ANONYMOUS_CLIENT = "0.0.0.0"


def classify_file(filename: str) -> str:
    """Map a filename's extension to a display type ("File" when unknown)."""
    _, dot, ext = (filename or "").rpartition(".")
    if not dot:
        return UPLOADS.default_file_type
    return UPLOADS.file_types.get(ext.lower(), UPLOADS.default_file_type)

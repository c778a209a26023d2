# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 02 SEP 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the edge API.
"""

from core.config.defaults import (
    RateLimitDefaults,
    GitHubDefaults,
    DownloadDefaults,
    UploadDefaults,
    TimeoutDefaults,
    RATE_LIMITS,
    GITHUB,
    DOWNLOADS,
    UPLOADS,
    TIMEOUTS,
    HCAPTCHA_VERIFY_URL,
    ANONYMOUS_CLIENT,
    classify_file,
)
from core.config.settings import EdgeConfig, get_config, set_config

__all__ = [
    "RateLimitDefaults",
    "GitHubDefaults",
    "DownloadDefaults",
    "UploadDefaults",
    "TimeoutDefaults",
    "RATE_LIMITS",
    "GITHUB",
    "DOWNLOADS",
    "UPLOADS",
    "TIMEOUTS",
    "HCAPTCHA_VERIFY_URL",
    "ANONYMOUS_CLIENT",
    "classify_file",
    "EdgeConfig",
    "get_config",
    "set_config",
]

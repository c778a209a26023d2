# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - External service clients
# PURPOSE: Key-value stores, GitHub repository host, hCaptcha
# CREATED: 03 SEP 2026
# ============================================================================
"""
Infrastructure Module

Clients for everything outside the process:
- KeyValueStore backends (counters, rate-limit markers)
- GitHubClient (catalog snapshot, releases, issues)
- CaptchaVerifier (hCaptcha)
"""

from infrastructure.kv_store import KeyValueStore, MemoryKeyValueStore, PostgresKeyValueStore
from infrastructure.github_client import GitHubClient
from infrastructure.captcha import CaptchaVerifier

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PostgresKeyValueStore",
    "GitHubClient",
    "CaptchaVerifier",
]

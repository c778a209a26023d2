# ============================================================================
# CAPTCHA VERIFIER
# ============================================================================
# STATUS: Infrastructure - hCaptcha siteverify client
# PURPOSE: Shared-secret bot check for submissions
# CREATED: 04 SEP 2026
# ============================================================================
"""
Captcha Verifier

Verifies an hCaptcha response token against the siteverify endpoint.

With no secret configured, verification always succeeds. That is the
"open" mode for deployments that do not use captcha at all.
"""

import logging
from typing import Optional

import httpx

from core.config import HCAPTCHA_VERIFY_URL, TIMEOUTS

logger = logging.getLogger(__name__)


class CaptchaVerifier:
    """hCaptcha verification (no-op without a secret)."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        secret: Optional[str] = None,
        verify_url: str = HCAPTCHA_VERIFY_URL,
    ):
        self._http = http
        self._secret = secret
        self._verify_url = verify_url

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    async def verify(self, token: Optional[str], remote_ip: Optional[str] = None) -> bool:
        """
        True when the token is accepted (or captcha is disabled).

        A missing token, a rejected token, or an unreachable verifier all
        return False.
        """
        if not self._secret:
            return True
        if not token:
            return False

        data = {"secret": self._secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            resp = await self._http.post(self._verify_url, data=data, timeout=TIMEOUTS.captcha)
            result = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Captcha verification unavailable: {e}")
            return False

        if not result.get("success"):
            logger.info(f"Captcha rejected: {result.get('error-codes', [])}")
            return False
        return True

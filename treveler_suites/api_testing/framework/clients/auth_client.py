"""
================================================================================
Auth API Client
================================================================================

Raw calls to the two-step authentication endpoints:

    POST /auth/initiate   {"email"}            -> one-time code sent out-of-band
    POST /auth/verify     {"email", "code"}    -> access/refresh tokens
    POST /auth/refresh    {"refresh"}          -> new access token
    POST /auth/logout     {}                   -> 200 or 204

Responses are returned unvalidated; AuthorizationService applies the
success criteria.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import httpx
from loguru import logger

from ..models import AuthResponse
from ..response_validator import response_time_ms
from .base import ApiClientBase


# Time budget for auth operations (15 seconds)
AUTH_RESPONSE_TIME_LIMIT_MS = 15000


class AuthApiClient(ApiClientBase):
    """
    Client for /auth/* endpoints.

    Usage:
        >>> with HttpClient(config) as http:
        ...     auth = AuthApiClient(http)
        ...     response = auth.initiate_auth("test@example.com")
        ...     response.status_code
        200
    """

    ENDPOINTS = {
        "initiate": "/auth/initiate",
        "verify": "/auth/verify",
        "refresh": "/auth/refresh",
        "logout": "/auth/logout",
    }

    TIME_LIMIT_KEY = "auth.response_time_limit_ms"
    DEFAULT_TIME_LIMIT_MS = AUTH_RESPONSE_TIME_LIMIT_MS

    def initiate_auth(self, email: str) -> httpx.Response:
        """Ask the backend to send a one-time code to ``email``."""
        logger.info(f"Initiating authentication for email: {email}")
        response = self.http.post(self.ENDPOINTS["initiate"], json={"email": email})
        self._log_exchange("Initiate auth", response)
        return response

    def verify_auth(self, email: str, code: str) -> httpx.Response:
        """Exchange email + one-time code for tokens."""
        logger.info(f"Verifying authentication for email: {email}")
        response = self.http.post(
            self.ENDPOINTS["verify"], json={"email": email, "code": code}
        )
        self._log_exchange("Verify auth", response)
        return response

    def refresh_token(self, refresh_token: str) -> httpx.Response:
        logger.info("Refreshing authentication token")
        response = self.http.post(self.ENDPOINTS["refresh"], json={"refresh": refresh_token})
        self._log_exchange("Refresh token", response)
        return response

    def logout(self) -> httpx.Response:
        logger.info("Performing logout")
        response = self.http.post(self.ENDPOINTS["logout"], json={})
        self._log_exchange("Logout", response)
        return response

    def is_valid_auth_response(self, response: httpx.Response) -> bool:
        """
        Boolean form of the token reply criteria.

        True when the reply is 200, JSON, within the time budget, and carries
        an access token without an error field.
        """
        if response.status_code != 200:
            return False
        if "application/json" not in response.headers.get("content-type", ""):
            return False
        if response_time_ms(response) > self.response_time_limit_ms:
            return False
        try:
            auth_response = AuthResponse.from_json(response.json())
        except ValueError as e:
            logger.warning(f"Failed to parse auth response: {e}")
            return False
        return not auth_response.has_error() and auth_response.has_valid_token()

    def _log_exchange(self, label: str, response: httpx.Response) -> None:
        logger.info(
            f"{label} response - Status: {response.status_code}, "
            f"Time: {response_time_ms(response):.0f}ms"
        )

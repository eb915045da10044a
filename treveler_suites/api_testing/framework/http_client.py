"""
================================================================================
HTTP Client with Allure Integration
================================================================================

httpx-based client used by every API client in the suite:
    - Bearer credential injected per request from a CredentialStore
    - Path templates with {placeholder} expansion
    - Exactly one attempt per call (retry policy belongs to the test)
    - Allure reporting with redacted headers/bodies and a cURL command

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Mapping, Optional

import httpx
from loguru import logger

from treveler_tools.report_tools.allure_utils import attach_request_response, mask_headers

from .auth_injector import BearerAuthInjector
from .config_loader import ConfigLoader
from .credential_store import CredentialStore


SENSITIVE_BODY_KEYS = ["password", "secret", "token", "api_key", "authorization", "session"]
SENSITIVE_BODY_FIELDS = {"code", "refresh", "access"}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class HttpClientError(Exception):
    """Raised for client misuse (no session, unresolved path placeholder)."""
    pass


class HttpClient:
    """
    HTTP client for the Treveler API.

    Features:
        - Authorization header taken from the credential store at dispatch time
        - {placeholder} path templates filled from path_params
        - Single attempt per request, no retry or backoff
        - Allure step per request with request/response details

    Usage:
        >>> config = ConfigLoader()
        >>> with HttpClient(config) as client:
        ...     response = client.get("/hotels/{hotel_id}", path_params={"hotel_id": "h1"})
        ...     print(response.json())
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        credential_store: Optional[CredentialStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP client with configuration.

        Args:
            config: Configuration loader instance. Creates new one if None.
            credential_store: Store read by the injector. Process-wide store if None.
            transport: Optional httpx transport. A mock transport must hand back
                streamed responses (stream=httpx.ByteStream(...)); httpx leaves
                .elapsed unset on replies whose body was read at construction.
        """
        if config is None:
            config = ConfigLoader()

        self.config = config
        self.base_url = config.get("api.base_url", "http://localhost:8000")
        self.timeout = float(config.get("api.timeout", 30))

        self.credential_store = credential_store or CredentialStore.default()
        self.auth = BearerAuthInjector(self.credential_store)
        self._transport = transport
        self.session: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpClient":
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self.auth,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.session:
            self.session.close()
            self.session = None

    def request(
        self,
        method: str,
        url: str,
        path_params: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send one HTTP request and log it to Allure.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH)
            url: Path relative to base_url, may contain {placeholders}
            path_params: Values for the placeholders in url
            authenticated: False skips credential injection for this request only
            **kwargs: Additional arguments passed to httpx.Client.request

        Returns:
            httpx.Response object

        Raises:
            HttpClientError: Outside a context manager or on unresolved placeholders
            httpx.HTTPError: Network failures, propagated as-is
        """
        if self.session is None:
            raise HttpClientError(
                "HttpClient must be used within a context manager. "
                "Use 'with HttpClient() as client:'"
            )

        path = self.build_url(url, path_params)
        if not authenticated:
            kwargs["auth"] = None

        logger.info(f"Performing {method} request to: {path}")
        try:
            response = self.session.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise

        elapsed_ms = response.elapsed.total_seconds() * 1000
        logger.info(
            f"{method} request completed. Status code: {response.status_code}, "
            f"Time: {elapsed_ms:.0f}ms"
        )
        self._log_to_allure(method, path, kwargs, response, elapsed_ms)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute DELETE request."""
        return self.request("DELETE", url, **kwargs)

    @staticmethod
    def build_url(template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Fill {placeholder} segments of a path template.

        Examples:
            >>> HttpClient.build_url("/hotels/{hotel_id}/stays", {"hotel_id": "h1"})
            '/hotels/h1/stays'

        Raises:
            HttpClientError: If a placeholder has no value
        """
        params = path_params or {}

        def _substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            if params.get(name) is None:
                raise HttpClientError(f"Missing path parameter '{name}' for {template}")
            return str(params[name])

        return _PLACEHOLDER.sub(_substitute, template)

    def _log_to_allure(
        self,
        method: str,
        url: str,
        kwargs: Dict[str, Any],
        response: httpx.Response,
        elapsed_ms: float,
    ) -> None:
        """Attach the exchange to the Allure report with credentials redacted."""
        full_url = str(response.request.url)
        safe_headers = mask_headers(dict(response.request.headers))
        safe_body = self._redact_body(kwargs.get("json"))

        attach_request_response(
            method=method,
            path=url,
            url=full_url,
            status_code=response.status_code,
            elapsed_ms=elapsed_ms,
            request_headers=safe_headers,
            request_body=safe_body,
            query_params=kwargs.get("params"),
            curl_command=self._build_curl(method, full_url, safe_headers, safe_body),
            response_text=self._response_text(response),
        )

    @staticmethod
    def _response_text(response: httpx.Response) -> str:
        try:
            return json.dumps(response.json(), ensure_ascii=False, indent=2)
        except ValueError:
            return response.text

    def _redact_body(self, payload: Any) -> Any:
        """Recursively mask sensitive fields in request bodies."""
        if isinstance(payload, dict):
            redacted = {}
            for key, value in payload.items():
                lowered = key.lower()
                if lowered in SENSITIVE_BODY_FIELDS or any(
                    token in lowered for token in SENSITIVE_BODY_KEYS
                ):
                    redacted[key] = "***MASKED***"
                else:
                    redacted[key] = self._redact_body(value)
            return redacted
        if isinstance(payload, list):
            return [self._redact_body(item) for item in payload]
        return payload

    def _build_curl(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Dict[str, Any]],
    ) -> str:
        """Build a copy-paste ready cURL command from already redacted parts."""
        parts = [f"curl -X {method}"]

        for key, value in headers.items():
            parts.append(f"-H '{key}: {value}'")

        if body:
            body_json = json.dumps(body, ensure_ascii=False)
            parts.append(f"-d '{body_json}'")

        parts.append(f"'{url}'")

        return " \\\n  ".join(parts)


__all__ = [
    "HttpClient",
    "HttpClientError",
]

"""
Shared base for the endpoint clients.

Each client keeps an endpoint table of path templates and sends its calls
through an HttpClient, returning the raw httpx.Response to the test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from ..http_client import HttpClient


class ApiClientBase:
    """Endpoint table plus the response-time budget of one API area."""

    ENDPOINTS: Dict[str, str] = {}

    # config key holding the response-time budget, and its fallback
    TIME_LIMIT_KEY = "api.response_time_limit_ms"
    DEFAULT_TIME_LIMIT_MS = 5000

    def __init__(self, http_client: HttpClient) -> None:
        self.http = http_client

    @property
    def response_time_limit_ms(self) -> int:
        return int(self.http.config.get(self.TIME_LIMIT_KEY, self.DEFAULT_TIME_LIMIT_MS))

    @classmethod
    def endpoints(cls) -> List[str]:
        """All path templates of this client."""
        return list(cls.ENDPOINTS.values())

    @staticmethod
    def _query(**params: Any) -> Optional[Dict[str, Any]]:
        """Drop unset query parameters; None when nothing is left."""
        cleaned = {key: value for key, value in params.items() if value is not None}
        return cleaned or None

    def _upload(
        self,
        url: str,
        file_path: Union[str, Path],
        path_params: Optional[Mapping[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """POST ``file_path`` as the multipart ``file`` field."""
        path = Path(file_path)
        with path.open("rb") as fh:
            return self.http.post(
                url,
                path_params=path_params,
                params=params,
                files={"file": (path.name, fh)},
            )

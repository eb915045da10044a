"""
================================================================================
Request Authorization Injector
================================================================================

httpx authentication hook that decorates every outgoing request with the
bearer header of the credential currently held by a CredentialStore.

The hook only decorates requests: it does not retry, does not look at the
response and never fails when no credential is stored.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Generator

import httpx
from loguru import logger

from .credential_store import CredentialStore


class BearerAuthInjector(httpx.Auth):
    """
    Attach ``Authorization: Bearer <token>`` right before dispatch.

    The store is read once per request, so a request keeps the header it was
    sent with even if the stored credential is replaced afterwards.

    Usage:
        >>> store = CredentialStore()
        >>> client = httpx.Client(auth=BearerAuthInjector(store))
    """

    def __init__(self, credential_store: CredentialStore) -> None:
        self.credential_store = credential_store

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        header = self.credential_store.authorization_header()
        if header:
            request.headers["Authorization"] = header
            logger.debug(f"Injected bearer credential into {request.method} {request.url.path}")
        else:
            logger.debug(f"No credential stored, sending {request.method} {request.url.path} unauthenticated")
        yield request


__all__ = [
    "BearerAuthInjector",
]

"""
================================================================================
Credential Store
================================================================================

Single-slot holder of the active session credential.

Features:
    - One credential at a time; set() always replaces the previous one
    - Bearer header derivation for the request injector
    - Thread-safe reads and writes (one lock around the slot)
    - Lazily created process-wide default instance (double-checked lock)
    - Independent instances for isolated sessions

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger


# Expiry hint attached to credentials built from verify/refresh replies (1 hour)
DEFAULT_EXPIRY_SECONDS = 3600


@dataclass
class Credential:
    """
    One authenticated session: tokens plus the opaque user payload.

    Attributes:
        access_token: Bearer token sent with authorized requests
        refresh_token: Token accepted by /auth/refresh (optional)
        user_info: User payload returned with the tokens, never interpreted
        expiry_seconds: Lifetime hint in seconds
        issued_at: Epoch seconds when the credential was built
    """
    access_token: Optional[str]
    refresh_token: Optional[str] = None
    user_info: Any = None
    expiry_seconds: int = DEFAULT_EXPIRY_SECONDS
    issued_at: float = field(default_factory=time.time)

    def authorization_header(self) -> Optional[str]:
        """Return "Bearer <token>" or None when the token is empty."""
        if self.access_token:
            return f"Bearer {self.access_token}"
        return None

    def is_expired(self) -> bool:
        """True once issued_at + expiry_seconds has passed."""
        return time.time() >= self.issued_at + self.expiry_seconds

    def is_token_valid(self) -> bool:
        """Non-empty access token that has not expired."""
        return bool(self.access_token) and not self.is_expired()

    def invalidate(self) -> None:
        """Drop tokens and user payload in place."""
        self.access_token = None
        self.refresh_token = None
        self.user_info = None

    def __repr__(self) -> str:
        return (
            f"Credential(access_token={'[HIDDEN]' if self.access_token else None}, "
            f"refresh_token={'[HIDDEN]' if self.refresh_token else None}, "
            f"user_info={self.user_info!r}, expiry_seconds={self.expiry_seconds})"
        )


class CredentialStore:
    """
    Thread-safe single-slot credential cache.

    The slot holds at most one Credential. Storing a new credential discards
    the previous one; there is no per-user keying. Absence is reported as
    None/False, never as an exception.

    A process-wide instance is available through ``CredentialStore.default()``.
    Components that need isolation (parallel multi-identity tests) receive
    their own ``CredentialStore()`` instead.

    Usage:
        >>> store = CredentialStore()
        >>> store.set(Credential(access_token="abc123"))
        >>> store.authorization_header()
        'Bearer abc123'
        >>> store.clear()
        >>> store.get() is None
        True
    """

    _default: Optional["CredentialStore"] = None
    _default_lock = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._credential: Optional[Credential] = None

    @classmethod
    def default(cls) -> "CredentialStore":
        """
        Get the process-wide store, creating it on first use.

        Returns:
            Shared CredentialStore instance
        """
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
                    logger.debug("Default credential store initialized")
        return cls._default

    @classmethod
    def reset_default(cls) -> None:
        """Drop the process-wide store (for testing)."""
        with cls._default_lock:
            if cls._default is not None:
                cls._default.clear()
            cls._default = None

    def set(self, credential: Credential) -> None:
        """
        Store a credential, replacing whatever is currently held.

        Empty-token credentials are stored as well; has_valid_credential()
        reports them as invalid.
        """
        with self._lock:
            self._credential = credential
        logger.info("Stored new credential (previous one discarded)")

    def get(self) -> Optional[Credential]:
        """Return the current credential or None."""
        with self._lock:
            credential = self._credential
        if credential is None:
            logger.debug("No credential currently stored")
        return credential

    def authorization_header(self) -> Optional[str]:
        """
        Bearer header value for the stored access token.

        Returns:
            "Bearer <access_token>", or None if nothing (or an empty token) is stored
        """
        with self._lock:
            if self._credential is None:
                return None
            return self._credential.authorization_header()

    def has_valid_credential(self) -> bool:
        """True iff a credential is stored and its access token is non-empty."""
        with self._lock:
            return self._credential is not None and bool(self._credential.access_token)

    def refresh_token(self) -> Optional[str]:
        with self._lock:
            return self._credential.refresh_token if self._credential else None

    def user_info(self) -> Any:
        with self._lock:
            return self._credential.user_info if self._credential else None

    def has_refresh_token(self) -> bool:
        with self._lock:
            return self._credential is not None and bool(self._credential.refresh_token)

    def clear(self) -> None:
        """Invalidate the stored credential and empty the slot."""
        with self._lock:
            if self._credential is not None:
                self._credential.invalidate()
            self._credential = None
        logger.info("Cleared stored credential")


__all__ = [
    "Credential",
    "CredentialStore",
    "DEFAULT_EXPIRY_SECONDS",
]

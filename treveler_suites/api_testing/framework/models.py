"""
================================================================================
Auth Wire Models
================================================================================

Parsed form of the JSON bodies returned by /auth/verify and /auth/refresh.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .credential_store import DEFAULT_EXPIRY_SECONDS, Credential


@dataclass
class AuthResponse:
    """
    Token reply of the auth endpoints.

    Wire keys: ``access``, ``refresh``, ``user``, ``error``, ``message``.
    Unknown keys are ignored.
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user_info: Any = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "AuthResponse":
        """Build from a decoded JSON body; non-object bodies give an empty model."""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            access_token=payload.get("access"),
            refresh_token=payload.get("refresh"),
            user_info=payload.get("user"),
            error=payload.get("error"),
            message=payload.get("message"),
        )

    def has_error(self) -> bool:
        return bool(self.error and str(self.error).strip())

    def has_valid_token(self) -> bool:
        return bool(self.access_token and str(self.access_token).strip())

    def to_credential(self, expiry_seconds: int = DEFAULT_EXPIRY_SECONDS) -> Credential:
        """Wrap the tokens into a Credential with a fixed expiry hint."""
        return Credential(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            user_info=self.user_info,
            expiry_seconds=expiry_seconds,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access": self.access_token,
            "refresh": self.refresh_token,
            "user": self.user_info,
            "error": self.error,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return (
            f"AuthResponse(access_token={'[HIDDEN]' if self.access_token else None}, "
            f"refresh_token={'[HIDDEN]' if self.refresh_token else None}, "
            f"user_info={self.user_info!r}, error={self.error!r}, message={self.message!r})"
        )


__all__ = [
    "AuthResponse",
]

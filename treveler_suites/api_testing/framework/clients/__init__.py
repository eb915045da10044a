"""
Endpoint clients of the Treveler API.
"""

from .auth_client import AUTH_RESPONSE_TIME_LIMIT_MS, AuthApiClient
from .base import ApiClientBase
from .comment_client import CommentApiClient
from .event_client import EventApiClient
from .hotel_client import HotelApiClient
from .user_client import UserApiClient

__all__ = [
    "AUTH_RESPONSE_TIME_LIMIT_MS",
    "ApiClientBase",
    "AuthApiClient",
    "CommentApiClient",
    "EventApiClient",
    "HotelApiClient",
    "UserApiClient",
]

"""
User API client: current user profile, avatar and stays.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import httpx
from loguru import logger

from .base import ApiClientBase


class UserApiClient(ApiClientBase):
    """Client for /users/* endpoints."""

    ENDPOINTS = {
        "me": "/users/me",
        "user": "/users/{user_id}",
        "hotel_admin": "/users/me/hotel-admin",
        "avatar": "/users/me/avatar",
        "my_stays": "/users/me/stays",
    }

    def get_current_user(self) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["me"])

    def update_current_user(self, payload: Dict[str, Any]) -> httpx.Response:
        logger.info("Updating current user profile")
        return self.http.patch(self.ENDPOINTS["me"], json=payload)

    def get_user(self, user_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["user"], path_params={"user_id": user_id})

    def get_hotel_admin_info(self) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["hotel_admin"])

    def upload_avatar(self, file_path: Union[str, Path]) -> httpx.Response:
        logger.info(f"Uploading avatar from {file_path}")
        return self._upload(self.ENDPOINTS["avatar"], file_path)

    def delete_avatar(self) -> httpx.Response:
        logger.info("Deleting avatar")
        return self.http.delete(self.ENDPOINTS["avatar"])

    def get_my_stays(self) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["my_stays"])

"""
Comment API client: comments attached to an event.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .base import ApiClientBase


class CommentApiClient(ApiClientBase):
    """Client for /events/{event_id}/comments endpoints."""

    ENDPOINTS = {
        "comments": "/events/{event_id}/comments",
        "comment": "/events/{event_id}/comments/{comment_id}",
    }

    def get_comments(
        self,
        event_id: str,
        author_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> httpx.Response:
        return self.http.get(
            self.ENDPOINTS["comments"],
            path_params={"event_id": event_id},
            params=self._query(author_id=author_id, limit=limit),
        )

    def create_comment(self, event_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating comment for event {event_id}")
        return self.http.post(
            self.ENDPOINTS["comments"], path_params={"event_id": event_id}, json=payload
        )

    def delete_comment(self, event_id: str, comment_id: str) -> httpx.Response:
        logger.info(f"Deleting comment {comment_id} from event {event_id}")
        return self.http.delete(
            self.ENDPOINTS["comment"],
            path_params={"event_id": event_id, "comment_id": comment_id},
        )

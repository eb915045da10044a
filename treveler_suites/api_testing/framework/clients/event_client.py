"""
Event API client: events, attendance, likes, images and recurring series.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx
from loguru import logger

from .base import ApiClientBase


class EventApiClient(ApiClientBase):
    """Client for /events/* endpoints."""

    ENDPOINTS = {
        "events": "/events",
        "event": "/events/{event_id}",
        "attend": "/events/{event_id}/attend",
        "cancel": "/events/{event_id}/cancel",
        "archive": "/events/{event_id}/archive",
        "like": "/events/{event_id}/like",
        "likes_count": "/events/{event_id}/likes/count",
        "images": "/events/{event_id}/images",
        "image": "/events/{event_id}/images/{image_id}",
        "recurring": "/events/recurring",
        "recurring_event": "/events/recurring/{recurring_event_id}",
        "recurring_instances": "/events/recurring/{recurring_event_id}/instances",
        "all_recurring_instances": "/events/recurring/instances",
        "recurring_exceptions": "/events/recurring/{recurring_event_id}/exceptions",
        "rrule_examples": "/events/recurring/rrule-examples",
    }

    # -- events ---------------------------------------------------------------

    def create_event(self, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating event: {payload.get('name')}")
        return self.http.post(self.ENDPOINTS["events"], json=payload)

    def get_events(
        self,
        hotel_id: Optional[str] = None,
        creator_user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> httpx.Response:
        """List events; unset filters are left out of the query string."""
        params = self._query(
            hotel_id=hotel_id,
            creator_user_id=creator_user_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )
        return self.http.get(self.ENDPOINTS["events"], params=params)

    def get_event(self, event_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["event"], path_params={"event_id": event_id})

    def update_event(self, event_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Updating event {event_id}")
        return self.http.patch(
            self.ENDPOINTS["event"], path_params={"event_id": event_id}, json=payload
        )

    # -- participation --------------------------------------------------------

    def attend_event(self, event_id: str) -> httpx.Response:
        logger.info(f"Attending event {event_id}")
        return self.http.post(self.ENDPOINTS["attend"], path_params={"event_id": event_id})

    def leave_event(self, event_id: str) -> httpx.Response:
        logger.info(f"Leaving event {event_id}")
        return self.http.delete(self.ENDPOINTS["attend"], path_params={"event_id": event_id})

    def cancel_event(self, event_id: str) -> httpx.Response:
        logger.info(f"Cancelling event {event_id}")
        return self.http.post(self.ENDPOINTS["cancel"], path_params={"event_id": event_id})

    def archive_event(self, event_id: str) -> httpx.Response:
        logger.info(f"Archiving event {event_id}")
        return self.http.post(self.ENDPOINTS["archive"], path_params={"event_id": event_id})

    def like_event(self, event_id: str) -> httpx.Response:
        return self.http.post(self.ENDPOINTS["like"], path_params={"event_id": event_id})

    def get_likes_count(self, event_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["likes_count"], path_params={"event_id": event_id})

    # -- images ---------------------------------------------------------------

    def upload_event_image(
        self,
        event_id: str,
        file_path: Union[str, Path],
        is_cover: Optional[bool] = None,
    ) -> httpx.Response:
        logger.info(f"Uploading image for event: {event_id}")
        # the API expects lowercase booleans in the query string
        is_cover_param = None if is_cover is None else str(is_cover).lower()
        return self._upload(
            self.ENDPOINTS["images"],
            file_path,
            path_params={"event_id": event_id},
            params=self._query(is_cover=is_cover_param),
        )

    def get_event_images(self, event_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["images"], path_params={"event_id": event_id})

    def delete_event_image(self, event_id: str, image_id: str) -> httpx.Response:
        logger.info(f"Deleting image {image_id} of event {event_id}")
        return self.http.delete(
            self.ENDPOINTS["image"], path_params={"event_id": event_id, "image_id": image_id}
        )

    # -- recurring events -----------------------------------------------------

    def create_recurring_event(self, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating recurring event: {payload.get('name')}")
        return self.http.post(self.ENDPOINTS["recurring"], json=payload)

    def get_recurring_instances(
        self,
        recurring_event_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> httpx.Response:
        return self.http.get(
            self.ENDPOINTS["recurring_instances"],
            path_params={"recurring_event_id": recurring_event_id},
            params=self._query(start_date=start_date, end_date=end_date),
        )

    def get_all_recurring_instances(self) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["all_recurring_instances"])

    def create_recurring_exception(
        self, recurring_event_id: str, payload: Dict[str, Any]
    ) -> httpx.Response:
        logger.info(f"Creating exception for recurring event {recurring_event_id}")
        return self.http.post(
            self.ENDPOINTS["recurring_exceptions"],
            path_params={"recurring_event_id": recurring_event_id},
            json=payload,
        )

    def deactivate_recurring_event(self, recurring_event_id: str) -> httpx.Response:
        logger.info(f"Deactivating recurring event {recurring_event_id}")
        return self.http.delete(
            self.ENDPOINTS["recurring_event"],
            path_params={"recurring_event_id": recurring_event_id},
        )

    def get_rrule_examples(self) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["rrule_examples"])

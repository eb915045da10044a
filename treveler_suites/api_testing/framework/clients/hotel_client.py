"""
Hotel API client: hotels, hotel locations, members and stays.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .base import ApiClientBase


class HotelApiClient(ApiClientBase):
    """Client for /hotels/* endpoints."""

    ENDPOINTS = {
        "hotels": "/hotels",
        "hotel": "/hotels/{hotel_id}",
        "locations": "/hotels/{hotel_id}/locations",
        "location": "/hotels/locations/{location_id}",
        "members": "/hotels/{hotel_id}/members",
        "member": "/hotels/{hotel_id}/members/{user_id}",
        "stays": "/hotels/{hotel_id}/stays",
        "stay": "/hotels/{hotel_id}/stays/{stay_id}",
    }

    # -- hotels ---------------------------------------------------------------

    def create_hotel(self, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating hotel: {payload.get('name')}")
        return self.http.post(self.ENDPOINTS["hotels"], json=payload)

    def get_hotels(self, limit: Optional[int] = None, offset: Optional[int] = None) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["hotels"], params=self._query(limit=limit, offset=offset))

    def get_hotel(self, hotel_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["hotel"], path_params={"hotel_id": hotel_id})

    def update_hotel(self, hotel_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Updating hotel {hotel_id}")
        return self.http.patch(self.ENDPOINTS["hotel"], path_params={"hotel_id": hotel_id}, json=payload)

    # -- locations ------------------------------------------------------------

    def get_locations(self, hotel_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["locations"], path_params={"hotel_id": hotel_id})

    def create_location(self, hotel_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating location in hotel {hotel_id}: {payload.get('name')}")
        return self.http.post(
            self.ENDPOINTS["locations"], path_params={"hotel_id": hotel_id}, json=payload
        )

    def update_location(self, location_id: str, payload: Dict[str, Any]) -> httpx.Response:
        return self.http.patch(
            self.ENDPOINTS["location"], path_params={"location_id": location_id}, json=payload
        )

    def delete_location(self, location_id: str) -> httpx.Response:
        logger.info(f"Deleting location {location_id}")
        return self.http.delete(self.ENDPOINTS["location"], path_params={"location_id": location_id})

    # -- members --------------------------------------------------------------

    def get_members(self, hotel_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["members"], path_params={"hotel_id": hotel_id})

    def add_member(self, hotel_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Adding member {payload.get('user_id')} to hotel {hotel_id}")
        return self.http.post(
            self.ENDPOINTS["members"], path_params={"hotel_id": hotel_id}, json=payload
        )

    def remove_member(self, hotel_id: str, user_id: str) -> httpx.Response:
        logger.info(f"Removing member {user_id} from hotel {hotel_id}")
        return self.http.delete(
            self.ENDPOINTS["member"], path_params={"hotel_id": hotel_id, "user_id": user_id}
        )

    # -- stays ----------------------------------------------------------------

    def get_stays(self, hotel_id: str) -> httpx.Response:
        return self.http.get(self.ENDPOINTS["stays"], path_params={"hotel_id": hotel_id})

    def get_stay(self, hotel_id: str, stay_id: str) -> httpx.Response:
        """Stays of the hotel filtered by id; the backend answers with a list."""
        return self.http.get(
            self.ENDPOINTS["stays"],
            path_params={"hotel_id": hotel_id},
            params={"stayId": stay_id},
        )

    def create_stay(self, hotel_id: str, payload: Dict[str, Any]) -> httpx.Response:
        logger.info(f"Creating stay in hotel {hotel_id} for user {payload.get('user_id')}")
        return self.http.post(
            self.ENDPOINTS["stays"], path_params={"hotel_id": hotel_id}, json=payload
        )

    def update_stay(self, hotel_id: str, stay_id: str, payload: Dict[str, Any]) -> httpx.Response:
        return self.http.patch(
            self.ENDPOINTS["stay"],
            path_params={"hotel_id": hotel_id, "stay_id": stay_id},
            json=payload,
        )

    def delete_stay(self, hotel_id: str, stay_id: str) -> httpx.Response:
        logger.info(f"Deleting stay {stay_id} from hotel {hotel_id}")
        return self.http.delete(
            self.ENDPOINTS["stay"], path_params={"hotel_id": hotel_id, "stay_id": stay_id}
        )

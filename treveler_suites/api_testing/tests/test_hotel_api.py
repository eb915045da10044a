"""
================================================================================
Hotel API Test Suite
================================================================================

Live tests for hotels, hotel locations, members and stays.

Test Categories:
    - Permissions: guest users cannot create or update hotels
    - CRU of hotels by a platform admin
    - Location CRUD, including duplicate and repeated delete
    - Member add/remove
    - Stay CRUD, including overlapping dates

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict

import allure
import pytest

from treveler_suites.api_testing.framework import (
    ConfigLoader,
    HotelApiClient,
    UserApiClient,
)
from treveler_suites.api_testing.framework.data_factory import TestDataFactory, generate_email
from treveler_suites.api_testing.framework.response_validator import (
    validate_json_path_value,
    validate_status_code,
)


pytestmark = [pytest.mark.requires_external, pytest.mark.hotel]


def _assert_fields(actual: Dict[str, Any], expected: Dict[str, Any]) -> None:
    for key, value in expected.items():
        assert actual.get(key) == value, f"{key}: expected {value!r}, got {actual.get(key)!r}"


@pytest.fixture
def created_hotel(
    authorize_user, hotel_client: HotelApiClient, data_factory: TestDataFactory
) -> Dict[str, Any]:
    authorize_user("platform_admin")
    response = hotel_client.create_hotel(data_factory.hotel.create_valid())
    validate_status_code(response, 200)
    return response.json()


@pytest.fixture
def fresh_user_id(authorize_user, user_client: UserApiClient, config: ConfigLoader) -> str:
    """Id of a brand-new user; leaves that user logged in."""
    _, code = config.get_account("guest")
    authorize_user(email=generate_email(), code=code)
    return user_client.get_current_user().json()["id"]


@allure.epic("Treveler API")
@allure.feature("Hotels")
class TestHotelAPI:

    @pytest.mark.P1
    @allure.title("Guest cannot create or update hotels")
    def test_guest_restricted_operations(
        self, authorize_user, hotel_client: HotelApiClient, data_factory: TestDataFactory
    ):
        authorize_user("guest")
        payload = data_factory.hotel.create_valid()

        response = hotel_client.create_hotel(payload)
        validate_status_code(response, 403)
        validate_json_path_value(response, "detail", "Requires platform_super_admin")

        hotels = hotel_client.get_hotels().json()
        assert hotels, "At least one hotel should exist"
        response = hotel_client.update_hotel(hotels[0]["id"], payload)
        validate_status_code(response, 403)
        validate_json_path_value(
            response, "detail", "Requires hotel super_admin or platform_super_admin"
        )

    @pytest.mark.P0
    @pytest.mark.smoke
    @allure.title("Platform admin creates, reads and updates a hotel")
    def test_hotel_cru(
        self, authorize_user, hotel_client: HotelApiClient, data_factory: TestDataFactory
    ):
        authorize_user("platform_admin")
        payload = data_factory.hotel.create_valid()

        with allure.step("Create hotel"):
            response = hotel_client.create_hotel(payload)
            validate_status_code(response, 200)
            hotel = response.json()
            _assert_fields(hotel, payload)
            assert hotel.get("created_at") is not None
            assert hotel.get("updated_at") is not None

        with allure.step("Get hotel by id"):
            response = hotel_client.get_hotel(hotel["id"])
            validate_status_code(response, 200)
            _assert_fields(response.json(), payload)

        with allure.step("Update hotel"):
            update = data_factory.hotel.create_valid()
            response = hotel_client.update_hotel(hotel["id"], update)
            validate_status_code(response, 200)
            _assert_fields(response.json(), update)
            _assert_fields(hotel_client.get_hotel(hotel["id"]).json(), update)

    @pytest.mark.P1
    @allure.title("Hotel location CRUD")
    def test_location_crud(
        self,
        created_hotel: Dict[str, Any],
        hotel_client: HotelApiClient,
        data_factory: TestDataFactory,
    ):
        hotel_id = created_hotel["id"]
        payload = data_factory.location.create_valid()

        response = hotel_client.create_location(hotel_id, payload)
        validate_status_code(response, 200)
        location = response.json()
        _assert_fields(location, payload)

        listed = [item for item in hotel_client.get_locations(hotel_id).json()
                  if item["name"] == payload["name"]]
        assert len(listed) == 1
        assert listed[0]["hotel_id"] == hotel_id

        validate_status_code(hotel_client.create_location(hotel_id, payload), 409)

        update = data_factory.location.create_valid()
        response = hotel_client.update_location(location["id"], update)
        validate_status_code(response, 200)
        _assert_fields(response.json(), update)
        assert response.json()["hotel_id"] == hotel_id

        validate_status_code(hotel_client.delete_location(location["id"]), 200)
        names = [item["name"] for item in hotel_client.get_locations(hotel_id).json()]
        assert update["name"] not in names
        validate_status_code(hotel_client.delete_location(location["id"]), 404)

    @pytest.mark.P1
    @allure.title("Hotel member add and remove")
    def test_member_crd(
        self,
        fresh_user_id: str,
        created_hotel: Dict[str, Any],
        hotel_client: HotelApiClient,
        data_factory: TestDataFactory,
    ):
        hotel_id = created_hotel["id"]
        payload = data_factory.stay.create_member(fresh_user_id)

        response = hotel_client.add_member(hotel_id, payload)
        validate_status_code(response, 200)
        _assert_fields(response.json(), payload)

        members = hotel_client.get_members(hotel_id).json()
        assert fresh_user_id in [member["user_id"] for member in members]

        validate_status_code(hotel_client.remove_member(hotel_id, fresh_user_id), 200)
        members = hotel_client.get_members(hotel_id).json()
        assert fresh_user_id not in [member["user_id"] for member in members]

    @pytest.mark.P1
    @allure.title("Hotel stay CRUD")
    def test_stay_crud(
        self,
        fresh_user_id: str,
        created_hotel: Dict[str, Any],
        hotel_client: HotelApiClient,
        data_factory: TestDataFactory,
    ):
        hotel_id = created_hotel["id"]
        payload = data_factory.stay.create_valid(fresh_user_id, start_in_days=1, length_days=6)

        response = hotel_client.create_stay(hotel_id, payload)
        validate_status_code(response, 200)
        stay = response.json()
        _assert_fields(stay, payload)

        overlapping = data_factory.stay.create_valid(fresh_user_id, start_in_days=2, length_days=6)
        validate_status_code(hotel_client.create_stay(hotel_id, overlapping), 409)

        response = hotel_client.get_stay(hotel_id, stay["id"])
        validate_status_code(response, 200)
        _assert_fields(response.json()[0], payload)

        update = data_factory.stay.create_valid(fresh_user_id, start_in_days=2, length_days=7)
        response = hotel_client.update_stay(hotel_id, stay["id"], update)
        validate_status_code(response, 200)
        _assert_fields(response.json(), update)

        validate_status_code(hotel_client.delete_stay(hotel_id, stay["id"]), 200)
        validate_status_code(hotel_client.get_stay(hotel_id, stay["id"]), 404)

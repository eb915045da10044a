"""
================================================================================
Authorized API Test Suite
================================================================================

Live tests for credential injection on ordinary endpoints: switching
users, unauthenticated calls and the credential staying in place across
calls.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import allure
import pytest

from treveler_suites.api_testing.framework import CredentialStore, UserApiClient
from treveler_suites.api_testing.framework.response_validator import validate_status_code


pytestmark = [pytest.mark.requires_external, pytest.mark.auth]


@allure.epic("Treveler API")
@allure.feature("Authorized Requests")
class TestAuthorizedApi:

    @pytest.mark.P0
    @pytest.mark.smoke
    @allure.title("Authorized call as a single user")
    def test_authorized_call_with_single_user(
        self, authorize_user, user_client: UserApiClient, credential_store: CredentialStore
    ):
        authorize_user("guest")
        assert credential_store.has_valid_credential()

        response = user_client.get_current_user()

        validate_status_code(response, 200)

    @pytest.mark.P1
    @allure.title("Switching users replaces the credential")
    def test_switching_between_users(
        self, authorize_user, user_client: UserApiClient, credential_store: CredentialStore
    ):
        first = authorize_user("guest")
        first_token = first.access_token
        validate_status_code(user_client.get_current_user(), 200)

        second = authorize_user("hotel_admin")

        assert second.access_token != first_token
        assert credential_store.get() is second
        validate_status_code(user_client.get_current_user(), 200)

    @pytest.mark.P1
    @allure.title("Call without a credential is rejected with 401")
    def test_unauthorized_call(
        self, user_client: UserApiClient, credential_store: CredentialStore
    ):
        credential_store.clear()
        assert not credential_store.has_valid_credential()

        response = user_client.get_current_user()

        validate_status_code(response, 401)

    @pytest.mark.P1
    @allure.title("Credential persists across consecutive calls")
    def test_credential_persists_across_calls(
        self, authorize_user, user_client: UserApiClient, credential_store: CredentialStore
    ):
        credential = authorize_user("guest")

        for _ in range(3):
            validate_status_code(user_client.get_current_user(), 200)

        assert credential_store.get() is credential

    @pytest.mark.P2
    @allure.title("Re-authorizing the same user issues a new token")
    def test_reauthorizing_replaces_token(
        self, authorize_user, credential_store: CredentialStore
    ):
        first_token = authorize_user("guest").access_token
        second_token = authorize_user("guest").access_token

        assert first_token != second_token
        assert credential_store.get().access_token == second_token

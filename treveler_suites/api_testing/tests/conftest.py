"""
================================================================================
API Testing Pytest Configuration
================================================================================

Shared fixtures for the live Treveler API suite.

Fixtures:
    - config: Configuration loader instance
    - credential_store: Fresh credential store per test, cleared on teardown
    - http_client: HTTP client injecting the test's credential
    - auth_client / authorization_service: Authorization flow
    - authorize_user: Log in as a configured test account
    - hotel_client / event_client / user_client / comment_client
    - data_factory: Payload factory with cleanup

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Callable, Generator, Optional

import allure
import pytest
from loguru import logger

from treveler_suites.api_testing.framework import (
    AuthApiClient,
    AuthorizationService,
    CommentApiClient,
    ConfigLoader,
    Credential,
    CredentialStore,
    EventApiClient,
    HotelApiClient,
    HttpClient,
    UserApiClient,
)
from treveler_suites.api_testing.framework.data_factory import TestDataFactory


# =============================================================================
# Session-Scoped Fixtures (Shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """
    Provide configuration loader instance.

    Session-scoped to ensure configuration is loaded only once.
    """
    return ConfigLoader()


@pytest.fixture(scope="session")
def base_url(config: ConfigLoader) -> str:
    return config.get("api.base_url", "http://localhost:8000")


# =============================================================================
# Function-Scoped Fixtures (Fresh for each test)
# =============================================================================

@pytest.fixture
def credential_store() -> Generator[CredentialStore, None, None]:
    """Isolated session for one test; nothing leaks into the next test."""
    store = CredentialStore()
    yield store
    store.clear()


@pytest.fixture
def http_client(
    config: ConfigLoader, credential_store: CredentialStore
) -> Generator[HttpClient, None, None]:
    """
    HTTP client whose requests carry the credential of ``credential_store``.

    Usage:
        def test_example(http_client):
            response = http_client.get("/users/me")
            assert response.status_code == 200
    """
    with HttpClient(config, credential_store=credential_store) as client:
        yield client


@pytest.fixture
def auth_client(http_client: HttpClient) -> AuthApiClient:
    return AuthApiClient(http_client)


@pytest.fixture
def authorization_service(
    auth_client: AuthApiClient, credential_store: CredentialStore, config: ConfigLoader
) -> AuthorizationService:
    return AuthorizationService(auth_client, credential_store, config)


@pytest.fixture
def authorize_user(
    authorization_service: AuthorizationService, config: ConfigLoader
) -> Callable[..., Credential]:
    """
    Log in as a configured account (``guest``, ``hotel_admin``,
    ``platform_admin``) or with an explicit email and code.

    Authorizing again replaces the active credential.

    Usage:
        def test_example(authorize_user, user_client):
            authorize_user("platform_admin")
            assert user_client.get_current_user().status_code == 200
    """
    def _authorize(account: Optional[str] = None, email: Optional[str] = None,
                   code: Optional[str] = None) -> Credential:
        if account is not None:
            email, code = config.get_account(account)
        with allure.step(f"Authorize {email}"):
            logger.info(f"Authorizing test user: {email}")
            return authorization_service.complete_authorization(email, code)

    return _authorize


@pytest.fixture
def hotel_client(http_client: HttpClient) -> HotelApiClient:
    return HotelApiClient(http_client)


@pytest.fixture
def event_client(http_client: HttpClient) -> EventApiClient:
    return EventApiClient(http_client)


@pytest.fixture
def user_client(http_client: HttpClient) -> UserApiClient:
    return UserApiClient(http_client)


@pytest.fixture
def comment_client(http_client: HttpClient) -> CommentApiClient:
    return CommentApiClient(http_client)


@pytest.fixture
def data_factory() -> Generator[TestDataFactory, None, None]:
    """Payload factory; tracked resources are cleaned up after the test."""
    factory = TestDataFactory()
    yield factory
    factory.cleanup_all()


# =============================================================================
# Allure Reporting Hooks
# =============================================================================

def pytest_exception_interact(node, call, report):
    """Attach additional info on test failure."""
    if report.failed:
        allure.attach(
            str(call.excinfo.value),
            name="Error Details",
            attachment_type=allure.attachment_type.TEXT
        )

"""
================================================================================
API Testing Framework
================================================================================

Components of the Treveler API automation suite.

Modules:
    - credential_store: Process-wide or isolated holder of the session credential
    - auth_injector: httpx auth hook adding the bearer header per request
    - http_client: httpx client with Allure logging and path templates
    - authorization_service: Two-step email authorization flow
    - clients: Endpoint clients (auth, hotel, event, user, comment)
    - response_validator: Response assertions
    - config_loader: YAML configuration management
    - data_factory: Request payloads and random test data

Author: Automation Team
License: MIT
================================================================================
"""

from .auth_injector import BearerAuthInjector
from .authorization_service import (
    AuthFlow,
    AuthFlowState,
    AuthorizationError,
    AuthorizationService,
    AuthTransportError,
    MissingCredentialError,
    RemoteAuthError,
)
from .clients import (
    AuthApiClient,
    CommentApiClient,
    EventApiClient,
    HotelApiClient,
    UserApiClient,
)
from .config_loader import ConfigLoader, ConfigurationError
from .credential_store import Credential, CredentialStore
from .http_client import HttpClient, HttpClientError
from .models import AuthResponse
from .response_validator import ResponseValidationError, ResponseValidator

__all__ = [
    "AuthApiClient",
    "AuthFlow",
    "AuthFlowState",
    "AuthResponse",
    "AuthTransportError",
    "AuthorizationError",
    "AuthorizationService",
    "BearerAuthInjector",
    "CommentApiClient",
    "ConfigLoader",
    "ConfigurationError",
    "Credential",
    "CredentialStore",
    "EventApiClient",
    "HotelApiClient",
    "HttpClient",
    "HttpClientError",
    "MissingCredentialError",
    "RemoteAuthError",
    "ResponseValidationError",
    "ResponseValidator",
    "UserApiClient",
]

"""
================================================================================
Authorization Service
================================================================================

Two-step email authorization against the Treveler API:

    START --initiate--> INITIATED --verify--> VERIFIED --store--> DONE
      \\                    \\                    \\
       +--------------------+--------------------+--> FAILED

Features:
    - One flow object per operation with its transition history
    - Every reply checked for status, content type and time budget
    - Error bodies on HTTP 200 reported as RemoteAuthError
    - verify() is the only operation that writes the credential store
    - Nothing is stored when any step fails
    - Single attempt per call, no retries

Usage:
    >>> store = CredentialStore()
    >>> with HttpClient(config, credential_store=store) as http:
    ...     service = AuthorizationService(AuthApiClient(http), store)
    ...     credential = service.complete_authorization("test@example.com", "123456")
    ...     store.get() is credential
    True

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from treveler_tools.report_tools.allure_utils import attach_step_details

from .clients.auth_client import AuthApiClient
from .config_loader import ConfigLoader
from .credential_store import DEFAULT_EXPIRY_SECONDS, Credential, CredentialStore
from .models import AuthResponse
from .response_validator import (
    ResponseValidationError,
    response_time_ms,
    validate_content_type,
    validate_response_body_not_empty,
    validate_response_time,
    validate_status_code,
)


JSON_CONTENT_TYPE = "application/json"
LOGOUT_SUCCESS_CODES = (200, 204)


# ================================================================================
# Errors
# ================================================================================

class AuthorizationError(Exception):
    """Base error of the authorization flow."""

    def __init__(
        self,
        message: str,
        state: Optional["AuthFlowState"] = None,
        email: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.state = state
        self.email = email


class AuthTransportError(AuthorizationError):
    """Bad status, content type, empty body, time budget exceeded or network failure."""
    pass


class RemoteAuthError(AuthorizationError):
    """The backend answered with an error field in the body."""

    def __init__(
        self,
        remote_error: str,
        remote_message: Optional[str] = None,
        state: Optional["AuthFlowState"] = None,
        email: Optional[str] = None,
    ) -> None:
        text = f"Authorization rejected: {remote_error}"
        if remote_message:
            text += f" ({remote_message})"
        super().__init__(text, state=state, email=email)
        self.remote_error = remote_error
        self.remote_message = remote_message


class MissingCredentialError(AuthorizationError):
    """The reply carries no usable access token, or no refresh token is available."""
    pass


# ================================================================================
# Flow state
# ================================================================================

class AuthFlowState(Enum):
    START = "start"
    INITIATED = "initiated"
    VERIFIED = "verified"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS = {
    AuthFlowState.START: {AuthFlowState.INITIATED, AuthFlowState.VERIFIED, AuthFlowState.FAILED},
    AuthFlowState.INITIATED: {AuthFlowState.VERIFIED, AuthFlowState.FAILED},
    AuthFlowState.VERIFIED: {AuthFlowState.DONE, AuthFlowState.FAILED},
    AuthFlowState.DONE: set(),
    AuthFlowState.FAILED: set(),
}


class AuthFlow:
    """
    State of one authorization attempt.

    Each service operation creates its own flow; flows are never shared
    between operations or persisted.
    """

    def __init__(self, email: Optional[str] = None) -> None:
        self.email = email
        self.state = AuthFlowState.START
        self.history: List[AuthFlowState] = [AuthFlowState.START]
        self.error: Optional[str] = None

    def advance(self, target: AuthFlowState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise AuthorizationError(
                f"Illegal transition {self.state.value} -> {target.value}",
                state=self.state,
                email=self.email,
            )
        logger.debug(f"Auth flow for {self.email}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)

    def fail(self, message: str) -> None:
        self.error = message
        self.advance(AuthFlowState.FAILED)

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "state": self.state.value,
            "history": [state.value for state in self.history],
            "error": self.error,
        }


# ================================================================================
# Service
# ================================================================================

class AuthorizationService:
    """
    Drives the initiate/verify exchange and owns writes to the credential store.

    Args:
        auth_client: Raw /auth/* client
        credential_store: Store that receives verified credentials.
            Process-wide store if None.
        config: Configuration; the auth client's HTTP config if None.
    """

    def __init__(
        self,
        auth_client: AuthApiClient,
        credential_store: Optional[CredentialStore] = None,
        config: Optional[ConfigLoader] = None,
    ) -> None:
        self.auth_client = auth_client
        self.credential_store = credential_store or CredentialStore.default()
        self.config = config or auth_client.http.config
        self.expiry_seconds = int(
            self.config.get("auth.default_expiry_seconds", DEFAULT_EXPIRY_SECONDS)
        )
        self.last_flow: Optional[AuthFlow] = None

    @property
    def response_time_limit_ms(self) -> int:
        return self.auth_client.response_time_limit_ms

    def endpoints(self) -> List[str]:
        return self.auth_client.endpoints()

    # -- public operations ----------------------------------------------------

    def initiate(self, email: str) -> Dict[str, Any]:
        """
        Ask the backend to send a one-time code to ``email``.

        Returns:
            The decoded acknowledgment body, ``{}`` when it is empty or not JSON

        Raises:
            AuthTransportError: Non-200, wrong content type, over budget or network error
        """
        flow = self._new_flow(email)
        return self._initiate(flow)

    def verify(self, email: str, code: str) -> Credential:
        """
        Exchange ``email`` and ``code`` for a credential and store it.

        The previous credential, if any, is replaced. On failure the store is
        left untouched.

        Raises:
            AuthTransportError: Transport-level violation
            RemoteAuthError: Body carries an error field
            MissingCredentialError: No access token in the reply
        """
        flow = self._new_flow(email)
        return self._verify(flow, code)

    def complete_authorization(self, email: str, code: str) -> Credential:
        """initiate() followed by verify() under a single flow."""
        logger.info(f"Starting complete authorization for email: {email}")
        flow = self._new_flow(email)
        self._initiate(flow)
        credential = self._verify(flow, code)
        logger.info(f"Complete authorization successful for email: {email}")
        return credential

    def refresh(self, refresh_token: str) -> Credential:
        """
        Exchange a refresh token for a new credential.

        The result is returned only; the store is not written.
        """
        flow = self._new_flow(None)
        logger.info("Refreshing access token")
        response = self._send(flow, lambda: self.auth_client.refresh_token(refresh_token))
        self._check_token_reply(flow, response)
        credential = self._parse_credential(flow, response)
        flow.advance(AuthFlowState.DONE)
        logger.info("Token refresh successful")
        return credential

    def refresh_and_store(self, refresh_token: Optional[str] = None) -> Credential:
        """Refresh with the given (or stored) refresh token and store the result."""
        token = refresh_token or self.credential_store.refresh_token()
        if not token:
            raise MissingCredentialError("No refresh token available")
        credential = self.refresh(token)
        self.credential_store.set(credential)
        return credential

    def logout(self, credential: Optional[Credential] = None) -> bool:
        """
        Log out on the backend and drop the local session.

        Local invalidation always happens, whatever the backend answers.

        Returns:
            True when the backend answered 200 or 204
        """
        logger.info("Performing logout")
        success = False
        try:
            response = self.auth_client.logout()
            success = response.status_code in LOGOUT_SUCCESS_CODES
            if not success:
                logger.warning(f"Logout failed with status code: {response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Logout request failed: {e}")
        finally:
            if credential is not None:
                credential.invalidate()
            self.credential_store.clear()

        if success:
            logger.info("Logout successful")
        return success

    @staticmethod
    def validate_token(credential: Optional[Credential]) -> bool:
        if credential is None:
            return False
        return credential.is_token_valid()

    # -- flow steps -----------------------------------------------------------

    def _new_flow(self, email: Optional[str]) -> AuthFlow:
        flow = AuthFlow(email)
        self.last_flow = flow
        return flow

    def _initiate(self, flow: AuthFlow) -> Dict[str, Any]:
        email = flow.email
        logger.info(f"Initiating authentication for email: {email}")
        response = self._send(flow, lambda: self.auth_client.initiate_auth(email))
        self._check(flow, response, require_body=False)
        flow.advance(AuthFlowState.INITIATED)
        logger.info(f"Authentication initiated successfully for email: {email}")
        try:
            ack = response.json()
        except ValueError:
            return {}
        return ack if isinstance(ack, dict) else {}

    def _verify(self, flow: AuthFlow, code: str) -> Credential:
        email = flow.email
        logger.info(f"Verifying authentication for email: {email}")
        response = self._send(flow, lambda: self.auth_client.verify_auth(email, code))
        self._check_token_reply(flow, response)
        credential = self._parse_credential(flow, response)
        self.credential_store.set(credential)
        flow.advance(AuthFlowState.DONE)
        logger.info(f"Authentication verified successfully for email: {email}")
        return credential

    def _send(self, flow: AuthFlow, call) -> httpx.Response:
        try:
            return call()
        except httpx.HTTPError as e:
            raise self._failure(flow, AuthTransportError, f"Request failed: {e}")

    def _check(self, flow: AuthFlow, response: httpx.Response, require_body: bool) -> None:
        try:
            validate_status_code(response, 200)
            validate_content_type(response, JSON_CONTENT_TYPE)
            if require_body:
                validate_response_body_not_empty(response)
            validate_response_time(response, self.response_time_limit_ms)
        except ResponseValidationError as e:
            raise self._failure(flow, AuthTransportError, str(e), response)

    def _check_token_reply(self, flow: AuthFlow, response: httpx.Response) -> None:
        self._check(flow, response, require_body=True)

    def _parse_credential(self, flow: AuthFlow, response: httpx.Response) -> Credential:
        try:
            auth_response = AuthResponse.from_json(response.json())
        except ValueError as e:
            raise self._failure(
                flow, AuthTransportError, f"Unparseable auth response: {e}", response
            )

        if auth_response.has_error():
            flow.fail(auth_response.error)
            error = RemoteAuthError(
                auth_response.error,
                auth_response.message,
                state=flow.state,
                email=flow.email,
            )
            self._report(flow, str(error), response)
            raise error

        if not auth_response.has_valid_token():
            raise self._failure(
                flow, MissingCredentialError, "Auth response carries no access token", response
            )

        flow.advance(AuthFlowState.VERIFIED)
        return auth_response.to_credential(self.expiry_seconds)

    # -- failure handling -----------------------------------------------------

    def _failure(
        self,
        flow: AuthFlow,
        error_cls: type,
        message: str,
        response: Optional[httpx.Response] = None,
    ) -> AuthorizationError:
        """Move the flow to FAILED, report it and build the error to raise."""
        flow.fail(message)
        self._report(flow, message, response)
        return error_cls(message, state=flow.state, email=flow.email)

    @staticmethod
    def _report(flow: AuthFlow, message: str, response: Optional[httpx.Response]) -> None:
        logger.error(f"Authorization failed for {flow.email}: {message}")
        details = flow.to_dict()
        if response is not None:
            details["status_code"] = response.status_code
            details["content_type"] = response.headers.get("content-type")
            details["response_time_ms"] = round(response_time_ms(response))
        attach_step_details(details, name="Authorization Failure")


__all__ = [
    "AuthFlow",
    "AuthFlowState",
    "AuthTransportError",
    "AuthorizationError",
    "AuthorizationService",
    "MissingCredentialError",
    "RemoteAuthError",
]

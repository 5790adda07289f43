"""
Firebase Authentication over the Identity Toolkit REST API.

Supports the production endpoint and the Auth emulator (or the dev mock in
`dev/mock-identity-toolkit.py`) via CLOCKS_API_FIREBASE_AUTH_EMULATOR_HOST.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import requests

from gateway.auth.config import GatewayConfig
from gateway.auth.errors import ProviderFailure
from gateway.auth.models import Identity

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
GOOGLE_PROVIDER_ID = "google.com"
# The emulator accepts any key, but the parameter must be present.
_EMULATOR_API_KEY = "emulator-api-key"

# REST error message -> (SDK-style code, default message)
REST_ERROR_CODES: Dict[str, Tuple[str, str]] = {
    "EMAIL_EXISTS": ("auth/email-already-in-use", "The email address is already in use by another account."),
    "INVALID_EMAIL": ("auth/invalid-email", "The email address is badly formatted."),
    "WEAK_PASSWORD": ("auth/weak-password", "Password should be at least 6 characters."),
    "EMAIL_NOT_FOUND": ("auth/user-not-found", "There is no user record corresponding to this email."),
    "INVALID_PASSWORD": ("auth/wrong-password", "The password is invalid."),
    "INVALID_LOGIN_CREDENTIALS": ("auth/invalid-credential", "Invalid email or password."),
    "USER_DISABLED": ("auth/user-disabled", "The user account has been disabled."),
    "TOO_MANY_ATTEMPTS_TRY_LATER": ("auth/too-many-requests", "Too many attempts. Please try again later."),
    "OPERATION_NOT_ALLOWED": ("auth/operation-not-allowed", "This sign-in method is not enabled."),
    "INVALID_IDP_RESPONSE": ("auth/invalid-credential", "The supplied credential is malformed or has expired."),
    "MISSING_PASSWORD": ("auth/missing-password", "A password is required."),
    "MISSING_EMAIL": ("auth/missing-email", "An email address is required."),
}


def _unavailable(message: str, code: str = "auth/internal-error") -> ProviderFailure:
    return ProviderFailure(code, message, unavailable=True)


def parse_rest_error(data: Any) -> ProviderFailure:
    """
    Turn an Identity Toolkit error body into a ProviderFailure.

    Bodies look like {"error": {"code": 400, "message": "WEAK_PASSWORD : Password should be ..."}}.
    """
    err = data.get("error") if isinstance(data, dict) else None
    raw = str((err or {}).get("message") or "") if isinstance(err, dict) else ""
    key, _, detail = raw.partition(":")
    key = key.strip()
    detail = detail.strip()

    mapped = REST_ERROR_CODES.get(key)
    if mapped is None:
        # Project or key misconfiguration and anything newer than this table: not an auth outcome.
        logger.warning("Unrecognized identity provider error: %s", key or "<empty>")
        return _unavailable("Identity provider rejected the request")
    code, default_message = mapped
    return ProviderFailure(code, detail or default_message)


class FirebaseIdentityProvider:
    """IdentityProvider backed by Firebase Authentication."""

    def __init__(self, cfg: GatewayConfig, session: Optional[requests.Session] = None) -> None:
        self.api_key = cfg.firebase_api_key
        self.emulator_host = cfg.firebase_auth_emulator_host
        self.timeout = cfg.provider_timeout_seconds
        self._session = session or requests.Session()

        if self.emulator_host:
            self.base_url = f"http://{self.emulator_host}/identitytoolkit.googleapis.com/v1"
            if not self.api_key:
                self.api_key = _EMULATOR_API_KEY
        else:
            self.base_url = IDENTITY_TOOLKIT_URL

    def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise _unavailable("Identity provider is not configured", code="auth/invalid-api-key")

        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            r = self._session.post(url, params={"key": self.api_key}, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            # Never include the URL: it carries the API key.
            logger.warning("Identity provider request failed (%s): %s", endpoint, type(e).__name__)
            raise _unavailable("Network error", code="auth/network-request-failed") from e

        if r.status_code >= 500:
            raise _unavailable(f"Identity provider error (status={r.status_code})")

        try:
            data = r.json()
        except ValueError as e:
            raise _unavailable(f"Invalid identity provider response (status={r.status_code})") from e

        if r.status_code >= 400:
            raise parse_rest_error(data)
        if not isinstance(data, dict):
            raise _unavailable("Invalid identity provider response")
        return data

    @staticmethod
    def _identity(data: Dict[str, Any]) -> Identity:
        local_id = str(data.get("localId") or "").strip()
        if not local_id:
            raise _unavailable("Identity provider response is missing localId")
        return Identity(user_id=local_id)

    def register(self, email: str, password: str) -> Identity:
        data = self._post("signUp", {"email": email, "password": password, "returnSecureToken": True})
        return self._identity(data)

    def authenticate_password(self, email: str, password: str) -> Identity:
        data = self._post("signInWithPassword", {"email": email, "password": password, "returnSecureToken": True})
        return self._identity(data)

    def authenticate_federated(self, credential: Optional[str] = None) -> Identity:
        token = (credential or "").strip()
        if not token:
            raise ProviderFailure("auth/argument-error", "A Google credential is required")
        data = self._post(
            "signInWithIdp",
            {
                "postBody": urlencode({"id_token": token, "providerId": GOOGLE_PROVIDER_ID}),
                "requestUri": "http://localhost",
                "returnIdpCredential": True,
                "returnSecureToken": True,
            },
        )
        return self._identity(data)

    def revoke_session(self) -> None:
        # The REST client keeps no server-side session: like the SDK's signOut,
        # dropping local credentials is all there is to do.
        return None

# sweetbloom/clients/identity_client.py

"""Identity Toolkit REST client for email/password accounts."""

import json
from typing import Any

from sweetbloom.clients.base_client import RemoteClient
from sweetbloom.errors import AuthError
from sweetbloom.models.session import Session

# Provider error message -> coarse error code
PROVIDER_CODES: dict[str, str] = {
    "EMAIL_NOT_FOUND": "user-not-found",
    "INVALID_PASSWORD": "wrong-password",
    "INVALID_EMAIL": "invalid-email",
    "INVALID_LOGIN_CREDENTIALS": "invalid-credential",
    "EMAIL_EXISTS": "email-already-in-use",
    "WEAK_PASSWORD": "weak-password",
    "USER_DISABLED": "user-disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "too-many-requests",
}

NETWORK_ERROR = "network-request-failed"
UNKNOWN_ERROR = "unknown"


def classify_error(body: dict[str, Any]) -> str:
    """Map an ``{"error": {"message": ...}}`` body to a coarse code.

    The provider sometimes appends detail after ``" : "``
    (``"WEAK_PASSWORD : Password should be at least 6 characters"``).
    """
    error = body.get("error")
    raw = ""
    if isinstance(error, dict):
        raw = str(error.get("message", ""))
    provider_code = raw.split(" : ", 1)[0].strip().upper()
    return PROVIDER_CODES.get(provider_code, UNKNOWN_ERROR)


class IdentityClient(RemoteClient):
    """Sign-in and sign-up against the hosted credential service."""

    def __init__(self) -> None:
        super().__init__("identity")

    def _get_base_url(self) -> str:
        return f"{self.settings.IDENTITY_BASE_URL}/accounts"

    def _call(self, endpoint: str, email: str, password: str) -> Session:
        payload: dict[str, Any] = {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        }
        resp = self._fetch_post(
            f"{self._get_base_url()}:{endpoint}",
            payload,
            accept_status=(200, 400),
        )
        if resp is None:
            raise AuthError(NETWORK_ERROR, NETWORK_ERROR)

        try:
            body: dict[str, Any] = json.loads(resp.text or "{}")
        except json.JSONDecodeError:
            self.logger.error(
                "[identity] Malformed JSON from %s", endpoint
            )
            raise AuthError(UNKNOWN_ERROR, UNKNOWN_ERROR) from None

        if resp.status_code != 200:
            code = classify_error(body)
            self.logger.info(
                "[identity] %s rejected for %s: %s",
                endpoint,
                email,
                code,
            )
            raise AuthError(code, code)

        return Session(
            uid=str(body.get("localId", "")),
            email=str(body.get("email", email)),
            id_token=str(body.get("idToken", "")),
            refresh_token=str(body.get("refreshToken", "")),
            expires_in=int(body.get("expiresIn", 0) or 0),
            display_name=str(body.get("displayName", "") or ""),
        )

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange an email and password for a session."""
        return self._call("signInWithPassword", email, password)

    def sign_up(self, email: str, password: str) -> Session:
        """Create an account and return its first session."""
        return self._call("signUp", email, password)

# sweetbloom/services/auth_service.py

"""Login / registration: form checks, provider calls, error messages."""

import asyncio
import logging
from dataclasses import replace

from sweetbloom.clients.identity_client import IdentityClient
from sweetbloom.config.settings import Settings
from sweetbloom.errors import AuthError, ValidationError
from sweetbloom.models.session import Session

logger = logging.getLogger("sweetbloom.auth")

GENERIC_MESSAGE = "Une erreur est survenue."

AUTH_MESSAGES: dict[str, str] = {
    "user-not-found": "Aucun compte trouvé.",
    "wrong-password": "Mot de passe incorrect.",
    "invalid-email": "Email invalide.",
    "invalid-credential": "Email ou mot de passe incorrect.",
    "email-already-in-use": "Cet email est déjà utilisé.",
    "weak-password": "Mot de passe trop faible.",
    "user-disabled": "Ce compte a été désactivé.",
    "too-many-requests": "Trop de tentatives. Réessayez plus tard.",
    "network-request-failed": "Connexion impossible. Vérifiez votre réseau.",
}


def message_for(code: str) -> str:
    """User-facing message for a coarse error code."""
    return AUTH_MESSAGES.get(code, GENERIC_MESSAGE)


class AuthService:
    """Owns the current session and talks to the identity service."""

    def __init__(self, client: IdentityClient | None = None) -> None:
        self._client = client or IdentityClient()
        self._session: Session | None = None

    @property
    def current_session(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    # ── Validation (never touches the network) ───────────

    @staticmethod
    def validate_login(email: str, password: str) -> None:
        if not email.strip() or not password:
            raise ValidationError("Veuillez remplir tous les champs.")

    @staticmethod
    def validate_registration(
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> None:
        """Check a registration form in the order the form shows errors."""
        if (
            not name.strip()
            or not email.strip()
            or not password
            or not confirm_password
        ):
            raise ValidationError("Veuillez remplir tous les champs.")
        if password != confirm_password:
            raise ValidationError(
                "Les mots de passe ne correspondent pas."
            )
        if len(password) < Settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Le mot de passe doit contenir au moins "
                f"{Settings.MIN_PASSWORD_LENGTH} caractères."
            )

    # ── Provider calls ───────────────────────────────────

    async def login(self, email: str, password: str) -> Session:
        """Sign in; raises ValidationError or AuthError with a message."""
        self.validate_login(email, password)
        try:
            session = await asyncio.to_thread(
                self._client.sign_in, email.strip(), password
            )
        except AuthError as exc:
            logger.warning("Login failed for %s: %s", email, exc.code)
            raise AuthError(exc.code, message_for(exc.code)) from exc

        self._session = session
        logger.info("Signed in as %s", session.email)
        return session

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> Session:
        """Create an account and sign it in."""
        self.validate_registration(name, email, password, confirm_password)
        try:
            session = await asyncio.to_thread(
                self._client.sign_up, email.strip(), password
            )
        except AuthError as exc:
            logger.warning(
                "Registration failed for %s: %s", email, exc.code
            )
            raise AuthError(exc.code, message_for(exc.code)) from exc

        if not session.display_name:
            session = replace(session, display_name=name.strip())
        self._session = session
        logger.info("Registered %s", session.email)
        return session

    def logout(self) -> None:
        if self._session is not None:
            logger.info("Signed out %s", self._session.email)
        self._session = None

# sweetbloom/models/session.py

"""Authenticated user session returned by the identity service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """A signed-in user."""

    uid: str
    email: str
    id_token: str
    refresh_token: str = ""
    expires_in: int = 0
    display_name: str = ""

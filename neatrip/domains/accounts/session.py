"""
Session Tokens - Encrypted auth state.

The public user record (everything but the password hash) is serialised
into a Fernet token that the client keeps and sends back as a bearer
token. Tokens expire after the configured TTL.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from neatrip.domains.base import CamelModel
from neatrip.domains.social.models import User

logger = logging.getLogger(__name__)

__all__ = ["AuthState", "SessionManager", "SessionResult"]


class AuthState(CamelModel):
    user: User | None = None
    is_authenticated: bool = False
    is_loading: bool = False


class SessionResult(CamelModel):
    """A fresh token together with the state it encodes."""

    token: str | None = None
    state: AuthState


def _fernet_key(secret: str) -> bytes:
    # Accept a ready Fernet key, otherwise derive one from the passphrase
    try:
        Fernet(secret.encode())
        return secret.encode()
    except ValueError:
        return base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())


class SessionManager:
    """
    Issues and reads session tokens.

    Example:
        >>> sessions = SessionManager("my-secret", ttl_seconds=3600)
        >>> token = sessions.login(user)
        >>> sessions.restore(token).user.model_dump() == user.model_dump()
        True
    """

    def __init__(self, secret: str = "", ttl_seconds: int | None = None) -> None:
        if not secret:
            # Generate temporary key for development
            logger.warning("SESSION_SECRET not set - generating temporary key")
            secret = Fernet.generate_key().decode()
            logger.warning("Sessions will not survive a restart; set SESSION_SECRET in production!")

        self.cipher = Fernet(_fernet_key(secret))
        self.ttl_seconds = ttl_seconds

    def login(self, user: User) -> str:
        """Issue a token carrying the public user record."""
        payload = json.dumps(user.to_json_dict())
        return self.cipher.encrypt(payload.encode()).decode()

    def restore(self, token: str | None) -> AuthState:
        """Read a token. Bad or expired tokens give the anonymous state."""
        if not token:
            return AuthState()

        try:
            payload = self.cipher.decrypt(token.encode(), ttl=self.ttl_seconds)
            user = User.model_validate(json.loads(payload))
        except InvalidToken:
            logger.info("Session token rejected (invalid or expired)")
            return AuthState()
        except ValueError as e:
            logger.warning("Session payload unreadable: %s", e)
            return AuthState()

        return AuthState(user=user, is_authenticated=True)

    def update(self, token: str | None, changes: dict[str, Any]) -> SessionResult:
        """Merge user fields into the session. Anonymous sessions stay anonymous."""
        state = self.restore(token)
        if state.user is None:
            return SessionResult(state=AuthState())

        user = state.user.model_copy(update=changes)
        return SessionResult(
            token=self.login(user),
            state=AuthState(user=user, is_authenticated=True),
        )

    def logout(self) -> AuthState:
        return AuthState()

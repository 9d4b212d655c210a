"""
Password Hashing - scrypt via the cryptography package.

Hashes are stored as "scrypt$<salt>$<key>" with urlsafe base64 parts.
"""

from __future__ import annotations

import base64
import logging
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

logger = logging.getLogger(__name__)

__all__ = ["hash_password", "verify_password"]

_SCHEME = "scrypt"
_SALT_BYTES = 16
_KEY_LENGTH = 32
_N, _R, _P = 2**14, 8, 1


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=_KEY_LENGTH, n=_N, r=_R, p=_P)


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(_SALT_BYTES)
    key = _kdf(salt).derive(password.encode())
    return "$".join(
        (
            _SCHEME,
            base64.urlsafe_b64encode(salt).decode(),
            base64.urlsafe_b64encode(key).decode(),
        )
    )


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    if not hashed:
        return False

    try:
        scheme, salt_b64, key_b64 = hashed.split("$")
        salt = base64.urlsafe_b64decode(salt_b64)
        key = base64.urlsafe_b64decode(key_b64)
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False

    if scheme != _SCHEME:
        return False

    try:
        _kdf(salt).verify(password.encode(), key)
    except InvalidKey:
        return False
    return True

"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    AuthError,
    ConflictError,
    ErrorCode,
    LLMError,
    NeatripError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "NeatripError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthError",
    "PermissionDeniedError",
    "LLMError",
    "StorageError",
]

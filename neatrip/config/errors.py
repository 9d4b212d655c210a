"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from neatrip.config.errors import ErrorCode, NeatripError

    raise NeatripError(ErrorCode.NOT_FOUND, "Post not found")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Request validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ACTION = "INVALID_ACTION"

    # Records
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # LLM/Model errors
    LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_INVALID_RESPONSE = "LLM_INVALID_RESPONSE"
    LLM_AUTH_FAILED = "LLM_AUTH_FAILED"

    # Storage errors
    STORAGE_CONNECTION_FAILED = "STORAGE_CONNECTION_FAILED"
    STORAGE_UNKNOWN_COLLECTION = "STORAGE_UNKNOWN_COLLECTION"
    STORAGE_RESTORE_FAILED = "STORAGE_RESTORE_FAILED"

    # Security errors
    SECURITY_UNAUTHORIZED = "SECURITY_UNAUTHORIZED"
    SECURITY_FORBIDDEN = "SECURITY_FORBIDDEN"
    SECURITY_RATE_LIMITED = "SECURITY_RATE_LIMITED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class NeatripError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(NeatripError):
    """Request validation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class NotFoundError(NeatripError):
    """Missing record errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, details)


class ConflictError(NeatripError):
    """Uniqueness violations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFLICT, message, details)


class AuthError(NeatripError):
    """Missing or invalid credentials."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SECURITY_UNAUTHORIZED, message, details)


class PermissionDeniedError(NeatripError):
    """Authenticated but not allowed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SECURITY_FORBIDDEN, message, details)


class LLMError(NeatripError):
    """LLM/model errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.LLM_UNAVAILABLE,
    ) -> None:
        super().__init__(code, message, details)


class StorageError(NeatripError):
    """Storage/database errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.STORAGE_CONNECTION_FAILED,
    ) -> None:
        super().__init__(code, message, details)

"""
Form Schemas - Validation rules for account, post and place forms.
"""

from __future__ import annotations

import re

from pydantic import (
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from neatrip.domains.base import CamelModel
from neatrip.domains.social.models import OpeningHours, PlaceCategory

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
_URL = TypeAdapter(HttpUrl)


def _check_username(value: str | None) -> str | None:
    if value is None:
        return value
    if len(value) < 3:
        raise ValueError("Username must be at least 3 characters")
    if not _USERNAME_RE.match(value):
        raise ValueError("Username can only contain letters, numbers, and underscores")
    return value


def _check_website(value: str | None) -> str | None:
    # Empty string clears the website
    if not value:
        return value
    try:
        _URL.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Please enter a valid URL") from None
    return value


class LoginForm(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterForm(CamelModel):
    """Sign-up form. Password rules match the client-side checks."""

    name: str = Field(..., min_length=2)
    username: str
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str
    agree_to_terms: bool = False

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Passwords don't match")
        return value

    @field_validator("agree_to_terms")
    @classmethod
    def _terms_accepted(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must agree to the terms and conditions")
        return value


class ProfileForm(CamelModel):
    """Partial profile update; only supplied fields change."""

    name: str | None = Field(default=None, min_length=2)
    username: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=100)
    website: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    avatar: str | None = None
    cover_image: str | None = None

    # Omitted leaves the name alone; an explicit null is rejected
    @field_validator("name")
    @classmethod
    def _name_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("username")
    @classmethod
    def _username(cls, value: str | None) -> str | None:
        return _check_username(value)

    @field_validator("website")
    @classmethod
    def _website(cls, value: str | None) -> str | None:
        return _check_website(value)


class CreatePostForm(CamelModel):
    caption: str = Field(..., min_length=1, max_length=2200)
    location: str | None = None
    tags: list[str] = Field(default_factory=list)
    place_id: str | None = None
    media_urls: list[str] = Field(default_factory=list)
    is_reel: bool = False


class CreatePlaceForm(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    category: PlaceCategory
    location: str = Field(..., min_length=1)
    website: str | None = None
    phone: str | None = None
    tags: list[str] = Field(default_factory=list)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = None
    best_time_to_visit: str | None = None
    ticket_info: str | None = None
    opening_hours: OpeningHours | None = None
    media_urls: list[str] = Field(default_factory=list)

    @field_validator("website")
    @classmethod
    def _website(cls, value: str | None) -> str | None:
        return _check_website(value)

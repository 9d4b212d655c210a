"""
Social Models - Users, places, posts and their relations.

Records are stored with camelCase keys; these models read them back
and shape API responses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from neatrip.domains.base import CamelModel


class PlaceCategory(str, Enum):
    NATURE = "NATURE"
    CITY_SPOT = "CITY_SPOT"
    LAKE = "LAKE"
    CAFE = "CAFE"
    RESTAURANT = "RESTAURANT"
    MUSEUM = "MUSEUM"
    PARK = "PARK"
    BEACH = "BEACH"
    MOUNTAIN = "MOUNTAIN"
    HISTORICAL = "HISTORICAL"
    ENTERTAINMENT = "ENTERTAINMENT"
    SHOPPING = "SHOPPING"
    ADVENTURE = "ADVENTURE"
    HOTEL = "HOTEL"
    ATTRACTION = "ATTRACTION"
    OTHER = "OTHER"


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class NotificationType(str, Enum):
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    FOLLOW = "FOLLOW"
    SHARE = "SHARE"
    MENTION = "MENTION"
    SYSTEM = "SYSTEM"


class Record(CamelModel):
    """Fields every stored record carries."""

    id: str
    created_at: str
    updated_at: str | None = None


class User(Record):
    """A registered user. The password hash never leaves the process."""

    email: str
    username: str | None = None
    name: str = ""
    bio: str | None = None
    avatar: str | None = None
    cover_image: str | None = None
    website: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    location: str | None = None
    is_verified: bool = False
    theme: str = "system"
    password_hash: str | None = Field(default=None, exclude=True)


class UserSummary(CamelModel):
    id: str
    name: str = ""
    username: str | None = None
    avatar: str | None = None
    is_verified: bool = False


class UserProfile(User):
    """User with social counters, as seen by a viewer."""

    post_count: int = 0
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False


class OpeningHours(CamelModel):
    monday: str | None = None
    tuesday: str | None = None
    wednesday: str | None = None
    thursday: str | None = None
    friday: str | None = None
    saturday: str | None = None
    sunday: str | None = None


class Media(Record):
    """Image or video attached to a post or place."""

    type: MediaType = MediaType.IMAGE
    url: str
    caption: str | None = None
    is_primary: bool = False
    order: int = 0


class Place(Record):
    name: str
    description: str | None = None
    category: PlaceCategory = PlaceCategory.OTHER
    tags: list[str] = Field(default_factory=list)
    location: str
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    best_time_to_visit: str | None = None
    ticket_info: str | None = None
    opening_hours: OpeningHours | None = None
    is_verified: bool = False
    is_curated: bool = False
    created_by: str | None = None
    media: list[Media] = Field(default_factory=list)
    is_saved: bool = False


class PlaceSummary(CamelModel):
    id: str
    name: str
    category: PlaceCategory = PlaceCategory.OTHER
    location: str = ""


class Post(Record):
    caption: str
    location: str | None = None
    place_id: str | None = None
    author_id: str
    is_reel: bool = False
    tags: list[str] = Field(default_factory=list)


class FeedPost(Post):
    """A post expanded with everything the feed renders."""

    author: UserSummary
    place: PlaceSummary | None = None
    media: list[Media] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    is_liked: bool = False


class FeedPage(CamelModel):
    posts: list[FeedPost]
    page: int
    limit: int
    has_more: bool


class Comment(Record):
    content: str
    user_id: str
    post_id: str
    parent_id: str | None = None
    author: UserSummary | None = None
    replies: list[Comment] = Field(default_factory=list)


class Share(Record):
    user_id: str
    post_id: str
    platform: str = "link"


class Notification(Record):
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False

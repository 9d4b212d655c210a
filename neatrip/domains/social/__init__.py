"""
Social Domain - Users, places, posts, comments, follows and notifications.

This domain handles:
- CRUD for users, places and posts with cascading deletes
- The paginated feed
- Likes, comments, shares, follows and saved places
- Notifications raised by those interactions
"""

from .models import (
    Comment,
    FeedPage,
    FeedPost,
    Media,
    MediaType,
    Notification,
    NotificationType,
    OpeningHours,
    Place,
    PlaceCategory,
    PlaceSummary,
    Post,
    Share,
    User,
    UserProfile,
    UserSummary,
)
from .service import SocialService, media_type_for

__all__ = [
    "SocialService",
    "media_type_for",
    "Comment",
    "FeedPage",
    "FeedPost",
    "Media",
    "MediaType",
    "Notification",
    "NotificationType",
    "OpeningHours",
    "Place",
    "PlaceCategory",
    "PlaceSummary",
    "Post",
    "Share",
    "User",
    "UserProfile",
    "UserSummary",
]

"""
Social Service - CRUD, feed and interactions over the document store.

Unique fields (emails, usernames, likes, follows, saves) are keyed by the
store; this layer adds referential links, ownership checks and cascades.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from neatrip.config import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

from .models import (
    Comment,
    FeedPage,
    FeedPost,
    Media,
    MediaType,
    Notification,
    NotificationType,
    Place,
    PlaceCategory,
    PlaceSummary,
    Post,
    Share,
    User,
    UserProfile,
    UserSummary,
)

if TYPE_CHECKING:
    from neatrip.adapters.sqlite import DocumentStore

logger = logging.getLogger(__name__)

__all__ = ["SocialService", "media_type_for"]

_VIDEO_SUFFIXES = (".mp4", ".mov", ".webm", ".m4v")
_NEWEST_FIRST = {"createdAt": "desc"}
_OLDEST_FIRST = {"createdAt": "asc"}


def media_type_for(url: str) -> MediaType:
    """Guess the media type from the URL extension."""
    path = url.split("?", 1)[0].lower()
    return MediaType.VIDEO if path.endswith(_VIDEO_SUFFIXES) else MediaType.IMAGE


def _camel(fields: dict[str, Any]) -> dict[str, Any]:
    return {to_camel(key): value for key, value in fields.items()}


class SocialService:
    """
    Social features on top of a DocumentStore.

    Example:
        >>> social = SocialService(store)
        >>> ana = await social.create_user(email="ana@example.com", name="Ana")
        >>> post = await social.create_post(ana.id, caption="Sunset at Cabo da Roca")
        >>> page = await social.get_feed(viewer_id=ana.id)
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # --- Users ---

    async def get_user(self, user_id: str) -> User:
        record = await self._store.get("users", user_id)
        if record is None:
            raise NotFoundError("User not found", {"user_id": user_id})
        return User.model_validate(record)

    async def find_user_by_email(self, email: str) -> User | None:
        record = await self._store.find_one("users", {"email": email.lower()})
        return User.model_validate(record) if record else None

    async def find_user_by_username(self, username: str) -> User | None:
        record = await self._store.find_one("users", {"username": username})
        return User.model_validate(record) if record else None

    async def list_users(self, limit: int | None = None, offset: int = 0) -> list[User]:
        records = await self._store.find(
            "users", order_by=_NEWEST_FIRST, limit=limit, offset=offset
        )
        return [User.model_validate(r) for r in records]

    @staticmethod
    def _user_conflict(error: ConflictError) -> ConflictError:
        if "username" in error.details.get("fields", []):
            return ConflictError("Username is already taken", {"field": "username"})
        return ConflictError("Email is already registered", {"field": "email"})

    async def create_user(
        self,
        *,
        email: str,
        name: str = "",
        username: str | None = None,
        password_hash: str | None = None,
        **profile: Any,
    ) -> User:
        """
        Create a user.

        Raises:
            ConflictError: Email or username already in use
        """
        try:
            record = await self._store.insert(
                "users",
                {
                    "email": email.lower(),
                    "name": name,
                    "username": username,
                    "passwordHash": password_hash,
                    "isVerified": False,
                    "theme": "system",
                    **_camel(profile),
                },
            )
        except ConflictError as e:
            raise self._user_conflict(e) from e
        logger.info("Created user %s", record["id"])
        return User.model_validate(record)

    async def update_user(self, user_id: str, **changes: Any) -> User:
        """
        Apply profile changes. The merged record is validated before it is written.

        Raises:
            ValidationError: The result would not be a valid user
            ConflictError: New email or username already in use
        """
        record = await self._store.get("users", user_id)
        if record is None:
            raise NotFoundError("User not found", {"user_id": user_id})

        if changes.get("email"):
            changes["email"] = changes["email"].lower()
        changes = _camel(changes)

        try:
            User.model_validate({**record, **changes})
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid profile update",
                {
                    "errors": [
                        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                        for err in e.errors()
                    ]
                },
            ) from e

        try:
            updated = await self._store.update("users", user_id, changes)
        except ConflictError as e:
            raise self._user_conflict(e) from e
        if updated is None:
            raise NotFoundError("User not found", {"user_id": user_id})
        return User.model_validate(updated)

    async def delete_user(self, user_id: str) -> None:
        """Delete a user with their posts, interactions and notifications."""
        await self.get_user(user_id)

        for post in await self._store.find("posts", {"authorId": user_id}):
            await self._delete_post_cascade(post["id"])

        await self._store.delete_where("likes", {"userId": user_id})
        await self._delete_threads(await self._store.find("comments", {"userId": user_id}))
        await self._store.delete_where("shares", {"userId": user_id})
        await self._store.delete_where("follows", {"followerId": user_id})
        await self._store.delete_where("follows", {"followingId": user_id})
        await self._store.delete_where("saved_places", {"userId": user_id})
        await self._store.delete_where("notifications", {"userId": user_id})
        await self._store.delete("users", user_id)
        logger.info("Deleted user %s", user_id)

    async def get_profile(self, user_id: str, viewer_id: str | None = None) -> UserProfile:
        user = await self.get_user(user_id)
        is_following = False
        if viewer_id and viewer_id != user_id:
            is_following = await self._store.exists(
                "follows", {"followerId": viewer_id, "followingId": user_id}
            )
        return UserProfile(
            **user.model_dump(),
            post_count=await self._store.count("posts", {"authorId": user_id}),
            follower_count=await self.follower_count(user_id),
            following_count=await self.following_count(user_id),
            is_following=is_following,
        )

    async def _summary(self, user_id: str) -> UserSummary:
        record = await self._store.get("users", user_id)
        if record is None:
            return UserSummary(id=user_id, name="Deleted user")
        return UserSummary.model_validate(record)

    # --- Places ---

    async def _place_media(self, place_id: str) -> list[Media]:
        records = await self._store.find(
            "place_media", {"placeId": place_id}, order_by={"order": "asc"}
        )
        return [Media.model_validate(r) for r in records]

    async def get_place(self, place_id: str, viewer_id: str | None = None) -> Place:
        record = await self._store.get("places", place_id)
        if record is None:
            raise NotFoundError("Place not found", {"place_id": place_id})

        is_saved = False
        if viewer_id:
            is_saved = await self._store.exists(
                "saved_places", {"userId": viewer_id, "placeId": place_id}
            )
        return Place.model_validate(
            {**record, "media": await self._place_media(place_id), "isSaved": is_saved}
        )

    async def list_places(
        self,
        category: PlaceCategory | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Place]:
        where = {"category": category.value} if category else None
        records = await self._store.find(
            "places", where=where, order_by=_NEWEST_FIRST, limit=limit, offset=offset
        )
        return [
            Place.model_validate({**r, "media": await self._place_media(r["id"])})
            for r in records
        ]

    async def create_place(
        self,
        *,
        name: str,
        location: str,
        category: PlaceCategory = PlaceCategory.OTHER,
        created_by: str | None = None,
        media_urls: list[str] | None = None,
        **fields: Any,
    ) -> Place:
        record = await self._store.insert(
            "places",
            {
                "name": name,
                "location": location,
                "category": PlaceCategory(category).value,
                "createdBy": created_by,
                "isVerified": False,
                "isCurated": False,
                **_camel(fields),
            },
        )
        for index, url in enumerate(media_urls or []):
            await self._store.insert(
                "place_media",
                {
                    "placeId": record["id"],
                    "type": media_type_for(url).value,
                    "url": url,
                    "isPrimary": index == 0,
                    "order": index,
                },
            )
        logger.info("Created place %s (%s)", record["id"], name)
        return await self.get_place(record["id"])

    async def update_place(self, place_id: str, **changes: Any) -> Place:
        await self.get_place(place_id)
        if "category" in changes:
            changes["category"] = PlaceCategory(changes["category"]).value
        await self._store.update("places", place_id, _camel(changes))
        return await self.get_place(place_id)

    async def delete_place(self, place_id: str) -> None:
        """Delete a place. Posts keep existing without the place link."""
        await self.get_place(place_id)
        await self._store.delete_where("place_media", {"placeId": place_id})
        await self._store.delete_where("saved_places", {"placeId": place_id})
        for post in await self._store.find("posts", {"placeId": place_id}):
            await self._store.update("posts", post["id"], {"placeId": None})
        await self._store.delete("places", place_id)

    # --- Posts ---

    async def _post_record(self, post_id: str) -> dict[str, Any]:
        record = await self._store.get("posts", post_id)
        if record is None:
            raise NotFoundError("Post not found", {"post_id": post_id})
        return record

    async def _expand_post(self, record: dict[str, Any], viewer_id: str | None) -> FeedPost:
        post_id = record["id"]

        place = None
        if record.get("placeId"):
            place_record = await self._store.get("places", record["placeId"])
            if place_record:
                place = PlaceSummary.model_validate(place_record)

        media = await self._store.find(
            "post_media", {"postId": post_id}, order_by={"order": "asc"}
        )
        is_liked = bool(viewer_id) and await self._store.exists(
            "likes", {"userId": viewer_id, "postId": post_id}
        )

        return FeedPost.model_validate(
            {
                **record,
                "author": await self._summary(record["authorId"]),
                "place": place,
                "media": media,
                "likeCount": await self._store.count("likes", {"postId": post_id}),
                "commentCount": await self._store.count("comments", {"postId": post_id}),
                "shareCount": await self._store.count("shares", {"postId": post_id}),
                "isLiked": is_liked,
            }
        )

    async def get_post(self, post_id: str, viewer_id: str | None = None) -> FeedPost:
        return await self._expand_post(await self._post_record(post_id), viewer_id)

    async def create_post(
        self,
        author_id: str,
        *,
        caption: str,
        location: str | None = None,
        place_id: str | None = None,
        tags: list[str] | None = None,
        media_urls: list[str] | None = None,
        is_reel: bool = False,
    ) -> FeedPost:
        """
        Create a post with its media.

        Raises:
            NotFoundError: Author or place does not exist
        """
        await self.get_user(author_id)
        if place_id:
            await self.get_place(place_id)

        record = await self._store.insert(
            "posts",
            {
                "caption": caption,
                "location": location,
                "placeId": place_id,
                "authorId": author_id,
                "isReel": is_reel,
                "tags": tags or [],
            },
        )
        for index, url in enumerate(media_urls or []):
            await self._store.insert(
                "post_media",
                {
                    "postId": record["id"],
                    "type": media_type_for(url).value,
                    "url": url,
                    "order": index,
                },
            )

        logger.info("Created post %s by %s", record["id"], author_id)
        return await self._expand_post(record, author_id)

    async def update_post(self, post_id: str, user_id: str, **changes: Any) -> FeedPost:
        record = await self._post_record(post_id)
        if record["authorId"] != user_id:
            raise PermissionDeniedError("Only the author can edit this post")
        if changes.get("place_id"):
            await self.get_place(changes["place_id"])

        updated = await self._store.update("posts", post_id, _camel(changes))
        return await self._expand_post(updated, user_id)

    async def delete_post(self, post_id: str, user_id: str) -> None:
        record = await self._post_record(post_id)
        if record["authorId"] != user_id:
            raise PermissionDeniedError("Only the author can delete this post")
        await self._delete_post_cascade(post_id)
        logger.info("Deleted post %s", post_id)

    async def _delete_post_cascade(self, post_id: str) -> None:
        for collection in ("likes", "comments", "shares", "post_media"):
            await self._store.delete_where(collection, {"postId": post_id})
        await self._store.delete("posts", post_id)

    async def get_feed(
        self,
        viewer_id: str | None = None,
        page: int = 1,
        limit: int = 10,
        author_id: str | None = None,
    ) -> FeedPage:
        """Newest posts first, one page at a time (pages start at 1)."""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        where = {"authorId": author_id} if author_id else None
        # One extra record tells whether another page exists
        records = await self._store.find(
            "posts",
            where=where,
            order_by=_NEWEST_FIRST,
            limit=limit + 1,
            offset=(page - 1) * limit,
        )
        posts = [await self._expand_post(r, viewer_id) for r in records[:limit]]
        return FeedPage(posts=posts, page=page, limit=limit, has_more=len(records) > limit)

    # --- Likes ---

    async def like_post(self, user_id: str, post_id: str) -> int:
        """Like a post. Liking twice is a no-op. Returns the like count."""
        post = await self._post_record(post_id)
        where = {"userId": user_id, "postId": post_id}

        try:
            await self._store.insert("likes", where)
        except ConflictError:
            logger.debug("Post %s already liked by %s", post_id, user_id)
        else:
            if post["authorId"] != user_id:
                liker = await self._summary(user_id)
                await self.notify(
                    post["authorId"],
                    NotificationType.LIKE,
                    "New like",
                    f"{liker.name} liked your post",
                    {"postId": post_id, "userId": user_id},
                )

        return await self._store.count("likes", {"postId": post_id})

    async def unlike_post(self, user_id: str, post_id: str) -> int:
        await self._post_record(post_id)
        await self._store.delete_where("likes", {"userId": user_id, "postId": post_id})
        return await self._store.count("likes", {"postId": post_id})

    # --- Comments ---

    async def list_comments(self, post_id: str) -> list[Comment]:
        """Comments oldest first, replies nested under their parents."""
        await self._post_record(post_id)
        records = await self._store.find(
            "comments", {"postId": post_id}, order_by=_OLDEST_FIRST
        )

        by_id: dict[str, Comment] = {}
        for record in records:
            by_id[record["id"]] = Comment.model_validate(
                {**record, "author": await self._summary(record["userId"])}
            )

        roots: list[Comment] = []
        for comment in by_id.values():
            parent = by_id.get(comment.parent_id) if comment.parent_id else None
            if parent is not None:
                parent.replies.append(comment)
            else:
                roots.append(comment)
        return roots

    async def create_comment(
        self,
        user_id: str,
        post_id: str,
        content: str,
        parent_id: str | None = None,
    ) -> Comment:
        """
        Comment on a post or reply to a comment.

        Raises:
            NotFoundError: Post or parent comment does not exist
            ValidationError: Parent belongs to another post, or content is blank
        """
        post = await self._post_record(post_id)
        content = content.strip()
        if not content:
            raise ValidationError("Comment cannot be empty", {"field": "content"})

        if parent_id:
            parent = await self._store.get("comments", parent_id)
            if parent is None:
                raise NotFoundError("Parent comment not found", {"parent_id": parent_id})
            if parent["postId"] != post_id:
                raise ValidationError(
                    "Parent comment belongs to a different post", {"parent_id": parent_id}
                )

        record = await self._store.insert(
            "comments",
            {"content": content, "userId": user_id, "postId": post_id, "parentId": parent_id},
        )
        author = await self._summary(user_id)

        if post["authorId"] != user_id:
            await self.notify(
                post["authorId"],
                NotificationType.COMMENT,
                "New comment",
                f"{author.name} commented on your post",
                {"postId": post_id, "commentId": record["id"]},
            )

        return Comment.model_validate({**record, "author": author})

    async def delete_comment(
        self, comment_id: str, user_id: str, post_id: str | None = None
    ) -> None:
        """
        Delete a comment and every reply beneath it.

        Raises:
            NotFoundError: No such comment (on `post_id`, when given)
            PermissionDeniedError: Not the comment's author
        """
        record = await self._store.get("comments", comment_id)
        if record is None or (post_id is not None and record["postId"] != post_id):
            raise NotFoundError("Comment not found", {"comment_id": comment_id})
        if record["userId"] != user_id:
            raise PermissionDeniedError("Only the author can delete this comment")

        await self._delete_threads([record])

    async def _delete_threads(self, roots: list[dict[str, Any]]) -> int:
        """Delete the given comments with all their descendants."""
        doomed: set[str] = set()
        for post_id in {root["postId"] for root in roots}:
            children: dict[str, list[str]] = {}
            for comment in await self._store.find("comments", {"postId": post_id}):
                if comment.get("parentId"):
                    children.setdefault(comment["parentId"], []).append(comment["id"])

            stack = [root["id"] for root in roots if root["postId"] == post_id]
            while stack:
                comment_id = stack.pop()
                if comment_id not in doomed:
                    doomed.add(comment_id)
                    stack.extend(children.get(comment_id, []))

        for comment_id in doomed:
            await self._store.delete("comments", comment_id)
        return len(doomed)

    # --- Shares ---

    async def share_post(self, user_id: str, post_id: str, platform: str = "link") -> Share:
        post = await self._post_record(post_id)
        record = await self._store.insert(
            "shares", {"userId": user_id, "postId": post_id, "platform": platform}
        )

        if post["authorId"] != user_id:
            sharer = await self._summary(user_id)
            await self.notify(
                post["authorId"],
                NotificationType.SHARE,
                "Post shared",
                f"{sharer.name} shared your post",
                {"postId": post_id, "platform": platform},
            )
        return Share.model_validate(record)

    # --- Follows ---

    async def follow_user(self, follower_id: str, following_id: str) -> None:
        """Follow a user. Following twice is a no-op."""
        if follower_id == following_id:
            raise ValidationError("You cannot follow yourself")
        await self.get_user(following_id)

        try:
            await self._store.insert(
                "follows", {"followerId": follower_id, "followingId": following_id}
            )
        except ConflictError:
            return

        follower = await self._summary(follower_id)
        await self.notify(
            following_id,
            NotificationType.FOLLOW,
            "New follower",
            f"{follower.name} started following you",
            {"userId": follower_id},
        )

    async def unfollow_user(self, follower_id: str, following_id: str) -> bool:
        removed = await self._store.delete_where(
            "follows", {"followerId": follower_id, "followingId": following_id}
        )
        return removed > 0

    async def follower_count(self, user_id: str) -> int:
        return await self._store.count("follows", {"followingId": user_id})

    async def following_count(self, user_id: str) -> int:
        return await self._store.count("follows", {"followerId": user_id})

    # --- Saved places ---

    async def save_place(self, user_id: str, place_id: str) -> None:
        await self.get_place(place_id)
        try:
            await self._store.insert("saved_places", {"userId": user_id, "placeId": place_id})
        except ConflictError:
            logger.debug("Place %s already saved by %s", place_id, user_id)

    async def unsave_place(self, user_id: str, place_id: str) -> bool:
        removed = await self._store.delete_where(
            "saved_places", {"userId": user_id, "placeId": place_id}
        )
        return removed > 0

    async def list_saved_places(self, user_id: str) -> list[Place]:
        saved = await self._store.find(
            "saved_places", {"userId": user_id}, order_by=_NEWEST_FIRST
        )
        places = []
        for entry in saved:
            try:
                places.append(await self.get_place(entry["placeId"], viewer_id=user_id))
            except NotFoundError:
                logger.warning("Saved place %s no longer exists", entry["placeId"])
        return places

    # --- Notifications ---

    async def notify(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        record = await self._store.insert(
            "notifications",
            {
                "userId": user_id,
                "type": type.value,
                "title": title,
                "message": message,
                "data": data or {},
                "isRead": False,
            },
        )
        logger.debug("Notification %s -> %s", type.value, user_id)
        return Notification.model_validate(record)

    async def list_notifications(
        self, user_id: str, unread_only: bool = False, limit: int | None = None
    ) -> list[Notification]:
        where: dict[str, Any] = {"userId": user_id}
        if unread_only:
            where["isRead"] = False
        records = await self._store.find(
            "notifications", where=where, order_by=_NEWEST_FIRST, limit=limit
        )
        return [Notification.model_validate(r) for r in records]

    async def mark_notification_read(self, notification_id: str, user_id: str) -> Notification:
        record = await self._store.get("notifications", notification_id)
        if record is None:
            raise NotFoundError("Notification not found", {"notification_id": notification_id})
        if record["userId"] != user_id:
            raise PermissionDeniedError("Not your notification")

        updated = await self._store.update("notifications", notification_id, {"isRead": True})
        return Notification.model_validate(updated)

    async def mark_all_notifications_read(self, user_id: str) -> int:
        unread = await self._store.find("notifications", {"userId": user_id, "isRead": False})
        for record in unread:
            await self._store.update("notifications", record["id"], {"isRead": True})
        return len(unread)

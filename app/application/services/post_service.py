"""Post service: image/video posts with views and likes."""

from __future__ import annotations

from typing import Any

from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import (
    COLLECTION_POSTS,
    DESCENDING,
    FOLDER_POST_IMAGES,
    FOLDER_POST_VIDEOS,
)
from app.domain.enums import PostCategory, PostType
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import sanitize_text

MAX_CONTENT_LENGTH = 1000

_NOTIFICATION_TITLES = {
    PostCategory.PENSEE.value: "💭 Nouvelle pensée du jour",
    PostCategory.PASTEUR.value: "✝️ Message du pasteur",
}
_DEFAULT_NOTIFICATION_TITLE = "📱 Nouvelle publication"


def _clean_content(content: str | None) -> str:
    cleaned = sanitize_text(content) or ""
    if not 1 <= len(cleaned) <= MAX_CONTENT_LENGTH:
        raise ValidationException(
            f"Content must be between 1 and {MAX_CONTENT_LENGTH} characters",
            field="content",
        )
    return cleaned


class PostService(ContentService):
    """Owns the `posts` collection."""

    collection_name = COLLECTION_POSTS
    resource_name = "Post"

    async def create(
        self,
        *,
        type: str,
        category: str,
        content: str,
        media: UploadedFile | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Upload the media file, persist the post, notify all users.

        The notification title depends on the category.
        """
        if media is None:
            raise ValidationException("Media file is required", field="media")
        if type not in PostType.values():
            raise ValidationException("Type must be either image or video", field="type")
        if category not in PostCategory.values():
            raise ValidationException("Invalid category", field="category")
        text = _clean_content(content)

        is_image = type == PostType.IMAGE.value
        self._validate_file(media, kind="image" if is_image else "video")
        media_url = await self._upload(
            media, FOLDER_POST_IMAGES if is_image else FOLDER_POST_VIDEOS
        )

        post_id = await self.collection.add(
            {
                "type": type,
                "category": category,
                "content": text,
                "mediaUrl": media_url,
                "thumbnailUrl": None,
                "authorId": user.uid,
                "authorName": user.display_name,
                "authorRole": user.role,
                "likes": 0,
                "views": 0,
                "createdAt": utc_now(),
            }
        )
        await self._broadcast(
            _NOTIFICATION_TITLES.get(category, _DEFAULT_NOTIFICATION_TITLE),
            text[:100],
            {"type": "post", "postId": post_id, "category": category},
        )
        return {"success": True, "message": "Post created successfully", "postId": post_id}

    async def list_all(
        self,
        *,
        category: str | None = None,
        author_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> dict[str, Any]:
        req = self.page_request(page, limit)
        query = self.collection
        if category:
            query = query.where("category", "==", category)
        if author_id:
            query = query.where("authorId", "==", author_id)
        posts, pagination = await self._paginate(
            query.order_by("createdAt", DESCENDING), req, count_query=query
        )
        return {"success": True, "posts": posts, "pagination": pagination}

    async def get(self, post_id: str) -> dict[str, Any]:
        """Return the post and count one view."""
        snap = await self._get_snapshot(post_id)
        await self._increment(post_id, "views")
        return {"success": True, "post": snapshot_to_dict(snap)}

    async def update(
        self, post_id: str, *, content: str | None, user: CurrentUser
    ) -> dict[str, Any]:
        snap = await self._get_snapshot(post_id)
        self.authz.require_owner_or_admin(snap.to_dict().get("authorId"), user, "post", "update")
        changes: dict[str, Any] = {"updatedAt": utc_now()}
        if content is not None:
            changes["content"] = _clean_content(content)
        await self.collection.document(post_id).update(changes)
        return {"success": True, "message": "Post updated successfully"}

    async def delete(self, post_id: str, *, user: CurrentUser) -> dict[str, Any]:
        snap = await self._get_snapshot(post_id)
        data = snap.to_dict()
        self.authz.require_owner_or_admin(data.get("authorId"), user, "post", "delete")
        await self.collection.document(post_id).delete()
        await self._remove_files([data.get("mediaUrl"), data.get("thumbnailUrl")])
        return {"success": True, "message": "Post deleted successfully"}

    async def like(self, post_id: str) -> dict[str, Any]:
        await self._increment(post_id, "likes")
        return {"success": True, "message": "Post liked successfully"}

"""
Batched engagement aggregates.

Listings enrich a whole page of posts (or users) at once: every metric is a
single grouped query keyed by the id set, so the number of round trips does
not grow with the page size.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.engagement.models import Like, Follow, Bookmark
from src.comments.models import Comment
from src.posts.models import Post


@dataclass
class PostCounts:
    likes: int = 0
    comments: int = 0
    reposts: int = 0


@dataclass
class UserCounts:
    followers: int = 0
    following: int = 0
    posts: int = 0


@dataclass
class ViewerFlags:
    liked: Set[int] = field(default_factory=set)
    bookmarked: Set[int] = field(default_factory=set)


class EngagementCounts:
    """Read-time aggregates over likes, comments, reposts and follows"""

    async def for_posts(self, post_ids: Iterable[int], db: AsyncSession) -> Dict[int, PostCounts]:
        ids = list(set(post_ids))
        counts = {post_id: PostCounts() for post_id in ids}
        if not ids:
            return counts

        likes = await db.execute(
            select(Like.post_id, func.count(Like.id))
            .where(Like.post_id.in_(ids))
            .group_by(Like.post_id)
        )
        for post_id, total in likes.all():
            counts[post_id].likes = total

        comments = await db.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(ids))
            .group_by(Comment.post_id)
        )
        for post_id, total in comments.all():
            counts[post_id].comments = total

        reposts = await db.execute(
            select(Post.original_post_id, func.count(Post.id))
            .where(Post.original_post_id.in_(ids))
            .group_by(Post.original_post_id)
        )
        for post_id, total in reposts.all():
            counts[post_id].reposts = total

        return counts

    async def viewer_flags(self, viewer_id: Optional[str], post_ids: Iterable[int], db: AsyncSession) -> ViewerFlags:
        """Posts among post_ids that the viewer has liked / bookmarked"""
        ids = list(set(post_ids))
        if not viewer_id or not ids:
            return ViewerFlags()

        liked = await db.execute(
            select(Like.post_id).where(Like.user_id == viewer_id, Like.post_id.in_(ids))
        )
        bookmarked = await db.execute(
            select(Bookmark.post_id).where(Bookmark.user_id == viewer_id, Bookmark.post_id.in_(ids))
        )
        return ViewerFlags(
            liked=set(liked.scalars().all()),
            bookmarked=set(bookmarked.scalars().all()),
        )

    async def for_users(self, user_ids: Iterable[str], db: AsyncSession) -> Dict[str, UserCounts]:
        ids = list(set(user_ids))
        counts = {user_id: UserCounts() for user_id in ids}
        if not ids:
            return counts

        followers = await db.execute(
            select(Follow.following_id, func.count(Follow.id))
            .where(Follow.following_id.in_(ids))
            .group_by(Follow.following_id)
        )
        for user_id, total in followers.all():
            counts[user_id].followers = total

        following = await db.execute(
            select(Follow.follower_id, func.count(Follow.id))
            .where(Follow.follower_id.in_(ids))
            .group_by(Follow.follower_id)
        )
        for user_id, total in following.all():
            counts[user_id].following = total

        posts = await db.execute(
            select(Post.user_id, func.count(Post.id))
            .where(Post.user_id.in_(ids))
            .group_by(Post.user_id)
        )
        for user_id, total in posts.all():
            counts[user_id].posts = total

        return counts

    async def following_among(self, viewer_id: Optional[str], user_ids: Iterable[str], db: AsyncSession) -> Set[str]:
        """Users among user_ids that the viewer follows; never includes the viewer"""
        ids = [user_id for user_id in set(user_ids) if user_id != viewer_id]
        if not viewer_id or not ids:
            return set()

        result = await db.execute(
            select(Follow.following_id).where(
                Follow.follower_id == viewer_id,
                Follow.following_id.in_(ids)
            )
        )
        return set(result.scalars().all())

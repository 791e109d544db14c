"""
Service layer for Engagement module: idempotent like, follow and bookmark toggles
"""
import logging
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.engagement.models import Like, Follow, Bookmark
from src.engagement.exceptions import SelfReferenceException

logger = logging.getLogger(__name__)


class EngagementService:
    """Insert-if-absent / delete-if-present over relationship rows.

    Every create returns False instead of raising when the row already
    exists; the unique constraint on (actor, target) decides, so two
    concurrent creates still leave exactly one row.
    """

    async def _insert(self, row, existing_query, db: AsyncSession) -> bool:
        existing = await db.execute(existing_query)
        if existing.first() is not None:
            return False

        db.add(row)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race for the same pair, or the target does not exist
            await db.rollback()
            logger.info("Relationship insert rejected by constraint: %s", row.__tablename__)
            return False
        return True

    async def _delete(self, statement, db: AsyncSession) -> bool:
        result = await db.execute(statement)
        await db.commit()
        return (result.rowcount or 0) > 0

    # Likes
    async def like_post(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        """Like a post; False when already liked"""
        return await self._insert(
            Like(user_id=user_id, post_id=post_id),
            select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id),
            db
        )

    async def unlike_post(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        """Remove a like; False when there was none"""
        return await self._delete(
            delete(Like).where(Like.user_id == user_id, Like.post_id == post_id),
            db
        )

    async def is_liked(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        result = await db.execute(
            select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id)
        )
        return result.first() is not None

    # Follows
    async def follow_user(self, follower_id: str, following_id: str, db: AsyncSession) -> bool:
        """
        Follow a user.

        Raises:
            SelfReferenceException: follower and target are the same user
        """
        if follower_id == following_id:
            raise SelfReferenceException()
        return await self._insert(
            Follow(follower_id=follower_id, following_id=following_id),
            select(Follow.id).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            ),
            db
        )

    async def unfollow_user(self, follower_id: str, following_id: str, db: AsyncSession) -> bool:
        return await self._delete(
            delete(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            ),
            db
        )

    async def is_following(self, follower_id: str, following_id: str, db: AsyncSession) -> bool:
        if follower_id == following_id:
            return False
        result = await db.execute(
            select(Follow.id).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        return result.first() is not None

    async def get_following_ids(self, user_id: str, db: AsyncSession) -> List[str]:
        result = await db.execute(
            select(Follow.following_id).where(Follow.follower_id == user_id)
        )
        return list(result.scalars().all())

    # Bookmarks
    async def bookmark_post(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        return await self._insert(
            Bookmark(user_id=user_id, post_id=post_id),
            select(Bookmark.id).where(Bookmark.user_id == user_id, Bookmark.post_id == post_id),
            db
        )

    async def unbookmark_post(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        return await self._delete(
            delete(Bookmark).where(Bookmark.user_id == user_id, Bookmark.post_id == post_id),
            db
        )

    async def is_bookmarked(self, user_id: str, post_id: int, db: AsyncSession) -> bool:
        result = await db.execute(
            select(Bookmark.id).where(Bookmark.user_id == user_id, Bookmark.post_id == post_id)
        )
        return result.first() is not None

"""
Service layer for Posts module: post creation, deletion and the feed listings
"""
import logging
from typing import List, Optional

from sqlalchemy import select, delete, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from src.config import settings
from src.engagement.counts import EngagementCounts
from src.engagement.models import Follow, Bookmark
from src.posts.models import Post
from src.posts.schemas import PostCreate, PostResponse
from src.posts.exceptions import PostNotFoundException
from src.posts.utils import to_post_responses
from src.users.models import User

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self):
        """Initialize PostService with dependencies"""
        self.engagement_counts = EngagementCounts()

    def _posts_with_authors(self) -> Select:
        return select(Post, User).join(User, Post.user_id == User.id)

    async def _enrich(self, rows, viewer_id: Optional[str], db: AsyncSession) -> List[PostResponse]:
        """Attach counts and viewer flags to a page of (Post, User) rows"""
        post_ids = [post.id for post, _ in rows]
        counts = await self.engagement_counts.for_posts(post_ids, db)
        flags = await self.engagement_counts.viewer_flags(viewer_id, post_ids, db)
        return to_post_responses(rows, counts, flags)

    async def _list(self, query: Select, viewer_id: Optional[str], limit: int, offset: int, db: AsyncSession) -> List[PostResponse]:
        result = await db.execute(
            query.order_by(desc(Post.created_at), desc(Post.id)).offset(offset).limit(limit)
        )
        return await self._enrich(result.all(), viewer_id, db)

    async def post_exists(self, post_id: int, db: AsyncSession) -> bool:
        result = await db.execute(select(Post.id).where(Post.id == post_id))
        return result.first() is not None

    async def create_post(self, post_data: PostCreate, user_id: str, db: AsyncSession) -> PostResponse:
        """
        Create a post authored by user_id.

        A post carrying original_post_id is a repost of that post.

        Raises:
            PostNotFoundException: the referenced original or parent post does not exist
        """
        if post_data.original_post_id is not None and not await self.post_exists(post_data.original_post_id, db):
            raise PostNotFoundException(f"Original post {post_data.original_post_id} not found")
        if post_data.parent_post_id is not None and not await self.post_exists(post_data.parent_post_id, db):
            raise PostNotFoundException(f"Parent post {post_data.parent_post_id} not found")

        db_post = Post(
            user_id=user_id,
            content=post_data.content,
            image_url=post_data.image_url,
            parent_post_id=post_data.parent_post_id,
            original_post_id=post_data.original_post_id,
            is_repost=post_data.original_post_id is not None,
        )
        try:
            db.add(db_post)
            await db.commit()
            await db.refresh(db_post)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Failed to create post for user %s", user_id)
            raise

        return await self.get_post(db_post.id, user_id, db)

    async def get_post(self, post_id: int, viewer_id: Optional[str], db: AsyncSession) -> Optional[PostResponse]:
        """Get one enriched post, or None when it does not exist"""
        result = await db.execute(self._posts_with_authors().where(Post.id == post_id))
        row = result.first()
        if row is None:
            return None
        posts = await self._enrich([row], viewer_id, db)
        return posts[0]

    async def get_posts(
        self,
        viewer_id: Optional[str],
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        """All posts, newest first"""
        return await self._list(self._posts_with_authors(), viewer_id, limit, offset, db)

    async def get_explore_posts(
        self,
        viewer_id: Optional[str],
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        return await self.get_posts(viewer_id, db, limit, offset)

    async def get_user_posts(
        self,
        user_id: str,
        viewer_id: Optional[str],
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        """Posts authored by user_id, newest first"""
        query = self._posts_with_authors().where(Post.user_id == user_id)
        return await self._list(query, viewer_id, limit, offset, db)

    async def get_feed_posts(
        self,
        viewer_id: str,
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        """
        Personalized feed: posts by the accounts the viewer follows plus the
        viewer's own posts. A viewer who follows nobody sees only their own posts.
        """
        followed = select(Follow.following_id).where(Follow.follower_id == viewer_id)
        query = self._posts_with_authors().where(
            or_(Post.user_id == viewer_id, Post.user_id.in_(followed))
        )
        return await self._list(query, viewer_id, limit, offset, db)

    async def get_bookmarked_posts(
        self,
        viewer_id: str,
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        """Posts the viewer bookmarked, most recently bookmarked first"""
        result = await db.execute(
            self._posts_with_authors()
            .join(Bookmark, Bookmark.post_id == Post.id)
            .where(Bookmark.user_id == viewer_id)
            .order_by(desc(Bookmark.created_at), desc(Bookmark.id))
            .offset(offset)
            .limit(limit)
        )
        return await self._enrich(result.all(), viewer_id, db)

    async def get_all_posts_admin(
        self,
        db: AsyncSession,
        limit: int = settings.ADMIN_PAGE_SIZE,
        offset: int = 0,
    ) -> List[PostResponse]:
        return await self.get_posts(None, db, limit, offset)

    async def delete_post(self, post_id: int, user_id: str, db: AsyncSession) -> bool:
        """Delete a post owned by user_id; False when missing or owned by someone else"""
        result = await db.execute(
            delete(Post).where(Post.id == post_id, Post.user_id == user_id)
        )
        await db.commit()
        return (result.rowcount or 0) > 0

    async def delete_post_as_admin(self, post_id: int, db: AsyncSession) -> bool:
        """Delete any post. The caller has already checked admin rights."""
        result = await db.execute(delete(Post).where(Post.id == post_id))
        await db.commit()
        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info("Post %s deleted by an administrator", post_id)
        return deleted

    async def get_post_likes_count(self, post_id: int, db: AsyncSession) -> int:
        counts = await self.engagement_counts.for_posts([post_id], db)
        return counts[post_id].likes

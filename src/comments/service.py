import logging
from typing import List
from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.comments.models import Comment
from src.comments.schemas import CommentCreate, CommentResponse
from src.exceptions import DatabaseException
from src.posts.utils import to_author_response
from src.users.models import User

logger = logging.getLogger(__name__)


def _to_comment_response(comment: Comment, author: User) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        user=to_author_response(author),
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


class CommentService:
    async def create_comment(self, post_id: int, comment_data: CommentCreate, user_id: str, db: AsyncSession) -> CommentResponse:
        """Create a comment on an existing post; the caller checks the post exists"""
        comment = Comment(post_id=post_id, user_id=user_id, content=comment_data.content)
        try:
            db.add(comment)
            await db.commit()
            await db.refresh(comment)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to create comment on post %s: %s", post_id, e)
            raise DatabaseException("Failed to create comment")

        author = await db.get(User, user_id)
        return _to_comment_response(comment, author)

    async def get_post_comments(
        self,
        post_id: int,
        db: AsyncSession,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[CommentResponse]:
        """Comments on a post, newest first"""
        result = await db.execute(
            select(Comment, User)
            .join(User, Comment.user_id == User.id)
            .where(Comment.post_id == post_id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .offset(offset)
            .limit(limit)
        )
        return [_to_comment_response(comment, author) for comment, author in result.all()]

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from src.database import get_db
from src.posts.models import Post
from src.posts.exceptions import PostNotFoundException
from src.posts.service import PostService

def get_post_service() -> PostService:
    return PostService()

async def require_post_id(
    post_id: int,
    db: AsyncSession = Depends(get_db)
) -> int:
    """
    Return post_id if the post exists, otherwise raise 404

    Only the id is returned so that handlers never hold an ORM instance that a
    later rollback could expire.

    Raises:
        PostNotFoundException: if the post does not exist
    """
    result = await db.execute(
        select(Post.id).where(Post.id == post_id)
    )
    if result.first() is None:
        raise PostNotFoundException()
    return post_id

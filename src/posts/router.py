import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from src.posts.schemas import PostCreate, PostResponse, MessageResponse
from src.posts.service import PostService
from src.posts.dependencies import get_post_service
from src.posts.exceptions import PostException, PostNotFoundException, PostForbiddenException
from src.auth.dependencies import get_current_active_user, get_current_user_optional
from src.notifications.dependencies import get_notification_service
from src.notifications.service import NotificationService
from src.users.models import User
from src.pagination import OffsetParams, get_offset_params
from src.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_active_user),
    service: PostService = Depends(get_post_service),
    notifications: NotificationService = Depends(get_notification_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a post

    - **content**: Post text (1-10000 characters, not blank)
    - **image_url**: Optional image
    - **original_post_id**: Set to repost an existing post
    """
    user_id = current_user.id
    try:
        post = await service.create_post(post_data, user_id, db)
    except PostException:
        raise
    except Exception:
        logger.exception("Error creating post")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

    await notifications.publish("new_post", post.serializable_dict())
    return post

@router.get("", response_model=List[PostResponse])
async def get_posts(
    pagination: OffsetParams = Depends(get_offset_params),
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """All posts, newest first"""
    viewer_id = current_user.id if current_user else None
    try:
        return await service.get_posts(viewer_id, db, pagination.limit, pagination.offset)
    except Exception:
        logger.exception("Error fetching posts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch posts"
        )

@router.get("/explore", response_model=List[PostResponse])
async def get_explore_posts(
    pagination: OffsetParams = Depends(get_offset_params),
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Global timeline

    - **limit**: Page size (default: 20, max: 100)
    - **offset**: Items to skip (default: 0)
    """
    viewer_id = current_user.id if current_user else None
    try:
        return await service.get_explore_posts(viewer_id, db, pagination.limit, pagination.offset)
    except Exception:
        logger.exception("Error fetching explore posts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch explore posts"
        )

@router.get("/feed", response_model=List[PostResponse])
async def get_feed_posts(
    pagination: OffsetParams = Depends(get_offset_params),
    current_user: User = Depends(get_current_active_user),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Posts from followed accounts and the current user, newest first"""
    viewer_id = current_user.id
    try:
        return await service.get_feed_posts(viewer_id, db, pagination.limit, pagination.offset)
    except Exception:
        logger.exception("Error fetching feed posts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch feed posts"
        )

@router.get("/user/{user_id}", response_model=List[PostResponse])
async def get_user_posts(
    user_id: str,
    pagination: OffsetParams = Depends(get_offset_params),
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Posts of one user, newest first"""
    viewer_id = current_user.id if current_user else None
    try:
        return await service.get_user_posts(user_id, viewer_id, db, pagination.limit, pagination.offset)
    except Exception:
        logger.exception("Error fetching posts of user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user posts"
        )

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Post detail by ID"""
    viewer_id = current_user.id if current_user else None
    try:
        post = await service.get_post(post_id, viewer_id, db)
    except Exception:
        logger.exception("Error fetching post %s", post_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch post"
        )
    if post is None:
        raise PostNotFoundException()
    return post

@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a post

    Only the author can delete; administrators use the admin endpoint.

    - 404 when the post does not exist
    - 403 when the post belongs to someone else
    """
    user_id = current_user.id
    try:
        deleted = await service.delete_post(post_id, user_id, db)
        exists = deleted or await service.post_exists(post_id, db)
    except Exception:
        logger.exception("Error deleting post %s", post_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete post"
        )
    if not exists:
        raise PostNotFoundException()
    if not deleted:
        raise PostForbiddenException()
    return MessageResponse(message="Post deleted successfully")

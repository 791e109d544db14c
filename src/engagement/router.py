import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from src.database import get_db
from src.auth.dependencies import get_current_active_user
from src.users.models import User
from src.engagement.service import EngagementService
from src.engagement.counts import EngagementCounts
from src.engagement.schemas import FollowResponse
from src.engagement.dependencies import get_engagement_service
from src.users.dependencies import require_user_id
from src.engagement.exceptions import EngagementException
from src.posts.schemas import PostLikeResponse, PostBookmarkResponse, PostResponse
from src.posts.service import PostService
from src.posts.dependencies import get_post_service, require_post_id
from src.notifications.dependencies import get_notification_service
from src.notifications.service import NotificationService
from src.pagination import OffsetParams, get_offset_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Engagement"])


def _server_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


# Likes
@router.post("/posts/{post_id}/like", response_model=PostLikeResponse)
async def like_post(
    current_user: User = Depends(get_current_active_user),
    post_id: int = Depends(require_post_id),
    service: EngagementService = Depends(get_engagement_service),
    post_service: PostService = Depends(get_post_service),
    notifications: NotificationService = Depends(get_notification_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Like a post

    Repeating the request is not an error: `changed` is false and the like
    count is unchanged.
    """
    user_id = current_user.id
    try:
        changed = await service.like_post(user_id, post_id, db)
        likes_count = await post_service.get_post_likes_count(post_id, db)
    except Exception:
        logger.exception("Error liking post %s", post_id)
        raise _server_error("Failed to like post")

    if changed:
        await notifications.publish("new_like", {
            "post_id": post_id,
            "user_id": user_id,
            "likes_count": likes_count,
        })
    return PostLikeResponse(post_id=post_id, is_liked=True, changed=changed, likes_count=likes_count)

@router.delete("/posts/{post_id}/like", response_model=PostLikeResponse)
async def unlike_post(
    current_user: User = Depends(get_current_active_user),
    post_id: int = Depends(require_post_id),
    service: EngagementService = Depends(get_engagement_service),
    post_service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Remove a like; a missing like is a no-op"""
    user_id = current_user.id
    try:
        changed = await service.unlike_post(user_id, post_id, db)
        likes_count = await post_service.get_post_likes_count(post_id, db)
    except Exception:
        logger.exception("Error unliking post %s", post_id)
        raise _server_error("Failed to unlike post")
    return PostLikeResponse(post_id=post_id, is_liked=False, changed=changed, likes_count=likes_count)


# Bookmarks
@router.post("/posts/{post_id}/bookmark", response_model=PostBookmarkResponse)
async def bookmark_post(
    current_user: User = Depends(get_current_active_user),
    post_id: int = Depends(require_post_id),
    service: EngagementService = Depends(get_engagement_service),
    db: AsyncSession = Depends(get_db)
):
    user_id = current_user.id
    try:
        changed = await service.bookmark_post(user_id, post_id, db)
    except Exception:
        logger.exception("Error bookmarking post %s", post_id)
        raise _server_error("Failed to bookmark post")
    return PostBookmarkResponse(post_id=post_id, is_bookmarked=True, changed=changed)

@router.delete("/posts/{post_id}/bookmark", response_model=PostBookmarkResponse)
async def unbookmark_post(
    current_user: User = Depends(get_current_active_user),
    post_id: int = Depends(require_post_id),
    service: EngagementService = Depends(get_engagement_service),
    db: AsyncSession = Depends(get_db)
):
    user_id = current_user.id
    try:
        changed = await service.unbookmark_post(user_id, post_id, db)
    except Exception:
        logger.exception("Error removing bookmark on post %s", post_id)
        raise _server_error("Failed to remove bookmark")
    return PostBookmarkResponse(post_id=post_id, is_bookmarked=False, changed=changed)

@router.get("/bookmarks", response_model=List[PostResponse])
async def get_bookmarks(
    pagination: OffsetParams = Depends(get_offset_params),
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
    db: AsyncSession = Depends(get_db)
):
    """Posts bookmarked by the current user, most recently bookmarked first"""
    viewer_id = current_user.id
    try:
        return await post_service.get_bookmarked_posts(viewer_id, db, pagination.limit, pagination.offset)
    except Exception:
        logger.exception("Error fetching bookmarks")
        raise _server_error("Failed to fetch bookmarks")


# Follows
async def _followers_count(user_id: str, db: AsyncSession) -> int:
    counts = await EngagementCounts().for_users([user_id], db)
    return counts[user_id].followers

@router.post("/users/{user_id}/follow", response_model=FollowResponse)
async def follow_user(
    current_user: User = Depends(get_current_active_user),
    user_id: str = Depends(require_user_id),
    service: EngagementService = Depends(get_engagement_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Follow a user

    - 400 when following yourself
    - 404 when the user does not exist
    """
    follower_id = current_user.id
    try:
        changed = await service.follow_user(follower_id, user_id, db)
        followers_count = await _followers_count(user_id, db)
    except EngagementException:
        raise
    except Exception:
        logger.exception("Error following user %s", user_id)
        raise _server_error("Failed to follow user")
    return FollowResponse(user_id=user_id, is_following=True, changed=changed, followers_count=followers_count)

@router.delete("/users/{user_id}/follow", response_model=FollowResponse)
async def unfollow_user(
    current_user: User = Depends(get_current_active_user),
    user_id: str = Depends(require_user_id),
    service: EngagementService = Depends(get_engagement_service),
    db: AsyncSession = Depends(get_db)
):
    follower_id = current_user.id
    try:
        changed = await service.unfollow_user(follower_id, user_id, db)
        followers_count = await _followers_count(user_id, db)
    except Exception:
        logger.exception("Error unfollowing user %s", user_id)
        raise _server_error("Failed to unfollow user")
    return FollowResponse(user_id=user_id, is_following=False, changed=changed, followers_count=followers_count)
